from __future__ import annotations

import asyncio

import httpx
import pytest

from restsync.adapters.http_client import HttpxTransport, build_async_client
from restsync.core.config import AdapterSettings
from restsync.core.domain.errors import TransportError
from restsync.core.domain.models import RequestDescription


def _client(handler) -> httpx.AsyncClient:
    return build_async_client(
        AdapterSettings(_env_file=None, user_agent="restsync-tests"),
        transport=httpx.MockTransport(handler),
    )


def test_submit_sends_method_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, text='{"id": 7}')

    async def scenario():
        async with HttpxTransport(_client(handler)) as transport:
            return await transport.submit(
                RequestDescription(
                    method="POST",
                    url="https://api.example.com/post_groups",
                    payload='{"name": "Ä"}',
                    content_type="application/json",
                    accept="application/json",
                    data_type="json",
                )
            )

    response = asyncio.run(scenario())
    assert response.status == 201
    assert response.ok
    assert response.body == '{"id": 7}'

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.example.com/post_groups"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["User-Agent"] == "restsync-tests"
    assert request.content == '{"name": "Ä"}'.encode("utf-8")


def test_submit_encodes_query_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="[]")

    async def scenario():
        transport = HttpxTransport(_client(handler))
        await transport.submit(
            RequestDescription(
                method="GET",
                url="https://api.example.com/post_groups",
                params={"page": 2, "q": "a b"},
            )
        )

    asyncio.run(scenario())
    assert seen[0].url.params["page"] == "2"
    assert seen[0].url.params["q"] == "a b"
    assert "Content-Type" not in seen[0].headers


def test_error_status_is_returned_not_raised() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, text='{"name": ["can\'t be blank"]}')

    async def scenario():
        transport = HttpxTransport(_client(handler))
        return await transport.submit(RequestDescription(method="PUT", url="https://api.example.com/x/1"))

    response = asyncio.run(scenario())
    assert response.status == 422
    assert not response.ok
    assert response.body == '{"name": ["can\'t be blank"]}'


def test_empty_body_becomes_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async def scenario():
        transport = HttpxTransport(_client(handler))
        return await transport.submit(RequestDescription(method="DELETE", url="https://api.example.com/x/1"))

    response = asyncio.run(scenario())
    assert response.status == 204
    assert response.body is None


def test_connection_error_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        transport = HttpxTransport(_client(handler))
        await transport.submit(RequestDescription(method="GET", url="https://api.example.com/x"))

    with pytest.raises(TransportError, match="connection refused"):
        asyncio.run(scenario())


def test_borrowed_client_is_not_closed() -> None:
    async def scenario():
        client = _client(lambda request: httpx.Response(200))
        async with HttpxTransport(client):
            pass
        borrowed_closed = client.is_closed

        owned = HttpxTransport(settings=AdapterSettings(_env_file=None))
        await owned.aclose()
        await client.aclose()
        return borrowed_closed, owned.client.is_closed

    borrowed_closed, owned_closed = asyncio.run(scenario())
    assert not borrowed_closed
    assert owned_closed


def test_build_async_client_applies_settings() -> None:
    settings = AdapterSettings(_env_file=None, http_timeout_seconds=3.5, user_agent="ua/1")
    client = build_async_client(settings, extra_headers={"X-Token": "t"})
    try:
        assert client.timeout.read == 3.5
        assert client.headers["User-Agent"] == "ua/1"
        assert client.headers["X-Token"] == "t"
        assert client.follow_redirects
    finally:
        asyncio.run(client.aclose())


def test_invalid_url_becomes_transport_error() -> None:
    async def scenario():
        transport = HttpxTransport(_client(lambda request: httpx.Response(200)))
        await transport.submit(RequestDescription(method="GET", url="https://x.com:port/posts"))

    with pytest.raises(TransportError, match="x.com:port"):
        asyncio.run(scenario())
