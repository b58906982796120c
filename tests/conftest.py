from __future__ import annotations

import pytest

from restsync.core.config import AdapterSettings
from tests.fakes import ScriptedTransport


@pytest.fixture
def settings() -> AdapterSettings:
    return AdapterSettings(_env_file=None, url="https://api.example.com", namespace="api/v1")


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()
