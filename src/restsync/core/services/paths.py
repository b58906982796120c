"""URL prefixes and resource path segments.

Rules:
- `root_path` joins the configured base address and namespace; a namespace
  starting with "/" replaces the base path instead of extending it.
- `resource_path` turns a type name into its plural snake_case segment
  (`PostGroup` -> `post_groups`).

Limitation: pluralization only knows regular English suffixes. Irregular nouns
(`person`, `child`) and non-English names come out as `persons`, `childs`.
"""

from __future__ import annotations

import re
from functools import lru_cache
from urllib.parse import urlsplit, urlunsplit

_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s\-]+")
_SIBILANT_ENDINGS = ("s", "x", "z", "ch", "sh")
_VOWELS = "aeiou"


def root_path(base_url: str | None, namespace: str | None) -> str:
    """Canonical prefix for every resource URL, without trailing slash."""

    base = (base_url or "").strip()
    ns = (namespace or "").strip()

    scheme, netloc, path, _query, _fragment = urlsplit(base)
    if ns:
        if ns.startswith("/"):
            path = ns
        else:
            path = f"{path.rstrip('/')}/{ns}"

    path = re.sub(r"/{2,}", "/", path).rstrip("/")
    if netloc and path and not path.startswith("/"):
        path = f"/{path}"
    return urlunsplit((scheme, netloc, path, "", ""))


def decamelize(name: str) -> str:
    """`PostGroup` -> `post_group`; `HTTPRequest` -> `http_request`."""

    value = _ACRONYM_BOUNDARY.sub(r"\1_\2", name.strip())
    value = _CAMEL_BOUNDARY.sub(r"\1_\2", value)
    value = _SEPARATORS.sub("_", value)
    return value.lower()


def pluralize(word: str) -> str:
    """Regular English plural of `word` (last word only for snake_case)."""

    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in _VOWELS:
        return f"{word[:-1]}ies"
    if lower.endswith(_SIBILANT_ENDINGS):
        return f"{word}es"
    return f"{word}s"


@lru_cache(maxsize=256)
def resource_path(resource_name: str) -> str:
    """Network path segment for a resource type name."""

    return pluralize(decamelize(resource_name))
