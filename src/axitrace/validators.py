"""Small predicates shared by events and configuration."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse

_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)
_SECRET_KEY_RE = re.compile(r"^sk_(live|test)_.+")


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    local, _, _ = value.partition("@")
    if len(local) > 64 or ".." in value:
        return False
    return bool(_EMAIL_RE.fullmatch(value))


def is_valid_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_secret_key(value: str) -> bool:
    return bool(_SECRET_KEY_RE.match(value))


def is_positive(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and value > 0
