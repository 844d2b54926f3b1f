"""SDK configuration.

``Config`` validates itself on construction and is then handed to the
transport as-is.  ``Config.from_env()`` is the only place that reads the
process environment::

    AXITRACE_SECRET_KEY   sk_live_... / sk_test_...   (required)
    AXITRACE_BASE_URL     default https://stat.axitrace.com
    AXITRACE_TIMEOUT      seconds, default 30
    AXITRACE_VERIFY_SSL   1/true/yes/on
    AXITRACE_DEBUG        1/true/yes/on
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from axitrace.exceptions import ConfigurationError
from axitrace.validators import is_valid_secret_key, is_valid_url

DEFAULT_BASE_URL = "https://stat.axitrace.com"
DEFAULT_TIMEOUT = 30
SDK_VERSION = "0.1.0"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


@dataclass
class Config:
    secret_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    debug: bool = False

    def __post_init__(self) -> None:
        key = (self.secret_key or "").strip()
        if not key:
            raise ConfigurationError.missing_secret_key()
        if not is_valid_secret_key(key):
            raise ConfigurationError.invalid_secret_key(key)
        self.secret_key = key

        if not is_valid_url(self.base_url):
            raise ConfigurationError.invalid_base_url(self.base_url)
        self.base_url = self.base_url.rstrip("/")

        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, int)
            or self.timeout <= 0
        ):
            raise ConfigurationError.invalid_timeout(self.timeout)

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> Config:
        """Build a config from environment variables.

        Keyword ``overrides`` win over the environment; empty variables are
        ignored.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        secret_key = env.get("AXITRACE_SECRET_KEY", "")
        if secret_key:
            values["secret_key"] = secret_key

        base_url = env.get("AXITRACE_BASE_URL", "")
        if base_url:
            values["base_url"] = base_url

        timeout = env.get("AXITRACE_TIMEOUT", "")
        if timeout:
            try:
                values["timeout"] = int(timeout)
            except ValueError as exc:
                raise ConfigurationError.invalid_timeout(timeout) from exc

        verify_ssl = env.get("AXITRACE_VERIFY_SSL", "")
        if verify_ssl:
            values["verify_ssl"] = _env_bool(verify_ssl)

        debug = env.get("AXITRACE_DEBUG", "")
        if debug:
            values["debug"] = _env_bool(debug)

        values.update(overrides)
        if not values.get("secret_key"):
            raise ConfigurationError.missing_secret_key()
        return cls(**values)

    @property
    def is_test_mode(self) -> bool:
        """Informational only: True for ``sk_test_`` keys."""
        return self.secret_key.startswith("sk_test_")

    @property
    def user_agent(self) -> str:
        return (
            f"axitrace-python/{SDK_VERSION} "
            f"Python/{platform.python_version()} httpx/{httpx.__version__}"
        )
