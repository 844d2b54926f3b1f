"""Authenticated HTTP transport for the AxiTrace API, built on httpx.

Usage::

    config = Config("sk_test_abc")
    with HttpClient(config) as http:
        resp = http.post("/v1/page/view", {...})

Tests (or callers with their own pooling) can hand in a ready
``httpx.Client``.  The URL is always built from ``config.base_url`` and
auth, headers and timeout are attached per request, so an injected client
behaves like an owned one.  ``verify_ssl`` is a connection-pool setting in
httpx and only applies to clients this class creates.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from axitrace.config import Config
from axitrace.exceptions import ApiError, AuthenticationError, ValidationError
from axitrace.response import Response

logger = logging.getLogger(__name__)


class HttpClient:
    """POST/GET against the AxiTrace API with basic auth (key, empty password).

    401 and 403 raise :class:`AuthenticationError`; any other status >= 400
    raises :class:`ApiError`; network failures raise ``ApiError`` with
    status code 0.  A body that cannot be encoded as JSON raises
    :class:`ValidationError` before anything is sent.
    """

    def __init__(self, config: Config, client: Optional[httpx.Client] = None):
        self.config = config
        self._auth = httpx.BasicAuth(config.secret_key, "")
        self._headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self._client = client if client is not None else self._create_client()

    def _create_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
        )

    # -- public API --

    def post(self, endpoint: str, data: Dict[str, Any]) -> Response:
        return self._request("POST", endpoint, json_body=data)

    def get(self, endpoint: str, query: Optional[Dict[str, Any]] = None) -> Response:
        return self._request("GET", endpoint, query=query)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- internals --

    def _url(self, endpoint: str) -> str:
        return self.config.base_url + "/" + endpoint.lstrip("/")

    @staticmethod
    def _encode(body: Dict[str, Any]) -> bytes:
        try:
            text = json.dumps(
                body, ensure_ascii=False, separators=(",", ":"), allow_nan=False
            )
        except (TypeError, ValueError) as exc:
            raise ValidationError.unserializable_payload(str(exc)) from exc
        return text.encode("utf-8")

    def _request(
        self,
        method: str,
        endpoint: str,
        json_body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> Response:
        if self.config.debug:
            logger.info("AxiTrace %s %s payload=%s", method, endpoint, json_body)

        headers = dict(self._headers)
        content = None
        if json_body is not None:
            content = self._encode(json_body)
            headers["Content-Type"] = "application/json"

        try:
            resp = self._client.request(
                method,
                self._url(endpoint),
                content=content,
                params=query or None,
                headers=headers,
                auth=self._auth,
                timeout=self.config.timeout,
            )
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            logger.warning("AxiTrace %s %s failed: %s", method, endpoint, exc)
            raise ApiError.connection_error(str(exc) or type(exc).__name__) from exc

        status = resp.status_code
        logger.debug("AxiTrace %s %s -> %d", method, endpoint, status)

        if status == 401:
            raise AuthenticationError.unauthorized()
        if status == 403:
            raise AuthenticationError.forbidden()
        if status >= 400:
            raise ApiError.from_response(status, resp.text)

        return Response.from_json(resp.text, status)
