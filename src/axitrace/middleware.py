"""Starlette / FastAPI middleware exposing request cookies to the SDK.

Add it to the app that calls AxiTrace from its handlers; every
:class:`~axitrace.cookies.CookieReader` created without an explicit source
(including the one inside :class:`~axitrace.AxiTrace`) then reads the
cookies of the request being served.

Usage::

    from fastapi import FastAPI
    from axitrace import AxiTrace, AxiTraceCookieMiddleware

    app = FastAPI()
    app.add_middleware(AxiTraceCookieMiddleware)
    axitrace = AxiTrace.from_env()

    @app.get("/thank-you")
    def thank_you():
        axitrace.page_view("https://shop.example.com/thank-you")
        ...
"""

from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from axitrace.cookies import bind_request_cookies, reset_request_cookies


class AxiTraceCookieMiddleware(BaseHTTPMiddleware):
    """Binds ``request.cookies`` for the duration of each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token = bind_request_cookies(request.cookies)
        try:
            return await call_next(request)
        finally:
            reset_request_cookies(token)
