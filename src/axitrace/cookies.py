"""Read AxiTrace and Facebook tracking cookies.

The browser-side AxiTrace script stores its visitor, session and user ids
in ``vt_vid``, ``vt_sid`` and ``vt_uid``; the Facebook pixel stores
``_fbp`` and ``_fbc``.  Server-side events reuse them so both sides land
on the same profile.

By default a :class:`CookieReader` looks at the cookies of the request
currently being handled, as bound by
:class:`axitrace.middleware.AxiTraceCookieMiddleware`.  Outside a request
it sees no cookies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Dict, Mapping, Optional

COOKIE_VISITOR_ID = "vt_vid"
COOKIE_SESSION_ID = "vt_sid"
COOKIE_USER_ID = "vt_uid"
COOKIE_FBP = "_fbp"
COOKIE_FBC = "_fbc"

_request_cookies: ContextVar[Mapping[str, str]] = ContextVar(
    "axitrace_request_cookies", default={}
)


def bind_request_cookies(cookies: Mapping[str, str]):
    """Make ``cookies`` the current request's cookies; returns a reset token."""
    return _request_cookies.set(dict(cookies))


def reset_request_cookies(token) -> None:
    _request_cookies.reset(token)


class CookieReader:
    def __init__(self, source: Optional[Mapping[str, str]] = None):
        self._source = source

    @property
    def cookies(self) -> Mapping[str, str]:
        if self._source is not None:
            return self._source
        return _request_cookies.get()

    def get(self, name: str) -> Optional[str]:
        """Cookie value, or None when missing, empty or ``"0"``."""
        value = self.cookies.get(name)
        if value is None or value in ("", "0"):
            return None
        return value

    @property
    def visitor_id(self) -> Optional[str]:
        return self.get(COOKIE_VISITOR_ID)

    @property
    def session_id(self) -> Optional[str]:
        return self.get(COOKIE_SESSION_ID)

    @property
    def user_id(self) -> Optional[str]:
        return self.get(COOKIE_USER_ID)

    @property
    def fbp(self) -> Optional[str]:
        return self.get(COOKIE_FBP)

    @property
    def fbc(self) -> Optional[str]:
        return self.get(COOKIE_FBC)

    def axitrace_cookies(self) -> Dict[str, Optional[str]]:
        return {
            "visitor_id": self.visitor_id,
            "session_id": self.session_id,
            "user_id": self.user_id,
        }

    def facebook_cookies(self) -> Dict[str, Optional[str]]:
        return {"fbp": self.fbp, "fbc": self.fbc}
