"""Uniform wrapper around an AxiTrace API answer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Response:
    """Result of sending one event.

    ``success`` requires a 2xx status AND, when the body carries a
    ``success`` flag, that flag being true.
    """

    success: bool
    status_code: int
    event_id: Optional[str] = None
    action: Optional[str] = None
    error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any, status_code: int) -> Response:
        data = body if isinstance(body, dict) else {}
        success = 200 <= status_code < 300
        if "success" in data:
            success = success and bool(data["success"])
        return cls(
            success=success,
            status_code=status_code,
            event_id=data.get("eventId"),
            action=data.get("action"),
            error=data.get("error"),
            raw=data,
        )

    @classmethod
    def from_json(cls, text: str, status_code: int) -> Response:
        """Parse a raw body; undecodable JSON counts as an empty body."""
        try:
            body = json.loads(text) if text else {}
        except ValueError:
            body = {}
        return cls.from_body(body, status_code)

    @classmethod
    def ok(cls, event_id: str, action: str) -> Response:
        return cls.from_body(
            {"success": True, "eventId": event_id, "action": action}, 200
        )

    @classmethod
    def failure(cls, error: str, status_code: int = 400) -> Response:
        return cls(
            success=False,
            status_code=status_code,
            error=error,
            raw={"success": False, "error": error},
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "status_code": self.status_code,
            "event_id": self.event_id,
            "action": self.action,
            "error": self.error,
        }
