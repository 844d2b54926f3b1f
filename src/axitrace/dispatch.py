"""EventsApi — validate, serialize and POST events."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from axitrace.events import Event
from axitrace.exceptions import AxiTraceError
from axitrace.response import Response
from axitrace.transport import HttpClient

logger = logging.getLogger(__name__)


class EventsApi:
    """Sends events through an :class:`HttpClient`.

    ``send()`` validates first, so a :class:`ValidationError` is raised
    before any network I/O.
    """

    def __init__(self, http: HttpClient):
        self.http = http

    def send(self, event: Event) -> Response:
        event.validate()
        return self.http.post(event.endpoint, event.serialize())

    def send_batch(self, events: Iterable[Event]) -> List[Response]:
        """Send events one by one, in order.

        A failing event does not stop the batch: its error becomes a failed
        :class:`Response` at the same position.
        """
        responses: List[Response] = []
        for event in events:
            try:
                responses.append(self.send(event))
            except AxiTraceError as exc:
                logger.warning(
                    "AxiTrace %s event failed: %s", event.action.value, exc
                )
                responses.append(Response.failure(str(exc), exc.status_code))
        return responses

    def send_raw(self, endpoint: str, data: Dict[str, Any]) -> Response:
        """POST an already-built payload, skipping validation."""
        return self.http.post(endpoint, data)
