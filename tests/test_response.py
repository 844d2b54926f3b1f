"""Tests for Response and ApiError message extraction."""

import pytest

from axitrace.exceptions import ApiError
from axitrace.response import Response


class TestResponse:
    def test_success_body(self):
        resp = Response.from_body(
            {"success": True, "eventId": "evt_1", "action": "page_view"}, 200
        )
        assert resp.success is True
        assert resp.event_id == "evt_1"
        assert resp.action == "page_view"
        assert resp.error is None

    def test_success_flag_false_on_200(self):
        resp = Response.from_body({"success": False, "error": "dup"}, 200)
        assert resp.success is False
        assert resp.status_code == 200
        assert resp.error == "dup"

    def test_no_flag_uses_status(self):
        assert Response.from_body({}, 202).success is True
        assert Response.from_body({}, 302).success is False

    def test_non_dict_body(self):
        resp = Response.from_body(["unexpected"], 200)
        assert resp.success is True
        assert resp.raw == {}

    def test_from_json_invalid(self):
        resp = Response.from_json("<html>", 200)
        assert resp.success is True
        assert resp.raw == {}

    def test_from_json_empty(self):
        assert Response.from_json("", 204).raw == {}

    def test_ok_and_failure(self):
        assert Response.ok("evt_2", "search").to_dict() == {
            "success": True,
            "status_code": 200,
            "event_id": "evt_2",
            "action": "search",
            "error": None,
        }
        failed = Response.failure("boom", 0)
        assert failed.success is False
        assert failed.status_code == 0
        assert failed.get("error") == "boom"

    def test_get_raw_field(self):
        resp = Response.from_body({"success": True, "extra": 1}, 200)
        assert resp.get("extra") == 1
        assert resp.get("missing", "x") == "x"


class TestApiErrorFromResponse:
    def test_status_table(self):
        err = ApiError.from_response(429)
        assert err.status_code == 429
        assert "Too many requests" in str(err)

    def test_unknown_status(self):
        assert str(ApiError.from_response(418)) == "HTTP error 418"

    @pytest.mark.parametrize(
        "body, expected",
        [
            ('{"error": "bad sku"}', "bad sku"),
            ('{"message": "quota"}', "quota"),
            ('{"error": "e", "message": "m"}', "e"),
        ],
    )
    def test_body_message_wins(self, body, expected):
        err = ApiError.from_response(400, body)
        assert str(err) == expected
        assert err.body == body

    def test_non_json_body(self):
        err = ApiError.from_response(500, "oops")
        assert "Internal server error" in str(err)

    def test_connection_error(self):
        err = ApiError.connection_error("timed out")
        assert err.status_code == 0
        assert str(err) == "Connection error: timed out"
