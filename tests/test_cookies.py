"""Tests for CookieReader and the request-scoped cookie binding."""

from axitrace.cookies import CookieReader, bind_request_cookies, reset_request_cookies


class TestCookieReader:
    def test_reads_known_cookies(self):
        reader = CookieReader(
            {
                "vt_vid": "visitor",
                "vt_sid": "session",
                "vt_uid": "user",
                "_fbp": "fb.1.1.1",
                "_fbc": "fb.1.1.click",
            }
        )
        assert reader.axitrace_cookies() == {
            "visitor_id": "visitor",
            "session_id": "session",
            "user_id": "user",
        }
        assert reader.facebook_cookies() == {"fbp": "fb.1.1.1", "fbc": "fb.1.1.click"}

    def test_empty_and_zero_are_absent(self):
        reader = CookieReader({"vt_vid": "", "vt_sid": "0"})
        assert reader.visitor_id is None
        assert reader.session_id is None
        assert reader.user_id is None

    def test_no_request_means_no_cookies(self):
        assert CookieReader().visitor_id is None

    def test_reads_bound_request_cookies(self):
        reader = CookieReader()
        token = bind_request_cookies({"vt_vid": "bound"})
        try:
            assert reader.visitor_id == "bound"
        finally:
            reset_request_cookies(token)
        assert reader.visitor_id is None

    def test_explicit_source_wins_over_request(self):
        token = bind_request_cookies({"vt_vid": "bound"})
        try:
            assert CookieReader({"vt_vid": "explicit"}).visitor_id == "explicit"
        finally:
            reset_request_cookies(token)
