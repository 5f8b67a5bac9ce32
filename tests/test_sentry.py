"""
Tests for Sentry event filtering.
"""

from glidru.core.errors import NotFound, UpstreamFailure
from glidru.integrations.sentry import _filter_events, _filter_transactions, capture_exception


class TestSentryFilters:
    def test_caller_errors_are_dropped(self):
        error = NotFound("Question not found")

        assert _filter_events({}, {"exc_info": (type(error), error, None)}) is None

    def test_server_errors_are_kept(self):
        error = UpstreamFailure("Firestore unavailable")
        event = {"message": "boom"}

        assert _filter_events(event, {"exc_info": (type(error), error, None)}) is event

    def test_credentials_are_scrubbed(self):
        event = {"request": {"headers": {"Authorization": "Bearer secret", "Accept": "*/*"}}}

        filtered = _filter_events(event, {})

        assert filtered["request"]["headers"]["Authorization"] == "[Filtered]"
        assert filtered["request"]["headers"]["Accept"] == "*/*"

    def test_health_transactions_are_dropped(self):
        assert _filter_transactions({"transaction": "/api/health"}, {}) is None
        assert _filter_transactions({"transaction": "list_questions"}, {}) is not None

    def test_capture_without_dsn(self):
        assert capture_exception(RuntimeError("boom")) is None
