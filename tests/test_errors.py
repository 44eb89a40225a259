"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from bugathon.core.errors import (
    StoreError,
    SyncFailedError,
    SyncInProgressError,
    TicketSourceError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_ticket_source_error(self):
        err = TicketSourceError("Ticket source returned HTTP 503", status_code=503, url="https://x")
        assert err.http_status == 502
        assert err.code == "TICKET_SOURCE_ERROR"
        d = err.to_dict()
        assert d["details"] == {"status_code": 503, "url": "https://x"}

    def test_ticket_source_error_without_details(self):
        d = TicketSourceError("timed out").to_dict()
        assert "details" not in d
        assert d["message"] == "timed out"

    def test_store_error(self):
        err = StoreError("upsert tickets", "database is locked")
        assert err.http_status == 500
        assert err.code == "STORE_ERROR"
        assert "database is locked" in err.message
        assert err.details["operation"] == "upsert tickets"

    def test_sync_failed_error(self):
        err = SyncFailedError("scoring_users", "boom")
        assert err.code == "SYNC_FAILED"
        assert err.details["stage"] == "scoring_users"

    def test_sync_in_progress_error(self):
        err = SyncInProgressError()
        assert err.http_status == 409
        assert err.code == "SYNC_IN_PROGRESS"


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_bad_query_param_returns_validation_error(self, client):
        r = client.get("/stats?days=abc")
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert isinstance(body["details"]["errors"], list)
        assert body["details"]["errors"][0]["field"] == "query.days"

    def test_unknown_route_is_404(self, client):
        assert client.get("/nope").status_code == 404
