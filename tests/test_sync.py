"""
Tests for the Sync Orchestrator.

Covered scenarios:
  A) end-to-end: two tickets → normalized rows, user scores, leaderboard order
  B) transport failure → failure result, nothing written
  C) store failure after ticket writes → failure result, tickets kept
  D) re-running an unchanged sync is idempotent
  E) overlapping syncs in one process are rejected
  F) POST /sync envelope for success and failure
"""
from __future__ import annotations

import pytest

from conftest import FakeTicketSource, raw_ticket
from bugathon.core.errors import StoreError, SyncInProgressError, TicketSourceError
from bugathon.models.achievement import Achievement
from bugathon.models.daily_stat import DailyStat
from bugathon.models.ticket import Ticket
from bugathon.models.user_score import UserScore
from bugathon.services import sync as sync_service
from bugathon.services.sync import SyncStage, sync_bugathon_data


def _scenario_tickets():
    return [
        raw_ticket("BUG-A", summary="[Bugathon New] crash", category="new",
                   reporter="alice", points=5),
        raw_ticket("BUG-B", summary="memory leak", category="done",
                   reporter="carol", assignee="bob", points=8),
    ]


# ---------------------------------------------------------------------------
# Service layer
# ---------------------------------------------------------------------------

class TestSyncService:
    def test_end_to_end_scenario(self, db):
        result = sync_bugathon_data(db, FakeTicketSource(_scenario_tickets()))

        assert result.success is True
        assert result.tickets_processed == 2
        assert result.stage == SyncStage.done

        a = db.query(Ticket).filter_by(key="BUG-A").one()
        b = db.query(Ticket).filter_by(key="BUG-B").one()
        assert (a.is_new_bug, a.reporter_points, a.assignee_points) == (True, 2.5, 0)
        assert (b.is_new_bug, b.reporter_points, b.assignee_points) == (False, 0, 8)

        alice = db.query(UserScore).filter_by(user_name="alice").one()
        bob = db.query(UserScore).filter_by(user_name="bob").one()
        assert (alice.bugs_reported, alice.reporter_points, alice.total_points) == (1, 2.5, 2.5)
        assert (bob.bugs_fixed, bob.assignee_points, bob.total_points) == (1, 8, 8)

        assert db.query(DailyStat).count() == 1
        champion = db.query(Achievement).one()
        assert champion.user_name == "bob"

    def test_transport_failure_short_circuits(self, db):
        source = FakeTicketSource(error=TicketSourceError("boom", status_code=503))
        result = sync_bugathon_data(db, source)

        assert result.success is False
        assert result.stage == SyncStage.failed
        assert result.failed_stage == SyncStage.fetching
        assert result.error["code"] == "TICKET_SOURCE_ERROR"
        assert result.error["details"]["status_code"] == 503
        assert result.http_status == 502
        assert db.query(Ticket).count() == 0
        assert db.query(UserScore).count() == 0
        assert db.query(DailyStat).count() == 0

    def test_store_failure_keeps_earlier_writes(self, db, monkeypatch):
        def broken_scores(db, now=None):
            raise StoreError("update user scores", "connection reset")

        monkeypatch.setattr(sync_service, "update_user_scores", broken_scores)
        result = sync_bugathon_data(db, FakeTicketSource(_scenario_tickets()))

        assert result.success is False
        assert result.failed_stage == SyncStage.scoring_users
        assert result.error["code"] == "STORE_ERROR"
        assert db.query(Ticket).count() == 2
        assert db.query(DailyStat).count() == 0
        assert db.query(Achievement).count() == 0

    def test_unexpected_error_wrapped(self, db, monkeypatch):
        def broken_daily(db, day=None):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(sync_service, "update_daily_stats", broken_daily)
        result = sync_bugathon_data(db, FakeTicketSource(_scenario_tickets()))

        assert result.success is False
        assert result.failed_stage == SyncStage.aggregating_daily
        assert result.error["code"] == "SYNC_FAILED"
        assert "kaboom" in result.error["message"]

    def test_rerun_is_idempotent(self, db):
        sync_bugathon_data(db, FakeTicketSource(_scenario_tickets()))
        first_earned = db.query(Achievement).one().earned_at

        result = sync_bugathon_data(db, FakeTicketSource(_scenario_tickets()))
        db.expire_all()
        assert result.success is True
        assert result.achievements_granted == []
        assert db.query(Ticket).count() == 2
        assert db.query(UserScore).count() == 2
        assert db.query(DailyStat).count() == 1
        rows = db.query(Achievement).all()
        assert len(rows) == 1
        assert rows[0].earned_at == first_earned

    def test_empty_source(self, db):
        result = sync_bugathon_data(db, FakeTicketSource([]))
        assert result.success is True
        assert result.tickets_processed == 0
        assert db.query(Achievement).count() == 0

    def test_concurrent_sync_rejected(self, db):
        assert sync_service._sync_lock.acquire(blocking=False)
        try:
            with pytest.raises(SyncInProgressError):
                sync_bugathon_data(db, FakeTicketSource([]))
        finally:
            sync_service._sync_lock.release()

    def test_lock_released_after_failure(self, db):
        sync_bugathon_data(db, FakeTicketSource(error=TicketSourceError("down")))
        assert sync_bugathon_data(db, FakeTicketSource([])).success is True


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class TestSyncEndpoint:
    def test_sync_success_then_leaderboard(self, client, source):
        source.tickets = _scenario_tickets()

        r = client.post("/sync")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["tickets_processed"] == 2
        assert body["stage"] == "done"
        assert body["error"] is None

        r = client.get("/leaderboard")
        items = r.json()["items"]
        assert [i["user_name"] for i in items] == ["bob", "alice"]
        assert items[0]["total_points"] == 8
        assert items[1]["total_points"] == 2.5

    def test_sync_transport_failure_envelope(self, client, source):
        source.error = TicketSourceError("Ticket source returned HTTP 401", status_code=401)

        r = client.post("/sync")
        assert r.status_code == 502
        body = r.json()
        assert body["success"] is False
        assert body["tickets_processed"] == 0
        assert body["stage"] == "failed"
        assert body["failed_stage"] == "fetching"
        assert body["error"]["code"] == "TICKET_SOURCE_ERROR"

    def test_sync_in_progress_returns_409(self, client):
        assert sync_service._sync_lock.acquire(blocking=False)
        try:
            r = client.post("/sync")
        finally:
            sync_service._sync_lock.release()
        assert r.status_code == 409
        assert r.json()["code"] == "SYNC_IN_PROGRESS"
