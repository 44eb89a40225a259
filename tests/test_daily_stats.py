"""
Tests for the Daily Stats Aggregator.

Tickets are created "now" unless a past timestamp is given, so the
aggregator's default day (today, UTC) sees them.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from conftest import raw_ticket
from bugathon.models.daily_stat import DailyStat
from bugathon.services.daily_stats import update_daily_stats
from bugathon.services.tickets import normalize_ticket, upsert_tickets

_LONG_AGO = "2020-01-01T10:00:00.000+0000"


def _now_str() -> str:
    return datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000+0000")


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _seed(db, *tickets):
    upsert_tickets(db, [normalize_ticket(t) for t in tickets])


class TestUpdateDailyStats:
    def test_empty_store_gives_zero_row(self, db):
        stat = update_daily_stats(db)
        assert stat.date == _today()
        assert (stat.bugs_created, stat.bugs_fixed, stat.points_earned, stat.active_users) == (0, 0, 0, 0)

    def test_counts_created_and_fixed_independently(self, db):
        _seed(
            db,
            # created today, still open
            raw_ticket("BUG-1", reporter="alice", points=5),
            # created today and fixed today: in both sets
            raw_ticket("BUG-2", reporter="carol", category="done", assignee="bob",
                       points=3, resolved=_now_str()),
            # created long ago, fixed today
            raw_ticket("BUG-3", reporter="dave", category="done", assignee="erin",
                       points=8, created=_LONG_AGO, resolved=_now_str()),
            # created and fixed long ago
            raw_ticket("BUG-4", reporter="zed", category="done", assignee="yan",
                       points=13, created=_LONG_AGO, resolved=_LONG_AGO),
        )
        stat = update_daily_stats(db)

        assert stat.bugs_created == 2
        assert stat.bugs_fixed == 2
        assert stat.points_earned == 11
        # reporters of today's tickets {alice, carol} ∪ today's fixers {bob, erin}
        assert stat.active_users == 4

    def test_resolved_today_but_not_done_is_not_fixed(self, db):
        _seed(db, raw_ticket("BUG-1", category="indeterminate", assignee="bob",
                             points=3, created=_LONG_AGO, resolved=_now_str()))
        stat = update_daily_stats(db)
        assert stat.bugs_fixed == 0
        assert stat.points_earned == 0

    def test_same_person_counted_once(self, db):
        _seed(
            db,
            raw_ticket("BUG-1", reporter="alice"),
            raw_ticket("BUG-2", reporter="bob", category="done", assignee="alice",
                       points=2, created=_LONG_AGO, resolved=_now_str()),
        )
        assert update_daily_stats(db).active_users == 1

    def test_unassigned_fix_not_an_active_user(self, db):
        _seed(db, raw_ticket("BUG-1", reporter="alice", category="done", assignee=None,
                             points=2, created=_LONG_AGO, resolved=_now_str()))
        stat = update_daily_stats(db)
        assert stat.bugs_fixed == 1
        assert stat.active_users == 0

    def test_rerun_updates_single_row(self, db):
        _seed(db, raw_ticket("BUG-1"))
        update_daily_stats(db)
        _seed(db, raw_ticket("BUG-2"))
        stat = update_daily_stats(db)

        assert stat.bugs_created == 2
        assert db.query(DailyStat).count() == 1

    def test_only_target_day_touched(self, db):
        yesterday = _today() - timedelta(days=1)
        db.add(DailyStat(date=yesterday, bugs_created=7, bugs_fixed=3, points_earned=9,
                         active_users=2, updated_at=datetime.now(tz=timezone.utc)))
        db.commit()
        _seed(db, raw_ticket("BUG-1"))

        update_daily_stats(db)
        old = db.query(DailyStat).filter_by(date=yesterday).one()
        assert (old.bugs_created, old.bugs_fixed, old.points_earned) == (7, 3, 9)
