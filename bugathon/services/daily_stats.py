"""
Daily stats: today's creation / resolution counters.

Two independent reads against `tickets` (the sets may overlap):
  created  — created_at  >= start of today (UTC)
  fixed    — status_category == "done" and resolved_at >= start of today

Only today's `daily_stats` row is written; past dates are never recomputed.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bugathon.core.errors import StoreError
from bugathon.models.daily_stat import DailyStat
from bugathon.models.ticket import Ticket
from bugathon.services.tickets import DONE_CATEGORY

logger = logging.getLogger(__name__)


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def compute_daily_stat(
    created: list[Ticket],
    fixed: list[Ticket],
) -> dict:
    """Pure counter computation over the two filtered ticket sets."""
    names = {t.reporter_name for t in created if t.reporter_name}
    names |= {t.assignee_name for t in fixed if t.assignee_name is not None}
    return {
        "bugs_created": len(created),
        "bugs_fixed": len(fixed),
        "points_earned": sum(t.assignee_points or 0 for t in fixed),
        "active_users": len(names),
    }


def update_daily_stats(db: Session, day: Optional[date] = None) -> DailyStat:
    """Recompute and upsert the DailyStat row for `day` (defaults to today, UTC)."""
    target = day or _today()
    boundary = _day_start(target)

    try:
        created = db.query(Ticket).filter(Ticket.created_at >= boundary).all()
        fixed = (
            db.query(Ticket)
            .filter(
                Ticket.status_category == DONE_CATEGORY,
                Ticket.resolved_at >= boundary,
            )
            .all()
        )
        counters = compute_daily_stat(created, fixed)

        stat = db.query(DailyStat).filter(DailyStat.date == target).first()
        if stat is None:
            stat = DailyStat(date=target)
            db.add(stat)
        stat.bugs_created = counters["bugs_created"]
        stat.bugs_fixed = counters["bugs_fixed"]
        stat.points_earned = counters["points_earned"]
        stat.active_users = counters["active_users"]
        stat.updated_at = datetime.now(tz=timezone.utc)
        db.commit()
        db.refresh(stat)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("update daily stats", str(exc)) from exc

    logger.info(
        "Daily stats %s: created=%s fixed=%s points=%s active=%s",
        target, stat.bugs_created, stat.bugs_fixed, stat.points_earned, stat.active_users,
    )
    return stat
