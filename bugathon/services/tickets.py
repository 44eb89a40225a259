"""
Ticket service: normalize raw source tickets and upsert them into `tickets`.

Public API
----------
normalize_ticket(raw, now)     → NormalizedTicket   (pure, never fails)
upsert_tickets(db, tickets)    → int                 (one commit per batch)

Point attribution
-----------------
  reporter_points = sprint_points * 0.5   if the summary carries the marker
  assignee_points = sprint_points         if status_category == "done"

The two rules are independent: a ticket can pay both, one or neither.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bugathon.core.errors import StoreError
from bugathon.models.ticket import Ticket
from bugathon.schemas.jira import RawTicket

NEW_BUG_MARKER = "[bugathon new]"
DONE_CATEGORY = "done"
REPORTER_SHARE = 0.5


# ---------------------------------------------------------------------------
# Result type (plain dataclass — no ORM, no Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class NormalizedTicket:
    key: str
    summary: str
    is_new_bug: bool
    status: str
    status_category: str
    reporter_id: Optional[str]
    reporter_name: Optional[str]
    assignee_id: Optional[str]
    assignee_name: Optional[str]
    sprint_points: float
    reporter_points: float
    assignee_points: float
    created_at: datetime
    resolved_at: Optional[datetime]
    priority: Optional[str]
    issue_type: Optional[str]
    last_updated: datetime


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _display_name(user) -> Optional[str]:
    """Blank or whitespace-only names count as absent."""
    if user is None or not (user.display_name or "").strip():
        return None
    return user.display_name


def is_new_bug(summary: str) -> bool:
    return NEW_BUG_MARKER in (summary or "").casefold()


def reporter_points_for(new_bug: bool, sprint_points: float) -> float:
    return sprint_points * REPORTER_SHARE if new_bug else 0


def assignee_points_for(status_category: str, sprint_points: float) -> float:
    return sprint_points if status_category == DONE_CATEGORY else 0


# ---------------------------------------------------------------------------
# Public — normalizer
# ---------------------------------------------------------------------------

def normalize_ticket(raw: RawTicket, now: Optional[datetime] = None) -> NormalizedTicket:
    """Map one source ticket onto the persisted shape and apply point attribution."""
    f = raw.fields
    sprint_points = f.sprint_points or 0
    new_bug = is_new_bug(f.summary)
    category = f.status.status_category.key
    reporter = f.reporter
    assignee = f.assignee

    return NormalizedTicket(
        key=raw.key,
        summary=f.summary,
        is_new_bug=new_bug,
        status=f.status.name,
        status_category=category,
        reporter_id=reporter.account_id if reporter else None,
        reporter_name=_display_name(reporter),
        assignee_id=assignee.account_id if assignee else None,
        assignee_name=_display_name(assignee),
        sprint_points=sprint_points,
        reporter_points=reporter_points_for(new_bug, sprint_points),
        assignee_points=assignee_points_for(category, sprint_points),
        created_at=_as_utc(f.created),
        resolved_at=_as_utc(f.resolutiondate),
        priority=f.priority.name if f.priority else None,
        issue_type=f.issuetype.name if f.issuetype else None,
        last_updated=now or _utcnow(),
    )


# ---------------------------------------------------------------------------
# Public — store writer
# ---------------------------------------------------------------------------

def upsert_tickets(db: Session, tickets: list[NormalizedTicket]) -> int:
    """
    Insert new tickets and overwrite every column of existing ones (keyed by
    `key`). The whole batch is committed at once; on failure it is rolled
    back and StoreError is raised.
    """
    if not tickets:
        return 0
    try:
        keys = [t.key for t in tickets]
        existing = {
            row.key: row
            for row in db.query(Ticket).filter(Ticket.key.in_(keys)).all()
        }
        for t in tickets:
            values = asdict(t)
            row = existing.get(t.key)
            if row is None:
                row = Ticket(**values)
                db.add(row)
                existing[t.key] = row
            else:
                for name, value in values.items():
                    setattr(row, name, value)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("upsert tickets", str(exc)) from exc
    return len(tickets)
