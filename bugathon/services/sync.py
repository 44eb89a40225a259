"""
Sync orchestrator: ticket source → tickets → user scores → daily stats → achievements.

Stages (linear, single pass)
----------------------------
  fetching → normalizing → scoring_users → aggregating_daily
           → checking_achievements → done
Any stage may move to `failed`; the first failure short-circuits the rest.

Nothing is retried and nothing is rolled back across stages: if scoring
fails, the tickets written in `normalizing` stay persisted.

Overlapping syncs in the same process are rejected (SyncInProgressError).
Separate worker processes are not coordinated.
"""
from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session

from bugathon.core.errors import BugathonException, SyncFailedError, SyncInProgressError
from bugathon.schemas.jira import RawTicket
from bugathon.services.achievements import check_achievements
from bugathon.services.daily_stats import update_daily_stats
from bugathon.services.scoring import update_user_scores
from bugathon.services.tickets import normalize_ticket, upsert_tickets

logger = logging.getLogger(__name__)

_sync_lock = threading.Lock()


class SyncStage(str, enum.Enum):
    fetching = "fetching"
    normalizing = "normalizing"
    scoring_users = "scoring_users"
    aggregating_daily = "aggregating_daily"
    checking_achievements = "checking_achievements"
    done = "done"
    failed = "failed"


class TicketSource(Protocol):
    def fetch_tickets(self) -> list[RawTicket]: ...


@dataclass
class SyncResult:
    success: bool
    tickets_processed: int = 0
    stage: SyncStage = SyncStage.done
    failed_stage: Optional[SyncStage] = None
    error: Optional[dict[str, Any]] = None
    achievements_granted: list[str] = field(default_factory=list)
    http_status: int = 200


def _run(db: Session, source: TicketSource, state: dict) -> SyncResult:
    state["stage"] = SyncStage.fetching
    raw_tickets = source.fetch_tickets()

    state["stage"] = SyncStage.normalizing
    now = datetime.now(tz=timezone.utc)
    normalized = [normalize_ticket(t, now=now) for t in raw_tickets]
    upsert_tickets(db, normalized)
    logger.info("Upserted %s tickets", len(normalized))

    state["stage"] = SyncStage.scoring_users
    update_user_scores(db, now=now)

    state["stage"] = SyncStage.aggregating_daily
    update_daily_stats(db)

    state["stage"] = SyncStage.checking_achievements
    granted = check_achievements(db)

    return SyncResult(
        success=True,
        tickets_processed=len(raw_tickets),
        achievements_granted=granted,
    )


def sync_bugathon_data(db: Session, source: TicketSource) -> SyncResult:
    """
    Run one full sync. Never raises for stage failures: returns
    SyncResult(success=False, error={code, message, details}) instead.
    Raises SyncInProgressError if another sync holds the lock.
    """
    if not _sync_lock.acquire(blocking=False):
        raise SyncInProgressError()

    state: dict = {"stage": SyncStage.fetching}
    try:
        logger.info("Sync started")
        result = _run(db, source, state)
        logger.info(
            "Sync finished: %s tickets processed, achievements granted: %s",
            result.tickets_processed, result.achievements_granted or "none",
        )
        return result
    except BugathonException as exc:
        stage: SyncStage = state["stage"]
        logger.error("Sync failed while %s: [%s] %s", stage.value, exc.code, exc.message)
        return _failure(stage, exc)
    except Exception as exc:
        stage = state["stage"]
        logger.exception("Sync failed while %s with an unexpected error", stage.value)
        return _failure(stage, SyncFailedError(stage.value, str(exc)))
    finally:
        _sync_lock.release()


def _failure(stage: SyncStage, exc: BugathonException) -> SyncResult:
    return SyncResult(
        success=False,
        stage=SyncStage.failed,
        failed_stage=stage,
        error=exc.to_dict(),
        http_status=exc.http_status,
    )
