"""
Sync router.

POST /sync   — pull tickets from Jira and rebuild scores, stats and achievements
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bugathon.db.base import get_db
from bugathon.schemas.sync import SyncResponse
from bugathon.services.sync import SyncResult, sync_bugathon_data
from bugathon.services.ticket_source import JiraClient, get_ticket_source

router = APIRouter(prefix="/sync", tags=["sync"])


def _result_to_response(result: SyncResult) -> SyncResponse:
    return SyncResponse(
        success=result.success,
        tickets_processed=result.tickets_processed,
        stage=result.stage.value,
        failed_stage=result.failed_stage.value if result.failed_stage else None,
        achievements_granted=result.achievements_granted,
        error=result.error,
    )


@router.post(
    "",
    response_model=SyncResponse,
    summary="Run a full bugathon sync",
    responses={
        200: {"description": "Sync completed; `tickets_processed` is set."},
        409: {"description": "Another sync is already running in this worker."},
        502: {"description": "Ticket source failed; body carries `success=false`."},
        500: {"description": "Store or unexpected failure; body carries `success=false`."},
    },
)
def run_sync(
    db: Session = Depends(get_db),
    source: JiraClient = Depends(get_ticket_source),
):
    """
    Fetch the bugathon tickets, upsert them, recompute every user score,
    refresh today's daily stats and grant achievements.

    Steps run in order and stop at the first failure. Work committed by
    earlier steps is kept. The body always follows `SyncResponse`; on
    failure the HTTP status is taken from the originating error.
    """
    result = sync_bugathon_data(db, source)
    body = _result_to_response(result)
    if result.success:
        return body
    return JSONResponse(status_code=result.http_status, content=body.model_dump())
