"""
Sync response schema.

POST /sync → SyncResponse
"""
from typing import Optional
from pydantic import BaseModel, Field

from bugathon.schemas.common import ErrorResponse


class SyncResponse(BaseModel):
    success: bool
    tickets_processed: int = Field(
        default=0, description="Tickets fetched and upserted (0 on failure)."
    )
    stage: str = Field(description='"done" on success, "failed" otherwise.')
    failed_stage: Optional[str] = Field(
        default=None,
        description="Stage that raised the error, e.g. \"fetching\".",
        examples=["fetching"],
    )
    achievements_granted: list[str] = Field(default_factory=list)
    error: Optional[ErrorResponse] = Field(
        default=None,
        description="Originating error when success is false.",
    )
