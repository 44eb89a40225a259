"""
Inbound schemas for the Jira search API.

GET /rest/api/3/search/jql → JiraSearchResponse  (issues: list[RawTicket])

Only the projected fields are modelled; anything else Jira sends is ignored.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Jira emits "+0000" style offsets; normalise to "+00:00" before parsing.
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


class JiraUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_id: Optional[str] = Field(default=None, alias="accountId")
    display_name: Optional[str] = Field(default=None, alias="displayName")


class JiraStatusCategory(BaseModel):
    key: str


class JiraStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    status_category: JiraStatusCategory = Field(alias="statusCategory")


class JiraNamed(BaseModel):
    name: str


class JiraFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: Optional[str] = ""
    status: JiraStatus
    reporter: Optional[JiraUser] = None
    assignee: Optional[JiraUser] = None
    assigned_dev: Optional[JiraUser] = Field(default=None, alias="customfield_10312")
    sprint_points: Optional[float] = Field(default=None, alias="customfield_10016")
    created: datetime
    resolutiondate: Optional[datetime] = None
    priority: Optional[JiraNamed] = None
    issuetype: Optional[JiraNamed] = None

    @field_validator("summary", mode="before")
    @classmethod
    def null_summary_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("created", "resolutiondate", mode="before")
    @classmethod
    def normalise_offset(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.endswith("Z"):
                return v[:-1] + "+00:00"
            return _COMPACT_OFFSET.sub(r"\1:\2", v)
        return v


class RawTicket(BaseModel):
    """One issue as returned by the ticket source (read-only input)."""
    key: str
    fields: JiraFields


class JiraSearchResponse(BaseModel):
    issues: list[RawTicket] = Field(default_factory=list)
