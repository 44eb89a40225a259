"""
Ticket source: Jira Cloud search client.

One GET per sync, no pagination: the first `maxResults` issues matching
the JQL are returned and anything beyond that is silently truncated.

Any transport failure, non-2xx status or unparsable payload is raised as
TicketSourceError; nothing is retried here.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from bugathon.core.config import Settings, settings as default_settings
from bugathon.core.errors import TicketSourceError
from bugathon.schemas.jira import JiraSearchResponse, RawTicket

logger = logging.getLogger(__name__)

TICKET_FIELDS = (
    "key",
    "summary",
    "status",
    "reporter",
    "assignee",
    "customfield_10312",  # Assigned Dev
    "customfield_10016",  # Sprint points
    "created",
    "resolutiondate",
    "priority",
    "issuetype",
)


class JiraClient:
    """Fetches the bugathon ticket set from the Jira search endpoint."""

    def __init__(
        self,
        search_url: str,
        email: str,
        api_token: str,
        jql: str = 'labels = "Bugathon"',
        max_results: int = 100,
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ):
        self.search_url = search_url
        self.auth = (email, api_token)
        self.jql = jql
        self.max_results = max_results
        self.timeout = timeout
        self.http = session or requests.Session()
        self.headers = {"Accept": "application/json"}

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "JiraClient":
        return cls(
            search_url=settings.jira_search_url,
            email=settings.JIRA_EMAIL,
            api_token=settings.JIRA_API_TOKEN,
            jql=settings.JIRA_JQL,
            max_results=settings.JIRA_MAX_RESULTS,
            timeout=settings.JIRA_TIMEOUT_SECONDS,
        )

    def _params(self) -> dict[str, Any]:
        return {
            "jql": self.jql,
            "fields": ",".join(TICKET_FIELDS),
            "maxResults": self.max_results,
        }

    def fetch_tickets(self) -> list[RawTicket]:
        try:
            resp = self.http.get(
                self.search_url,
                headers=self.headers,
                params=self._params(),
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Ticket source request failed: %s", exc)
            raise TicketSourceError(
                message=f"Ticket source request failed: {exc}",
                url=self.search_url,
            ) from exc

        if not 200 <= resp.status_code < 300:
            logger.error(
                "Ticket source returned HTTP %s: %s",
                resp.status_code, (resp.text or "")[:500],
            )
            raise TicketSourceError(
                message=f"Ticket source returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                url=self.search_url,
            )

        try:
            payload = JiraSearchResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise TicketSourceError(
                message=f"Ticket source returned an unreadable payload: {exc}",
                status_code=resp.status_code,
                url=self.search_url,
            ) from exc

        if len(payload.issues) >= self.max_results:
            logger.warning(
                "Ticket source returned %s issues (maxResults=%s); later issues are not synced",
                len(payload.issues), self.max_results,
            )
        logger.info("Fetched %s tickets from ticket source", len(payload.issues))
        return payload.issues


def get_ticket_source() -> JiraClient:
    """FastAPI dependency; overridden in tests with a fake source."""
    return JiraClient.from_settings()
