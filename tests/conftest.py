"""
Shared pytest fixtures.

Uses a local SQLite database so no Postgres is required for tests. Tables are
recreated for every test: scores are a fold over the whole ticket table, so
tests cannot share rows the way date-partitioned data can.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_bugathon.db"

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bugathon.db.base import Base, get_db
from bugathon.main import app
from bugathon.schemas.jira import RawTicket
from bugathon.services.ticket_source import get_ticket_source

SQLITE_URL = "sqlite:///./test_bugathon.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def jira_issue(
    key: str,
    summary: str = "some bug",
    category: str = "new",
    status: Optional[str] = None,
    reporter: Optional[str] = "alice",
    assignee: Optional[str] = None,
    points: Optional[float] = None,
    created: Optional[str] = None,
    resolved: Optional[str] = None,
    priority: str = "Medium",
    issue_type: str = "Bug",
) -> dict:
    """Build an issue dict shaped like the Jira search API response."""
    now = datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000+0000")
    fields = {
        "summary": summary,
        "status": {
            "name": status or ("Done" if category == "done" else "To Do"),
            "statusCategory": {"key": category},
        },
        "reporter": (
            {"accountId": f"acc-{reporter}", "displayName": reporter} if reporter else None
        ),
        "assignee": (
            {"accountId": f"acc-{assignee}", "displayName": assignee} if assignee else None
        ),
        "customfield_10016": points,
        "created": created or now,
        "resolutiondate": resolved,
        "priority": {"name": priority},
        "issuetype": {"name": issue_type},
    }
    return {"key": key, "fields": fields}


def raw_ticket(key: str, **kwargs) -> RawTicket:
    return RawTicket.model_validate(jira_issue(key, **kwargs))


class FakeTicketSource:
    """Stands in for JiraClient: returns canned tickets or raises."""

    def __init__(self, tickets=None, error: Optional[Exception] = None):
        self.tickets = list(tickets or [])
        self.error = error
        self.calls = 0

    def fetch_tickets(self) -> list[RawTicket]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tickets)


@pytest.fixture(autouse=True)
def reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="session", autouse=True)
def drop_tables_at_exit():
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def source():
    return FakeTicketSource()


@pytest.fixture()
def client(source):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ticket_source] = lambda: source
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
