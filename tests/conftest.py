"""Shared test fixtures for all test groups."""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from app.core.exceptions import EmailInUse, InvalidCredentials, Unauthenticated
from app.features.auth.service import AuthService
from app.features.tasks.domain import StatusEvent, Task, TaskStatus
from app.features.tasks.service import TaskService
from app.features.workflows.domain import Member, Role, Workflow
from app.features.workflows.service import WorkflowService
from app.infra.supabase.repositories import RepositoryFactory
from app.models.user import AuthUser, UserProfile

BASE_TIME = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
APP_ORIGIN = "https://board.acme.io"


# ============================================================================
# In-memory Supabase client
# ============================================================================


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Chainable stand-in for the postgrest query builder."""

    def __init__(self, store: "FakeSupabase", table: str):
        self._store = store
        self._table = table
        self._op = "select"
        self._payload: Optional[Dict[str, Any]] = None
        self._filters: List[Tuple[str, Any]] = []
        self._order: Optional[Tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def select(self, *_columns):
        self._op = "select"
        return self

    def insert(self, payload: Dict[str, Any]):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: Dict[str, Any]):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> FakeResponse:
        if self._store.fail_with is not None:
            raise self._store.fail_with

        rows = self._store.tables.setdefault(self._table, [])

        if self._op == "insert":
            row = copy.deepcopy(self._payload)
            row.setdefault("id", str(uuid.uuid4()))
            rows.append(row)
            return FakeResponse([copy.deepcopy(row)])

        matched = [row for row in rows if self._matches(row)]

        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse(copy.deepcopy(matched))

        if self._op == "delete":
            self._store.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(matched))

        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self._limit:
            matched = matched[: self._limit]
        return FakeResponse(copy.deepcopy(matched))


class FakeSupabase:
    """Minimal Supabase client exposing ``table()`` over in-memory rows."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_with: Optional[Exception] = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])

    def seed(self, name: str, record) -> Dict[str, Any]:
        row = record.model_dump(mode="json")
        self.tables.setdefault(name, []).append(row)
        return row

    def go_offline(self):
        self.fail_with = httpx.ConnectError("connection refused")


# ============================================================================
# Identity provider and mail relay fakes
# ============================================================================


class FakeIdentity:
    """Identity collaborator keeping accounts in memory."""

    def __init__(self):
        self.accounts: Dict[str, Tuple[AuthUser, str]] = {}
        self.tokens: Dict[str, AuthUser] = {}
        self.signed_out: List[str] = []

    async def register(self, email: str, password: str, display_name: str) -> AuthUser:
        if email in self.accounts:
            raise EmailInUse()
        user = AuthUser(id=f"u-{uuid.uuid4().hex[:8]}", email=email, display_name=display_name)
        self.accounts[email] = (user, password)
        return user

    async def sign_in(self, email: str, password: str):
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise InvalidCredentials()
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = account[0]
        return account[0], token

    async def current_user(self, access_token: Optional[str]) -> AuthUser:
        if access_token not in self.tokens:
            raise Unauthenticated()
        return self.tokens[access_token]

    async def sign_out(self, access_token: str) -> None:
        self.tokens.pop(access_token, None)
        self.signed_out.append(access_token)


class FakeMail:
    """Mail collaborator recording every invitation."""

    def __init__(self, deliver: bool = True):
        self.deliver = deliver
        self.sent: List[Dict[str, Optional[str]]] = []

    async def send_invite(self, to_email, project_name, invite_link, to_name=None) -> bool:
        if not self.deliver:
            return False
        self.sent.append({
            "to_email": to_email,
            "project_name": project_name,
            "invite_link": invite_link,
            "to_name": to_name,
        })
        return True


# ============================================================================
# Users
# ============================================================================


@pytest.fixture
def owner():
    return AuthUser(id="u-owner", email="olivia@acme.io", display_name="Olivia")


@pytest.fixture
def manager():
    return AuthUser(id="u-pm", email="paul@acme.io", display_name="Paul")


@pytest.fixture
def developer():
    return AuthUser(id="u-dev", email="dana@acme.io", display_name="Dana")


@pytest.fixture
def viewer():
    return AuthUser(id="u-viewer", email="victor@acme.io", display_name="Victor")


@pytest.fixture
def outsider():
    return AuthUser(id="u-bob", email="bob@acme.io", display_name="Bob")


# ============================================================================
# Store and services
# ============================================================================


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def repos(supabase):
    return RepositoryFactory(supabase)


@pytest.fixture
def mail():
    return FakeMail()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def workflow_service(repos, mail):
    return WorkflowService(repos, mail, APP_ORIGIN)


@pytest.fixture
def task_service(repos):
    return TaskService(repos)


@pytest.fixture
def auth_service(identity, repos, workflow_service):
    return AuthService(identity, repos, workflow_service)


def make_workflow(owner_id: str = "u-owner", members: Optional[List[Member]] = None, **overrides) -> Workflow:
    data = {
        "id": "wf-1",
        "name": "Refonte du site",
        "owner_id": owner_id,
        "members": members or [],
        "created_at": BASE_TIME,
    }
    data.update(overrides)
    return Workflow(**data)


def make_member(uid: str, role: Role, email: Optional[str] = None, minutes: int = 0) -> Member:
    return Member(
        uid=uid,
        email=email or f"{uid}@acme.io",
        name=uid,
        role=role,
        added_at=BASE_TIME + timedelta(minutes=minutes),
    )


def make_task(task_id: str = "t-1", status: TaskStatus = TaskStatus.REPORT, minutes: int = 0, **overrides) -> Task:
    created_at = BASE_TIME + timedelta(minutes=minutes)
    data = {
        "id": task_id,
        "workflow_id": "wf-1",
        "title": f"Task {task_id}",
        "description": "",
        "status": status,
        "assigned_to": "u-dev",
        "comments": [],
        "history": [StatusEvent(status=TaskStatus.REPORT, timestamp=created_at)],
        "created_at": created_at,
    }
    data.update(overrides)
    return Task(**data)


@pytest.fixture
def board(supabase, owner, manager, developer, viewer, outsider):
    """
    Seeded store: workflow ``wf-1`` owned by Olivia with a project manager,
    a developer and a viewer, plus profiles for the owner and for Bob, a
    registered user who is not part of the workflow.
    """
    workflow = make_workflow(members=[
        make_member(manager.id, Role.PROJECT_MANAGER, manager.email, minutes=1),
        make_member(developer.id, Role.DEVELOPER, developer.email, minutes=2),
        make_member(viewer.id, Role.VIEWER, viewer.email, minutes=3),
    ])
    supabase.seed("workflows", workflow)

    for user in (owner, outsider):
        supabase.seed("users", UserProfile(
            id=user.id,
            name=user.display_name,
            email=user.email,
            created_at=BASE_TIME,
        ))

    return workflow


# ============================================================================
# HTTP client
# ============================================================================


@pytest.fixture
def api_client(supabase, mail, identity, owner, manager, developer, viewer, outsider):
    """
    FastAPI test client over the in-memory collaborators.

    Requests authenticate with ``Authorization: Bearer <user id>`` for the
    user fixtures above; any other token is rejected with 401.
    """
    from fastapi import Header
    from fastapi.testclient import TestClient

    from app.api import dependencies
    from app.main import app
    from app.middleware.auth import get_bearer_token, get_current_user

    known_users = {user.id: user for user in (owner, manager, developer, viewer, outsider)}

    def fake_current_user(authorization: Optional[str] = Header(None)) -> AuthUser:
        token = get_bearer_token(authorization)
        if token not in known_users:
            raise Unauthenticated()
        return known_users[token]

    app.dependency_overrides[dependencies.get_repositories] = lambda: RepositoryFactory(supabase)
    app.dependency_overrides[dependencies.get_mail_service] = lambda: mail
    app.dependency_overrides[dependencies.get_identity] = lambda: identity
    app.dependency_overrides[get_current_user] = fake_current_user

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


def auth_header(user: AuthUser) -> Dict[str, str]:
    return {"Authorization": f"Bearer {user.id}"}
