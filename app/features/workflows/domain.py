"""Domain models and rules for workflows, members and invitations"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field, model_validator

from app.core.exceptions import (
    AlreadyMember,
    InvalidTarget,
    PermissionDenied,
    ValidationError,
)
from app.utils.datetime_helper import utc_now


class Role(str, Enum):
    """Workflow member role enum"""
    OWNER = "owner"
    PROJECT_MANAGER = "project_manager"
    DEVELOPER = "developer"
    VIEWER = "viewer"


ROLE_INFO = {
    Role.OWNER: ("Propriétaire", "Contrôle total du projet"),
    Role.PROJECT_MANAGER: ("Chef de projet", "Gère l'équipe et les tâches"),
    Role.DEVELOPER: ("Développeur", "Crée et modifie les tâches"),
    Role.VIEWER: ("Observateur", "Lecture seule"),
}

MEMBER_MANAGERS = frozenset({Role.OWNER, Role.PROJECT_MANAGER})
TASK_EDITORS = frozenset({Role.OWNER, Role.PROJECT_MANAGER, Role.DEVELOPER})


class Member(BaseModel):
    """Role-tagged binding of a user to a workflow (embedded in the workflow record)"""
    uid: str
    email: str
    name: str
    role: Role
    added_at: datetime


class WorkflowCreate(BaseModel):
    """Workflow creation model"""
    name: str
    owner_id: str
    members: List[Member] = Field(default_factory=list)
    created_at: datetime


class Workflow(BaseModel):
    """Complete workflow model from database"""
    id: str
    name: str
    owner_id: str
    members: List[Member] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def check_members(self) -> "Workflow":
        # ownerId is authoritative: the owner never appears as a member row
        seen = set()
        for member in self.members:
            if member.uid == self.owner_id or member.role == Role.OWNER:
                raise ValueError("owner must not be stored as a member")
            if member.uid in seen:
                raise ValueError(f"duplicate member {member.uid}")
            seen.add(member.uid)
        return self

    def find_member(self, uid: str) -> Optional[Member]:
        return next((m for m in self.members if m.uid == uid), None)

    def has_access(self, uid: str) -> bool:
        return uid == self.owner_id or self.find_member(uid) is not None


class InviteCreate(BaseModel):
    """Invite creation model"""
    token: str
    workflow_id: str
    email: str
    role: Role
    invited_by: str
    created_at: datetime


class Invite(InviteCreate):
    """Persisted invitation awaiting redemption"""

    class Config:
        from_attributes = True


class InviteOutcome(str, Enum):
    ADDED_DIRECTLY = "added_directly"
    INVITATION_SENT = "invitation_sent"


# ---------------------------------------------------------------------------
# Role & permission resolution
# ---------------------------------------------------------------------------

def resolve_role(workflow: Workflow, user_id: Optional[str]) -> Role:
    """
    Derive the role of a user inside a workflow.

    Non-members (and anonymous callers) fall back to viewer instead of raising.
    """
    if user_id is None:
        return Role.VIEWER
    if user_id == workflow.owner_id:
        return Role.OWNER
    member = workflow.find_member(user_id)
    if member is not None:
        return member.role
    return Role.VIEWER


def can_manage_members(role: Role) -> bool:
    return role in MEMBER_MANAGERS


def can_create_or_advance_tasks(role: Role) -> bool:
    return role in TASK_EDITORS


def assignable_roles() -> List[Role]:
    """Roles an invitation or a role change may grant"""
    return [role for role in Role if role != Role.OWNER]


def _check_assignable(role: Role) -> None:
    if role == Role.OWNER:
        raise ValidationError("Le rôle propriétaire ne peut pas être attribué")


# ---------------------------------------------------------------------------
# Membership mutations (in-memory; persisted by the service layer)
# ---------------------------------------------------------------------------

def add_member(
    workflow: Workflow,
    uid: str,
    email: str,
    name: Optional[str],
    role: Role,
    now: Optional[datetime] = None,
) -> Member:
    """Append a member, enforcing one entry per uid"""
    _check_assignable(role)
    if workflow.has_access(uid):
        raise AlreadyMember()

    member = Member(
        uid=uid,
        email=email,
        name=name or email,
        role=role,
        added_at=now or utc_now(),
    )
    workflow.members.append(member)
    return member


def _target_member(workflow: Workflow, target_uid: str) -> Member:
    if target_uid == workflow.owner_id:
        raise InvalidTarget()
    member = workflow.find_member(target_uid)
    if member is None:
        raise InvalidTarget("Ce membre n'appartient pas au projet")
    return member


def change_member_role(
    workflow: Workflow,
    target_uid: str,
    new_role: Role,
    requester_role: Role,
) -> Member:
    """Replace a member's role in place, keeping added_at and position"""
    if not can_manage_members(requester_role):
        raise PermissionDenied()
    member = _target_member(workflow, target_uid)
    _check_assignable(new_role)

    updated = member.model_copy(update={"role": new_role})
    index = workflow.members.index(member)
    workflow.members[index] = updated
    return updated


def remove_member(workflow: Workflow, target_uid: str, requester_role: Role) -> Member:
    """Remove the member with the matching uid"""
    if not can_manage_members(requester_role):
        raise PermissionDenied()
    member = _target_member(workflow, target_uid)

    workflow.members = [m for m in workflow.members if m.uid != target_uid]
    return member


def build_invite_link(origin: str, token: str, workflow_id: str, role: Role) -> str:
    """Build ``<origin>/register?invite=<token>&workflowId=<id>&role=<role>``"""
    query = urlencode({"invite": token, "workflowId": workflow_id, "role": role.value})
    return f"{origin.rstrip('/')}/register?{query}"
