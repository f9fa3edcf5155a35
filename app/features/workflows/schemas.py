"""Request and response schemas for the Workflows API"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr

from app.features.tasks.domain import Task
from app.features.workflows.domain import InviteOutcome, Member, Role, Workflow
from app.models.user import UserProfile


class CreateWorkflowRequest(BaseModel):
    name: str


class WorkflowResponse(BaseModel):
    workflow: Workflow


class WorkflowSummary(BaseModel):
    """Dashboard card"""
    id: str
    name: str
    owner_id: str
    member_count: int
    role: Role
    created_at: datetime
    created_at_label: str


class WorkflowListResponse(BaseModel):
    workflows: List[WorkflowSummary]
    count: int


class WorkflowDetailResponse(BaseModel):
    """Board view of a workflow"""
    workflow: Workflow
    owner: Optional[UserProfile] = None
    current_role: Role
    tasks: List[Task]
    task_counts: Dict[str, int]


class InviteMemberRequest(BaseModel):
    email: EmailStr
    role: Role = Role.DEVELOPER


class InviteMemberResponse(BaseModel):
    outcome: InviteOutcome
    member: Optional[Member] = None


class ChangeRoleRequest(BaseModel):
    role: Role


class MemberResponse(BaseModel):
    member: Member


class InviteSummary(BaseModel):
    token: str
    email: str
    role: Role
    invited_by: str
    created_at: datetime


class InviteListResponse(BaseModel):
    invites: List[InviteSummary]
    count: int


class RedeemInviteResponse(BaseModel):
    workflow_id: str
    member: Optional[Member] = None


class RoleInfo(BaseModel):
    key: Role
    label: str
    description: str
    assignable: bool


class RoleListResponse(BaseModel):
    roles: List[RoleInfo]


class DeleteResponse(BaseModel):
    success: bool
    message: str
