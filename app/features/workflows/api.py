"""Workflows API endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_workflow_service
from app.features.workflows.domain import ROLE_INFO, assignable_roles
from app.features.workflows.schemas import (
    ChangeRoleRequest,
    CreateWorkflowRequest,
    DeleteResponse,
    InviteListResponse,
    InviteMemberRequest,
    InviteMemberResponse,
    InviteSummary,
    MemberResponse,
    RedeemInviteResponse,
    RoleInfo,
    RoleListResponse,
    WorkflowDetailResponse,
    WorkflowListResponse,
    WorkflowResponse,
)
from app.features.workflows.service import WorkflowService
from app.middleware.auth import get_current_user
from app.models.user import AuthUser

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api", tags=["workflows"])


@router.get("/roles", response_model=RoleListResponse)
async def list_roles():
    """Roles with their labels; the owner role is never assignable"""
    assignable = assignable_roles()
    return {
        "roles": [
            RoleInfo(key=role, label=label, description=description, assignable=role in assignable)
            for role, (label, description) in ROLE_INFO.items()
        ]
    }


@router.get("/workflows", response_model=WorkflowListResponse)
async def list_workflows(
    search: Optional[str] = Query(None, description="Case-insensitive filter on the workflow name"),
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """List the workflows the authenticated user owns or belongs to"""
    workflows = await service.list_workflows(user, search)

    return {
        "workflows": workflows,
        "count": len(workflows)
    }


@router.post("/workflows", response_model=WorkflowResponse)
async def create_workflow(
    request: CreateWorkflowRequest,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """Create a workflow owned by the authenticated user"""
    workflow = await service.create_workflow(user, request.name)
    return {"workflow": workflow}


@router.get("/workflows/{workflow_id}", response_model=WorkflowDetailResponse)
async def get_workflow(
    workflow_id: str,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """
    Get the board of a workflow.

    Returns the workflow with its members, the owner profile, the caller's
    resolved role, the tasks in creation order and the count per column.
    Non-members get the viewer role.
    """
    return await service.get_workflow_detail(workflow_id, user)


@router.post("/workflows/{workflow_id}/members", response_model=InviteMemberResponse)
async def invite_member(
    workflow_id: str,
    request: InviteMemberRequest,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """
    Invite a member by e-mail.

    Registered users are added directly (outcome "added_directly"); other
    addresses receive an invitation link (outcome "invitation_sent").
    """
    return await service.invite_member(workflow_id, user, request.email, request.role)


@router.patch("/workflows/{workflow_id}/members/{member_uid}", response_model=MemberResponse)
async def change_member_role(
    workflow_id: str,
    member_uid: str,
    request: ChangeRoleRequest,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    member = await service.change_member_role(workflow_id, user, member_uid, request.role)
    return {"member": member}


@router.delete("/workflows/{workflow_id}/members/{member_uid}", response_model=DeleteResponse)
async def remove_member(
    workflow_id: str,
    member_uid: str,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    await service.remove_member(workflow_id, user, member_uid)
    return {"success": True, "message": "Member removed successfully"}


@router.get("/workflows/{workflow_id}/invites", response_model=InviteListResponse)
async def list_invites(
    workflow_id: str,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """Pending invitations, newest first (managers only)"""
    invites = await service.list_invites(workflow_id, user)

    return {
        "invites": [InviteSummary(**invite.model_dump()) for invite in invites],
        "count": len(invites)
    }


@router.delete("/workflows/{workflow_id}/invites/{token}", response_model=DeleteResponse)
async def cancel_invite(
    workflow_id: str,
    token: str,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    await service.cancel_invite(workflow_id, user, token)
    return {"success": True, "message": "Invite cancelled successfully"}


@router.post("/invites/{token}/redeem", response_model=RedeemInviteResponse)
async def redeem_invite(
    token: str,
    user: AuthUser = Depends(get_current_user),
    service: WorkflowService = Depends(get_workflow_service),
):
    """Join the workflow an invitation link points to, as the signed-in user"""
    return await service.redeem_invite(token, user)
