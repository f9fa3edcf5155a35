"""Business logic for workflows, membership and invitations"""

import logging
import uuid
from typing import List, Optional

from app.core.exceptions import (
    InviteNotFound,
    NetworkFailure,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from app.features.tasks.domain import count_by_status
from app.features.workflows import domain
from app.features.workflows.domain import (
    Invite,
    InviteCreate,
    InviteOutcome,
    Member,
    Role,
    Workflow,
    WorkflowCreate,
)
from app.features.workflows.schemas import (
    InviteMemberResponse,
    RedeemInviteResponse,
    WorkflowDetailResponse,
    WorkflowSummary,
)
from app.infra.supabase.repositories import RepositoryFactory
from app.models.user import AuthUser
from app.services.mail_service import MailService
from app.utils.datetime_helper import format_datetime_fr, utc_now

logger = logging.getLogger(__name__)


class WorkflowService:
    """
    Service layer for workflow business logic.

    The caller's role is always resolved here from the stored workflow and
    the authenticated user, never taken from the request.
    """

    def __init__(self, repos: RepositoryFactory, mail: MailService, app_origin: str):
        self.repos = repos
        self.mail = mail
        self.app_origin = app_origin

    # ============================================================================
    # LOOKUPS
    # ============================================================================

    async def get_workflow_or_404(self, workflow_id: str) -> Workflow:
        workflow = await self.repos.workflows.find_by_id(workflow_id)
        if not workflow:
            logger.warning(f"Workflow not found: {workflow_id}")
            raise NotFound()
        return workflow

    async def _require_manager(self, workflow: Workflow, user: AuthUser) -> Role:
        role = domain.resolve_role(workflow, user.id)
        if not domain.can_manage_members(role):
            logger.warning(f"User {user.id} ({role.value}) may not manage members of {workflow.id}")
            raise PermissionDenied()
        return role

    # ============================================================================
    # WORKFLOWS
    # ============================================================================

    async def create_workflow(self, user: AuthUser, name: Optional[str]) -> Workflow:
        """Create a workflow owned by the user; the owner is not stored as a member"""
        if not name or not name.strip():
            raise ValidationError("Le nom du projet est requis")

        workflow = await self.repos.workflows.create(WorkflowCreate(
            name=name.strip(),
            owner_id=user.id,
            members=[],
            created_at=utc_now(),
        ))
        logger.info(f"Created workflow {workflow.id} for {user.id}")
        return workflow

    async def list_workflows(self, user: AuthUser, search: Optional[str] = None) -> List[WorkflowSummary]:
        """Workflows the user owns or belongs to, optionally filtered by name"""
        workflows = await self.repos.workflows.find_all()
        needle = (search or "").strip().lower()

        summaries = []
        for workflow in workflows:
            if not workflow.has_access(user.id):
                continue
            if needle and needle not in workflow.name.lower():
                continue
            summaries.append(WorkflowSummary(
                id=workflow.id,
                name=workflow.name,
                owner_id=workflow.owner_id,
                member_count=len(workflow.members),
                role=domain.resolve_role(workflow, user.id),
                created_at=workflow.created_at,
                created_at_label=format_datetime_fr(workflow.created_at),
            ))
        return summaries

    async def get_workflow_detail(self, workflow_id: str, user: AuthUser) -> WorkflowDetailResponse:
        """Board view: workflow, owner profile, caller's role, tasks and column counts"""
        workflow = await self.get_workflow_or_404(workflow_id)
        owner = await self.repos.users.find_by_id(workflow.owner_id)
        tasks = await self.repos.tasks.find_by_workflow(workflow_id)

        return WorkflowDetailResponse(
            workflow=workflow,
            owner=owner,
            current_role=domain.resolve_role(workflow, user.id),
            tasks=tasks,
            task_counts=count_by_status(tasks),
        )

    # ============================================================================
    # MEMBERSHIP
    # ============================================================================

    async def invite_member(
        self,
        workflow_id: str,
        user: AuthUser,
        email: str,
        role: Role,
    ) -> InviteMemberResponse:
        """
        Add a known user directly, or e-mail an invitation link to an unknown address.

        Business rules:
        - Only owners and project managers may invite
        - A known user who already belongs to the workflow raises AlreadyMember
        - Unknown addresses get a persisted invite record before the e-mail is sent

        Raises:
            PermissionDenied, ValidationError, AlreadyMember, NetworkFailure
        """
        workflow = await self.get_workflow_or_404(workflow_id)
        await self._require_manager(workflow, user)

        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("L'adresse email est requise")
        if role == Role.OWNER:
            raise ValidationError("Le rôle propriétaire ne peut pas être attribué")

        profile = await self.repos.users.find_by_email(email)

        if profile is not None:
            member = domain.add_member(workflow, profile.id, profile.email, profile.name, role)
            await self.repos.workflows.add_member(workflow.id, member)
            logger.info(f"Added {profile.id} to workflow {workflow.id} as {role.value}")
            return InviteMemberResponse(outcome=InviteOutcome.ADDED_DIRECTLY, member=member)

        invite = await self.repos.invites.create(InviteCreate(
            token=str(uuid.uuid4()),
            workflow_id=workflow.id,
            email=email,
            role=role,
            invited_by=user.id,
            created_at=utc_now(),
        ))
        link = domain.build_invite_link(self.app_origin, invite.token, workflow.id, role)

        sent = await self.mail.send_invite(email, workflow.name, link, to_name=email)
        if not sent:
            # An undelivered invite is never left redeemable
            await self.repos.invites.delete(invite.token)
            raise NetworkFailure()

        logger.info(f"Invitation for workflow {workflow.id} sent to {email}")
        return InviteMemberResponse(outcome=InviteOutcome.INVITATION_SENT)

    async def redeem_invite(self, token: Optional[str], new_user: AuthUser) -> RedeemInviteResponse:
        """
        Grant the membership recorded by an invite, then delete the invite (single use).

        Raises:
            InviteNotFound: no invite with this token, or its workflow is gone
        """
        invite = await self.repos.invites.find_by_token(token) if token else None
        if invite is None:
            raise InviteNotFound()

        workflow = await self.repos.workflows.find_by_id(invite.workflow_id)
        if workflow is None:
            logger.warning(f"Invite {token} points to deleted workflow {invite.workflow_id}")
            await self.repos.invites.delete(invite.token)
            raise InviteNotFound()

        member = workflow.find_member(new_user.id)

        if member is None and new_user.id != workflow.owner_id:
            member = domain.add_member(
                workflow,
                new_user.id,
                new_user.email or invite.email,
                new_user.display_name,
                invite.role,
            )
            await self.repos.workflows.add_member(workflow.id, member)
            logger.info(f"Invite {token} redeemed: {new_user.id} joined {workflow.id}")
        else:
            logger.info(f"Invite {token} redeemed by existing member {new_user.id}")

        await self.repos.invites.delete(invite.token)
        return RedeemInviteResponse(workflow_id=workflow.id, member=member)

    async def change_member_role(
        self,
        workflow_id: str,
        user: AuthUser,
        target_uid: str,
        new_role: Role,
    ) -> Member:
        workflow = await self.get_workflow_or_404(workflow_id)
        requester_role = domain.resolve_role(workflow, user.id)

        updated = domain.change_member_role(workflow, target_uid, new_role, requester_role)
        await self.repos.workflows.save_members(workflow)

        logger.info(f"Member {target_uid} of {workflow_id} is now {new_role.value}")
        return updated

    async def remove_member(self, workflow_id: str, user: AuthUser, target_uid: str) -> Member:
        workflow = await self.get_workflow_or_404(workflow_id)
        requester_role = domain.resolve_role(workflow, user.id)

        removed = domain.remove_member(workflow, target_uid, requester_role)
        await self.repos.workflows.remove_member(workflow.id, target_uid)

        logger.info(f"Removed member {target_uid} from {workflow_id}")
        return removed

    # ============================================================================
    # INVITATIONS
    # ============================================================================

    async def list_invites(self, workflow_id: str, user: AuthUser) -> List[Invite]:
        workflow = await self.get_workflow_or_404(workflow_id)
        await self._require_manager(workflow, user)
        return await self.repos.invites.find_by_workflow(workflow_id)

    async def cancel_invite(self, workflow_id: str, user: AuthUser, token: str) -> None:
        workflow = await self.get_workflow_or_404(workflow_id)
        await self._require_manager(workflow, user)

        invite = await self.repos.invites.find_by_token(token)
        if invite is None or invite.workflow_id != workflow_id:
            raise InviteNotFound()

        await self.repos.invites.delete(token)
        logger.info(f"Cancelled invite {token} of workflow {workflow_id}")
