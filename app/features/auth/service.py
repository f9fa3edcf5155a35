"""Business logic for registration and sessions"""

import logging
from typing import Optional

from app import config
from app.core.exceptions import InviteNotFound, ValidationError, WeakPassword
from app.features.auth.schemas import LoginResponse, MeResponse, RegisterResponse
from app.features.workflows.service import WorkflowService
from app.infra.supabase.identity import SupabaseIdentity
from app.infra.supabase.repositories import RepositoryFactory
from app.models.user import AuthUser, UserProfileCreate
from app.utils.datetime_helper import utc_now

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, sign in and sign out on top of the identity provider"""

    def __init__(
        self,
        identity: SupabaseIdentity,
        repos: RepositoryFactory,
        workflows: WorkflowService,
    ):
        self.identity = identity
        self.repos = repos
        self.workflows = workflows

    async def register(
        self,
        email: str,
        password: Optional[str],
        name: Optional[str],
        invite_token: Optional[str] = None,
    ) -> RegisterResponse:
        """
        Create an account and mirror its profile into the users table.

        When an invite token is given the invitation is redeemed for the new
        account; a stale or unknown token does not fail the registration.

        Raises:
            WeakPassword: password shorter than the minimum length
            ValidationError: blank name
            EmailInUse, InvalidEmail, NetworkFailure: from the identity provider
        """
        if not password or len(password) < config.MIN_PASSWORD_LENGTH:
            raise WeakPassword()

        name = (name or "").strip()
        if not name:
            raise ValidationError("Le nom est requis")

        user = await self.identity.register(email, password, name)

        profile = await self.repos.users.create(UserProfileCreate(
            id=user.id,
            name=name,
            email=(user.email or email).lower(),
            created_at=utc_now(),
        ))
        logger.info(f"Profile created for {user.id}")

        redeemed = None
        if invite_token:
            try:
                redeemed = await self.workflows.redeem_invite(invite_token, user)
            except InviteNotFound:
                logger.warning(f"Registration of {user.id} referenced unknown invite {invite_token}")

        return RegisterResponse(user=user, profile=profile, invite=redeemed)

    async def login(self, email: str, password: str) -> LoginResponse:
        user, access_token = await self.identity.sign_in(email, password)
        logger.info(f"User {user.id} signed in")
        return LoginResponse(user=user, access_token=access_token)

    async def logout(self, access_token: str) -> None:
        await self.identity.sign_out(access_token)

    async def me(self, user: AuthUser) -> MeResponse:
        profile = await self.repos.users.find_by_id(user.id)
        return MeResponse(user=user, profile=profile)
