"""Identity provider adapter over Supabase Auth"""
import logging
from typing import Any, Callable, Optional, Tuple

import httpx
from supabase import AuthApiError, AuthError, AuthRetryableError, Client

from app.core.exceptions import (
    EmailInUse,
    InvalidCredentials,
    InvalidEmail,
    NetworkFailure,
    UnknownFailure,
    Unauthenticated,
    WeakPassword,
    WorkflowManagerError,
)
from app.models.user import AuthUser

logger = logging.getLogger(__name__)

EMAIL_IN_USE_CODES = {"email_exists", "user_already_exists"}
INVALID_EMAIL_CODES = {"email_address_invalid", "validation_failed"}
WEAK_PASSWORD_CODES = {"weak_password"}
INVALID_CREDENTIALS_CODES = {"invalid_credentials", "email_not_confirmed"}


def map_auth_error(error: Exception) -> WorkflowManagerError:
    """Translate a Supabase Auth failure into the application's error taxonomy"""
    if isinstance(error, (httpx.TransportError, AuthRetryableError)):
        return NetworkFailure()

    code = getattr(error, "code", None)
    if code in EMAIL_IN_USE_CODES:
        return EmailInUse()
    if code in INVALID_EMAIL_CODES:
        return InvalidEmail()
    if code in WEAK_PASSWORD_CODES:
        return WeakPassword()
    if code in INVALID_CREDENTIALS_CODES:
        return InvalidCredentials()
    return UnknownFailure()


def to_auth_user(user: Any) -> AuthUser:
    """Build the identity handle from a Supabase user object"""
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthUser(
        id=str(user.id),
        email=getattr(user, "email", None),
        display_name=metadata.get("display_name") or metadata.get("name"),
    )


class SupabaseIdentity:
    """
    Identity collaborator: register, sign in, current user, sign out.

    ``client_factory`` returns a Supabase client per call so sessions held by
    the auth client never leak between requests.
    """

    def __init__(
        self,
        client_factory: Callable[[], Client],
        admin_client_factory: Optional[Callable[[], Client]] = None,
    ):
        self._client_factory = client_factory
        self._admin_client_factory = admin_client_factory or client_factory

    def _call(self, operation: str, fn: Callable[[Client], Any]) -> Any:
        try:
            return fn(self._client_factory())
        except (AuthApiError, AuthError, httpx.HTTPError) as e:
            mapped = map_auth_error(e)
            logger.warning(f"Identity provider {operation} failed ({mapped.code}): {e}")
            raise mapped

    async def register(self, email: str, password: str, display_name: str) -> AuthUser:
        response = self._call("sign_up", lambda client: client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"display_name": display_name}},
        }))

        if response.user is None:
            raise UnknownFailure()

        user = to_auth_user(response.user)
        logger.info(f"Registered user {user.id}")
        return user

    async def sign_in(self, email: str, password: str) -> Tuple[AuthUser, str]:
        """Returns the user and the session access token"""
        response = self._call("sign_in", lambda client: client.auth.sign_in_with_password({
            "email": email,
            "password": password,
        }))

        if response.user is None or response.session is None:
            raise InvalidCredentials()

        return to_auth_user(response.user), response.session.access_token

    async def current_user(self, access_token: Optional[str]) -> AuthUser:
        if not access_token:
            raise Unauthenticated()

        response = self._call("get_user", lambda client: client.auth.get_user(access_token))

        if response is None or response.user is None:
            raise Unauthenticated()

        return to_auth_user(response.user)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token (needs the service-role client)"""
        client = self._admin_client_factory()
        try:
            client.auth.admin.sign_out(access_token)
        except (AuthApiError, AuthError, httpx.HTTPError) as e:
            logger.warning(f"Identity provider sign_out failed: {e}")
            raise map_auth_error(e)
