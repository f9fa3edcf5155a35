"""
Supabase JWT Authentication Middleware

Verifies Supabase access tokens against the project JWKS and exposes the
authenticated identity as FastAPI dependencies.
"""
import time
import logging
from typing import Optional

from fastapi import Header
from jose import jwt, jwk
import httpx

from app import config
from app.core.exceptions import NetworkFailure, Unauthenticated
from app.models.user import AuthUser

logger = logging.getLogger(__name__)

# Signing keys, refreshed at most once per TTL
_signing_keys: Optional[dict] = None
_signing_keys_fetched_at: float = 0
JWKS_TTL_SECONDS = 3600

JWT_AUDIENCE = "authenticated"
SUPPORTED_ALGORITHMS = ["ES256", "RS256"]


def get_supabase_url() -> str:
    if not config.SUPABASE_URL:
        raise ValueError("SUPABASE_URL must be set")
    return config.SUPABASE_URL.rstrip("/")


def get_jwks_url() -> str:
    return f"{get_supabase_url()}/auth/v1/.well-known/jwks.json"


def get_jwt_issuer() -> str:
    return f"{get_supabase_url()}/auth/v1"


async def _fetch_jwks(url: str) -> dict:
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()


async def get_jwks() -> dict:
    """
    Signing keys of the Supabase project.
    Stale keys keep being served while the endpoint is unreachable.
    """
    global _signing_keys, _signing_keys_fetched_at

    age = time.time() - _signing_keys_fetched_at
    if _signing_keys is not None and age < JWKS_TTL_SECONDS:
        return _signing_keys

    try:
        _signing_keys = await _fetch_jwks(get_jwks_url())
        _signing_keys_fetched_at = time.time()
    except httpx.HTTPError as e:
        if _signing_keys is None:
            logger.error(f"JWKS unavailable: {e}")
            raise NetworkFailure()
        logger.warning(f"JWKS refresh failed, keeping stale keys: {e}")

    return _signing_keys


def reset_jwks_cache() -> None:
    global _signing_keys, _signing_keys_fetched_at
    _signing_keys = None
    _signing_keys_fetched_at = 0


async def verify_token(token: str) -> dict:
    """
    Verify a Supabase access token (ES256 or RS256) and return its payload.

    Raises:
        Unauthenticated: token is malformed, expired, or signed by an unknown key
    """
    jwks = await get_jwks()

    try:
        unverified_header = jwt.get_unverified_header(token)
    except jwt.JWTError as e:
        logger.warning(f"Malformed token: {e}")
        raise Unauthenticated()

    kid = unverified_header.get("kid")
    key_data = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None) if kid else None
    if not key_data:
        logger.warning(f"No JWKS key for kid {kid!r}")
        raise Unauthenticated()

    try:
        return jwt.decode(
            token,
            jwk.construct(key_data),
            algorithms=SUPPORTED_ALGORITHMS,
            audience=JWT_AUDIENCE,
            issuer=get_jwt_issuer(),
        )
    except jwt.ExpiredSignatureError:
        logger.info("Token has expired")
        raise Unauthenticated("Votre session a expiré. Veuillez vous reconnecter")
    except jwt.JWTError as e:
        logger.warning(f"Token validation failed: {e}")
        raise Unauthenticated()


def user_from_payload(payload: dict) -> AuthUser:
    """Build the identity handle from verified JWT claims"""
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated()

    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=user_id,
        email=payload.get("email"),
        display_name=metadata.get("display_name") or metadata.get("name"),
    )


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency returning the raw token of a 'Bearer <token>' header"""
    if not authorization:
        raise Unauthenticated()

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated()
    return token.strip()


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthUser:
    """FastAPI dependency returning the authenticated user"""
    token = get_bearer_token(authorization)
    payload = await verify_token(token)
    return user_from_payload(payload)
