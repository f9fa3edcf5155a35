"""Tests for the Supabase Auth adapter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from supabase import AuthApiError

from app.core.exceptions import (
    EmailInUse,
    InvalidCredentials,
    InvalidEmail,
    NetworkFailure,
    UnknownFailure,
    WeakPassword,
)
from app.infra.supabase.identity import SupabaseIdentity, map_auth_error

pytestmark = pytest.mark.unit


def _user(uid="u-1", email="nina@acme.io", metadata=None):
    return SimpleNamespace(id=uid, email=email, user_metadata=metadata or {"display_name": "Nina"})


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def identity(client):
    return SupabaseIdentity(lambda: client)


@pytest.mark.parametrize("code,expected", [
    ("user_already_exists", EmailInUse),
    ("email_exists", EmailInUse),
    ("email_address_invalid", InvalidEmail),
    ("weak_password", WeakPassword),
    ("invalid_credentials", InvalidCredentials),
    ("something_new", UnknownFailure),
])
def test_map_auth_error_by_code(code, expected):
    assert isinstance(map_auth_error(AuthApiError("boom", 400, code)), expected)


def test_transport_errors_map_to_network_failure():
    assert isinstance(map_auth_error(httpx.ConnectError("down")), NetworkFailure)


async def test_register_passes_display_name(identity, client):
    client.auth.sign_up.return_value = SimpleNamespace(user=_user())

    user = await identity.register("nina@acme.io", "secret1", "Nina")

    assert user.id == "u-1"
    assert user.display_name == "Nina"
    credentials = client.auth.sign_up.call_args[0][0]
    assert credentials["options"]["data"] == {"display_name": "Nina"}


async def test_register_with_taken_email(identity, client):
    client.auth.sign_up.side_effect = AuthApiError("User already registered", 422, "user_already_exists")

    with pytest.raises(EmailInUse):
        await identity.register("nina@acme.io", "secret1", "Nina")


async def test_sign_in_returns_access_token(identity, client):
    client.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=_user(metadata={"name": "Nina"}),
        session=SimpleNamespace(access_token="jwt-token"),
    )

    user, token = await identity.sign_in("nina@acme.io", "secret1")

    assert token == "jwt-token"
    assert user.display_name == "Nina"


async def test_sign_in_unreachable_provider(identity, client):
    client.auth.sign_in_with_password.side_effect = httpx.ConnectError("down")

    with pytest.raises(NetworkFailure):
        await identity.sign_in("nina@acme.io", "secret1")


async def test_sign_out_uses_admin_client(client):
    admin = MagicMock()
    identity = SupabaseIdentity(lambda: client, admin_client_factory=lambda: admin)

    await identity.sign_out("jwt-token")

    admin.auth.admin.sign_out.assert_called_once_with("jwt-token")
