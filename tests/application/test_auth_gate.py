"""Tests for session authentication and role authorization."""

import time

import pytest

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.exceptions import ForbiddenError, UnauthenticatedError
from storefront.domain.model.user import Role, User
from storefront.infrastructure.security.session_tokens import SessionTokenSigner
from tests.fakes import TEST_SECRET, build_world


class TestAuthenticate:

    async def test_valid_token_resolves_user(self):
        world = await build_world()
        user, token = await world.add_user("asha@example.com", "Asha")

        resolved = await world.auth.authenticate(token)

        assert resolved.id == user.id
        assert resolved.password_hash is None

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, token):
        world = await build_world()
        with pytest.raises(UnauthenticatedError, match="Please Login"):
            await world.auth.authenticate(token)

    async def test_expired_token(self):
        world = await build_world()
        user, _ = await world.add_user("asha@example.com")
        signer = SessionTokenSigner(TEST_SECRET, 60)
        stale = signer.issue(user.id, now=int(time.time()) - 3600)

        with pytest.raises(UnauthenticatedError, match="Session Expired"):
            await world.auth.authenticate(stale)

    async def test_tampered_token(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com")
        header, payload, signature = token.split(".")
        forged = f"{header}.{payload}x.{signature}"

        with pytest.raises(UnauthenticatedError):
            await world.auth.authenticate(forged)

    async def test_token_from_another_secret(self):
        world = await build_world()
        user, _ = await world.add_user("asha@example.com")
        foreign = SessionTokenSigner("some-other-secret", 60).issue(user.id)

        with pytest.raises(UnauthenticatedError):
            await world.auth.authenticate(foreign)

    async def test_removed_user_invalidates_session(self):
        world = await build_world()
        user, token = await world.add_user("asha@example.com")
        world.users.remove(user.id)

        with pytest.raises(UnauthenticatedError, match="Invalid Token"):
            await world.auth.authenticate(token)


class TestAuthorize:

    async def test_admin_passes(self):
        world = await build_world()
        _, token = await world.add_user("admin@example.com", role=Role.ADMIN)
        admin = await world.auth.require(token, ADMIN_ONLY)
        assert admin.is_admin

    async def test_customer_forbidden(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com")
        with pytest.raises(ForbiddenError, match="Role 'user'"):
            await world.auth.require(token, ADMIN_ONLY)

    async def test_promotion_takes_effect_on_existing_session(self):
        world = await build_world()
        user, token = await world.add_user("asha@example.com")
        await world.users.update_role(user.id, Role.ADMIN)

        admin = await world.auth.require(token, ADMIN_ONLY)
        assert admin.id == user.id

    async def test_any_of_several_roles(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com")
        user = await world.auth.require(token, {Role.CUSTOMER, Role.ADMIN})
        assert user.role is Role.CUSTOMER


class TestIssueSession:

    async def test_unsaved_user_rejected(self):
        world = await build_world()
        with pytest.raises(ValueError):
            world.auth.issue_session(User(id=None, email="x@example.com", name="X"))

    async def test_gate_accepts_tokens_it_issued(self):
        world = await build_world()
        user, _ = await world.add_user("asha@example.com")
        gate = AuthGate(world.users, SessionTokenSigner(TEST_SECRET, 60))
        token = gate.issue_session(user)
        assert (await world.auth.authenticate(token)).id == user.id
