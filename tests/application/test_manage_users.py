"""Integration tests for profile, password and role administration."""

import pytest

from storefront.application.login_user import LoginUserHandler
from storefront.application.manage_users import (
    BootstrapAdminHandler,
    ChangePasswordHandler,
    ListUsersHandler,
    ShowProfileHandler,
    UpdateUserRoleHandler,
)
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    UnauthenticatedError,
    ValidationError,
)
from storefront.domain.model.user import Role
from tests.fakes import build_world


class TestShowProfile:

    async def test_returns_signed_in_user(self):
        world = await build_world()
        user, token = await world.add_user("asha@example.com", "Asha")
        profile = await ShowProfileHandler(world.auth).handle(token)
        assert profile.name == "Asha"
        assert profile.id == user.id


class TestChangePassword:

    async def test_new_password_works_and_old_does_not(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com", password="s3cret-pass")

        await ChangePasswordHandler(world.users, world.hasher, world.auth).handle(
            token, "s3cret-pass", "brand-new-pass"
        )

        login = LoginUserHandler(world.users, world.hasher, world.auth)
        await login.handle("asha@example.com", "brand-new-pass")
        with pytest.raises(UnauthenticatedError):
            await login.handle("asha@example.com", "s3cret-pass")

    async def test_wrong_old_password(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com", password="s3cret-pass")
        with pytest.raises(UnauthenticatedError, match="Old password is incorrect"):
            await ChangePasswordHandler(world.users, world.hasher, world.auth).handle(
                token, "guess-pass", "brand-new-pass"
            )

    async def test_short_new_password(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com", password="s3cret-pass")
        with pytest.raises(ValidationError):
            await ChangePasswordHandler(world.users, world.hasher, world.auth).handle(
                token, "s3cret-pass", "short"
            )


class TestRoleAdministration:

    async def test_admin_lists_users_without_secrets(self):
        world = await build_world()
        await world.add_user("asha@example.com")
        _, admin_token = await world.add_user("admin@example.com", role=Role.ADMIN)

        users = await ListUsersHandler(world.users, world.auth).handle(admin_token)

        assert {u.email for u in users} == {"asha@example.com", "admin@example.com"}
        assert all(u.password_hash is None for u in users)

    async def test_customer_cannot_list_users(self):
        world = await build_world()
        _, token = await world.add_user("asha@example.com")
        with pytest.raises(ForbiddenError):
            await ListUsersHandler(world.users, world.auth).handle(token)

    async def test_admin_promotes_customer(self):
        world = await build_world()
        asha, asha_token = await world.add_user("asha@example.com")
        _, admin_token = await world.add_user("admin@example.com", role=Role.ADMIN)

        updated = await UpdateUserRoleHandler(world.users, world.auth).handle(
            admin_token, asha.id, "admin"
        )

        assert updated.role is Role.ADMIN
        assert (await world.auth.authenticate(asha_token)).is_admin

    async def test_unknown_role_rejected(self):
        world = await build_world()
        asha, _ = await world.add_user("asha@example.com")
        _, admin_token = await world.add_user("admin@example.com", role=Role.ADMIN)
        with pytest.raises(ValidationError, match="Unknown role"):
            await UpdateUserRoleHandler(world.users, world.auth).handle(
                admin_token, asha.id, "superuser"
            )

    async def test_unknown_user(self):
        world = await build_world()
        _, admin_token = await world.add_user("admin@example.com", role=Role.ADMIN)
        with pytest.raises(EntityNotFoundError):
            await UpdateUserRoleHandler(world.users, world.auth).handle(
                admin_token, "u999", "admin"
            )


class TestBootstrapAdmin:

    async def test_promotes_first_admin(self):
        world = await build_world()
        await world.add_user("owner@example.com")

        admin = await BootstrapAdminHandler(world.users).handle("Owner@example.com")

        assert admin.is_admin

    async def test_refuses_once_an_admin_exists(self):
        world = await build_world()
        await world.add_user("owner@example.com", role=Role.ADMIN)
        await world.add_user("asha@example.com")

        with pytest.raises(ForbiddenError):
            await BootstrapAdminHandler(world.users).handle("asha@example.com")
        assert not (await world.users.get_by_email("asha@example.com")).is_admin

    async def test_unknown_email(self):
        world = await build_world()
        with pytest.raises(EntityNotFoundError):
            await BootstrapAdminHandler(world.users).handle("ghost@example.com")
