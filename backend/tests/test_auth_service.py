import pytest

from tabletop.core.exceptions import (
    EntityNotFoundError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    InvalidInputError,
    ResourceAlreadyExistsError,
)
from tabletop.schemas.user import UserCreate, UserUpdate

from conftest import PASSWORD, make_issuer, register


def test_authenticate_returns_token_for_owner(run):
    async def scenario(services):
        user = await register(services, "alice")
        token = await services.auth.authenticate("alice@mail.com", PASSWORD)
        return user.id, make_issuer().decode(token).sub

    user_id, subject = run(scenario)
    assert subject == user_id


def test_wrong_password_and_unknown_email_fail_identically(run):
    async def scenario(services):
        await register(services, "alice")
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await services.auth.authenticate("alice@mail.com", "Wr0ng!pass")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await services.auth.authenticate("nobody@mail.com", PASSWORD)
        return wrong_password.value, unknown_email.value

    wrong_password, unknown_email = run(scenario)
    assert wrong_password.message == unknown_email.message
    assert wrong_password.status_code == unknown_email.status_code == 401


def test_register_rejects_taken_email_and_username(run):
    async def scenario(services):
        await register(services, "alice")
        with pytest.raises(ResourceAlreadyExistsError):
            await services.auth.register(
                UserCreate(username="alice2", email="alice@mail.com", password=PASSWORD)
            )
        with pytest.raises(ResourceAlreadyExistsError):
            await services.auth.register(
                UserCreate(username="alice", email="other@mail.com", password=PASSWORD)
            )

    run(scenario)


def test_register_rejects_weak_password(run):
    async def scenario(services):
        with pytest.raises(InvalidInputError):
            await services.auth.register(
                UserCreate(username="bob", email="bob@mail.com", password="alllowercase")
            )
        assert await services.users.users.find_by_email("bob@mail.com") is None

    run(scenario)


def test_login_refresh_logout_flow(run):
    async def scenario(services):
        user = await register(services, "alice")

        pair = await services.auth.login("alice@mail.com", PASSWORD)
        assert pair.token_type == "bearer"
        assert pair.expires_in == 15 * 60
        assert make_issuer().decode(pair.access_token).sub == user.id

        rotated = await services.auth.refresh(pair.refresh_token)
        assert rotated.refresh_token != pair.refresh_token

        with pytest.raises(InvalidCredentialsError):
            await services.auth.refresh(pair.refresh_token)

        await services.auth.logout(user.id)
        with pytest.raises(InvalidCredentialsError):
            await services.auth.refresh(rotated.refresh_token)

    run(scenario)


def test_password_change_revokes_refresh_tokens(run):
    async def scenario(services):
        await register(services, "alice")
        user = await services.users.get_by_username("alice")
        pair = await services.auth.login("alice@mail.com", PASSWORD)

        await services.auth.update_password(user.id, PASSWORD, "N3w!password")

        with pytest.raises(InvalidCredentialsError):
            await services.auth.refresh(pair.refresh_token)
        with pytest.raises(InvalidCredentialsError):
            await services.auth.authenticate("alice@mail.com", PASSWORD)
        await services.auth.authenticate("alice@mail.com", "N3w!password")

    run(scenario)


def test_password_change_requires_current_password(run):
    async def scenario(services):
        user = await register(services, "alice")
        with pytest.raises(IncorrectPasswordError):
            await services.auth.update_password(user.id, "Wr0ng!pass", "N3w!password")

    run(scenario)


def test_overlong_wrong_password_is_a_credential_mismatch(run):
    overlong = "A1!" + "x" * 100

    async def scenario(services):
        user = await register(services, "alice")
        with pytest.raises(InvalidCredentialsError):
            await services.auth.authenticate("alice@mail.com", overlong)
        with pytest.raises(InvalidCredentialsError):
            await services.auth.login("alice@mail.com", overlong)
        with pytest.raises(IncorrectPasswordError):
            await services.auth.update_password(user.id, overlong, "N3w!password")
        with pytest.raises(IncorrectPasswordError):
            await services.auth.delete_account(user.id, overlong)

        # Nothing changed: the original password still works
        await services.auth.authenticate("alice@mail.com", PASSWORD)

    run(scenario)


def test_delete_account_requires_password_and_removes_user(run):
    async def scenario(services):
        user = await register(services, "alice")
        await services.auth.login("alice@mail.com", PASSWORD)

        with pytest.raises(IncorrectPasswordError):
            await services.auth.delete_account(user.id, "Wr0ng!pass")

        await services.auth.delete_account(user.id, PASSWORD)
        with pytest.raises(EntityNotFoundError):
            await services.users.get(user.id)
        assert await services.tokens.refresh_tokens.count_by_user(user.id) == 0

    run(scenario)


def test_profile_patch_only_touches_sent_fields(run):
    async def scenario(services):
        user = await register(services, "alice")
        updated = await services.users.update_profile(user.id, UserUpdate(username="Alicia"))
        return updated

    updated = run(scenario)
    assert updated.username == "alicia"
    assert updated.email == "alice@mail.com"


def test_profile_patch_cannot_steal_email(run):
    async def scenario(services):
        await register(services, "alice")
        bob = await register(services, "bob")
        with pytest.raises(ResourceAlreadyExistsError):
            await services.users.update_profile(bob.id, UserUpdate(email="alice@mail.com"))

    run(scenario)
