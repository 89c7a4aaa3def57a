from datetime import timedelta

import pytest

from tabletop.core.exceptions import InvalidCredentialsError, RefreshTokenConflictError
from tabletop.core.security import generate_refresh_token
from tabletop.core.utils import utc_now
from tabletop.repositories.refresh_token_repository import SqlAlchemyRefreshTokenRepository
from tabletop.services.token_service import TokenService

from conftest import register


def test_issue_keeps_a_single_token_per_user(run):
    async def scenario(services):
        user = await register(services, "alice")
        first = await services.tokens.issue(user.id)
        second = await services.tokens.issue(user.id)
        count = await services.tokens.refresh_tokens.count_by_user(user.id)
        return first, second, count

    first, second, count = run(scenario)
    assert first != second
    assert count == 1


def test_replaced_token_no_longer_rotates(run):
    async def scenario(services):
        user = await register(services, "alice")
        old = await services.tokens.issue(user.id)
        await services.tokens.issue(user.id)
        with pytest.raises(InvalidCredentialsError):
            await services.tokens.rotate(old)

    run(scenario)


def test_rotation_consumes_the_token(run):
    async def scenario(services):
        user = await register(services, "alice")
        token = await services.tokens.issue(user.id)

        new_token, owner = await services.tokens.rotate(token)
        assert owner == user.id
        assert new_token != token

        with pytest.raises(InvalidCredentialsError):
            await services.tokens.rotate(token)

        # The replacement is still good
        await services.tokens.rotate(new_token)

    run(scenario)


def test_expired_token_is_rejected_and_removed(run):
    async def scenario(services):
        user = await register(services, "alice")
        expiring = TokenService(services.tokens.refresh_tokens, ttl=timedelta(seconds=-1))
        token = await expiring.issue(user.id)

        with pytest.raises(InvalidCredentialsError):
            await services.tokens.rotate(token)

        assert await services.tokens.refresh_tokens.find_by_token(token) is None

    run(scenario)


def test_unknown_token_is_rejected(run):
    async def scenario(services):
        with pytest.raises(InvalidCredentialsError):
            await services.tokens.rotate("never-issued")

    run(scenario)


def test_revoke_all_reports_count(run):
    async def scenario(services):
        user = await register(services, "alice")
        await services.tokens.issue(user.id)
        assert await services.tokens.revoke_all(user.id) == 1
        assert await services.tokens.revoke_all(user.id) == 0

    run(scenario)


class RacingRefreshTokens(SqlAlchemyRefreshTokenRepository):
    """Lets another sign-in claim the user's slot right before each of the next `races` inserts"""

    def __init__(self, db, races: int):
        super().__init__(db)
        self.races = races

    async def create(self, user_id, token, expires_at):
        if self.races > 0:
            self.races -= 1
            await super().create(user_id, generate_refresh_token(), expires_at)
        return await super().create(user_id, token, expires_at)


class ConsumedOnLookup(SqlAlchemyRefreshTokenRepository):
    """Another request rotates the token between lookup and delete"""

    async def find_by_token(self, token):
        record = await super().find_by_token(token)
        await self.delete_by_token(token)
        return record


def test_second_token_row_for_a_user_is_refused_by_the_store(run):
    async def scenario(services):
        user = await register(services, "alice")
        user_id = user.id
        repo = services.tokens.refresh_tokens
        expires_at = utc_now() + timedelta(days=1)

        await repo.create(user_id, generate_refresh_token(), expires_at)
        with pytest.raises(RefreshTokenConflictError) as exc:
            await repo.create(user_id, generate_refresh_token(), expires_at)
        assert exc.value.status_code == 409
        assert await repo.count_by_user(user_id) == 1

    run(scenario)


def test_issue_retries_when_a_concurrent_sign_in_takes_the_slot(run):
    async def scenario(services):
        user = await register(services, "alice")
        user_id = user.id
        racing = RacingRefreshTokens(services.tokens.refresh_tokens.db, races=1)

        token = await TokenService(racing).issue(user_id)

        assert (await racing.find_by_token(token)).user_id == user_id
        assert await racing.count_by_user(user_id) == 1

    run(scenario)


def test_issue_gives_up_with_a_conflict_after_repeated_races(run):
    async def scenario(services):
        user = await register(services, "alice")
        user_id = user.id
        racing = RacingRefreshTokens(services.tokens.refresh_tokens.db, races=2)

        with pytest.raises(RefreshTokenConflictError):
            await TokenService(racing).issue(user_id)
        # The competing sign-in kept its token
        assert await racing.count_by_user(user_id) == 1

    run(scenario)


def test_rotation_lost_to_a_concurrent_consumer_is_rejected(run):
    async def scenario(services):
        user = await register(services, "alice")
        user_id = user.id
        token = await services.tokens.issue(user_id)
        contended = TokenService(ConsumedOnLookup(services.tokens.refresh_tokens.db))

        with pytest.raises(InvalidCredentialsError):
            await contended.rotate(token)
        assert await services.tokens.refresh_tokens.count_by_user(user_id) == 0

    run(scenario)
