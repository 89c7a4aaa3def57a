import asyncio

import pytest

from tabletop.core.exceptions import HashingFailedError, InvalidInputError
from tabletop.core.security import PasswordHasher

from conftest import PASSWORD


@pytest.fixture
def hasher():
    hasher = PasswordHasher(rounds=4, max_workers=2)
    yield hasher
    hasher.close()


def test_hash_is_salted_and_both_hashes_verify(hasher):
    async def scenario():
        first = await hasher.hash(PASSWORD)
        second = await hasher.hash(PASSWORD)
        return first, second, await hasher.verify(PASSWORD, first), await hasher.verify(PASSWORD, second)

    first, second, first_ok, second_ok = asyncio.run(scenario())

    assert first != second
    assert first_ok and second_ok


def test_wrong_password_does_not_verify(hasher):
    async def scenario():
        hashed = await hasher.hash(PASSWORD)
        return await hasher.verify("Wr0ng!pass", hashed)

    assert asyncio.run(scenario()) is False


def test_password_over_bcrypt_limit_never_verifies(hasher):
    async def scenario():
        hashed = await hasher.hash(PASSWORD)
        return await hasher.verify("A1!" + "x" * 100, hashed)

    assert asyncio.run(scenario()) is False


def test_malformed_hash_raises(hasher):
    with pytest.raises(HashingFailedError):
        asyncio.run(hasher.verify(PASSWORD, "definitely-not-bcrypt"))


def test_weak_password_lists_every_problem():
    with pytest.raises(InvalidInputError) as exc:
        PasswordHasher.validate_password("short")

    problems = exc.value.details["password"]
    assert "min_length" in problems
    assert "uppercase_required" in problems
    assert "numeric_required" in problems
    assert "special_required" in problems
    assert "lowercase_required" not in problems


def test_password_over_bcrypt_limit_is_rejected():
    with pytest.raises(InvalidInputError) as exc:
        PasswordHasher.validate_password("Aa1!" + "x" * 80)
    assert exc.value.details["password"] == ["max_length"]


def test_weak_password_is_not_hashed(hasher):
    with pytest.raises(InvalidInputError):
        asyncio.run(hasher.hash("password"))
