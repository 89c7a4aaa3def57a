import asyncio
import os
import tempfile
from pathlib import Path

# Settings are read at import time; point them at throwaway locations first.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="tabletop-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'api.db'}"
os.environ["DB_INIT_MODE"] = "create_all"
os.environ["LOG_FILE"] = str(_TMP_DIR / "app.log")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tabletop.core.database import Base  # noqa: E402
from tabletop.core.security import PasswordHasher, TokenIssuer  # noqa: E402
from tabletop.schemas.user import UserCreate  # noqa: E402
from tabletop.services.registry import build_services  # noqa: E402

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
PASSWORD = "Str0ng!pass"


def make_issuer() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET)


async def _run_scenario(scenario):
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    hasher = PasswordHasher(rounds=4, max_workers=2)
    try:
        async with session_factory() as db:
            services = build_services(db, hasher=hasher, issuer=make_issuer())
            return await scenario(services)
    finally:
        hasher.close()
        await engine.dispose()


@pytest.fixture
def run():
    """Run an async scenario against a fresh in-memory database"""
    def _run(scenario):
        return asyncio.run(_run_scenario(scenario))
    return _run


async def register(services, name: str):
    return await services.auth.register(
        UserCreate(username=name, email=f"{name}@mail.com", password=PASSWORD)
    )
