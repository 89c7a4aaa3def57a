"""Wiring of repositories and services for one unit of work"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tabletop.core.security import PasswordHasher, TokenIssuer
from tabletop.repositories.game_system_repository import SqlAlchemyGameSystemRepository
from tabletop.repositories.refresh_token_repository import SqlAlchemyRefreshTokenRepository
from tabletop.repositories.session_checkin_repository import SqlAlchemySessionCheckinRepository
from tabletop.repositories.session_intent_repository import SqlAlchemySessionIntentRepository
from tabletop.repositories.session_repository import SqlAlchemySessionRepository
from tabletop.repositories.table_member_repository import SqlAlchemyTableMemberRepository
from tabletop.repositories.table_repository import SqlAlchemyTableRepository
from tabletop.repositories.table_request_repository import SqlAlchemyTableRequestRepository
from tabletop.repositories.user_repository import SqlAlchemyUserRepository
from tabletop.services.auth_service import AuthService
from tabletop.services.game_system_service import GameSystemService
from tabletop.services.session_checkin_service import SessionCheckinService
from tabletop.services.session_intent_service import SessionIntentService
from tabletop.services.session_service import SessionService
from tabletop.services.table_member_service import TableMemberService
from tabletop.services.table_request_service import TableRequestService
from tabletop.services.table_service import TableService
from tabletop.services.token_service import TokenService
from tabletop.services.user_service import UserService

# Process-wide handles; both are safe to share between concurrent requests.
password_hasher = PasswordHasher()
token_issuer = TokenIssuer()


@dataclass
class Services:
    auth: AuthService
    tokens: TokenService
    users: UserService
    game_systems: GameSystemService
    tables: TableService
    table_requests: TableRequestService
    members: TableMemberService
    sessions: SessionService
    intents: SessionIntentService
    checkins: SessionCheckinService


def build_services(
    db: AsyncSession,
    hasher: Optional[PasswordHasher] = None,
    issuer: Optional[TokenIssuer] = None,
) -> Services:
    """Bind every service to repositories sharing one database session"""
    users = SqlAlchemyUserRepository(db)
    refresh_tokens = SqlAlchemyRefreshTokenRepository(db)
    game_systems = SqlAlchemyGameSystemRepository(db)
    tables = SqlAlchemyTableRepository(db)
    table_requests = SqlAlchemyTableRequestRepository(db)
    members = SqlAlchemyTableMemberRepository(db)
    sessions = SqlAlchemySessionRepository(db)
    intents = SqlAlchemySessionIntentRepository(db)
    checkins = SqlAlchemySessionCheckinRepository(db)

    tokens = TokenService(refresh_tokens)
    return Services(
        auth=AuthService(users, hasher or password_hasher, issuer or token_issuer, tokens),
        tokens=tokens,
        users=UserService(users),
        game_systems=GameSystemService(game_systems),
        tables=TableService(tables, game_systems),
        table_requests=TableRequestService(table_requests, tables, members),
        members=TableMemberService(members, tables),
        sessions=SessionService(sessions, tables, intents, checkins),
        intents=SessionIntentService(intents, sessions),
        checkins=SessionCheckinService(checkins, intents, sessions, tables),
    )
