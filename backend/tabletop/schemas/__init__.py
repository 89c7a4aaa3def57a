"""Pydantic schemas for API validation"""

from tabletop.schemas.common import QueryOptions
from tabletop.schemas.user import (
    UserCreate,
    UserLogin,
    UserUpdate,
    UserResponse,
    PasswordChange,
    AccountDelete,
    TokenPair,
    RefreshTokenRequest,
)
from tabletop.schemas.game_system import GameSystemCreate, GameSystemUpdate, GameSystemResponse
from tabletop.schemas.table import TableCreate, TableUpdate, TableResponse
from tabletop.schemas.table_request import TableRequestCreate, TableRequestResponse
from tabletop.schemas.table_member import TableMemberResponse
from tabletop.schemas.session import (
    SessionCreate,
    SessionUpdate,
    SessionResponse,
    SessionFinalize,
    SessionFinalizationResponse,
)
from tabletop.schemas.session_intent import SessionIntentSet, SessionIntentResponse
from tabletop.schemas.session_checkin import (
    SessionCheckinCreate,
    SessionCheckinUpdate,
    SessionCheckinResponse,
)
from tabletop.schemas.response import APIResponse, ErrorResponse, HealthResponse

__all__ = [
    "QueryOptions",
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "PasswordChange", "AccountDelete",
    "TokenPair", "RefreshTokenRequest",
    "GameSystemCreate", "GameSystemUpdate", "GameSystemResponse",
    "TableCreate", "TableUpdate", "TableResponse",
    "TableRequestCreate", "TableRequestResponse",
    "TableMemberResponse",
    "SessionCreate", "SessionUpdate", "SessionResponse", "SessionFinalize", "SessionFinalizationResponse",
    "SessionIntentSet", "SessionIntentResponse",
    "SessionCheckinCreate", "SessionCheckinUpdate", "SessionCheckinResponse",
    "APIResponse", "ErrorResponse", "HealthResponse",
]
