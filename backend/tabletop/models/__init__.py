"""Database models"""

from tabletop.models.user import User
from tabletop.models.security import RefreshToken
from tabletop.models.game_system import GameSystem
from tabletop.models.table import Table, TableStatus
from tabletop.models.table_request import TableRequest, TableRequestStatus
from tabletop.models.table_member import TableMember
from tabletop.models.game_session import GameSession, SessionStatus
from tabletop.models.session_intent import SessionIntent, IntentStatus
from tabletop.models.session_checkin import SessionCheckin

__all__ = [
    "User", "RefreshToken",
    "GameSystem",
    "Table", "TableStatus",
    "TableRequest", "TableRequestStatus",
    "TableMember",
    "GameSession", "SessionStatus",
    "SessionIntent", "IntentStatus",
    "SessionCheckin",
]
