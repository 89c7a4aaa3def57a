"""
Authorization predicates.

Pure functions over entities the caller has already loaded. A missing anchor
entity is the caller's EntityNotFoundError; a False here becomes Forbidden.
Ownership is always read from the current Table row, never from token claims.
"""

from uuid import UUID

from tabletop.models import GameSession, SessionIntent, Table, TableRequest


def is_table_owner(table: Table, actor_id: UUID) -> bool:
    return table.gm_id == actor_id


def can_mutate_session(session: GameSession, table: Table, actor_id: UUID) -> bool:
    return session.table_id == table.id and is_table_owner(table, actor_id)


def can_approve_request(table: Table, actor_id: UUID) -> bool:
    return is_table_owner(table, actor_id)


def can_cancel_request(request: TableRequest, actor_id: UUID) -> bool:
    return request.user_id == actor_id


def can_manage_checkin(intent: SessionIntent, table: Table, actor_id: UUID) -> bool:
    """The player who declared the intent, or the GM running the session"""
    return intent.user_id == actor_id or is_table_owner(table, actor_id)


def can_remove_member(table: Table, actor_id: UUID, member_user_id: UUID) -> bool:
    """The GM removes anyone; a member may only remove themselves"""
    return member_user_id == actor_id or is_table_owner(table, actor_id)
