from types import SimpleNamespace
from uuid import uuid4

from tabletop.services.authorization import (
    can_approve_request,
    can_cancel_request,
    can_manage_checkin,
    can_mutate_session,
    can_remove_member,
    is_table_owner,
)


def _world():
    gm, player, stranger = uuid4(), uuid4(), uuid4()
    table = SimpleNamespace(id=uuid4(), gm_id=gm)
    other_table = SimpleNamespace(id=uuid4(), gm_id=gm)
    session = SimpleNamespace(id=uuid4(), table_id=table.id)
    request = SimpleNamespace(id=uuid4(), user_id=player, table_id=table.id)
    intent = SimpleNamespace(id=uuid4(), user_id=player, session_id=session.id)
    return SimpleNamespace(
        gm=gm, player=player, stranger=stranger,
        table=table, other_table=other_table, session=session, request=request, intent=intent,
    )


def test_only_gm_owns_table():
    w = _world()
    assert is_table_owner(w.table, w.gm)
    assert not is_table_owner(w.table, w.player)


def test_session_mutation_requires_matching_table():
    w = _world()
    assert can_mutate_session(w.session, w.table, w.gm)
    assert not can_mutate_session(w.session, w.table, w.player)
    # Same GM, but the session does not belong to this table
    assert not can_mutate_session(w.session, w.other_table, w.gm)


def test_request_decisions_and_cancellation_split_roles():
    w = _world()
    assert can_approve_request(w.table, w.gm)
    assert not can_approve_request(w.table, w.player)
    assert can_cancel_request(w.request, w.player)
    assert not can_cancel_request(w.request, w.gm)


def test_checkin_managed_by_player_or_gm():
    w = _world()
    assert can_manage_checkin(w.intent, w.table, w.player)
    assert can_manage_checkin(w.intent, w.table, w.gm)
    assert not can_manage_checkin(w.intent, w.table, w.stranger)


def test_membership_ends_by_gm_or_by_the_member():
    w = _world()
    assert can_remove_member(w.table, w.gm, w.player)
    assert can_remove_member(w.table, w.player, w.player)
    assert not can_remove_member(w.table, w.stranger, w.player)
