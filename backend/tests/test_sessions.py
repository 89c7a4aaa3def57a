from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tabletop.core.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidStatusTransitionError,
    TableNotFoundError,
)
from tabletop.models import IntentStatus, SessionStatus
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.session import CheckinEntry, SessionCreate, SessionUpdate
from tabletop.schemas.table import TableCreate
from tabletop.services.session_service import ensure_transition


async def _table(services, gm_id):
    return await services.tables.create(gm_id, TableCreate(title="Waterdeep"))


def _session_data(table_id, **overrides):
    values = {"table_id": table_id, "title": "Session 1"}
    values.update(overrides)
    return SessionCreate(**values)


def test_only_gm_schedules_sessions(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)

        with pytest.raises(ForbiddenError):
            await services.sessions.create(player, _session_data(table.id))

        session = await services.sessions.create(gm, _session_data(table.id))
        assert session.status == SessionStatus.SCHEDULED
        assert session.table_id == table.id

        with pytest.raises(TableNotFoundError):
            await services.sessions.create(gm, _session_data(uuid4()))

    run(scenario)


def test_scheduled_for_is_stored_as_naive_utc(run):
    gm = uuid4()
    when = datetime(2030, 5, 1, 20, 0, tzinfo=timezone(timedelta(hours=2)))

    async def scenario(services):
        table = await _table(services, gm)
        return await services.sessions.create(gm, _session_data(table.id, scheduled_for=when))

    session = run(scenario)
    assert session.scheduled_for == datetime(2030, 5, 1, 18, 0)


def test_lifecycle_start_then_cancel(run):
    gm = uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))

        started = await services.sessions.start(gm, session.id)
        assert started.status == SessionStatus.IN_PROGRESS

        cancelled = await services.sessions.cancel(gm, session.id)
        assert cancelled.status == SessionStatus.CANCELLED

        with pytest.raises(InvalidStatusTransitionError):
            await services.sessions.start(gm, session.id)

    run(scenario)


def test_patch_cannot_skip_lifecycle(run):
    gm = uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))

        with pytest.raises(InvalidStatusTransitionError):
            await services.sessions.update(gm, session.id, SessionUpdate(status=SessionStatus.COMPLETED))

        renamed = await services.sessions.update(gm, session.id, SessionUpdate(title="Session Zero"))
        assert renamed.title == "Session Zero"
        assert renamed.status == SessionStatus.SCHEDULED

    run(scenario)


def test_non_gm_cannot_mutate_or_list(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))

        with pytest.raises(ForbiddenError):
            await services.sessions.update(player, session.id, SessionUpdate(title="Hijack"))
        with pytest.raises(ForbiddenError):
            await services.sessions.start(player, session.id)
        with pytest.raises(ForbiddenError):
            await services.sessions.delete(player, session.id)
        with pytest.raises(ForbiddenError):
            await services.sessions.list_for_table(table.id, player, QueryOptions())

        listed = await services.sessions.list_for_table(table.id, gm, QueryOptions())
        assert [s.id for s in listed] == [session.id]

    run(scenario)


def test_delete_session(run):
    gm = uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))
        await services.sessions.delete(gm, session.id)
        with pytest.raises(EntityNotFoundError):
            await services.sessions.get(session.id)

    run(scenario)


def test_finalize_records_attendance_and_completes(run):
    gm, confirmed_player, walk_in = uuid4(), uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))
        await services.intents.set_intent(confirmed_player, session.id, IntentStatus.CONFIRMED)

        with pytest.raises(InvalidStatusTransitionError):
            await services.sessions.finalize(gm, session.id, [])

        await services.sessions.start(gm, session.id)
        completed, results = await services.sessions.finalize(gm, session.id, [
            CheckinEntry(user_id=confirmed_player, attendance=False, notes="Sick"),
            CheckinEntry(user_id=walk_in, attendance=True),
        ])

        intents = await services.intents.list_for_session(session.id)
        return completed, results, intents

    completed, results, intents = run(scenario)

    assert completed.status == SessionStatus.COMPLETED
    by_user = {result.user_id: result for result in results}
    assert by_user[confirmed_player].intent_status == IntentStatus.CONFIRMED
    assert by_user[confirmed_player].attendance is False
    assert by_user[walk_in].intent_status == IntentStatus.UNSURE
    assert by_user[walk_in].attendance is True
    assert {intent.user_id for intent in intents} == {confirmed_player, walk_in}


def test_finalize_retry_overwrites_checkins_left_by_an_interrupted_run(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        session = await services.sessions.create(gm, _session_data(table.id))
        await services.sessions.start(gm, session.id)

        # State after a run that wrote one checkin and then failed
        intent = await services.sessions.intents.create(player, session.id, IntentStatus.UNSURE)
        await services.sessions.checkins.create({"session_intent_id": intent.id, "attendance": True, "notes": None})
        assert (await services.sessions.get(session.id)).status == SessionStatus.IN_PROGRESS

        completed, results = await services.sessions.finalize(gm, session.id, [
            CheckinEntry(user_id=player, attendance=False, notes="Left early"),
        ])
        checkins = await services.checkins.find_by_session_intent_id(intent.id)
        return completed, results, checkins

    completed, results, checkins = run(scenario)

    assert completed.status == SessionStatus.COMPLETED
    assert len(checkins) == 1
    assert checkins[0].id == results[0].checkin_id
    assert checkins[0].attendance is False
    assert checkins[0].notes == "Left early"


def test_transition_table():
    ensure_transition(SessionStatus.SCHEDULED, SessionStatus.SCHEDULED)
    ensure_transition(SessionStatus.SCHEDULED, SessionStatus.IN_PROGRESS)
    ensure_transition(SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED)
    ensure_transition(SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED)

    for current, target in [
        (SessionStatus.SCHEDULED, SessionStatus.COMPLETED),
        (SessionStatus.COMPLETED, SessionStatus.IN_PROGRESS),
        (SessionStatus.CANCELLED, SessionStatus.SCHEDULED),
        (SessionStatus.IN_PROGRESS, SessionStatus.SCHEDULED),
    ]:
        with pytest.raises(InvalidStatusTransitionError):
            ensure_transition(current, target)


def test_patch_rejects_null_for_required_fields():
    with pytest.raises(ValueError):
        SessionUpdate(title=None)
    with pytest.raises(ValueError):
        SessionUpdate(status=None)

    cleared = SessionUpdate(scheduled_for=None)
    assert cleared.model_dump(exclude_unset=True) == {"scheduled_for": None}
