from uuid import uuid4

import pytest

from tabletop.core.exceptions import EntityNotFoundError, ForbiddenError, ResourceAlreadyExistsError
from tabletop.models import IntentStatus
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.session import SessionCreate
from tabletop.schemas.session_checkin import SessionCheckinCreate, SessionCheckinUpdate
from tabletop.schemas.table import TableCreate


async def _intent(services, gm_id, player_id):
    table = await services.tables.create(gm_id, TableCreate(title="Blades in the Dark"))
    session = await services.sessions.create(gm_id, SessionCreate(table_id=table.id, title="The Score"))
    return await services.intents.set_intent(player_id, session.id, IntentStatus.CONFIRMED)


def test_player_and_gm_may_record_checkins(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        intent = await _intent(services, gm, player)

        checkin = await services.checkins.create(
            player, SessionCheckinCreate(session_intent_id=intent.id, attendance=True)
        )
        assert checkin.attendance is True

        updated = await services.checkins.update(
            gm, checkin.id, SessionCheckinUpdate(notes="Arrived late")
        )
        assert updated.attendance is True
        assert updated.notes == "Arrived late"

        found = await services.checkins.find_by_session_intent_id(intent.id)
        assert [c.id for c in found] == [checkin.id]
        attended = await services.checkins.find_by_attendance(True, QueryOptions())
        assert [c.id for c in attended] == [checkin.id]
        assert await services.checkins.find_by_attendance(False, QueryOptions()) == []

    run(scenario)


def test_strangers_cannot_touch_checkins(run):
    gm, player, stranger = uuid4(), uuid4(), uuid4()

    async def scenario(services):
        intent = await _intent(services, gm, player)

        with pytest.raises(ForbiddenError):
            await services.checkins.create(
                stranger, SessionCheckinCreate(session_intent_id=intent.id, attendance=True)
            )

        checkin = await services.checkins.create(
            gm, SessionCheckinCreate(session_intent_id=intent.id, attendance=False)
        )
        with pytest.raises(ForbiddenError):
            await services.checkins.update(stranger, checkin.id, SessionCheckinUpdate(attendance=True))
        with pytest.raises(ForbiddenError):
            await services.checkins.delete(stranger, checkin.id)

    run(scenario)


def test_one_checkin_per_intent(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        intent = await _intent(services, gm, player)
        data = SessionCheckinCreate(session_intent_id=intent.id, attendance=True)
        await services.checkins.create(player, data)
        with pytest.raises(ResourceAlreadyExistsError):
            await services.checkins.create(gm, data)

    run(scenario)


def test_checkin_for_missing_intent(run):
    async def scenario(services):
        with pytest.raises(EntityNotFoundError):
            await services.checkins.create(
                uuid4(), SessionCheckinCreate(session_intent_id=uuid4(), attendance=True)
            )

    run(scenario)


def test_checkin_goes_away_with_its_intent(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        intent = await _intent(services, gm, player)
        checkin = await services.checkins.create(
            player, SessionCheckinCreate(session_intent_id=intent.id, attendance=True)
        )
        await services.intents.delete(player, intent.id)

        with pytest.raises(EntityNotFoundError):
            await services.checkins.get(checkin.id)

    run(scenario)
