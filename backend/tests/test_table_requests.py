from uuid import uuid4

import pytest

from tabletop.core.exceptions import (
    BusinessRuleViolationError,
    DuplicateTableRequestError,
    ForbiddenError,
    RequestAlreadyProcessedError,
    TableNotFoundError,
    UserNotTableGameMasterError,
)
from tabletop.models import TableRequestStatus, TableStatus
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.table import TableCreate, TableUpdate


async def _table(services, gm_id):
    return await services.tables.create(gm_id, TableCreate(title="Curse of Strahd", player_slots=5))


def test_request_approve_then_request_again(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)

        first = await services.table_requests.create(player, table.id, "Can I join?")
        assert first.status == TableRequestStatus.PENDING

        with pytest.raises(DuplicateTableRequestError):
            await services.table_requests.create(player, table.id)

        approved = await services.table_requests.approve(first.id, gm)
        assert approved.status == TableRequestStatus.APPROVED

        # Nothing pending any more, so a new request is allowed
        second = await services.table_requests.create(player, table.id)
        assert second.id != first.id
        assert second.status == TableRequestStatus.PENDING

        received = await services.table_requests.list_for_table(table.id, gm, QueryOptions())
        assert {r.id for r in received} == {first.id, second.id}

    run(scenario)


def test_reject_marks_request_rejected(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        request = await services.table_requests.create(player, table.id)
        rejected = await services.table_requests.reject(request.id, gm)
        assert rejected.status == TableRequestStatus.REJECTED

    run(scenario)


def test_only_gm_can_decide(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        request = await services.table_requests.create(player, table.id)

        with pytest.raises(ForbiddenError):
            await services.table_requests.approve(request.id, player)
        with pytest.raises(ForbiddenError):
            await services.table_requests.reject(request.id, uuid4())

        assert (await services.table_requests.get(request.id)).status == TableRequestStatus.PENDING

    run(scenario)


def test_decided_request_cannot_be_decided_again(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        request = await services.table_requests.create(player, table.id)
        await services.table_requests.reject(request.id, gm)

        with pytest.raises(RequestAlreadyProcessedError) as exc:
            await services.table_requests.approve(request.id, gm)
        assert exc.value.status_code == 409

        assert (await services.table_requests.get(request.id)).status == TableRequestStatus.REJECTED

    run(scenario)


def test_cancel_is_for_requester_and_pending_only(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        pending = await services.table_requests.create(player, table.id)

        with pytest.raises(ForbiddenError):
            await services.table_requests.cancel(pending.id, gm)

        await services.table_requests.cancel(pending.id, player)
        assert await services.table_requests.list_sent(player, QueryOptions()) == []

        decided = await services.table_requests.create(player, table.id)
        await services.table_requests.approve(decided.id, gm)
        with pytest.raises(RequestAlreadyProcessedError):
            await services.table_requests.cancel(decided.id, player)

    run(scenario)


def test_gm_cannot_request_own_table(run):
    gm = uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        with pytest.raises(BusinessRuleViolationError):
            await services.table_requests.create(gm, table.id)

    run(scenario)


def test_inactive_or_missing_table_rejects_requests(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        await services.tables.update(gm, table.id, TableUpdate(status=TableStatus.INACTIVE))

        with pytest.raises(BusinessRuleViolationError):
            await services.table_requests.create(player, table.id)
        with pytest.raises(TableNotFoundError):
            await services.table_requests.create(player, uuid4())

    run(scenario)


def test_received_requests_are_gm_only(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        await services.table_requests.create(player, table.id)
        with pytest.raises(ForbiddenError):
            await services.table_requests.list_for_table(table.id, player, QueryOptions())

    run(scenario)


def test_table_changes_are_gm_only(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        with pytest.raises(UserNotTableGameMasterError):
            await services.tables.update(player, table.id, TableUpdate(title="Mine now"))
        with pytest.raises(UserNotTableGameMasterError):
            await services.tables.delete(player, table.id)

        renamed = await services.tables.update(gm, table.id, TableUpdate(title="Tomb of Annihilation"))
        assert renamed.title == "Tomb of Annihilation"
        assert renamed.player_slots == 5

        await services.tables.delete(gm, table.id)
        with pytest.raises(TableNotFoundError):
            await services.tables.get(table.id)

    run(scenario)


def test_store_refuses_a_second_pending_request(run):
    gm, player = uuid4(), uuid4()

    async def scenario(services):
        table = await _table(services, gm)
        table_id = table.id
        repo = services.table_requests.table_requests

        first = await repo.create(player, table_id, None)
        first_id = first.id
        # Skips the service pre-check, as a racing create would
        with pytest.raises(DuplicateTableRequestError):
            await repo.create(player, table_id, "again")

        pending = await repo.find_by_user_and_table(player, table_id)
        assert [r.id for r in pending] == [first_id]

        # Only Pending rows are covered, so a decided request frees the slot
        await services.table_requests.approve(first_id, gm)
        second = await repo.create(player, table_id, None)
        assert second.status == TableRequestStatus.PENDING

    run(scenario)
