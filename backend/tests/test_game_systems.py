from uuid import uuid4

import pytest
from pydantic import ValidationError

from tabletop.core.exceptions import EntityNotFoundError, ResourceAlreadyExistsError
from tabletop.schemas.common import QueryOptions
from tabletop.schemas.game_system import GameSystemCreate, GameSystemUpdate
from tabletop.schemas.table import TableCreate, TableUpdate


def test_catalog_crud(run):
    async def scenario(services):
        dnd = await services.game_systems.create(GameSystemCreate(name="  D&D 5e "))
        assert dnd.name == "D&D 5e"
        await services.game_systems.create(GameSystemCreate(name="Call of Cthulhu"))

        assert (await services.game_systems.get_by_name("d&d 5E")).id == dnd.id
        matches = await services.game_systems.list_game_systems("cthulhu", QueryOptions())
        assert [g.name for g in matches] == ["Call of Cthulhu"]

        renamed = await services.game_systems.update(dnd.id, GameSystemUpdate(name="D&D 2024"))
        assert renamed.name == "D&D 2024"

        await services.game_systems.delete(dnd.id)
        with pytest.raises(EntityNotFoundError):
            await services.game_systems.get(dnd.id)
        with pytest.raises(EntityNotFoundError):
            await services.game_systems.delete(dnd.id)

    run(scenario)


def test_names_are_unique_ignoring_case(run):
    async def scenario(services):
        await services.game_systems.create(GameSystemCreate(name="Pathfinder"))
        other = await services.game_systems.create(GameSystemCreate(name="Starfinder"))
        other_id = other.id

        with pytest.raises(ResourceAlreadyExistsError):
            await services.game_systems.create(GameSystemCreate(name="PATHFINDER"))
        with pytest.raises(ResourceAlreadyExistsError):
            await services.game_systems.update(other_id, GameSystemUpdate(name="pathfinder"))

        # Keeping its own name is not a clash
        kept = await services.game_systems.update(other_id, GameSystemUpdate(name="Starfinder"))
        assert kept.name == "Starfinder"

    run(scenario)


def test_store_refuses_duplicate_name(run):
    async def scenario(services):
        await services.game_systems.game_systems.create("Blades in the Dark")
        with pytest.raises(ResourceAlreadyExistsError):
            await services.game_systems.game_systems.create("Blades in the Dark")

    run(scenario)


def test_blank_names_are_rejected():
    with pytest.raises(ValidationError):
        GameSystemCreate(name="   ")
    with pytest.raises(ValidationError):
        GameSystemUpdate(name=None)


def test_tables_must_reference_an_existing_game_system(run):
    gm = uuid4()

    async def scenario(services):
        with pytest.raises(EntityNotFoundError) as exc:
            await services.tables.create(gm, TableCreate(title="Ghost table", game_system_id=uuid4()))
        assert exc.value.details["entity_type"] == "GameSystem"

        system = await services.game_systems.create(GameSystemCreate(name="Mothership"))
        system_id = system.id
        table = await services.tables.create(gm, TableCreate(title="Prospero's Dream", game_system_id=system_id))
        table_id = table.id
        assert table.game_system_id == system_id

        with pytest.raises(EntityNotFoundError):
            await services.tables.update(gm, table_id, TableUpdate(game_system_id=uuid4()))

        cleared = await services.tables.update(gm, table_id, TableUpdate(game_system_id=None))
        assert cleared.game_system_id is None

    run(scenario)


def test_deleting_a_game_system_unlinks_its_tables(run):
    gm = uuid4()

    async def scenario(services):
        system = await services.game_systems.create(GameSystemCreate(name="Mork Borg"))
        table = await services.tables.create(gm, TableCreate(title="Dying world", game_system_id=system.id))

        await services.game_systems.delete(system.id)

        return (await services.tables.get(table.id)).game_system_id

    assert run(scenario) is None
