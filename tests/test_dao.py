import pytest

from partflow.core.exceptions import ConflictError
from partflow.dao import CategoriesDAO, InventoryDAO, LocationsDAO, PartsDAO
from partflow.domain import create_category, create_inventory_change, create_location, create_part


async def _add_parts(db, *payloads):
    dao = PartsDAO(db)
    parts = [await dao.create(create_part(p)) for p in payloads]
    await db.commit()
    return parts


# ---------------- parts ----------------
def test_parts_create_and_find_by_id(run_db):
    async def _scenario(db):
        [part] = await _add_parts(
            db,
            {"name": "Bolt", "tags": ["m6", "steel", "m6"], "min_quantity": 0},
        )
        return part, await PartsDAO(db).find_by_id(part.id)

    created, found = run_db(_scenario)

    assert found == created
    assert found.tags == ["m6", "steel", "m6"]
    assert found.min_quantity == 0


def test_parts_find_by_id_missing(run_db):
    async def _scenario(db):
        return await PartsDAO(db).find_by_id("nope")

    assert run_db(_scenario) is None


def test_parts_search_matches_name_spec_material_case_insensitively(run_db):
    async def _scenario(db):
        await _add_parts(
            db,
            {"name": "Hex Bolt"},
            {"name": "Nut", "specification": "fits BOLTS"},
            {"name": "Washer", "material": "boltonium"},
            {"name": "Spring"},
        )
        return await PartsDAO(db).search(search="bolt")

    assert sorted(p.name for p in run_db(_scenario)) == ["Hex Bolt", "Nut", "Washer"]


def test_parts_search_treats_like_wildcards_literally(run_db):
    async def _scenario(db):
        await _add_parts(
            db,
            {"name": "M6_bolt"},
            {"name": "Washer", "specification": "100% steel"},
            {"name": "Spring", "material": "C:\\spring"},
            {"name": "Nut"},
        )
        dao = PartsDAO(db)
        results = []
        for term in ("_", "%", "\\", "0%"):
            found = await dao.search(search=term)
            results.append(sorted(p.name for p in found))
        return results

    underscore, percent, backslash, literal = run_db(_scenario)

    assert underscore == ["M6_bolt"]
    assert percent == ["Washer"]
    assert backslash == ["Spring"]
    assert literal == ["Washer"]


def test_parts_search_combines_filters_with_and(run_db):
    async def _scenario(db):
        await _add_parts(
            db,
            {"name": "Bolt A", "category_id": "c1", "location_id": "l1"},
            {"name": "Bolt B", "category_id": "c1", "location_id": "l2"},
            {"name": "Nut", "category_id": "c1", "location_id": "l1"},
        )
        return await PartsDAO(db).search(search="bolt", category_id="c1", location_id="l1")

    assert [p.name for p in run_db(_scenario)] == ["Bolt A"]


def test_parts_search_orders_newest_first(run_db):
    async def _scenario(db):
        await _add_parts(db, {"name": "first"}, {"name": "second"}, {"name": "third"})
        return await PartsDAO(db).find_all()

    assert [p.name for p in run_db(_scenario)] == ["third", "second", "first"]


def test_low_stock_filter_uses_coalesce_to_zero(run_db):
    async def _scenario(db):
        await _add_parts(
            db,
            {"name": "at-threshold", "quantity": 5, "min_quantity": 5},
            {"name": "empty-with-threshold", "quantity": 0, "min_quantity": 5},
            {"name": "above-threshold", "quantity": 6, "min_quantity": 5},
            {"name": "empty-no-threshold", "quantity": 0},
            {"name": "stocked-no-threshold", "quantity": 3},
        )
        return await PartsDAO(db).search(low_stock=True)

    names = sorted(p.name for p in run_db(_scenario))

    assert names == ["at-threshold", "empty-no-threshold", "empty-with-threshold"]


def test_parts_update_keeps_absent_fields_and_stamps_updated_at(run_db):
    async def _scenario(db):
        [part] = await _add_parts(db, {"name": "Bolt", "material": "steel", "quantity": 4})
        updated = await PartsDAO(db).update(part.id, {"name": "Bolt M6", "tags": ["x"]})
        await db.commit()
        return part, updated

    before, after = run_db(_scenario)

    assert after.name == "Bolt M6"
    assert after.material == "steel"
    assert after.quantity == 4
    assert after.tags == ["x"]
    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at


def test_parts_update_quantity_and_missing_ids(run_db):
    async def _scenario(db):
        [part] = await _add_parts(db, {"name": "Bolt", "quantity": 4})
        dao = PartsDAO(db)
        updated = await dao.update_quantity(part.id, 9, updated_at="2030-01-01T00:00:00.000000Z")
        missing_update = await dao.update("nope", {"name": "x"})
        missing_quantity = await dao.update_quantity("nope", 1)
        await db.commit()
        return updated, missing_update, missing_quantity

    updated, missing_update, missing_quantity = run_db(_scenario)

    assert updated.quantity == 9
    assert updated.updated_at == "2030-01-01T00:00:00.000000Z"
    assert missing_update is None
    assert missing_quantity is None


def test_parts_delete(run_db):
    async def _scenario(db):
        [part] = await _add_parts(db, {"name": "Bolt"})
        dao = PartsDAO(db)
        first = await dao.delete(part.id)
        second = await dao.delete(part.id)
        await db.commit()
        return first, second, await dao.find_by_id(part.id)

    assert run_db(_scenario) == (True, False, None)


# ---------------- ledger ----------------
def test_inventory_dao_reconstructs_signed_delta(run_db):
    async def _scenario(db):
        dao = InventoryDAO(db)
        for delta in (5, -3, 0):
            await dao.create(create_inventory_change({"part_id": "p-1", "delta": delta}))
        await dao.create(create_inventory_change({"part_id": "p-2", "delta": 1}))
        await db.commit()
        return await dao.find_by_part_id("p-1"), await dao.find_recent(2), await dao.find_all()

    history, recent, everything = run_db(_scenario)

    # most recent first
    assert [c.delta for c in history] == [0, -3, 5]
    assert [(c.change_type, c.quantity) for c in history] == [("out", 0), ("out", 3), ("in", 5)]
    assert len(recent) == 2
    assert recent[0].part_id == "p-2"
    assert len(everything) == 4


def test_inventory_dao_find_and_delete(run_db):
    async def _scenario(db):
        dao = InventoryDAO(db)
        change = await dao.create(create_inventory_change({"part_id": "p-1", "delta": 2}))
        await db.commit()
        found = await dao.find_by_id(change.id)
        deleted = await dao.delete(change.id)
        await db.commit()
        return change, found, deleted, await dao.find_by_id(change.id)

    change, found, deleted, after = run_db(_scenario)

    assert found.delta == 2
    assert found.id == change.id
    assert deleted is True
    assert after is None


# ---------------- categories ----------------
def test_categories_roots_and_children_ordered_by_name(run_db):
    async def _scenario(db):
        dao = CategoriesDAO(db)
        root = await dao.create(create_category({"name": "Fasteners"}))
        await dao.create(create_category({"name": "Electronics"}))
        await dao.create(create_category({"name": "Nuts", "parent_id": root.id}))
        await dao.create(create_category({"name": "Bolts", "parent_id": root.id}))
        await db.commit()
        return await dao.find_roots(), await dao.find_children(root.id)

    roots, children = run_db(_scenario)

    assert [c.name for c in roots] == ["Electronics", "Fasteners"]
    assert [c.name for c in children] == ["Bolts", "Nuts"]


def test_categories_update_and_delete(run_db):
    async def _scenario(db):
        dao = CategoriesDAO(db)
        category = await dao.create(create_category({"name": "Bolts", "icon": "B"}))
        updated = await dao.update(category.id, {"description": "hex", "unknown": 1})
        deleted = await dao.delete(category.id)
        await db.commit()
        return updated, deleted, await dao.find_all()

    updated, deleted, remaining = run_db(_scenario)

    assert updated.description == "hex"
    assert updated.icon == "B"
    assert deleted is True
    assert remaining == []


# ---------------- locations ----------------
def test_location_codes_are_unique_case_insensitively(run_db):
    async def _scenario(db):
        dao = LocationsDAO(db)
        await dao.create(create_location({"code": "A1"}))
        await db.commit()
        await dao.create(create_location({"code": "a1"}))

    with pytest.raises(ConflictError):
        run_db(_scenario)


def test_location_update_rejects_taken_code_but_allows_own(run_db):
    async def _scenario(db):
        dao = LocationsDAO(db)
        a1 = await dao.create(create_location({"code": "A1"}))
        b2 = await dao.create(create_location({"code": "B2"}))
        await db.commit()

        same = await dao.update(a1.id, {"code": "a1", "name": "Top drawer"})
        await db.commit()

        with pytest.raises(ConflictError):
            await dao.update(b2.id, {"code": "a1"})
        return same, await dao.find_by_code("a1")

    same, by_code = run_db(_scenario)

    assert same.code == "A1"
    assert same.name == "Top drawer"
    assert by_code.id == same.id
