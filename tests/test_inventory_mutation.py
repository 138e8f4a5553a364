import sqlite3

import anyio
import pytest
from sqlalchemy.exc import OperationalError

from partflow.core.exceptions import ConcurrentUpdateError, NotFoundError, ValidationFailure
from partflow.domain import is_low_stock
from partflow.domain.inventory import MAX_STOCK_QUANTITY
from partflow.schemas.inventory.part_schemas import PartCreate
from partflow.services.inventory import inventory_mutation_service
from partflow.services.inventory.inventory_mutation_service import apply_inventory_mutation
from partflow.services.inventory.part_service import (
    create_part,
    get_inventory_history,
    get_part,
)


@pytest.fixture
def make_part(run_db):
    def _make(**fields):
        return run_db(create_part, PartCreate(**fields))

    return _make


@pytest.fixture
def mutate(run_db):
    def _mutate(part_id, delta, **kwargs):
        return run_db(apply_inventory_mutation, part_id, delta=delta, **kwargs)

    return _mutate


def test_positive_delta_adds_stock_and_writes_ledger(make_part, mutate, run_db):
    part = make_part(name="Bolt", quantity=10)

    updated, change = mutate(part.id, 5, reason="restock", operator="kim")

    assert updated.quantity == 15
    assert updated.updated_at == change.timestamp
    assert change.change_type == "in"
    assert change.quantity == 5
    assert change.applied_delta == 5

    [row] = run_db(get_inventory_history, part.id)
    assert row.delta == 5
    assert row.reason == "restock"
    assert row.operator == "kim"


def test_clamped_mutation_records_requested_delta(make_part, mutate, run_db):
    part = make_part(name="Washer", quantity=3)

    updated, _ = mutate(part.id, -10)

    assert updated.quantity == 0
    [row] = run_db(get_inventory_history, part.id)
    # ledger keeps what was asked for, applied_delta what happened
    assert (row.change_type, row.quantity, row.delta) == ("out", 10, -10)
    assert row.applied_delta == -3


def test_quantity_stays_non_negative(make_part, mutate, run_db):
    q0 = 7
    part = make_part(name="Spring", quantity=q0)

    updated, _ = mutate(part.id, -q0 - 5)
    assert updated.quantity == 0

    for delta in (-1, 2, -4):
        updated, _ = mutate(part.id, delta)
        assert updated.quantity >= 0

    assert run_db(get_part, part.id).quantity == 0


def test_zero_delta_writes_out_row_and_keeps_quantity(make_part, mutate, run_db):
    part = make_part(name="Pin", quantity=4)

    updated, change = mutate(part.id, 0)

    assert updated.quantity == 4
    assert (change.change_type, change.quantity, change.applied_delta) == ("out", 0, 0)
    assert len(run_db(get_inventory_history, part.id)) == 1


def test_ledger_round_trips_sign(make_part, mutate, run_db):
    part = make_part(name="Rivet", quantity=100)
    deltas = [3, -2, 11, -9]

    for delta in deltas:
        mutate(part.id, delta)

    history = run_db(get_inventory_history, part.id)
    assert [c.delta for c in reversed(history)] == deltas
    assert all((c.change_type == "in") == (c.delta > 0) for c in history)
    assert all(c.quantity == abs(c.delta) for c in history)
    assert run_db(get_part, part.id).quantity == 100 + sum(deltas)


def test_missing_part_writes_no_ledger_row(mutate, run_db):
    with pytest.raises(NotFoundError):
        mutate("missing", 5)

    assert run_db(get_inventory_history, "missing") == []


def test_overflowing_quantity_is_rejected_without_ledger_row(make_part, mutate, run_db):
    part = make_part(name="Grain of sand", quantity=MAX_STOCK_QUANTITY)

    with pytest.raises(ValidationFailure) as exc:
        mutate(part.id, 1)

    assert exc.value.details == {"field": "delta"}
    assert run_db(get_part, part.id).quantity == MAX_STOCK_QUANTITY
    assert run_db(get_inventory_history, part.id) == []

    # taking stock out of a full bin still works
    updated, _ = mutate(part.id, -1)
    assert updated.quantity == MAX_STOCK_QUANTITY - 1


def test_scenario_restock_clears_low_stock(make_part, mutate, run_db):
    part = make_part(name="Bolt M6", quantity=5, min_quantity=10)
    assert is_low_stock(part)

    updated, _ = mutate(part.id, 50)

    assert updated.quantity == 55
    assert not is_low_stock(updated)
    [row] = run_db(get_inventory_history, part.id)
    assert (row.change_type, row.quantity) == ("in", 50)


def test_concurrent_mutations_do_not_lose_updates(make_part, session_factory, run_db):
    part = make_part(name="Washer", quantity=100)

    async def _apply(delta):
        async with session_factory() as db:
            await apply_inventory_mutation(db, part.id, delta=delta)

    async def _race():
        async with anyio.create_task_group() as tg:
            tg.start_soon(_apply, 10)
            tg.start_soon(_apply, -3)

    anyio.run(_race)

    assert run_db(get_part, part.id).quantity == 107
    assert len(run_db(get_inventory_history, part.id)) == 2


def test_many_concurrent_mutations(make_part, session_factory, run_db):
    part = make_part(name="Nut", quantity=50)
    deltas = [1, -2, 3, -4, 5, -6, 7, -8, 9, 10]

    async def _apply(delta):
        async with session_factory() as db:
            await apply_inventory_mutation(db, part.id, delta=delta)

    async def _race():
        async with anyio.create_task_group() as tg:
            for delta in deltas:
                tg.start_soon(_apply, delta)

    anyio.run(_race)

    assert run_db(get_part, part.id).quantity == 50 + sum(deltas)
    assert len(run_db(get_inventory_history, part.id)) == len(deltas)


# ---------------- retry on SQLite lock ----------------
def _locked_error():
    return OperationalError("UPDATE parts", {}, sqlite3.OperationalError("database is locked"))


def test_lock_error_is_retried(make_part, mutate, monkeypatch):
    part = make_part(name="Bolt", quantity=1)
    real_mutate = inventory_mutation_service._mutate
    calls = {"n": 0}

    async def _flaky(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise _locked_error()
        return await real_mutate(*args, **kwargs)

    monkeypatch.setattr(inventory_mutation_service, "_mutate", _flaky)
    monkeypatch.setattr(inventory_mutation_service, "RETRY_BACKOFF_SECONDS", 0)

    updated, _ = mutate(part.id, 2)

    assert calls["n"] == 2
    assert updated.quantity == 3


def test_lock_error_gives_up_with_conflict(make_part, mutate, monkeypatch):
    part = make_part(name="Bolt", quantity=1)
    calls = {"n": 0}

    async def _always_locked(*args, **kwargs):
        calls["n"] += 1
        raise _locked_error()

    monkeypatch.setattr(inventory_mutation_service, "_mutate", _always_locked)
    monkeypatch.setattr(inventory_mutation_service, "RETRY_BACKOFF_SECONDS", 0)
    monkeypatch.setattr(inventory_mutation_service, "INVENTORY_MAX_RETRIES", 2)

    with pytest.raises(ConcurrentUpdateError) as exc:
        mutate(part.id, 2)

    assert exc.value.status_code == 409
    assert calls["n"] == 3


def test_other_operational_errors_are_not_retried(make_part, mutate, monkeypatch):
    part = make_part(name="Bolt", quantity=1)
    calls = {"n": 0}

    async def _broken(*args, **kwargs):
        calls["n"] += 1
        raise OperationalError("SELECT", {}, sqlite3.OperationalError("no such table: parts"))

    monkeypatch.setattr(inventory_mutation_service, "_mutate", _broken)

    with pytest.raises(OperationalError):
        mutate(part.id, 2)

    assert calls["n"] == 1
