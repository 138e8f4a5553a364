# partflow/services/inventory/inventory_mutation_service.py

import asyncio
import weakref
from typing import Optional, Tuple

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.config import INVENTORY_MAX_RETRIES
from partflow.core.exceptions import ConcurrentUpdateError, NotFoundError, ValidationFailure
from partflow.dao.inventory_dao import InventoryDAO
from partflow.dao.parts_dao import PartsDAO
from partflow.domain.entities import InventoryChange, Part
from partflow.domain.exceptions import DomainValidationError
from partflow.domain.inventory import apply_inventory_change, create_inventory_change
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

RETRY_BACKOFF_SECONDS = 0.05

# One lock per part id, dropped once nobody holds or waits on it
_part_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(part_id: str) -> asyncio.Lock:
    lock = _part_locks.get(part_id)
    if lock is None:
        lock = asyncio.Lock()
        _part_locks[part_id] = lock
    return lock


def _is_lock_error(exc: OperationalError) -> bool:
    message = str(exc.orig or exc).lower()
    return "database is locked" in message or "database table is locked" in message


async def _mutate(
    db: AsyncSession,
    part_id: str,
    delta: int,
    reason: Optional[str],
    operator: Optional[str],
) -> Tuple[Part, InventoryChange]:
    parts = PartsDAO(db)
    ledger = InventoryDAO(db)

    # ------------------------------------
    # 1. Load (and lock) the part
    # ------------------------------------
    part = await parts.find_by_id(part_id, for_update=True)
    if part is None:
        await db.rollback()
        raise NotFoundError("Part not found", ErrorCode.PART_NOT_FOUND)

    # ------------------------------------
    # 2. Build the ledger entry and apply it (pure, clamps at zero)
    # ------------------------------------
    try:
        change = create_inventory_change(
            {
                "part_id": part_id,
                "delta": delta,
                "reason": reason,
                "operator": operator,
            }
        )
        updated = apply_inventory_change(part, change)
    except DomainValidationError as e:
        await db.rollback()
        raise ValidationFailure(str(e), details={"field": e.field})

    change = change.model_copy(
        update={"applied_delta": updated.quantity - part.quantity}
    )

    # ------------------------------------
    # 3. Append to the ledger
    # ------------------------------------
    await ledger.create(change)

    # ------------------------------------
    # 4. Persist quantity + updated_at only
    # ------------------------------------
    stored = await parts.update_quantity(
        part_id,
        updated.quantity,
        updated_at=updated.updated_at,
    )

    await db.commit()
    return stored, change


async def apply_inventory_mutation(
    db: AsyncSession,
    part_id: str,
    *,
    delta: int,
    reason: Optional[str] = None,
    operator: Optional[str] = None,
) -> Tuple[Part, InventoryChange]:
    """Record a signed stock movement and update the part in one transaction.

    Mutations of the same part are serialized in-process; SQLite lock
    errors raised by other writers are retried before giving up with 409.
    The ledger keeps the requested delta even when the part clamps at zero;
    ``applied_delta`` carries what actually happened.
    """
    async with _lock_for(part_id):
        attempt = 0
        while True:
            try:
                part, change = await _mutate(db, part_id, delta, reason, operator)
                break
            except OperationalError as exc:
                await db.rollback()
                if not _is_lock_error(exc):
                    raise
                if attempt >= INVENTORY_MAX_RETRIES:
                    logger.error(
                        "Inventory mutation gave up after retries",
                        extra={"part_id": part_id, "attempts": attempt + 1},
                    )
                    raise ConcurrentUpdateError(
                        details={"part_id": part_id, "attempts": attempt + 1}
                    )
                attempt += 1
                logger.warning(
                    "Database locked during inventory mutation, retrying",
                    extra={"part_id": part_id, "attempt": attempt},
                )
                await asyncio.sleep(RETRY_BACKOFF_SECONDS * attempt)

    if change.applied_delta != change.delta:
        logger.warning(
            "Inventory change clamped at zero",
            extra={
                "part_id": part_id,
                "requested_delta": change.delta,
                "applied_delta": change.applied_delta,
            },
        )
    logger.info(
        "Inventory change applied",
        extra={
            "part_id": part_id,
            "change_id": change.id,
            "delta": change.delta,
            "applied_delta": change.applied_delta,
            "quantity": part.quantity,
        },
    )
    return part, change
