# partflow/services/inventory/part_service.py

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.exceptions import NotFoundError, ValidationFailure
from partflow.dao.inventory_dao import InventoryDAO
from partflow.dao.parts_dao import PartsDAO
from partflow.domain.entities import InventoryChange, Part
from partflow.domain.exceptions import DomainValidationError
from partflow.domain.inventory import create_part as build_part
from partflow.schemas.inventory.part_schemas import PartCreate, PartUpdate
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

# NOT NULL columns: an explicit null in a partial update is ignored
_NON_NULLABLE = {"name", "tags", "quantity"}


def _part_not_found() -> NotFoundError:
    return NotFoundError("Part not found", ErrorCode.PART_NOT_FOUND)


# ---------------- CREATE ----------------
async def create_part(db: AsyncSession, payload: PartCreate) -> Part:
    try:
        part = build_part(payload.model_dump())
    except DomainValidationError as e:
        raise ValidationFailure(str(e), details={"field": e.field})

    await PartsDAO(db).create(part)
    await db.commit()

    logger.info("Part created", extra={"part_id": part.id, "part_name": part.name})
    return part


# ---------------- LIST / SEARCH ----------------
async def search_parts(
    db: AsyncSession,
    *,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    location_id: Optional[str] = None,
    low_stock: bool = False,
) -> List[Part]:
    return await PartsDAO(db).search(
        search=search,
        category_id=category_id,
        location_id=location_id,
        low_stock=low_stock,
    )


# ---------------- GET ----------------
async def get_part(db: AsyncSession, part_id: str) -> Part:
    part = await PartsDAO(db).find_by_id(part_id)
    if not part:
        raise _part_not_found()
    return part


# ---------------- UPDATE ----------------
async def update_part(db: AsyncSession, part_id: str, payload: PartUpdate) -> Part:
    parts = PartsDAO(db)
    current = await parts.find_by_id(part_id)
    if not current:
        raise _part_not_found()

    updates = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if not (value is None and field in _NON_NULLABLE)
    }

    if "quantity" in updates:
        if updates["quantity"] != current.quantity:
            raise ValidationFailure(
                "quantity cannot be edited directly; record an inventory change "
                "or use the administrative overwrite",
                ErrorCode.QUANTITY_NOT_EDITABLE,
                {"current": current.quantity, "requested": updates["quantity"]},
            )
        del updates["quantity"]

    updated = await parts.update(part_id, updates)
    await db.commit()
    return updated


# ---------------- ADMINISTRATIVE OVERWRITE ----------------
async def overwrite_quantity(
    db: AsyncSession,
    part_id: str,
    quantity: int,
    *,
    reason: Optional[str] = None,
) -> Part:
    """Set stock directly. Writes no ledger row, so ledger sums diverge."""
    parts = PartsDAO(db)
    current = await parts.find_by_id(part_id, for_update=True)
    if not current:
        raise _part_not_found()

    updated = await parts.update_quantity(part_id, quantity)
    await db.commit()

    logger.warning(
        "Administrative quantity overwrite (no ledger entry)",
        extra={
            "part_id": part_id,
            "previous_quantity": current.quantity,
            "quantity": quantity,
            "reason": reason,
        },
    )
    return updated


# ---------------- DELETE ----------------
async def delete_part(db: AsyncSession, part_id: str) -> None:
    # ledger rows are kept
    deleted = await PartsDAO(db).delete(part_id)
    if not deleted:
        raise _part_not_found()
    await db.commit()
    logger.info("Part deleted", extra={"part_id": part_id})


# ---------------- HISTORY ----------------
async def get_inventory_history(db: AsyncSession, part_id: str) -> List[InventoryChange]:
    return await InventoryDAO(db).find_by_part_id(part_id)


# ---------------- LOW STOCK ----------------
async def low_stock_report(db: AsyncSession) -> List[Part]:
    parts = await PartsDAO(db).search(low_stock=True)
    logger.info("Low stock report", extra={"count": len(parts)})
    for part in parts:
        logger.info(
            "Low stock part",
            extra={
                "part_id": part.id,
                "part_name": part.name,
                "quantity": part.quantity,
                "min_quantity": part.min_quantity,
            },
        )
    return parts
