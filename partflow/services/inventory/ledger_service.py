# partflow/services/inventory/ledger_service.py

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.exceptions import NotFoundError
from partflow.dao.inventory_dao import InventoryDAO
from partflow.domain.entities import InventoryChange
from partflow.utils.logger import get_logger

logger = get_logger(__name__)


async def list_changes(db: AsyncSession) -> List[InventoryChange]:
    return await InventoryDAO(db).find_all()


async def list_recent_changes(db: AsyncSession, limit: int) -> List[InventoryChange]:
    return await InventoryDAO(db).find_recent(limit)


async def delete_change(db: AsyncSession, change_id: str) -> None:
    """Remove one ledger row. The part's quantity is left untouched."""
    deleted = await InventoryDAO(db).delete(change_id)
    if not deleted:
        raise NotFoundError(
            "Inventory change not found",
            ErrorCode.INVENTORY_CHANGE_NOT_FOUND,
        )
    await db.commit()
    logger.warning("Inventory change deleted", extra={"change_id": change_id})
