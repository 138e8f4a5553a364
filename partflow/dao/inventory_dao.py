# partflow/dao/inventory_dao.py

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.domain.entities import InventoryChange
from partflow.domain.inventory import delta_from
from partflow.models.inventory.inventory_change_models import InventoryChangeModel


def _map_change(row: InventoryChangeModel) -> InventoryChange:
    # the sign lives in change_type; quantity is unsigned
    return InventoryChange(
        id=row.id,
        part_id=row.part_id,
        delta=delta_from(row.change_type, row.quantity),
        change_type=row.change_type,
        quantity=row.quantity,
        applied_delta=row.applied_delta,
        reason=row.reason,
        operator=row.operator,
        timestamp=row.timestamp,
    )


class InventoryDAO:
    """Append-only access to the inventory_changes ledger."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, change: InventoryChange) -> InventoryChange:
        self.db.add(
            InventoryChangeModel(
                id=change.id,
                part_id=change.part_id,
                change_type=change.change_type,
                quantity=change.quantity,
                applied_delta=change.applied_delta,
                reason=change.reason,
                operator=change.operator,
                timestamp=change.timestamp,
            )
        )
        await self.db.flush()
        return change

    async def _list(self, *filters, limit: Optional[int] = None) -> List[InventoryChange]:
        stmt = (
            select(InventoryChangeModel)
            .where(*filters)
            .order_by(InventoryChangeModel.timestamp.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = (await self.db.execute(stmt)).scalars().all()
        return [_map_change(r) for r in rows]

    async def find_all(self) -> List[InventoryChange]:
        return await self._list()

    async def find_by_id(self, change_id: str) -> Optional[InventoryChange]:
        row = await self.db.get(InventoryChangeModel, change_id)
        return _map_change(row) if row else None

    async def find_by_part_id(self, part_id: str) -> List[InventoryChange]:
        return await self._list(InventoryChangeModel.part_id == part_id)

    async def find_recent(self, limit: int = 50) -> List[InventoryChange]:
        return await self._list(limit=limit)

    async def delete(self, change_id: str) -> bool:
        result = await self.db.execute(
            delete(InventoryChangeModel).where(InventoryChangeModel.id == change_id)
        )
        return result.rowcount > 0
