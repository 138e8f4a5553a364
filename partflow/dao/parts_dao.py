# partflow/dao/parts_dao.py

import json
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.domain.entities import Part
from partflow.models.inventory.part_models import PartModel
from partflow.utils.timestamps import utc_now_iso

UPDATABLE_FIELDS = (
    "name",
    "specification",
    "material",
    "image_url",
    "tags",
    "category_id",
    "location_id",
    "quantity",
    "min_quantity",
)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# =====================================================
# MAPPERS
# =====================================================
def _map_part(row: PartModel) -> Part:
    return Part(
        id=row.id,
        name=row.name,
        specification=row.specification,
        material=row.material,
        image_url=row.image_url,
        tags=json.loads(row.tags) if row.tags else [],
        category_id=row.category_id,
        location_id=row.location_id,
        quantity=row.quantity,
        min_quantity=row.min_quantity,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _encode_tags(tags) -> str:
    return json.dumps(list(tags or []), ensure_ascii=False)


class PartsDAO:
    """Row <-> Part mapping and the part search query.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, part_id: str, *, for_update: bool = False) -> Optional[PartModel]:
        stmt = (
            select(PartModel)
            .where(PartModel.id == part_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        return (await self.db.execute(stmt)).scalar_one_or_none()

    # ---------------- CREATE ----------------
    async def create(self, part: Part) -> Part:
        self.db.add(
            PartModel(
                id=part.id,
                name=part.name,
                specification=part.specification,
                material=part.material,
                image_url=part.image_url,
                tags=_encode_tags(part.tags),
                category_id=part.category_id,
                location_id=part.location_id,
                quantity=part.quantity,
                min_quantity=part.min_quantity,
                created_at=part.created_at,
                updated_at=part.updated_at,
            )
        )
        await self.db.flush()
        return part

    # ---------------- READ ----------------
    async def find_all(self) -> List[Part]:
        return await self.search()

    async def find_by_id(self, part_id: str, *, for_update: bool = False) -> Optional[Part]:
        row = await self._get_row(part_id, for_update=for_update)
        return _map_part(row) if row else None

    async def search(
        self,
        *,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        location_id: Optional[str] = None,
        low_stock: bool = False,
    ) -> List[Part]:
        filters = []

        if search:
            pattern = f"%{_escape_like(search)}%"
            filters.append(
                or_(
                    PartModel.name.ilike(pattern, escape="\\"),
                    PartModel.specification.ilike(pattern, escape="\\"),
                    PartModel.material.ilike(pattern, escape="\\"),
                )
            )

        if category_id:
            filters.append(PartModel.category_id == category_id)

        if location_id:
            filters.append(PartModel.location_id == location_id)

        if low_stock:
            # a part without a threshold only counts once it is empty
            filters.append(
                PartModel.quantity <= func.coalesce(PartModel.min_quantity, 0)
            )

        stmt = (
            select(PartModel)
            .where(*filters)
            .order_by(PartModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [_map_part(r) for r in rows]

    # ---------------- UPDATE ----------------
    async def update(self, part_id: str, fields: Dict[str, Any]) -> Optional[Part]:
        """Fetch-modify-write of the given fields; may overwrite ``quantity``."""
        row = await self._get_row(part_id)
        if row is None:
            return None

        for field, value in fields.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "tags":
                value = _encode_tags(value)
            setattr(row, field, value)

        row.updated_at = utc_now_iso()
        await self.db.flush()
        return _map_part(row)

    async def update_quantity(
        self,
        part_id: str,
        quantity: int,
        *,
        updated_at: Optional[str] = None,
    ) -> Optional[Part]:
        row = await self._get_row(part_id)
        if row is None:
            return None

        row.quantity = quantity
        row.updated_at = updated_at or utc_now_iso()
        await self.db.flush()
        return _map_part(row)

    # ---------------- DELETE ----------------
    async def delete(self, part_id: str) -> bool:
        result = await self.db.execute(
            delete(PartModel).where(PartModel.id == part_id)
        )
        return result.rowcount > 0
