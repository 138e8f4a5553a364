# partflow/dao/categories_dao.py

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.domain.entities import Category
from partflow.models.catalog.category_models import CategoryModel
from partflow.utils.timestamps import utc_now_iso

UPDATABLE_FIELDS = ("name", "description", "parent_id", "icon")


def _map_category(row: CategoryModel) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        description=row.description,
        parent_id=row.parent_id,
        icon=row.icon,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CategoriesDAO:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, category_id: str) -> Optional[CategoryModel]:
        stmt = (
            select(CategoryModel)
            .where(CategoryModel.id == category_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def _list(self, *filters, order_by) -> List[Category]:
        stmt = (
            select(CategoryModel)
            .where(*filters)
            .order_by(order_by)
            .execution_options(populate_existing=True)
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [_map_category(r) for r in rows]

    async def create(self, category: Category) -> Category:
        self.db.add(
            CategoryModel(
                id=category.id,
                name=category.name,
                description=category.description,
                parent_id=category.parent_id,
                icon=category.icon,
                created_at=category.created_at,
                updated_at=category.updated_at,
            )
        )
        await self.db.flush()
        return category

    async def find_all(self) -> List[Category]:
        return await self._list(order_by=CategoryModel.created_at.desc())

    async def find_by_id(self, category_id: str) -> Optional[Category]:
        row = await self._get_row(category_id)
        return _map_category(row) if row else None

    async def find_roots(self) -> List[Category]:
        return await self._list(
            CategoryModel.parent_id.is_(None),
            order_by=CategoryModel.name.asc(),
        )

    async def find_children(self, parent_id: str) -> List[Category]:
        return await self._list(
            CategoryModel.parent_id == parent_id,
            order_by=CategoryModel.name.asc(),
        )

    async def update(self, category_id: str, fields: Dict[str, Any]) -> Optional[Category]:
        row = await self._get_row(category_id)
        if row is None:
            return None

        for field, value in fields.items():
            if field in UPDATABLE_FIELDS:
                setattr(row, field, value)

        row.updated_at = utc_now_iso()
        await self.db.flush()
        return _map_category(row)

    async def delete(self, category_id: str) -> bool:
        result = await self.db.execute(
            delete(CategoryModel).where(CategoryModel.id == category_id)
        )
        return result.rowcount > 0
