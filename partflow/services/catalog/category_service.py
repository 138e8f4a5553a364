# partflow/services/catalog/category_service.py

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.exceptions import NotFoundError, ValidationFailure
from partflow.dao.categories_dao import CategoriesDAO
from partflow.domain.catalog import (
    build_category_path,
    build_category_tree,
    create_category as build_category,
    would_create_cycle,
)
from partflow.domain.entities import Category, CategoryNode
from partflow.domain.exceptions import DomainValidationError
from partflow.schemas.catalog.category_schemas import CategoryCreate, CategoryUpdate
from partflow.utils.logger import get_logger

logger = get_logger(__name__)


def _category_not_found() -> NotFoundError:
    return NotFoundError("Category not found", ErrorCode.CATEGORY_NOT_FOUND)


# ---------------- CREATE ----------------
async def create_category(db: AsyncSession, payload: CategoryCreate) -> Category:
    try:
        category = build_category(payload.model_dump())
    except DomainValidationError as e:
        raise ValidationFailure(str(e), details={"field": e.field})

    await CategoriesDAO(db).create(category)
    await db.commit()

    logger.info("Category created", extra={"category_id": category.id})
    return category


# ---------------- LIST ----------------
async def list_categories(
    db: AsyncSession,
    *,
    parent_id: Optional[str] = None,
    roots: bool = False,
) -> List[Category]:
    dao = CategoriesDAO(db)
    if roots:
        return await dao.find_roots()
    if parent_id:
        return await dao.find_children(parent_id)
    return await dao.find_all()


async def get_category_tree(db: AsyncSession) -> List[CategoryNode]:
    return build_category_tree(await CategoriesDAO(db).find_all())


# ---------------- GET ----------------
async def get_category(db: AsyncSession, category_id: str) -> Category:
    category = await CategoriesDAO(db).find_by_id(category_id)
    if not category:
        raise _category_not_found()
    return category


async def get_category_path(db: AsyncSession, category_id: str) -> List[str]:
    dao = CategoriesDAO(db)
    if not await dao.find_by_id(category_id):
        raise _category_not_found()
    return build_category_path(await dao.find_all(), category_id)


# ---------------- UPDATE ----------------
async def update_category(
    db: AsyncSession,
    category_id: str,
    payload: CategoryUpdate,
) -> Category:
    dao = CategoriesDAO(db)
    if not await dao.find_by_id(category_id):
        raise _category_not_found()

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") is None:
        updates.pop("name", None)
    elif not updates["name"].strip():
        raise ValidationFailure("Category name is required", details={"field": "name"})

    new_parent_id = updates.get("parent_id")
    if new_parent_id and would_create_cycle(await dao.find_all(), category_id, new_parent_id):
        raise ValidationFailure(
            "Category cannot be moved under itself or one of its descendants",
            ErrorCode.CATEGORY_CYCLE,
            {"category_id": category_id, "parent_id": new_parent_id},
        )

    updated = await dao.update(category_id, updates)
    await db.commit()
    return updated


# ---------------- DELETE ----------------
async def delete_category(db: AsyncSession, category_id: str) -> None:
    # children keep their parent_id, parts keep their category_id
    deleted = await CategoriesDAO(db).delete(category_id)
    if not deleted:
        raise _category_not_found()
    await db.commit()
    logger.info("Category deleted", extra={"category_id": category_id})
