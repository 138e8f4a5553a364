from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.db import get_db
from partflow.domain.entities import Category, CategoryNode
from partflow.schemas.catalog.category_schemas import CategoryCreate, CategoryUpdate
from partflow.services.catalog.category_service import (
    create_category,
    delete_category,
    get_category,
    get_category_path,
    get_category_tree,
    list_categories,
    update_category,
)
from partflow.utils.logger import get_logger
from partflow.utils.response import DataResponse, ListResponse, data_response, list_response

router = APIRouter(prefix="/api/categories", tags=["Categories"])
logger = get_logger(__name__)


@router.get("", response_model=ListResponse[Category])
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    parent_id: Optional[str] = Query(None, alias="parentId"),
    roots: bool = Query(False),
):
    categories = await list_categories(db, parent_id=parent_id, roots=roots)
    return list_response(categories)


# declared before /{category_id} so "tree" is not read as an id
@router.get("/tree", response_model=DataResponse[List[CategoryNode]])
async def category_tree_api(db: AsyncSession = Depends(get_db)):
    return data_response(await get_category_tree(db))


@router.get("/{category_id}", response_model=DataResponse[Category])
async def get_category_api(category_id: str, db: AsyncSession = Depends(get_db)):
    return data_response(await get_category(db, category_id))


@router.get("/{category_id}/path", response_model=DataResponse[List[str]])
async def category_path_api(category_id: str, db: AsyncSession = Depends(get_db)):
    return data_response(await get_category_path(db, category_id))


@router.post("", response_model=DataResponse[Category], status_code=status.HTTP_201_CREATED)
async def create_category_api(payload: CategoryCreate, db: AsyncSession = Depends(get_db)):
    logger.info("Create category", extra={"category_name": payload.name})
    return data_response(await create_category(db, payload))


@router.put("/{category_id}", response_model=DataResponse[Category])
async def update_category_api(
    category_id: str,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Update category", extra={"category_id": category_id})
    return data_response(await update_category(db, category_id, payload))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_api(category_id: str, db: AsyncSession = Depends(get_db)):
    await delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
