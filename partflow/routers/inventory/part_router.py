from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.db import get_db
from partflow.domain.entities import InventoryChange, Part
from partflow.schemas.inventory.inventory_change_schemas import InventoryMutationRequest
from partflow.schemas.inventory.part_schemas import (
    PartCreate,
    PartUpdate,
    QuantityOverwrite,
)
from partflow.services.inventory.inventory_mutation_service import apply_inventory_mutation
from partflow.services.inventory.part_service import (
    create_part,
    delete_part,
    get_inventory_history,
    get_part,
    overwrite_quantity,
    search_parts,
    update_part,
)
from partflow.utils.check_admin import require_admin_key
from partflow.utils.logger import get_logger
from partflow.utils.response import DataResponse, ListResponse, data_response, list_response

router = APIRouter(prefix="/api/parts", tags=["Parts"])
logger = get_logger(__name__)


@router.get("", response_model=ListResponse[Part])
async def list_parts_api(
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    location_id: Optional[str] = Query(None, alias="locationId"),
    low_stock: bool = Query(False, alias="lowStock"),
):
    logger.debug(
        "List parts",
        extra={
            "search": search,
            "category_id": category_id,
            "location_id": location_id,
            "low_stock": low_stock,
        },
    )

    parts = await search_parts(
        db,
        search=search,
        category_id=category_id,
        location_id=location_id,
        low_stock=low_stock,
    )
    return list_response(parts)


@router.get("/{part_id}", response_model=DataResponse[Part])
async def get_part_api(part_id: str, db: AsyncSession = Depends(get_db)):
    return data_response(await get_part(db, part_id))


@router.post("", response_model=DataResponse[Part], status_code=status.HTTP_201_CREATED)
async def create_part_api(payload: PartCreate, db: AsyncSession = Depends(get_db)):
    logger.info("Create part", extra={"part_name": payload.name})

    part = await create_part(db, payload)
    return data_response(part)


@router.put("/{part_id}", response_model=DataResponse[Part])
async def update_part_api(
    part_id: str,
    payload: PartUpdate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Update part", extra={"part_id": part_id})

    part = await update_part(db, part_id, payload)
    return data_response(part)


@router.delete("/{part_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_part_api(part_id: str, db: AsyncSession = Depends(get_db)):
    await delete_part(db, part_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------- INVENTORY ----------------
@router.post("/{part_id}/inventory", response_model=DataResponse[Part])
async def record_inventory_change_api(
    part_id: str,
    payload: InventoryMutationRequest,
    db: AsyncSession = Depends(get_db),
):
    part, _ = await apply_inventory_mutation(
        db,
        part_id,
        delta=payload.delta,
        reason=payload.reason,
        operator=payload.operator,
    )
    return data_response(part)


@router.get("/{part_id}/inventory-history", response_model=ListResponse[InventoryChange])
async def inventory_history_api(part_id: str, db: AsyncSession = Depends(get_db)):
    return list_response(await get_inventory_history(db, part_id))


@router.put(
    "/{part_id}/quantity",
    response_model=DataResponse[Part],
    dependencies=[Depends(require_admin_key)],
)
async def overwrite_quantity_api(
    part_id: str,
    payload: QuantityOverwrite,
    db: AsyncSession = Depends(get_db),
):
    part = await overwrite_quantity(db, part_id, payload.quantity, reason=payload.reason)
    return data_response(part)
