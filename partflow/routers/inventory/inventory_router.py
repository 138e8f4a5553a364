from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.config import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from partflow.core.db import get_db
from partflow.domain.entities import InventoryChange
from partflow.services.inventory.ledger_service import (
    delete_change,
    list_changes,
    list_recent_changes,
)
from partflow.utils.response import ListResponse, list_response

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


@router.get("", response_model=ListResponse[InventoryChange])
async def list_changes_api(db: AsyncSession = Depends(get_db)):
    return list_response(await list_changes(db))


@router.get("/recent", response_model=ListResponse[InventoryChange])
async def recent_changes_api(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(HISTORY_DEFAULT_LIMIT, ge=1, le=HISTORY_MAX_LIMIT),
):
    return list_response(await list_recent_changes(db, limit))


@router.delete("/{change_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_change_api(change_id: str, db: AsyncSession = Depends(get_db)):
    await delete_change(db, change_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
