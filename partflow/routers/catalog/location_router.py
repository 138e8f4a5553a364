from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.db import get_db
from partflow.domain.entities import Location
from partflow.schemas.catalog.location_schemas import LocationCreate, LocationUpdate
from partflow.services.catalog.location_service import (
    create_location,
    delete_location,
    get_location,
    list_locations,
    update_location,
)
from partflow.utils.logger import get_logger
from partflow.utils.response import DataResponse, ListResponse, data_response, list_response

router = APIRouter(prefix="/api/locations", tags=["Locations"])
logger = get_logger(__name__)


@router.get("", response_model=ListResponse[Location])
async def list_locations_api(db: AsyncSession = Depends(get_db)):
    return list_response(await list_locations(db))


@router.get("/{location_id}", response_model=DataResponse[Location])
async def get_location_api(location_id: str, db: AsyncSession = Depends(get_db)):
    return data_response(await get_location(db, location_id))


@router.post("", response_model=DataResponse[Location], status_code=status.HTTP_201_CREATED)
async def create_location_api(payload: LocationCreate, db: AsyncSession = Depends(get_db)):
    logger.info("Create location", extra={"code": payload.code})
    return data_response(await create_location(db, payload))


@router.put("/{location_id}", response_model=DataResponse[Location])
async def update_location_api(
    location_id: str,
    payload: LocationUpdate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Update location", extra={"location_id": location_id})
    return data_response(await update_location(db, location_id, payload))


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location_api(location_id: str, db: AsyncSession = Depends(get_db)):
    await delete_location(db, location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
