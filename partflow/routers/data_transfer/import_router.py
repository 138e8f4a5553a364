from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.db import get_db
from partflow.schemas.data_transfer.transfer_schemas import (
    CsvImportRequest,
    FullImportRequest,
    FullImportResult,
    ImportResult,
    JsonImportRequest,
)
from partflow.services.data_transfer import import_service
from partflow.utils.logger import get_logger

router = APIRouter(prefix="/api/import", tags=["Import"])
logger = get_logger(__name__)


@router.post("/parts/json", response_model=ImportResult)
async def import_parts_json(payload: JsonImportRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Import parts (json)", extra={"count": len(payload.data)})
    return await import_service.import_parts(db, payload.data)


@router.post("/parts/csv", response_model=ImportResult)
async def import_parts_csv(payload: CsvImportRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Import parts (csv)")
    return await import_service.import_parts_csv(db, payload.csv_data)


@router.post("/categories/json", response_model=ImportResult)
async def import_categories_json(payload: JsonImportRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Import categories", extra={"count": len(payload.data)})
    return await import_service.import_categories(db, payload.data)


@router.post("/locations/json", response_model=ImportResult)
async def import_locations_json(payload: JsonImportRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Import locations", extra={"count": len(payload.data)})
    return await import_service.import_locations(db, payload.data)


@router.post("/all/json", response_model=FullImportResult)
async def import_all_json(payload: FullImportRequest, db: AsyncSession = Depends(get_db)):
    logger.info("Import full snapshot")
    return await import_service.import_snapshot(db, payload)
