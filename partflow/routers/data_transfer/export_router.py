from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.db import get_db
from partflow.services.data_transfer import export_service
from partflow.utils.timestamps import epoch_millis

router = APIRouter(prefix="/api/export", tags=["Export"])


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _csv(content: str, entity: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(f"{entity}_{epoch_millis()}.csv"),
    )


def _json(content: dict, name: str) -> JSONResponse:
    return JSONResponse(
        content=content,
        headers=_attachment(f"{name}_{epoch_millis()}.json"),
    )


@router.get("/parts/csv")
async def export_parts_csv(db: AsyncSession = Depends(get_db)):
    return _csv(await export_service.parts_csv(db), "parts")


@router.get("/parts/json")
async def export_parts_json(db: AsyncSession = Depends(get_db)):
    return _json(await export_service.parts_json(db), "parts")


@router.get("/categories/csv")
async def export_categories_csv(db: AsyncSession = Depends(get_db)):
    return _csv(await export_service.categories_csv(db), "categories")


@router.get("/categories/json")
async def export_categories_json(db: AsyncSession = Depends(get_db)):
    return _json(await export_service.categories_json(db), "categories")


@router.get("/locations/csv")
async def export_locations_csv(db: AsyncSession = Depends(get_db)):
    return _csv(await export_service.locations_csv(db), "locations")


@router.get("/locations/json")
async def export_locations_json(db: AsyncSession = Depends(get_db)):
    return _json(await export_service.locations_json(db), "locations")


@router.get("/all/json")
async def export_all_json(db: AsyncSession = Depends(get_db)):
    return _json(await export_service.full_snapshot(db), "partflow_backup")
