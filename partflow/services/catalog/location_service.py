# partflow/services/catalog/location_service.py

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.exceptions import NotFoundError, ValidationFailure
from partflow.dao.locations_dao import LocationsDAO
from partflow.domain.catalog import create_location as build_location
from partflow.domain.entities import Location
from partflow.domain.exceptions import DomainValidationError
from partflow.schemas.catalog.location_schemas import LocationCreate, LocationUpdate
from partflow.utils.logger import get_logger

logger = get_logger(__name__)


def _location_not_found() -> NotFoundError:
    return NotFoundError("Location not found", ErrorCode.LOCATION_NOT_FOUND)


async def create_location(db: AsyncSession, payload: LocationCreate) -> Location:
    try:
        location = build_location(payload.model_dump())
    except DomainValidationError as e:
        raise ValidationFailure(str(e), details={"field": e.field})

    location = await LocationsDAO(db).create(location)
    await db.commit()

    logger.info(
        "Location created",
        extra={"location_id": location.id, "code": location.code},
    )
    return location


async def list_locations(db: AsyncSession) -> List[Location]:
    return await LocationsDAO(db).find_all()


async def get_location(db: AsyncSession, location_id: str) -> Location:
    location = await LocationsDAO(db).find_by_id(location_id)
    if not location:
        raise _location_not_found()
    return location


async def update_location(
    db: AsyncSession,
    location_id: str,
    payload: LocationUpdate,
) -> Location:
    updated = await LocationsDAO(db).update(
        location_id, payload.model_dump(exclude_unset=True)
    )
    if not updated:
        raise _location_not_found()
    await db.commit()
    return updated


async def delete_location(db: AsyncSession, location_id: str) -> None:
    deleted = await LocationsDAO(db).delete(location_id)
    if not deleted:
        raise _location_not_found()
    await db.commit()
    logger.info("Location deleted", extra={"location_id": location_id})
