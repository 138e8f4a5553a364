# partflow/dao/locations_dao.py

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.constants.error_codes import ErrorCode
from partflow.core.exceptions import ConflictError, ValidationFailure
from partflow.domain.catalog import normalize_location_code
from partflow.domain.entities import Location
from partflow.models.catalog.location_models import LocationModel
from partflow.utils.timestamps import utc_now_iso

UPDATABLE_FIELDS = ("code", "name", "description")


def _map_location(row: LocationModel) -> Location:
    return Location(
        id=row.id,
        code=row.code,
        name=row.name,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class LocationsDAO:
    """Storage boxes. Codes are unique once uppercased; checked before every write."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, location_id: str) -> Optional[LocationModel]:
        stmt = (
            select(LocationModel)
            .where(LocationModel.id == location_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def _ensure_code_free(self, code: str, *, exclude_id: Optional[str] = None) -> None:
        stmt = select(LocationModel.id).where(LocationModel.code == code)
        if exclude_id:
            stmt = stmt.where(LocationModel.id != exclude_id)
        if await self.db.scalar(stmt):
            raise ConflictError(
                f"Location code {code} already exists",
                ErrorCode.LOCATION_CODE_EXISTS,
                {"code": code},
            )

    async def create(self, location: Location) -> Location:
        code = normalize_location_code(location.code)
        await self._ensure_code_free(code)

        self.db.add(
            LocationModel(
                id=location.id,
                code=code,
                name=location.name,
                description=location.description,
                created_at=location.created_at,
                updated_at=location.updated_at,
            )
        )
        await self.db.flush()
        return location.model_copy(update={"code": code})

    async def find_all(self) -> List[Location]:
        stmt = (
            select(LocationModel)
            .order_by(LocationModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        rows = (await self.db.execute(stmt)).scalars().all()
        return [_map_location(r) for r in rows]

    async def find_by_id(self, location_id: str) -> Optional[Location]:
        row = await self._get_row(location_id)
        return _map_location(row) if row else None

    async def find_by_code(self, code: str) -> Optional[Location]:
        stmt = select(LocationModel).where(
            LocationModel.code == normalize_location_code(code)
        )
        row = (await self.db.execute(stmt)).scalar_one_or_none()
        return _map_location(row) if row else None

    async def update(self, location_id: str, fields: Dict[str, Any]) -> Optional[Location]:
        row = await self._get_row(location_id)
        if row is None:
            return None

        if fields.get("code") is not None:
            fields = {**fields, "code": normalize_location_code(fields["code"])}
            if not fields["code"]:
                raise ValidationFailure(
                    "Location code is required", details={"field": "code"}
                )
            await self._ensure_code_free(fields["code"], exclude_id=location_id)

        for field, value in fields.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "code" and value is None:
                continue
            setattr(row, field, value)

        row.updated_at = utc_now_iso()
        await self.db.flush()
        return _map_location(row)

    async def delete(self, location_id: str) -> bool:
        result = await self.db.execute(
            delete(LocationModel).where(LocationModel.id == location_id)
        )
        return result.rowcount > 0
