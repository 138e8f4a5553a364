# partflow/services/data_transfer/export_service.py

import csv
import io
from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from partflow.dao.categories_dao import CategoriesDAO
from partflow.dao.locations_dao import LocationsDAO
from partflow.dao.parts_dao import PartsDAO
from partflow.domain.entities import CamelModel
from partflow.utils.logger import get_logger
from partflow.utils.timestamps import utc_now_iso

logger = get_logger(__name__)

EXPORT_VERSION = "1.0"
# spreadsheet apps need the BOM to pick up UTF-8
CSV_BOM = "\ufeff"
TAG_SEPARATOR = ";"

PART_HEADERS = [
    "ID",
    "Name",
    "Specification",
    "Material",
    "Category ID",
    "Location ID",
    "Quantity",
    "Min Quantity",
    "Tags",
    "Created At",
    "Updated At",
]
CATEGORY_HEADERS = ["ID", "Name", "Description", "Parent ID", "Created At", "Updated At"]
LOCATION_HEADERS = ["ID", "Code", "Name", "Description", "Created At", "Updated At"]


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def _to_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(v) for v in row])
    return CSV_BOM + buffer.getvalue()


def _dump(items: Iterable[CamelModel]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def _snapshot(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "exportDate": utc_now_iso(),
        "version": EXPORT_VERSION,
        "totalCount": len(items),
        "data": items,
    }


# =====================================================
# CSV
# =====================================================
async def parts_csv(db: AsyncSession) -> str:
    parts = await PartsDAO(db).search()
    logger.info("Exporting parts as CSV", extra={"count": len(parts)})
    return _to_csv(
        PART_HEADERS,
        (
            [
                p.id,
                p.name,
                p.specification,
                p.material,
                p.category_id,
                p.location_id,
                p.quantity,
                p.min_quantity,
                TAG_SEPARATOR.join(p.tags),
                p.created_at,
                p.updated_at,
            ]
            for p in parts
        ),
    )


async def categories_csv(db: AsyncSession) -> str:
    categories = await CategoriesDAO(db).find_all()
    return _to_csv(
        CATEGORY_HEADERS,
        (
            [c.id, c.name, c.description, c.parent_id, c.created_at, c.updated_at]
            for c in categories
        ),
    )


async def locations_csv(db: AsyncSession) -> str:
    locations = await LocationsDAO(db).find_all()
    return _to_csv(
        LOCATION_HEADERS,
        (
            [l.id, l.code, l.name, l.description, l.created_at, l.updated_at]
            for l in locations
        ),
    )


# =====================================================
# JSON
# =====================================================
async def parts_json(db: AsyncSession) -> Dict[str, Any]:
    return _snapshot(_dump(await PartsDAO(db).search()))


async def categories_json(db: AsyncSession) -> Dict[str, Any]:
    return _snapshot(_dump(await CategoriesDAO(db).find_all()))


async def locations_json(db: AsyncSession) -> Dict[str, Any]:
    return _snapshot(_dump(await LocationsDAO(db).find_all()))


async def full_snapshot(db: AsyncSession) -> Dict[str, Any]:
    parts = _dump(await PartsDAO(db).search())
    categories = _dump(await CategoriesDAO(db).find_all())
    locations = _dump(await LocationsDAO(db).find_all())

    logger.info(
        "Exporting full snapshot",
        extra={
            "parts": len(parts),
            "categories": len(categories),
            "locations": len(locations),
        },
    )
    return {
        "exportDate": utc_now_iso(),
        "version": EXPORT_VERSION,
        "data": {
            "parts": {"count": len(parts), "items": parts},
            "categories": {"count": len(categories), "items": categories},
            "locations": {"count": len(locations), "items": locations},
        },
    }
