# partflow/services/data_transfer/import_service.py

import csv
import io
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from partflow.core.exceptions import AppException, ValidationFailure
from partflow.dao.categories_dao import CategoriesDAO
from partflow.dao.locations_dao import LocationsDAO
from partflow.dao.parts_dao import PartsDAO
from partflow.domain.catalog import create_category, create_location
from partflow.domain.exceptions import DomainValidationError
from partflow.domain.inventory import create_part
from partflow.schemas.catalog.category_schemas import CategoryImportItem
from partflow.schemas.catalog.location_schemas import LocationImportItem
from partflow.schemas.data_transfer.transfer_schemas import (
    FullImportRequest,
    FullImportResult,
    ImportResult,
)
from partflow.schemas.inventory.part_schemas import PartImportItem
from partflow.services.data_transfer.export_service import CSV_BOM, TAG_SEPARATOR
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

ItemWriter = Callable[[AsyncSession, BaseModel], Awaitable[None]]


def _describe_validation(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'item'}: {err['msg']}"
        for err in e.errors()
    )


# =====================================================
# ITEM WRITERS
# =====================================================
async def _write_part(db: AsyncSession, item: PartImportItem) -> None:
    await PartsDAO(db).create(create_part(item.model_dump()))


async def _write_category(db: AsyncSession, item: CategoryImportItem) -> None:
    await CategoriesDAO(db).create(create_category(item.model_dump()))


async def _write_location(db: AsyncSession, item: LocationImportItem) -> None:
    await LocationsDAO(db).create(create_location(item.model_dump()))


async def _import_items(
    db: AsyncSession,
    items: List[Dict[str, Any]],
    schema: Type[BaseModel],
    writer: ItemWriter,
    label: str,
) -> ImportResult:
    """Insert items one by one; each runs in its own savepoint so a bad one fails alone."""
    result = ImportResult()

    for index, raw in enumerate(items, start=1):
        name = raw.get("name") or raw.get("code")
        prefix = f'{label} "{name}"' if name else f"{label} #{index}"

        try:
            item = schema.model_validate(raw)
        except ValidationError as e:
            result.failed += 1
            result.errors.append(f"{prefix}: {_describe_validation(e)}")
            continue

        try:
            async with db.begin_nested():
                await writer(db, item)
        except DomainValidationError as e:
            message = str(e)
        except AppException as e:
            message = e.detail
        except IntegrityError:
            message = "conflicts with an existing record"
        else:
            result.success += 1
            continue

        result.failed += 1
        result.errors.append(f"{prefix}: {message}")

    return result


def _log_result(label: str, result: ImportResult) -> None:
    logger.info(
        "Import finished",
        extra={"entity": label, "success": result.success, "failed": result.failed},
    )


# =====================================================
# JSON
# =====================================================
async def import_parts(db: AsyncSession, items: List[Dict[str, Any]]) -> ImportResult:
    result = await _import_items(db, items, PartImportItem, _write_part, "Part")
    await db.commit()
    _log_result("parts", result)
    return result


async def import_categories(db: AsyncSession, items: List[Dict[str, Any]]) -> ImportResult:
    result = await _import_items(
        db, items, CategoryImportItem, _write_category, "Category"
    )
    await db.commit()
    _log_result("categories", result)
    return result


async def import_locations(db: AsyncSession, items: List[Dict[str, Any]]) -> ImportResult:
    result = await _import_items(
        db, items, LocationImportItem, _write_location, "Location"
    )
    await db.commit()
    _log_result("locations", result)
    return result


async def import_snapshot(db: AsyncSession, payload: FullImportRequest) -> FullImportResult:
    """Categories first, then locations, then parts, so references resolve in order."""
    data = payload.data

    def _items(section) -> List[Dict[str, Any]]:
        return section.items if section else []

    categories = await _import_items(
        db, _items(data.categories), CategoryImportItem, _write_category, "Category"
    )
    locations = await _import_items(
        db, _items(data.locations), LocationImportItem, _write_location, "Location"
    )
    parts = await _import_items(
        db, _items(data.parts), PartImportItem, _write_part, "Part"
    )
    await db.commit()

    for label, result in (
        ("categories", categories),
        ("locations", locations),
        ("parts", parts),
    ):
        _log_result(label, result)

    return FullImportResult(categories=categories, locations=locations, parts=parts)


# =====================================================
# CSV
# =====================================================
def _optional_int(value: str) -> Optional[int]:
    value = value.strip()
    return int(value) if value else None


def _row_to_part(values: List[str]) -> Dict[str, Any]:
    # column order matches the parts CSV export
    values = values + [""] * (9 - len(values))
    part_id, name, specification, material, category_id, location_id, quantity, min_quantity, tags = (
        v.strip() for v in values[:9]
    )
    return {
        "id": part_id or None,
        "name": name,
        "specification": specification or None,
        "material": material or None,
        "categoryId": category_id or None,
        "locationId": location_id or None,
        "quantity": _optional_int(quantity) or 0,
        "minQuantity": _optional_int(min_quantity),
        "tags": [t for t in tags.split(TAG_SEPARATOR) if t],
    }


async def import_parts_csv(db: AsyncSession, csv_data: str) -> ImportResult:
    if not csv_data or not csv_data.strip():
        raise ValidationFailure("CSV data is empty")

    rows = [
        row
        for row in csv.reader(io.StringIO(csv_data.lstrip(CSV_BOM)))
        if any(cell.strip() for cell in row)
    ]
    if len(rows) < 2:
        raise ValidationFailure("CSV data must contain a header row and at least one data row")

    result = ImportResult()
    items: List[Dict[str, Any]] = []

    # header skipped; rows are numbered as in the file
    for line_no, values in enumerate(rows[1:], start=2):
        if len(values) < 2:
            continue
        try:
            items.append(_row_to_part(values))
        except ValueError as e:
            result.failed += 1
            result.errors.append(f"Row {line_no}: {e}")

    parsed = await _import_items(db, items, PartImportItem, _write_part, "Part")
    await db.commit()

    result.success += parsed.success
    result.failed += parsed.failed
    result.errors.extend(parsed.errors)
    _log_result("parts_csv", result)
    return result
