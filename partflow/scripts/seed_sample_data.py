"""Fill an empty database with a handful of categories, boxes and parts.

    python -m partflow.scripts.seed_sample_data
"""

import asyncio

from partflow.core.config import IS_PRODUCTION
from partflow.core.db import AsyncSessionLocal, engine, init_models
from partflow.dao import CategoriesDAO, LocationsDAO, PartsDAO
from partflow.domain.catalog import create_category, create_location
from partflow.domain.inventory import create_part
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

SAMPLE_CATEGORIES = [
    {"name": "Fasteners", "description": "Bolts, nuts, washers"},
    {"name": "Bolts", "parent": "Fasteners", "description": "All kinds of bolts"},
    {"name": "Nuts", "parent": "Fasteners", "description": "All kinds of nuts"},
    {"name": "Transmission", "description": "Gears, bearings, belts"},
    {"name": "Bearings", "parent": "Transmission", "description": "All kinds of bearings"},
    {"name": "Electronics", "description": "Resistors, capacitors, chips"},
]

SAMPLE_LOCATIONS = [
    {"code": "A1", "name": "Toolbox A1", "description": "Ground floor, left of the bench"},
    {"code": "A2", "name": "Toolbox A2", "description": "Ground floor, right of the bench"},
    {"code": "B1", "name": "Shelf B1", "description": "Upstairs store, first row"},
    {"code": "B2", "name": "Shelf B2", "description": "Upstairs store, second row"},
]

SAMPLE_PARTS = [
    {
        "name": "M6 x 20 bolt",
        "specification": "Length 20mm, diameter 6mm",
        "material": "Stainless steel 304",
        "quantity": 150,
        "min_quantity": 20,
        "tags": ["fastener", "bolt", "stainless"],
        "category": "Bolts",
        "location": "A1",
    },
    {
        "name": "M8 x 30 bolt",
        "specification": "Length 30mm, diameter 8mm",
        "material": "Carbon steel",
        "quantity": 80,
        "min_quantity": 15,
        "tags": ["fastener", "bolt", "carbon steel"],
        "category": "Bolts",
        "location": "A1",
    },
    {
        "name": "M6 nut",
        "specification": "Inner diameter 6mm",
        "material": "Stainless steel 304",
        "quantity": 200,
        "min_quantity": 30,
        "tags": ["fastener", "nut"],
        "category": "Nuts",
        "location": "A2",
    },
    {
        "name": "6001 bearing",
        "specification": "ID 12mm, OD 28mm",
        "material": "Alloy steel",
        "quantity": 25,
        "min_quantity": 5,
        "tags": ["transmission", "bearing"],
        "category": "Bearings",
        "location": "B1",
    },
    {
        "name": "Arduino Nano",
        "specification": "ATmega328P",
        "material": "PCB",
        "quantity": 10,
        "min_quantity": 2,
        "tags": ["electronics", "dev board", "Arduino"],
        "category": "Electronics",
        "location": "B2",
    },
    {
        "name": "LED 5mm red",
        "specification": "5mm through-hole",
        "material": "Plastic",
        "quantity": 500,
        "min_quantity": 50,
        "tags": ["electronics", "LED"],
        "category": "Electronics",
        "location": "B2",
    },
]


async def seed_sample_data() -> bool:
    """Insert the samples unless parts already exist. Returns True when it wrote anything."""
    async with AsyncSessionLocal() as db:
        parts = PartsDAO(db)
        if await parts.find_all():
            logger.info("Database already has parts; skipping seed")
            return False

        categories = CategoriesDAO(db)
        category_ids = {}
        for sample in SAMPLE_CATEGORIES:
            category = create_category(
                {
                    "name": sample["name"],
                    "description": sample["description"],
                    "parent_id": category_ids.get(sample.get("parent")),
                }
            )
            await categories.create(category)
            category_ids[category.name] = category.id

        locations = LocationsDAO(db)
        location_ids = {}
        for sample in SAMPLE_LOCATIONS:
            location = await locations.create(create_location(sample))
            location_ids[location.code] = location.id

        for sample in SAMPLE_PARTS:
            await parts.create(
                create_part(
                    {
                        **sample,
                        "category_id": category_ids[sample["category"]],
                        "location_id": location_ids[sample["location"]],
                    }
                )
            )

        await db.commit()

    logger.info(
        "Sample data inserted",
        extra={
            "categories": len(SAMPLE_CATEGORIES),
            "locations": len(SAMPLE_LOCATIONS),
            "parts": len(SAMPLE_PARTS),
        },
    )
    return True


async def main():
    if not IS_PRODUCTION:
        await init_models()
    await seed_sample_data()
    await engine.dispose()


if __name__ == "__main__":
    from partflow.core.logging import setup_logging

    setup_logging()
    asyncio.run(main())
