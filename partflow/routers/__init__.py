# partflow/routers/__init__.py

from .inventory.part_router import router as part_router
from .inventory.inventory_router import router as inventory_router

from .catalog.category_router import router as category_router
from .catalog.location_router import router as location_router

from .data_transfer.export_router import router as export_router
from .data_transfer.import_router import router as import_router


__all__ = [
    "part_router",
    "inventory_router",

    "category_router",
    "location_router",

    "export_router",
    "import_router",
]
