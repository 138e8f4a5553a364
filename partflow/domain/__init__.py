from partflow.domain.entities import (
    CamelModel,
    Category,
    CategoryNode,
    InventoryChange,
    Location,
    Part,
    Tag,
)
from partflow.domain.exceptions import DomainValidationError
from partflow.domain.inventory import (
    apply_inventory_change,
    create_inventory_change,
    create_part,
    is_low_stock,
)
from partflow.domain.catalog import (
    build_category_path,
    build_category_tree,
    create_category,
    create_location,
    create_tag,
)

__all__ = [
    "CamelModel",
    "Category",
    "CategoryNode",
    "InventoryChange",
    "Location",
    "Part",
    "Tag",
    "DomainValidationError",
    "apply_inventory_change",
    "create_inventory_change",
    "create_part",
    "is_low_stock",
    "build_category_path",
    "build_category_tree",
    "create_category",
    "create_location",
    "create_tag",
]
