# partflow/constants/inventory_change_type.py

from enum import Enum


class InventoryChangeType(str, Enum):
    IN = "in"
    OUT = "out"
