# partflow/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # parts / ledger
    PART_NOT_FOUND = "PART_NOT_FOUND"
    INVENTORY_CHANGE_NOT_FOUND = "INVENTORY_CHANGE_NOT_FOUND"
    QUANTITY_NOT_EDITABLE = "QUANTITY_NOT_EDITABLE"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"

    # categories
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_CYCLE = "CATEGORY_CYCLE"

    # locations
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    LOCATION_CODE_EXISTS = "LOCATION_CODE_EXISTS"
