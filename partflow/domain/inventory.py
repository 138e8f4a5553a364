"""Pure constructors and transformations for parts and their stock ledger.

Nothing here performs I/O; callers persist the returned objects.
"""

import uuid
from typing import Any, Mapping

from partflow.constants.inventory_change_type import InventoryChangeType
from partflow.domain.entities import InventoryChange, Part
from partflow.domain.exceptions import DomainValidationError
from partflow.utils.timestamps import utc_now_iso

# SQLite INTEGER is a signed 64-bit value
MAX_STOCK_QUANTITY = 2**63 - 1


def new_id() -> str:
    return str(uuid.uuid4())


def _non_negative(field: str, value: Any) -> None:
    if value is not None and value < 0:
        raise DomainValidationError(field, f"{field} must be >= 0")


def create_part(data: Mapping[str, Any]) -> Part:
    """Build a new Part from client input.

    ``quantity`` defaults to 0 and ``tags`` to an empty list; ``id`` is kept
    when supplied (imports), otherwise a fresh one is assigned. Both
    timestamps receive the same instant.
    """
    name = data.get("name")
    if not name or not str(name).strip():
        raise DomainValidationError("name", "Part name is required")

    quantity = data.get("quantity")
    quantity = 0 if quantity is None else quantity
    _non_negative("quantity", quantity)
    _non_negative("min_quantity", data.get("min_quantity"))

    now = utc_now_iso()
    return Part(
        id=data.get("id") or new_id(),
        name=name,
        specification=data.get("specification"),
        material=data.get("material"),
        image_url=data.get("image_url"),
        tags=list(data.get("tags") or []),
        category_id=data.get("category_id"),
        location_id=data.get("location_id"),
        quantity=quantity,
        min_quantity=data.get("min_quantity"),
        created_at=now,
        updated_at=now,
    )


def change_type_for(delta: int) -> InventoryChangeType:
    # zero falls to "out"
    return InventoryChangeType.IN if delta > 0 else InventoryChangeType.OUT


def delta_from(change_type: str, quantity: int) -> int:
    return quantity if change_type == InventoryChangeType.IN.value else -quantity


def create_inventory_change(data: Mapping[str, Any]) -> InventoryChange:
    part_id = data.get("part_id")
    if not part_id:
        raise DomainValidationError("part_id", "Inventory change requires a part id")

    delta = data.get("delta")
    if delta is None:
        raise DomainValidationError("delta", "Inventory change requires a delta")
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise DomainValidationError("delta", "delta must be an integer")

    return InventoryChange(
        id=data.get("id") or new_id(),
        part_id=part_id,
        delta=delta,
        change_type=change_type_for(delta).value,
        quantity=abs(delta),
        reason=data.get("reason"),
        operator=data.get("operator"),
        timestamp=utc_now_iso(),
    )


def apply_inventory_change(part: Part, change: InventoryChange) -> Part:
    """Return a copy of ``part`` with the change applied, clamped at zero."""
    next_quantity = part.quantity + change.delta
    if next_quantity > MAX_STOCK_QUANTITY:
        raise DomainValidationError("delta", "Resulting quantity exceeds the storable maximum")
    return part.model_copy(
        update={
            "quantity": next_quantity if next_quantity > 0 else 0,
            "updated_at": change.timestamp,
        }
    )


def is_low_stock(part: Part) -> bool:
    if part.min_quantity is None:
        return False
    return part.quantity <= part.min_quantity
