# partflow/schemas/inventory/inventory_change_schemas.py

from typing import Optional

from pydantic import Field, StrictInt

from partflow.domain.entities import CamelModel
from partflow.domain.inventory import MAX_STOCK_QUANTITY


class InventoryMutationRequest(CamelModel):
    # signed: positive = stock in, negative = stock out
    delta: StrictInt = Field(..., ge=-MAX_STOCK_QUANTITY, le=MAX_STOCK_QUANTITY)
    reason: Optional[str] = Field(None, max_length=500)
    operator: Optional[str] = Field(None, max_length=255)
