# partflow/schemas/inventory/part_schemas.py

from typing import List, Optional

from pydantic import ConfigDict, Field

from partflow.domain.entities import CamelModel
from partflow.domain.inventory import MAX_STOCK_QUANTITY


class PartCreate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    specification: Optional[str] = None
    material: Optional[str] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    location_id: Optional[str] = None
    quantity: int = Field(0, ge=0, le=MAX_STOCK_QUANTITY)
    min_quantity: Optional[int] = Field(None, ge=0, le=MAX_STOCK_QUANTITY)


class PartUpdate(CamelModel):
    """Generic field edit.

    ``quantity`` is accepted only when it equals the stored value (clients
    echo the whole part back); changing stock goes through the ledger.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    specification: Optional[str] = None
    material: Optional[str] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None
    category_id: Optional[str] = None
    location_id: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0, le=MAX_STOCK_QUANTITY)
    min_quantity: Optional[int] = Field(None, ge=0, le=MAX_STOCK_QUANTITY)


class PartImportItem(PartCreate):
    id: Optional[str] = None


class QuantityOverwrite(CamelModel):
    quantity: int = Field(..., ge=0, le=MAX_STOCK_QUANTITY)
    reason: Optional[str] = None
