"""Domain entities shared by the DAOs, services and the HTTP surface.

Field names are snake_case in Python and camelCase on the wire
(``minQuantity``, ``createdAt``...), which is what every client expects.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Part(CamelModel):
    id: str
    name: str
    specification: Optional[str] = None
    material: Optional[str] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    location_id: Optional[str] = None
    quantity: int = 0
    min_quantity: Optional[int] = None
    created_at: str
    updated_at: str


class InventoryChange(CamelModel):
    id: str
    part_id: str
    # requested signed change
    delta: int
    change_type: Literal["in", "out"]
    # unsigned magnitude of ``delta``
    quantity: int
    # what actually reached the part once clamping at zero is applied
    applied_delta: Optional[int] = None
    reason: Optional[str] = None
    operator: Optional[str] = None
    timestamp: str


class Category(CamelModel):
    id: str
    name: str
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    created_at: str
    updated_at: str


class CategoryNode(Category):
    children: List["CategoryNode"] = Field(default_factory=list)


class Location(CamelModel):
    id: str
    code: str
    name: Optional[str] = None
    description: Optional[str] = None
    created_at: str
    updated_at: str


class Tag(CamelModel):
    id: str
    name: str
    color: Optional[str] = None
    created_at: str
