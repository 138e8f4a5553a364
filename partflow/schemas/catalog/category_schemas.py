from typing import Optional

from pydantic import ConfigDict, Field

from partflow.domain.entities import CamelModel


class CategoryCreate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None


class CategoryUpdate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None


class CategoryImportItem(CategoryCreate):
    id: Optional[str] = None
