from typing import Optional

from pydantic import ConfigDict, Field

from partflow.domain.entities import CamelModel


class LocationCreate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    code: str = Field(..., min_length=1, max_length=50)
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class LocationUpdate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class LocationImportItem(LocationCreate):
    id: Optional[str] = None
