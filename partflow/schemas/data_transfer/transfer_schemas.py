from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from partflow.domain.entities import CamelModel


class ImportResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class JsonImportRequest(BaseModel):
    data: List[Dict[str, Any]]


class CsvImportRequest(CamelModel):
    csv_data: str = ""


class ImportSection(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)


class FullSnapshotData(BaseModel):
    categories: Optional[ImportSection] = None
    locations: Optional[ImportSection] = None
    parts: Optional[ImportSection] = None


class FullImportRequest(BaseModel):
    data: FullSnapshotData


class FullImportResult(BaseModel):
    categories: ImportResult
    locations: ImportResult
    parts: ImportResult
