# partflow/utils/response.py

from typing import Any, Dict, Generic, List, Sequence, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


def data_response(data: T) -> Dict[str, Any]:
    return {"data": data}


def list_response(items: Sequence[T]) -> Dict[str, Any]:
    return {"data": list(items), "total": len(items)}


class DataResponse(BaseModel, Generic[T]):
    data: T


class ListResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
