"""Response envelopes"""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Successful response: ``{"success": true, "data": ...}``"""

    success: bool = True
    data: DataT


class ErrorResponse(BaseModel):
    """Failed response: ``{"success": false, "error": "..."}``"""

    success: bool = False
    error: str
