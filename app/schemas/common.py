"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class ApiResponse(BaseModel, Generic[DataT]):
    status_code: int
    success: bool
    message: str
    data: DataT | None = None
    errors: list[str] = []

    model_config = CAMEL_CONFIG


def api_response(data: DataT, message: str, status_code: int = 200) -> ApiResponse[DataT]:
    """Wrap a successful result in the envelope."""
    return ApiResponse(status_code=status_code, success=status_code < 400, message=message, data=data)


def error_body(status_code: int, message: str, errors: list[str] | None = None) -> dict:
    """Serialized envelope for an error response."""
    return ApiResponse[None](status_code=status_code, success=False, message=message, errors=errors or []).model_dump(
        by_alias=True
    )
