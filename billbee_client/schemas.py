"""Pydantic schemas for request descriptors and response envelopes."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class RequestDescriptor(BaseModel):
    """A single logical request. Retries re-send the same descriptor."""

    path: str
    method: HttpMethod = HttpMethod.GET
    params: Optional[Dict[str, Any]] = None
    body: Any = None

    model_config = {"frozen": True}

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @property
    def has_body(self) -> bool:
        return self.method in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ApiResultBase(BaseModel):
    error_message: Optional[str] = Field(default=None, alias="ErrorMessage")
    error_code: Optional[int] = Field(default=None, alias="ErrorCode")
    error_description: Optional[Union[int, str]] = Field(default=None, alias="ErrorDescription")

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }


class ApiResult(ApiResultBase, Generic[T]):
    data: Optional[T] = Field(default=None, alias="Data")


class PagingInformation(BaseModel):
    page: int = Field(alias="Page")
    total_pages: int = Field(alias="TotalPages")
    total_rows: int = Field(alias="TotalRows")
    page_size: int = Field(alias="PageSize")

    model_config = {"populate_by_name": True}


class ApiPagedResult(ApiResultBase, Generic[T]):
    paging: Optional[PagingInformation] = Field(default=None, alias="Paging")
    data: List[T] = Field(default_factory=list, alias="Data")
