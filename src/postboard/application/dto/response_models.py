"""Shared response envelope for every HTTP endpoint."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class ApiResponse(StrictModel, Generic[DataT]):
    """Uniform `{status, message, data}` body returned on success."""

    status: Literal["success"] = "success"
    message: str
    data: DataT | None = None


class ApiErrorResponse(StrictModel):
    """Uniform `{status, message}` body returned on failure."""

    status: Literal["error"] = "error"
    message: str
