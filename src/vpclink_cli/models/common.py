"""Common response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned by the control plane."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: str | None = None
    code: str | None = Field(default=None, alias="__type")
