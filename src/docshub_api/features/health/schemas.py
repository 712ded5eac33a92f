"""Schemas for the health module."""

from __future__ import annotations

from typing import Literal

from docshub_api.common.schema import BaseSchema


class HealthCheckResponse(BaseSchema):
    status: Literal["ok"] = "ok"
    version: str | None = None


__all__ = ["HealthCheckResponse"]
