"""Schemas for the service health endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthRead(BaseModel):
    status: str
    consumer: dict[str, Any] = Field(default_factory=dict)
    producer: dict[str, Any] = Field(default_factory=dict)


__all__ = ["HealthRead"]
