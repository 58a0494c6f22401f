"""Pydantic schemas used by the FastAPI service."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class QueryRequest(BaseModel):
    """Payload for ``POST /api/playground/query``."""

    query: str = Field(..., min_length=1, description="A single read-only SELECT or WITH statement.")

    @field_validator("query")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


__all__ = ["QueryRequest"]
