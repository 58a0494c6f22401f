"""Response envelopes shared by every endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException


class ApiError(HTTPException):
    """An error rendered as ``{"success": false, "error": ..., "details": ...}``.

    ``internal`` details (exception messages, SQL errors) are dropped in production.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        *,
        details: Any = None,
        internal: bool = False,
    ) -> None:
        super().__init__(status_code=status_code, detail=error)
        self.error = error
        self.details = details
        self.internal = internal


def success(data: Any, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if meta is not None:
        body["meta"] = meta
    return body


def failure(error: str, details: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


def page_meta(total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {"total": total, "limit": limit, "offset": offset, "hasMore": offset + limit < total}


__all__ = ["ApiError", "failure", "page_meta", "success"]
