"""
api/results.py -- Translate service results into HTTP responses.

Every route funnels its service result through unwrap(), so the mapping from
outcome type to status code lives in one place:

  Ok           -> value returned to the route (200)
  Conflict     -> 400 conflict
  NotFound     -> 404 not_found
  Unauthorized -> 400 bad_credentials (register/login report credential
                  problems as client errors, not 401)
"""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException

from api.models import ErrorDetail
from core.results import Conflict, NotFound, Ok, Result, Unauthorized

T = TypeVar("T")


def unwrap(result: Result[T]) -> T:
    """Return the Ok value or raise the HTTPException for the failure."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Conflict):
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="conflict", message=result.reason).model_dump(),
        )
    if isinstance(result, NotFound):
        raise HTTPException(
            status_code=404,
            detail=ErrorDetail(code="not_found", message=result.reason).model_dump(),
        )
    if isinstance(result, Unauthorized):
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="bad_credentials", message=result.reason).model_dump(),
        )
    raise TypeError(f"Unhandled result type: {type(result).__name__}")
