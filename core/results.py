"""
core/results.py -- Tagged outcomes returned by the service layer.

Services never raise for business-rule outcomes (duplicates, missing ids,
bad credentials). They return one of the dataclasses below and the API layer
branches on the type. Unexpected failures still propagate as exceptions.

Layer rule: core/ is the kernel. No imports from api/, auth/, or internships/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Conflict:
    """A business-rule violation caused by duplicate or still-referenced data."""

    reason: str


@dataclass(frozen=True)
class NotFound:
    reason: str


@dataclass(frozen=True)
class Unauthorized:
    """Credentials or a registration gate were rejected."""

    reason: str


Result = Union[Ok[T], Conflict, NotFound, Unauthorized]
