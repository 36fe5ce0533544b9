"""Explicit success / failure results returned by the core services.

The cache-aside store and the catalog service never let an upstream failure
escape as an exception.  They return either :class:`Success` or
:class:`Failure` and the route layer branches on the kind to pick an HTTP
status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from src.utils.errors import UpstreamError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The producer (or the cache) delivered a value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """The upstream source failed; ``error`` says how."""

    error: UpstreamError


Outcome = Union[Success[T], Failure]
