"""
Failure policies shared by the content resolvers.

Reads default to falling back on bundled data; writes default to raising.
Each resolver operation takes the policy as a keyword so a caller can ask
for the opposite behaviour explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, List, TypeVar

from content_backend.store import StoreError
from shared.types import ListingStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailurePolicy(Enum):
    SILENT_FALLBACK = "silent_fallback"
    PROPAGATE = "propagate"


class ContentError(Exception):
    """Base class for errors surfaced by the content layer."""


class ContentReadError(ContentError):
    pass


class ContentWriteError(ContentError):
    pass


class ReadOnlySourceError(ContentWriteError):
    """Raised when writing to a source that only supports reads."""


@dataclass
class Listing(Generic[T]):
    items: List[T] = field(default_factory=list)
    status: ListingStatus = ListingStatus.LIVE


def read_with_policy(
    operation: Callable[[], T],
    fallback: Callable[[], T],
    *,
    policy: FailurePolicy,
    description: str,
) -> T:
    """
    Runs a read against the store.

    Under SILENT_FALLBACK a StoreError is logged and `fallback()` is
    returned; under PROPAGATE it is re-raised as ContentReadError.
    """
    try:
        return operation()
    except StoreError as exc:
        if policy is FailurePolicy.PROPAGATE:
            raise ContentReadError(f"Failed to {description}: {exc}") from exc
        logger.warning("Failed to %s, using bundled defaults: %s", description, exc)
        return fallback()


def write_with_policy(
    operation: Callable[[], None],
    *,
    policy: FailurePolicy,
    description: str,
) -> bool:
    """
    Runs a write against the store and returns True on success.

    Under PROPAGATE a StoreError becomes ContentWriteError carrying the
    backend message; under SILENT_FALLBACK it is logged and False returned.
    """
    try:
        operation()
    except StoreError as exc:
        if policy is FailurePolicy.PROPAGATE:
            raise ContentWriteError(f"Failed to {description}: {exc}") from exc
        logger.error("Failed to %s: %s", description, exc)
        return False
    return True
