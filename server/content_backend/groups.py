"""
Resolver for group offerings.

Reads fall back to the four bundled offerings when the store errors. An
empty table is a valid state and is returned as-is.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import List, Optional

from content_backend.policy import (
    FailurePolicy,
    Listing,
    read_with_policy,
    write_with_policy,
)
from content_backend.store import RemoteStore
from shared.defaults import (
    DEFAULT_GROUP_IMAGE_URL,
    default_groups,
    find_default_group,
)
from shared.types import GroupOffering, GroupType, ListingStatus

logger = logging.getLogger(__name__)

TABLE = "group_offerings"


def _group_type(value) -> GroupType:
    try:
        return GroupType(value)
    except ValueError:
        logger.warning("Unknown group type %r, treating as %s", value, GroupType.SUPPORT)
        return GroupType.SUPPORT


def group_from_row(row: dict) -> GroupOffering:
    description = row.get("description") or ""
    return GroupOffering(
        id=row["id"],
        title=row.get("title") or "",
        description=description,
        long_description=row.get("long_description") or description,
        benefits=list(row.get("benefits") or []),
        type=_group_type(row.get("type")),
        schedule=row.get("schedule") or "",
        facilitator=row.get("facilitator") or "",
        image=row.get("image") or "",
        active=bool(row.get("active")),
        focus=row.get("focus") or "",
    )


def group_to_row(group: GroupOffering) -> dict:
    """Maps a group onto table columns, never writing None."""
    row = asdict(group)
    row.update(
        title=group.title or "",
        description=group.description or "",
        long_description=group.long_description or "",
        benefits=list(group.benefits or []),
        type=GroupType(group.type or GroupType.SUPPORT).value,
        schedule=group.schedule or "",
        facilitator=group.facilitator or "",
        image=group.image or "",
        active=bool(group.active),
        focus=group.focus or "",
    )
    return row


class GroupOfferingsResolver:
    def __init__(self, store: RemoteStore):
        self.store = store

    def list_with_status(
        self, *, policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK
    ) -> Listing[GroupOffering]:
        def fetch() -> Listing[GroupOffering]:
            rows = self.store.select(TABLE, order_by="title")
            if not rows:
                return Listing([], ListingStatus.EMPTY)
            return Listing([group_from_row(row) for row in rows], ListingStatus.LIVE)

        return read_with_policy(
            fetch,
            lambda: Listing(default_groups(), ListingStatus.FALLBACK),
            policy=policy,
            description="list group offerings",
        )

    def list(
        self, *, policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK
    ) -> List[GroupOffering]:
        return self.list_with_status(policy=policy).items

    def get_by_id(
        self,
        group_id: str,
        *,
        policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK,
    ) -> Optional[GroupOffering]:
        def fetch() -> Optional[GroupOffering]:
            row = self.store.select_one(TABLE, filters={"id": group_id})
            if row is None:
                return find_default_group(group_id)
            return group_from_row(row)

        return read_with_policy(
            fetch,
            lambda: find_default_group(group_id),
            policy=policy,
            description=f"load group offering {group_id}",
        )

    def upsert(
        self,
        group: GroupOffering,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> bool:
        if not group.id:
            raise ValueError("Group offerings need an id before they are saved")
        row = group_to_row(group)
        return write_with_policy(
            lambda: self.store.upsert(TABLE, [row], on_conflict="id"),
            policy=policy,
            description="save group",
        )

    def remove(
        self,
        group_id: str,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> bool:
        return write_with_policy(
            lambda: self.store.delete(TABLE, filters={"id": group_id}),
            policy=policy,
            description="delete group",
        )

    def restore_defaults(
        self, *, policy: FailurePolicy = FailurePolicy.PROPAGATE
    ) -> bool:
        """Overwrites the four canonical offerings; other rows are untouched."""
        rows = [group_to_row(group) for group in default_groups()]
        return write_with_policy(
            lambda: self.store.upsert(TABLE, rows, on_conflict="id"),
            policy=policy,
            description="restore default groups",
        )

    @staticmethod
    def new_draft() -> GroupOffering:
        return GroupOffering(
            id=str(uuid.uuid4()),
            title="",
            description="",
            long_description="",
            benefits=[],
            type=GroupType.SUPPORT,
            schedule="",
            facilitator="",
            image=DEFAULT_GROUP_IMAGE_URL,
            active=True,
            focus="",
        )
