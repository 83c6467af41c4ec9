"""
Resolver for the singleton site content record.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, fields

from content_backend.policy import FailurePolicy, read_with_policy, write_with_policy
from content_backend.store import RemoteStore
from shared.defaults import SITE_CONTENT_ID, default_content
from shared.types import SiteContent

logger = logging.getLogger(__name__)

TABLE = "site_content"

_FIELD_NAMES = [f.name for f in fields(SiteContent)]


def content_from_row(row: dict) -> SiteContent:
    # NULL columns come back as empty strings; callers never see None.
    return SiteContent(**{name: row.get(name) or "" for name in _FIELD_NAMES})


def content_to_row(content: SiteContent) -> dict:
    row = {name: value or "" for name, value in asdict(content).items()}
    row["id"] = SITE_CONTENT_ID
    return row


class SiteContentResolver:
    def __init__(self, store: RemoteStore):
        self.store = store

    def get_content(
        self, *, policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK
    ) -> SiteContent:
        def fetch() -> SiteContent:
            row = self.store.select_one(TABLE, filters={"id": SITE_CONTENT_ID})
            if row is None:
                logger.warning("No site content row found, using bundled defaults")
                return default_content()
            return content_from_row(row)

        return read_with_policy(
            fetch, default_content, policy=policy, description="load site content"
        )

    def save_content(
        self,
        content: SiteContent,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> bool:
        row = content_to_row(content)
        return write_with_policy(
            lambda: self.store.upsert(TABLE, [row], on_conflict="id"),
            policy=policy,
            description="save site content",
        )
