"""
Resolver for blog posts.

Posts come from one of three sources chosen at configuration time: the
`posts` table in its rich shape, the `posts` table in its legacy
title/body/published/created_at shape, or the external blog's RSS feed.
Each source maps its own records onto the one `BlogPost` type.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional, Protocol
from urllib.parse import unquote

from content_backend.policy import (
    ContentReadError,
    FailurePolicy,
    Listing,
    ReadOnlySourceError,
    read_with_policy,
    write_with_policy,
)
from content_backend.rss import FeedFetcher, format_locale_date, make_excerpt
from content_backend.store import RemoteStore
from shared.defaults import (
    DEFAULT_AUTHOR,
    PLACEHOLDER_IMAGE_URL,
    default_posts,
    find_default_post,
)
from shared.types import BlogPost, ListingStatus

logger = logging.getLogger(__name__)

TABLE = "posts"
LEGACY_EXCERPT_LENGTH = 150
DRAFT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1499750310159-52f8f4347504"
    "?auto=format&fit=crop&q=80"
)
# Rows without a usable date sort last.
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_created_at(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str) and value:
        try:
            return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.warning("Unparseable created_at %r", value)
    return None


def _parse_publish_date(value) -> Optional[datetime]:
    """
    Reads a stored publish date. New rows hold ISO dates; rows written by
    older admin builds may hold the M/D/YYYY form.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        pass
    try:
        return datetime.strptime(value, "%m/%d/%Y").replace(tzinfo=timezone.utc)
    except ValueError:
        logger.warning("Unparseable publish_date %r", value)
    return None


class PostAdapter(Protocol):
    """Maps one `posts` table shape to and from BlogPost."""

    def sort_key(self, row: dict) -> datetime:
        ...

    def from_row(self, row: dict) -> BlogPost:
        ...

    def to_row(self, post: BlogPost) -> dict:
        ...


class RichPostAdapter:
    """Table with a column for every BlogPost field."""

    def sort_key(self, row: dict) -> datetime:
        return _parse_publish_date(row.get("publish_date")) or _EPOCH

    def from_row(self, row: dict) -> BlogPost:
        return BlogPost(
            id=row["id"],
            title=row.get("title") or "",
            excerpt=row.get("excerpt") or "",
            content=row.get("content") or "",
            author=row.get("author") or DEFAULT_AUTHOR,
            publish_date=row.get("publish_date") or "",
            image_url=row.get("image_url") or PLACEHOLDER_IMAGE_URL,
            tags=list(row.get("tags") or []),
        )

    def to_row(self, post: BlogPost) -> dict:
        return {
            "id": post.id,
            "title": post.title or "",
            "excerpt": post.excerpt or "",
            "content": post.content or "",
            "author": post.author or "",
            "publish_date": post.publish_date or "",
            "image_url": post.image_url or "",
            "tags": list(post.tags or []),
        }


class LegacyPostAdapter:
    """
    Table with only title, body, published and created_at columns. The
    remaining fields are derived when reading.
    """

    def sort_key(self, row: dict) -> datetime:
        return _parse_created_at(row.get("created_at")) or _EPOCH

    def from_row(self, row: dict) -> BlogPost:
        content = row.get("body") or ""
        created_at = _parse_created_at(row.get("created_at")) or datetime.now(
            timezone.utc
        )
        return BlogPost(
            id=row["id"],
            title=row.get("title") or "",
            excerpt=make_excerpt(content, LEGACY_EXCERPT_LENGTH),
            content=content,
            author=DEFAULT_AUTHOR,
            publish_date=format_locale_date(created_at),
            image_url=PLACEHOLDER_IMAGE_URL,
            tags=[],
            published=bool(row.get("published")),
        )

    def to_row(self, post: BlogPost) -> dict:
        # created_at is left to the table default.
        return {
            "id": post.id,
            "title": post.title or "",
            "body": post.content or "",
            "published": bool(post.published),
        }


class PostSource(Protocol):
    read_only: bool

    def list(self) -> Listing[BlogPost]:
        ...

    def get(self, post_id: str) -> Optional[BlogPost]:
        ...

    def fallback_listing(self) -> Listing[BlogPost]:
        ...

    def fallback_post(self, post_id: str) -> Optional[BlogPost]:
        ...

    def save(self, post: BlogPost) -> None:
        ...

    def delete(self, post_id: str) -> None:
        ...


class TablePostSource:
    """Posts stored in the `posts` table; store errors propagate."""

    read_only = False

    def __init__(self, store: RemoteStore, adapter: PostAdapter):
        self.store = store
        self.adapter = adapter

    def list(self) -> Listing[BlogPost]:
        rows = self.store.select(TABLE)
        rows.sort(key=self.adapter.sort_key, reverse=True)
        if not rows:
            return Listing([], ListingStatus.EMPTY)
        return Listing([self.adapter.from_row(row) for row in rows], ListingStatus.LIVE)

    def get(self, post_id: str) -> Optional[BlogPost]:
        row = self.store.select_one(TABLE, filters={"id": post_id})
        if row is None:
            return find_default_post(post_id)
        return self.adapter.from_row(row)

    def fallback_listing(self) -> Listing[BlogPost]:
        return Listing(default_posts(), ListingStatus.FALLBACK)

    def fallback_post(self, post_id: str) -> Optional[BlogPost]:
        return find_default_post(post_id)

    def save(self, post: BlogPost) -> None:
        self.store.upsert(TABLE, [self.adapter.to_row(post)], on_conflict="id")

    def delete(self, post_id: str) -> None:
        self.store.delete(TABLE, filters={"id": post_id})


class RssPostSource:
    """Read-only posts from the external blog's feed."""

    read_only = True

    def __init__(self, fetcher: FeedFetcher):
        self.fetcher = fetcher

    def list(self) -> Listing[BlogPost]:
        result = self.fetcher.fetch()
        return Listing(result.posts, result.status)

    def get(self, post_id: str) -> Optional[BlogPost]:
        # The feed is capped at a handful of items, so a scan is fine.
        wanted = unquote(post_id)
        for post in self.list().items:
            if unquote(post.id) == wanted:
                return post
        return None

    def fallback_listing(self) -> Listing[BlogPost]:
        return Listing([], ListingStatus.UNAVAILABLE)

    def fallback_post(self, post_id: str) -> Optional[BlogPost]:
        return None

    def save(self, post: BlogPost) -> None:
        raise ReadOnlySourceError(
            "Blog posts are managed on the external blog and cannot be saved here"
        )

    def delete(self, post_id: str) -> None:
        raise ReadOnlySourceError(
            "Blog posts are managed on the external blog and cannot be deleted here"
        )


class BlogPostsResolver:
    def __init__(self, source: PostSource):
        self.source = source

    @property
    def read_only(self) -> bool:
        return self.source.read_only

    def list_with_status(
        self, *, policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK
    ) -> Listing[BlogPost]:
        listing = read_with_policy(
            self.source.list,
            self.source.fallback_listing,
            policy=policy,
            description="list blog posts",
        )
        if (
            policy is FailurePolicy.PROPAGATE
            and listing.status is ListingStatus.UNAVAILABLE
        ):
            raise ContentReadError("Failed to list blog posts: feed unavailable")
        return listing

    def list(
        self, *, policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK
    ) -> List[BlogPost]:
        return self.list_with_status(policy=policy).items

    def get_by_id(
        self,
        post_id: str,
        *,
        policy: FailurePolicy = FailurePolicy.SILENT_FALLBACK,
    ) -> Optional[BlogPost]:
        return read_with_policy(
            lambda: self.source.get(post_id),
            lambda: self.source.fallback_post(post_id),
            policy=policy,
            description=f"load blog post {post_id}",
        )

    def _write(self, operation, *, policy: FailurePolicy, description: str) -> bool:
        try:
            return write_with_policy(operation, policy=policy, description=description)
        except ReadOnlySourceError:
            if policy is FailurePolicy.PROPAGATE:
                raise
            logger.error("Failed to %s: blog source is read-only", description)
            return False

    def upsert(
        self,
        post: BlogPost,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> bool:
        if not post.id:
            raise ValueError("Blog posts need an id before they are saved")
        return self._write(
            lambda: self.source.save(post), policy=policy, description="save post"
        )

    def remove(
        self,
        post_id: str,
        *,
        policy: FailurePolicy = FailurePolicy.PROPAGATE,
    ) -> bool:
        return self._write(
            lambda: self.source.delete(post_id),
            policy=policy,
            description="delete post",
        )

    @staticmethod
    def new_draft() -> BlogPost:
        return BlogPost(
            id=str(uuid.uuid4()),
            title="",
            excerpt="",
            content="",
            author=DEFAULT_AUTHOR,
            publish_date=datetime.now(timezone.utc).date().isoformat(),
            image_url=DRAFT_IMAGE_URL,
            tags=[],
        )
