"""
Content resolution service: the one entry point pages and admin routes use
to read and write site content, group offerings and blog posts.
"""

from __future__ import annotations

from typing import Literal

from content_backend.groups import GroupOfferingsResolver
from content_backend.posts import (
    BlogPostsResolver,
    LegacyPostAdapter,
    PostSource,
    RichPostAdapter,
    RssPostSource,
    TablePostSource,
)
from content_backend.rss import FeedFetcher
from content_backend.site_content import SiteContentResolver
from content_backend.store import RemoteStore

BlogSource = Literal["table", "legacy_table", "rss"]


def build_post_source(
    blog_source: BlogSource,
    store: RemoteStore,
    fetcher: FeedFetcher | None = None,
) -> PostSource:
    if blog_source == "table":
        return TablePostSource(store, RichPostAdapter())
    if blog_source == "legacy_table":
        return TablePostSource(store, LegacyPostAdapter())
    if blog_source == "rss":
        if fetcher is None:
            raise ValueError("An RSS blog source needs a FeedFetcher")
        return RssPostSource(fetcher)
    raise ValueError(f"Unknown blog source: {blog_source}")


class ContentService:
    def __init__(self, store: RemoteStore, post_source: PostSource | None = None):
        self.store = store
        self.site_content = SiteContentResolver(store)
        self.groups = GroupOfferingsResolver(store)
        self.posts = BlogPostsResolver(
            post_source or TablePostSource(store, RichPostAdapter())
        )

    def dashboard_stats(self) -> tuple[int, int]:
        """Returns (active group count, post count) for the admin overview."""
        active_groups = sum(1 for group in self.groups.list() if group.active)
        return active_groups, len(self.posts.list())
