"""
CLI helper to seed a database with the bundled site content, the canonical
group offerings, the sample blog posts and, optionally, an admin account.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from content_backend.auth import AuthError, StoreAuthClient
from content_backend.config import get_settings
from content_backend.policy import ContentError
from content_backend.service import ContentService, build_post_source
from content_backend.store import RemoteStore, SqlRemoteStore, StoreError
from shared.defaults import default_content, default_posts

logger = logging.getLogger(__name__)


def seed(
    store: RemoteStore,
    *,
    blog_source: str = "table",
    overwrite_content: bool = False,
    skip_posts: bool = False,
) -> None:
    service = ContentService(store, build_post_source(blog_source, store))

    existing = store.select_one("site_content", filters={"id": 1})
    if existing is None or overwrite_content:
        service.site_content.save_content(default_content())
        logger.info("Seeded site content")
    else:
        logger.info("Site content already present, leaving it alone")

    service.groups.restore_defaults()
    logger.info("Restored default group offerings")

    if skip_posts:
        return
    for post in default_posts():
        if store.select_one("posts", filters={"id": post.id}) is None:
            service.posts.upsert(post)
            logger.info("Seeded post %s", post.id)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the content database")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL (defaults to DATABASE_URL)",
    )
    parser.add_argument(
        "--overwrite-content",
        action="store_true",
        help="Replace existing site content with the bundled defaults",
    )
    parser.add_argument(
        "--skip-posts",
        action="store_true",
        help="Do not seed the sample blog posts",
    )
    parser.add_argument(
        "--admin-email",
        type=str,
        default=None,
        help="Create or reset an admin account with this email",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    settings = get_settings()
    database_url = args.database_url or settings.database_url
    if not database_url:
        logger.error("No database configured; pass --database-url or set DATABASE_URL")
        return 1
    if settings.blog_source == "rss":
        # The feed has no table to seed.
        args.skip_posts = True

    store = SqlRemoteStore(database_url, post_shape=settings.post_shape)
    try:
        seed(
            store,
            blog_source=settings.blog_source,
            overwrite_content=args.overwrite_content,
            skip_posts=args.skip_posts,
        )
    except (ContentError, StoreError) as exc:
        logger.error("Seeding failed: %s", exc)
        return 1

    if args.admin_email:
        password = os.environ.get("ADMIN_PASSWORD")
        if not password:
            logger.error("Set ADMIN_PASSWORD to create the admin account")
            return 1
        try:
            user_id = StoreAuthClient(store).create_user(
                args.admin_email, password, admin=True
            )
        except AuthError as exc:
            logger.error("Could not create admin: %s", exc)
            return 1
        logger.info("Admin account ready (user id %s)", user_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
