"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from content_backend.auth import LoggingRecoveryNotifier, RecoveryNotifier, StoreAuthClient
from content_backend.config import get_settings
from content_backend.rss import FeedFetcher
from content_backend.service import ContentService, build_post_source
from content_backend.store import (
    InMemoryRemoteStore,
    RemoteStore,
    SqlRemoteStore,
    UnavailableRemoteStore,
)

logger = logging.getLogger(__name__)

_store: RemoteStore | None = None
_content_service: ContentService | None = None
_auth_client: StoreAuthClient | None = None
_recovery_notifier: RecoveryNotifier | None = None


def get_store() -> RemoteStore:
    """
    Return a singleton store so every request shares one connection pool.
    """
    global _store
    if _store:
        return _store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _store = InMemoryRemoteStore()
    elif settings.database_url:
        _store = SqlRemoteStore(settings.database_url, post_shape=settings.post_shape)
    elif settings.environment == "production":
        message = "Critical Error: Database URL is required in production mode."
        logger.error(message)
        raise RuntimeError(message)
    else:
        logger.warning(
            "Missing DATABASE_URL. Running in fallback mode with bundled content."
        )
        _store = UnavailableRemoteStore()
    return _store


def get_feed_fetcher() -> FeedFetcher:
    settings = get_settings()
    return FeedFetcher(
        settings.rss_feed_url,
        settings.rss_proxy_url,
        timeout=settings.request_timeout_seconds,
        limit=settings.rss_item_limit,
    )


def get_content_service() -> ContentService:
    global _content_service
    if _content_service:
        return _content_service

    settings = get_settings()
    store = get_store()
    source = build_post_source(
        settings.blog_source,
        store,
        get_feed_fetcher() if settings.blog_source == "rss" else None,
    )
    _content_service = ContentService(store, source)
    return _content_service


def get_auth_client() -> StoreAuthClient:
    global _auth_client
    if _auth_client:
        return _auth_client
    settings = get_settings()
    _auth_client = StoreAuthClient(
        get_store(),
        session_ttl=timedelta(seconds=settings.session_ttl_seconds),
        recovery_ttl=timedelta(seconds=settings.recovery_ttl_seconds),
    )
    return _auth_client


def get_recovery_notifier() -> RecoveryNotifier:
    global _recovery_notifier
    if _recovery_notifier:
        return _recovery_notifier
    _recovery_notifier = LoggingRecoveryNotifier(get_settings().password_reset_url)
    return _recovery_notifier
