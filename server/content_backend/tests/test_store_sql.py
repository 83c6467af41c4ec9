import unittest
from datetime import datetime, timedelta, timezone

from content_backend.auth import AuthError, StoreAuthClient
from content_backend.groups import GroupOfferingsResolver
from content_backend.posts import BlogPostsResolver, LegacyPostAdapter, TablePostSource
from content_backend.site_content import SiteContentResolver
from content_backend.store import SqlRemoteStore, StoreError
from shared.defaults import DEFAULT_CONTENT, DEFAULT_GROUPS
from shared.types import BlogPost


class SqlRemoteStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL store.
    """

    def setUp(self):
        self.store = SqlRemoteStore("sqlite+pysqlite:///:memory:")

    def test_select_one_missing_row(self):
        self.assertIsNone(self.store.select_one("group_offerings", filters={"id": "x"}))

    def test_upsert_inserts_then_updates_supplied_columns(self):
        self.store.upsert(
            "posts",
            [{"id": "p1", "title": "First", "content": "Body", "tags": ["a"]}],
            on_conflict="id",
        )
        self.store.upsert("posts", [{"id": "p1", "title": "Renamed"}], on_conflict="id")
        row = self.store.select_one("posts", filters={"id": "p1"})
        self.assertEqual(row["title"], "Renamed")
        self.assertEqual(row["content"], "Body")
        self.assertEqual(row["tags"], ["a"])

    def test_select_orders_and_filters(self):
        self.store.upsert(
            "admin_users",
            [{"user_id": "b"}, {"user_id": "a"}, {"user_id": "c"}],
            on_conflict="user_id",
        )
        rows = self.store.select("admin_users", order_by="user_id", descending=True)
        self.assertEqual([r["user_id"] for r in rows], ["c", "b", "a"])
        rows = self.store.select("admin_users", filters={"user_id": "a"})
        self.assertEqual(rows, [{"user_id": "a"}])

    def test_delete(self):
        self.store.upsert("admin_users", [{"user_id": "a"}], on_conflict="user_id")
        self.store.delete("admin_users", filters={"user_id": "a"})
        self.assertEqual(self.store.select("admin_users"), [])

    def test_unknown_table_and_column_raise_store_error(self):
        with self.assertRaises(StoreError):
            self.store.select("groups")
        with self.assertRaises(StoreError):
            self.store.select("posts", order_by="created_at")
        with self.assertRaises(StoreError):
            self.store.delete("posts", filters={})

    def test_failed_batch_is_rolled_back(self):
        with self.assertRaises(StoreError):
            self.store.upsert(
                "admin_users",
                [{"user_id": "ok"}, {"not_user_id": "broken"}],
                on_conflict="user_id",
            )
        self.assertEqual(self.store.select("admin_users"), [])

    def test_resolvers_round_trip(self):
        content = SiteContentResolver(self.store)
        content.save_content(DEFAULT_CONTENT)
        self.assertEqual(content.get_content(), DEFAULT_CONTENT)

        groups = GroupOfferingsResolver(self.store)
        groups.restore_defaults()
        by_id = {g.id: g for g in groups.list()}
        for seed in DEFAULT_GROUPS:
            self.assertEqual(by_id[seed.id], seed)

    def test_backdated_recovery_session_is_rejected(self):
        auth = StoreAuthClient(self.store)
        auth.create_user("editor@example.org", "hunter22")
        token = auth.request_password_reset("editor@example.org")
        self.assertTrue(auth.verify_recovery(token).recovery)

        self.store.upsert(
            "auth_sessions",
            [
                {
                    "access_token": token,
                    "created_at": datetime.now(timezone.utc) - timedelta(days=365),
                }
            ],
            on_conflict="access_token",
        )
        with self.assertRaises(AuthError):
            auth.verify_recovery(token)
        self.assertIsNone(
            self.store.select_one("auth_sessions", filters={"access_token": token})
        )


class LegacySqlRemoteStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = SqlRemoteStore("sqlite+pysqlite:///:memory:", post_shape="legacy")

    def test_created_at_defaults_on_insert(self):
        resolver = BlogPostsResolver(TablePostSource(self.store, LegacyPostAdapter()))
        resolver.upsert(
            BlogPost(
                id="l1",
                title="Legacy",
                excerpt="",
                content="Short body",
                author="",
                publish_date="",
                image_url="",
            )
        )
        row = self.store.select_one("posts", filters={"id": "l1"})
        self.assertIsInstance(row["created_at"], datetime)
        self.assertEqual(row["body"], "Short body")
        self.assertEqual(resolver.get_by_id("l1").excerpt, "Short body...")


if __name__ == "__main__":
    unittest.main()
