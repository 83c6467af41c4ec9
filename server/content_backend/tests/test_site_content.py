import unittest
from dataclasses import fields

from content_backend.policy import (
    ContentReadError,
    ContentWriteError,
    FailurePolicy,
)
from content_backend.site_content import SiteContentResolver
from content_backend.store import InMemoryRemoteStore, UnavailableRemoteStore
from shared.defaults import DEFAULT_CONTENT
from shared.types import SiteContent


def _content(**overrides) -> SiteContent:
    values = dict(
        hero_title="Hero",
        hero_subtitle="Sub",
        about_text="About",
        methodology_text="Method",
        contact_email="team@example.org",
        contact_phone="555-0100",
        organization_name="Org",
        logo_url="https://example.org/logo.png",
        global_schedule_status="",
    )
    values.update(overrides)
    return SiteContent(**values)


class SiteContentResolverTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryRemoteStore()
        self.resolver = SiteContentResolver(self.store)

    def test_missing_row_returns_defaults(self):
        self.assertEqual(self.resolver.get_content(), DEFAULT_CONTENT)

    def test_unreachable_store_returns_defaults_with_defined_fields(self):
        resolver = SiteContentResolver(UnavailableRemoteStore())
        content = resolver.get_content()
        self.assertEqual(content, DEFAULT_CONTENT)
        for f in fields(SiteContent):
            self.assertIsInstance(getattr(content, f.name), str)

    def test_defaults_are_copies(self):
        content = self.resolver.get_content()
        content.hero_title = "changed"
        self.assertEqual(
            self.resolver.get_content().hero_title, DEFAULT_CONTENT.hero_title
        )

    def test_save_then_get(self):
        content = _content()
        self.assertTrue(self.resolver.save_content(content))
        self.assertEqual(self.resolver.get_content(), content)
        rows = self.store.select("site_content")
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["id"], 1)

    def test_save_is_last_write_wins_on_single_row(self):
        self.resolver.save_content(_content(hero_title="First"))
        self.resolver.save_content(_content(hero_title="Second"))
        self.assertEqual(len(self.store.select("site_content")), 1)
        self.assertEqual(self.resolver.get_content().hero_title, "Second")

    def test_save_coalesces_none_to_empty_string(self):
        self.resolver.save_content(_content(logo_url=None, global_schedule_status=None))
        row = self.store.select_one("site_content", filters={"id": 1})
        self.assertEqual(row["logo_url"], "")
        self.assertEqual(row["global_schedule_status"], "")

    def test_null_columns_read_back_as_empty_strings(self):
        self.store.upsert(
            "site_content",
            [{"id": 1, "hero_title": "Only title", "logo_url": None}],
            on_conflict="id",
        )
        content = self.resolver.get_content()
        self.assertEqual(content.hero_title, "Only title")
        self.assertEqual(content.logo_url, "")
        self.assertEqual(content.about_text, "")

    def test_save_failure_propagates_backend_message(self):
        resolver = SiteContentResolver(UnavailableRemoteStore())
        with self.assertRaises(ContentWriteError) as ctx:
            resolver.save_content(_content())
        self.assertIn("save site content", str(ctx.exception))
        self.assertIn("Missing database credentials", str(ctx.exception))

    def test_policies_can_be_swapped(self):
        resolver = SiteContentResolver(UnavailableRemoteStore())
        with self.assertRaises(ContentReadError):
            resolver.get_content(policy=FailurePolicy.PROPAGATE)
        self.assertFalse(
            resolver.save_content(_content(), policy=FailurePolicy.SILENT_FALLBACK)
        )


if __name__ == "__main__":
    unittest.main()
