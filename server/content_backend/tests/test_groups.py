import unittest
from unittest.mock import MagicMock

from content_backend.groups import GroupOfferingsResolver, group_to_row
from content_backend.policy import ContentWriteError, FailurePolicy
from content_backend.store import (
    InMemoryRemoteStore,
    StoreError,
    UnavailableRemoteStore,
)
from shared.defaults import DEFAULT_GROUPS
from shared.types import GroupOffering, GroupType, ListingStatus

CANONICAL_IDS = [group.id for group in DEFAULT_GROUPS]


def _group(group_id="custom-1", **overrides) -> GroupOffering:
    values = dict(
        id=group_id,
        title="Grief & Loss",
        description="A space for grief.",
        long_description="A longer description of the grief group.",
        benefits=["Name the loss", "Find support"],
        type=GroupType.PSYCHOEDUCATION,
        schedule="Fridays, 4:00 PM EST (Virtual)",
        facilitator="Guest Facilitator",
        image="https://example.org/grief.jpg",
        active=True,
        focus="Grief",
    )
    values.update(overrides)
    return GroupOffering(**values)


class GroupOfferingsReadTests(unittest.TestCase):
    def test_store_error_returns_exact_seed_offerings(self):
        resolver = GroupOfferingsResolver(UnavailableRemoteStore())
        listing = resolver.list_with_status()
        self.assertEqual(listing.status, ListingStatus.FALLBACK)
        self.assertEqual(listing.items, DEFAULT_GROUPS)
        self.assertEqual(listing.items[0].title, "Navigating Transitions")

    def test_empty_table_is_not_a_fallback(self):
        resolver = GroupOfferingsResolver(InMemoryRemoteStore())
        listing = resolver.list_with_status()
        self.assertEqual(listing.status, ListingStatus.EMPTY)
        self.assertEqual(resolver.list(), [])

    def test_list_is_ordered_by_title(self):
        store = InMemoryRemoteStore()
        resolver = GroupOfferingsResolver(store)
        resolver.upsert(_group("b", title="Zen Practice"))
        resolver.upsert(_group("a", title="Anxiety Skills"))
        resolver.upsert(_group("c", title="Mindful Parenting"))
        titles = [group.title for group in resolver.list()]
        self.assertEqual(titles, ["Anxiety Skills", "Mindful Parenting", "Zen Practice"])

    def test_list_keeps_inactive_groups(self):
        resolver = GroupOfferingsResolver(InMemoryRemoteStore())
        resolver.upsert(_group(active=False))
        self.assertEqual(len(resolver.list()), 1)
        self.assertFalse(resolver.list()[0].active)

    def test_get_by_id_falls_back_to_seed_on_miss(self):
        resolver = GroupOfferingsResolver(InMemoryRemoteStore())
        group = resolver.get_by_id(CANONICAL_IDS[1])
        self.assertEqual(group, DEFAULT_GROUPS[1])
        self.assertIsNone(resolver.get_by_id("no-such-group"))

    def test_get_by_id_falls_back_to_seed_on_error(self):
        resolver = GroupOfferingsResolver(UnavailableRemoteStore())
        self.assertEqual(resolver.get_by_id(CANONICAL_IDS[0]), DEFAULT_GROUPS[0])
        self.assertIsNone(resolver.get_by_id("custom-1"))

    def test_unknown_type_reads_as_support_group(self):
        store = InMemoryRemoteStore()
        row = group_to_row(_group())
        row["type"] = "Book Club"
        store.upsert("group_offerings", [row], on_conflict="id")
        group = GroupOfferingsResolver(store).get_by_id("custom-1")
        self.assertEqual(group.type, GroupType.SUPPORT)


class GroupOfferingsWriteTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryRemoteStore()
        self.resolver = GroupOfferingsResolver(self.store)

    def test_upsert_then_get_returns_equal_record(self):
        group = _group()
        self.assertTrue(self.resolver.upsert(group))
        self.assertEqual(self.resolver.get_by_id(group.id), group)

    def test_upsert_updates_in_place(self):
        self.resolver.upsert(_group())
        self.resolver.upsert(_group(title="Renamed"))
        rows = self.store.select("group_offerings")
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["title"], "Renamed")

    def test_upsert_applies_defaults_to_partial_records(self):
        partial = _group(
            long_description=None,
            benefits=None,
            schedule=None,
            facilitator=None,
            image=None,
            focus=None,
            active=None,
        )
        self.resolver.upsert(partial)
        row = self.store.select_one("group_offerings", filters={"id": "custom-1"})
        self.assertNotIn(None, row.values())
        self.assertEqual(row["benefits"], [])
        self.assertFalse(row["active"])

        loaded = self.resolver.get_by_id("custom-1")
        self.assertEqual(loaded.long_description, loaded.description)

    def test_upsert_uses_id_as_conflict_key(self):
        store = MagicMock()
        GroupOfferingsResolver(store).upsert(_group())
        _, kwargs = store.upsert.call_args
        self.assertEqual(kwargs["on_conflict"], "id")

    def test_upsert_requires_an_id(self):
        with self.assertRaises(ValueError):
            self.resolver.upsert(_group(group_id=""))

    def test_remove_then_get_returns_none(self):
        self.resolver.upsert(_group())
        self.assertTrue(self.resolver.remove("custom-1"))
        self.assertIsNone(self.resolver.get_by_id("custom-1"))

    def test_remove_of_seed_id_still_resolves_to_seed(self):
        self.resolver.restore_defaults()
        self.resolver.remove(CANONICAL_IDS[0])
        self.assertEqual(self.resolver.get_by_id(CANONICAL_IDS[0]), DEFAULT_GROUPS[0])

    def test_restore_defaults_resets_canonical_and_keeps_custom(self):
        self.resolver.restore_defaults()
        self.resolver.upsert(
            _group(CANONICAL_IDS[2], title="Customized Regulation", active=False)
        )
        custom = _group()
        self.resolver.upsert(custom)

        self.assertTrue(self.resolver.restore_defaults())

        groups = {group.id: group for group in self.resolver.list()}
        for seed in DEFAULT_GROUPS:
            self.assertEqual(groups[seed.id], seed)
        self.assertEqual(groups[custom.id], custom)
        self.assertEqual(len(groups), 5)

    def test_restore_defaults_is_one_batched_write(self):
        store = MagicMock()
        GroupOfferingsResolver(store).restore_defaults()
        store.upsert.assert_called_once()
        args, kwargs = store.upsert.call_args
        self.assertEqual([row["id"] for row in args[1]], CANONICAL_IDS)
        self.assertEqual(kwargs["on_conflict"], "id")

    def test_write_errors_propagate(self):
        store = MagicMock()
        store.upsert.side_effect = StoreError("permission denied for table")
        store.delete.side_effect = StoreError("permission denied for table")
        resolver = GroupOfferingsResolver(store)
        with self.assertRaisesRegex(ContentWriteError, "save group: permission denied"):
            resolver.upsert(_group())
        with self.assertRaisesRegex(ContentWriteError, "delete group"):
            resolver.remove("custom-1")
        with self.assertRaisesRegex(ContentWriteError, "restore default groups"):
            resolver.restore_defaults()

    def test_silent_write_policy_returns_false(self):
        resolver = GroupOfferingsResolver(UnavailableRemoteStore())
        self.assertFalse(
            resolver.upsert(_group(), policy=FailurePolicy.SILENT_FALLBACK)
        )

    def test_new_draft_has_fresh_id_and_form_defaults(self):
        first = GroupOfferingsResolver.new_draft()
        second = GroupOfferingsResolver.new_draft()
        self.assertNotEqual(first.id, second.id)
        self.assertTrue(first.active)
        self.assertEqual(first.type, GroupType.SUPPORT)
        self.assertEqual(first.benefits, [])


if __name__ == "__main__":
    unittest.main()
