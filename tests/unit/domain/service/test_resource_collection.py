"""Unit tests for ResourceCollection."""

import pytest

from mailroom.config import DirectorySettings, PreferenceSettings, ServerSettings
from mailroom.domain.value import (
    DEFAULT_ATTRIBUTES,
    DirectoryQuery,
    PreferenceScope,
    ResourceKind,
)
from tests.stubs import StubOwner, build_collection


@pytest.fixture
def seeded(directory):
    """Alice owns one calendar and can see one of Bob's."""
    directory.add_resource(ResourceKind.CALENDAR, "alice", "alice", name="Alice")
    directory.add_resource(ResourceKind.CALENDAR, "bob", "bob", shared_with=("alice",))
    directory.add_resource(ResourceKind.CALENDAR, "carol", "carol")
    return directory


class TestGetOwned:
    """Tests for the owned partition."""

    @pytest.mark.asyncio
    async def test_fetches_once_and_memoizes(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)

        owned = await collection.get_owned()
        again = await collection.get_owned()

        assert set(owned) == {"alice"}
        assert again is owned
        assert seeded.calls["fetch_owned"] == 1

    @pytest.mark.asyncio
    async def test_derived_from_populated_shared(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)

        shared = await collection.get_shared()
        owned = await collection.get_owned()

        assert set(owned) == {"alice"}
        assert owned["alice"] is shared["alice"]
        assert seeded.calls["fetch_owned"] == 0

    @pytest.mark.asyncio
    async def test_owned_is_subset_of_shared(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)

        owned = await collection.get_owned()
        shared = await collection.get_shared()

        assert set(owned) <= set(shared)
        assert shared["alice"] is owned["alice"]

    @pytest.mark.asyncio
    async def test_stale_shared_element_resets_both_partitions(
        self, seeded, preference_repository
    ):
        collection = build_collection(seeded, preference_repository)
        shared = await collection.get_shared()
        await shared["bob"].delete()

        owned = await collection.get_owned()

        assert set(owned) == {"alice"}
        assert seeded.calls["fetch_owned"] == 1
        assert collection.peek_shared() is None

        shared = await collection.get_shared()
        assert set(shared) == {"alice"}
        assert seeded.calls["fetch_shared"] == 2

    @pytest.mark.asyncio
    async def test_stale_owned_element_refetches(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        owned = await collection.get_owned()
        await owned["alice"].delete()

        assert await collection.get_owned() == {}
        assert seeded.calls["fetch_owned"] == 2

    @pytest.mark.asyncio
    async def test_unavailable_backend_is_not_memoized(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        seeded.available = False

        assert await collection.get_owned() == {}

        seeded.available = True
        assert set(await collection.get_owned()) == {"alice"}
        assert seeded.calls["fetch_owned"] == 2

    @pytest.mark.asyncio
    async def test_elements_carry_owner_context(self, seeded, preference_repository):
        owner = StubOwner()
        collection = build_collection(seeded, preference_repository, owner=owner)

        shared = await collection.get_shared()

        assert all(resource.user is owner for resource in shared.values())

    @pytest.mark.asyncio
    async def test_server_filter_override_is_passed(self, seeded, preference_repository):
        directory_settings = DirectorySettings(
            servers={
                "ro": ServerSettings(
                    filters={DirectoryQuery.SHARED_TASKSLISTS: "(acl=alice:r)"}
                )
            }
        )
        collection = build_collection(
            seeded,
            preference_repository,
            owner=StubOwner(server="ro"),
            kind=ResourceKind.TASKSLIST,
            directory_settings=directory_settings,
        )

        await collection.get_shared()
        await collection.get_owned(attributes="name")

        assert seeded.filters == [("fetch_shared", "(acl=alice:r)")]
        assert seeded.attributes == [
            ("fetch_shared", list(DEFAULT_ATTRIBUTES[DirectoryQuery.SHARED_TASKSLISTS]))
        ]

    @pytest.mark.asyncio
    async def test_owned_listing_uses_its_own_query(self, seeded, preference_repository):
        directory_settings = DirectorySettings(
            servers={
                "default": ServerSettings(
                    filters={DirectoryQuery.OWNED_CALENDARS: "(owner=alice)"}
                )
            }
        )
        collection = build_collection(
            seeded, preference_repository, directory_settings=directory_settings
        )

        await collection.get_owned(attributes="name")
        collection.invalidate()
        await collection.get_shared()

        assert seeded.filters == [("fetch_owned", "(owner=alice)"), ("fetch_shared", None)]
        assert seeded.attributes[0] == ("fetch_owned", ["name"])


class TestSetDefault:
    """Tests for recording the default resource."""

    @pytest.mark.asyncio
    async def test_set_default_persists_preference(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        owned = await collection.get_owned()

        assert await collection.set_default(owned["alice"]) is True

        stored = preference_repository.stored("alice", PreferenceScope.CALENDAR, "default_calendar")
        assert stored == "alice"

    @pytest.mark.asyncio
    async def test_set_default_leaves_partitions(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        owned = await collection.get_owned()
        shared = await collection.get_shared()

        await collection.set_default("bob")

        assert collection.peek_owned() is owned
        assert collection.peek_shared() is shared

    @pytest.mark.asyncio
    async def test_rejected_preference_keeps_default(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        current = await collection.get_default()
        owned = await collection.get_owned()
        preference_repository.accept_writes = False

        assert await collection.set_default(owned["alice"]) is False
        assert await collection.get_default() is current

    @pytest.mark.asyncio
    async def test_set_default_without_id_fails(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)

        assert await collection.set_default("") is False
        assert preference_repository.calls["persist"] == 0


class TestCreateDefault:
    """Tests for creating the default resource."""

    @pytest.mark.asyncio
    async def test_create_default_renders_template(self, directory, preference_repository):
        owner = StubOwner()
        collection = build_collection(directory, preference_repository, owner=owner)

        assert await collection.create_default("%%fullname%% (%%uid%%)") is True

        record = directory.stored(ResourceKind.CALENDAR, "alice")
        assert record is not None
        assert record.owner == "alice"
        assert record.name == "Alice Liddell (alice)"
        stored = preference_repository.stored("alice", PreferenceScope.CALENDAR, "default_calendar")
        assert stored == "alice"
        assert owner.changed == [ResourceKind.CALENDAR]

    @pytest.mark.asyncio
    async def test_missing_placeholder_value_renders_empty(
        self, directory, preference_repository
    ):
        owner = StubOwner(email=None)
        collection = build_collection(directory, preference_repository, owner=owner)

        await collection.create_default("Contacts <%%email%%>")

        assert directory.stored(ResourceKind.CALENDAR, "alice").name == "Contacts <>"

    @pytest.mark.asyncio
    async def test_without_template_uses_fullname(self, directory, preference_repository):
        collection = build_collection(directory, preference_repository)

        await collection.create_default()

        assert directory.stored(ResourceKind.CALENDAR, "alice").name == "Alice Liddell"

    @pytest.mark.asyncio
    async def test_created_defaults_preferences_written(
        self, directory, preference_repository
    ):
        settings = PreferenceSettings(
            created_defaults={ResourceKind.CALENDAR: {"display_cals": "a:0:{}"}}
        )
        collection = build_collection(directory, preference_repository, settings=settings)

        await collection.create_default()

        stored = preference_repository.stored("alice", PreferenceScope.CALENDAR, "display_cals")
        assert stored == "a:0:{}"

    @pytest.mark.asyncio
    async def test_rejected_resource_sets_no_default(self, directory, preference_repository):
        directory.accept_writes = False
        collection = build_collection(directory, preference_repository)

        assert await collection.create_default() is False
        assert preference_repository.calls["persist"] == 0

    @pytest.mark.asyncio
    async def test_taskslist_uses_its_own_scope(self, directory, preference_repository):
        collection = build_collection(
            directory, preference_repository, kind=ResourceKind.TASKSLIST
        )

        await collection.create_default()

        stored = preference_repository.stored(
            "alice", PreferenceScope.TASKSLIST, "default_taskslist"
        )
        assert stored == "alice"
        assert directory.stored(ResourceKind.TASKSLIST, "alice").owner == "alice"


class TestInvalidateAndSnapshot:
    """Tests for invalidation and snapshots."""

    @pytest.mark.asyncio
    async def test_invalidate_clears_everything(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        await collection.get_shared()
        await collection.get_owned()
        await collection.get_default()

        collection.invalidate()

        snapshot = collection.snapshot()
        assert snapshot.owned is None
        assert snapshot.shared is None
        assert snapshot.default_resolved is False

    @pytest.mark.asyncio
    async def test_snapshot_of_populated_partitions(self, seeded, preference_repository):
        collection = build_collection(seeded, preference_repository)
        await collection.get_owned()

        snapshot = collection.snapshot()

        assert [record.id for record in snapshot.owned] == ["alice"]
        assert snapshot.shared is None
