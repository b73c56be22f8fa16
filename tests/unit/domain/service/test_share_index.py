"""Unit tests for ShareIndex and GroupIndex."""

import pytest

from mailroom.config import DirectorySettings, ServerSettings
from mailroom.domain.model import SharedMailbox
from mailroom.domain.service import GroupIndex, ResourceFactory, ShareIndex
from mailroom.domain.service.share_index import RecordIndex
from mailroom.domain.value import DirectoryQuery, ShareTier
from tests.stubs import ChangeCounter, StubOwner


def build_index(index_class, directory, settings=None, owner=None):
    return index_class(
        owner or StubOwner(),
        directory,
        ResourceFactory(directory),
        settings or DirectorySettings(),
        ChangeCounter(),
    )


@pytest.fixture
def shares(directory):
    directory.add_share(ShareTier.SHARED, "alice", "team", fullname="Team Box")
    directory.add_share(ShareTier.SHARED, "alice", "sales", fullname="Sales")
    directory.add_share(ShareTier.SEND, "alice", "team", fullname="Team Box")
    directory.add_share(ShareTier.MANAGE, "alice", "ops", fullname="Ops")
    return directory


class TestShareIndex:
    """Tests for mailbox share tiers."""

    @pytest.mark.asyncio
    async def test_tiers_are_fetched_independently(self, shares):
        index = build_index(ShareIndex, shares)

        shared = await index.get(ShareTier.SHARED)

        assert set(shared) == {"team", "sales"}
        assert shares.calls["fetch_share_tier:shared"] == 1
        assert shares.calls["fetch_share_tier:send"] == 0
        assert index.peek(ShareTier.SEND) is None

    @pytest.mark.asyncio
    async def test_tier_is_memoized(self, shares):
        index = build_index(ShareIndex, shares)

        first = await index.get(ShareTier.MANAGE)
        second = await index.get(ShareTier.MANAGE)

        assert first is second
        assert shares.calls["fetch_share_tier:manage"] == 1

    @pytest.mark.asyncio
    async def test_invalidate_all_forces_refetch(self, shares):
        index = build_index(ShareIndex, shares)
        await index.get(ShareTier.SHARED)
        await index.get(ShareTier.SEND)

        index.invalidate_all()
        await index.get(ShareTier.SHARED)

        assert shares.calls["fetch_share_tier:shared"] == 2
        assert index.peek(ShareTier.SEND) is None

    @pytest.mark.asyncio
    async def test_wrappers_are_shared_mailboxes(self, shares):
        index = build_index(ShareIndex, shares)

        shared = await index.get(ShareTier.SHARED)

        assert isinstance(shared["team"], SharedMailbox)
        assert shared["team"].fullname == "Team Box"

    @pytest.mark.asyncio
    async def test_user_view_shares_the_tier_fetch(self, shares):
        index = build_index(ShareIndex, shares)
        built = []

        def to_user(mailbox):
            built.append(mailbox.id)
            return mailbox.entry.first("fullname")

        users = await index.get_users(ShareTier.SHARED, to_user)
        again = await index.get_users(ShareTier.SHARED, to_user)
        mailboxes = await index.get(ShareTier.SHARED)

        assert users == {"team": "Team Box", "sales": "Sales"}
        assert again is users
        assert set(mailboxes) == set(users)
        assert sorted(built) == ["sales", "team"]
        assert shares.calls["fetch_share_tier:shared"] == 1

    @pytest.mark.asyncio
    async def test_server_filter_override_is_passed(self, shares):
        settings = DirectorySettings(
            servers={
                "default": ServerSettings(
                    filters={DirectoryQuery.SEND_MAILBOXES: "(mineqSend=alice)"}
                )
            }
        )
        index = build_index(ShareIndex, shares, settings=settings)

        await index.get(ShareTier.SEND)
        await index.get(ShareTier.SHARED)

        assert ("fetch_share_tier:send", "(mineqSend=alice)") in shares.filters
        assert ("fetch_share_tier:shared", None) in shares.filters

    @pytest.mark.asyncio
    async def test_owner_without_uid_gets_nothing(self, shares):
        index = build_index(ShareIndex, shares, owner=StubOwner(uid=None))

        assert await index.get(ShareTier.SHARED) == {}
        assert shares.calls["fetch_share_tier:shared"] == 0

    @pytest.mark.asyncio
    async def test_snapshot_distinguishes_unset_tiers(self, shares):
        index = build_index(ShareIndex, shares)
        await index.get(ShareTier.MANAGE)

        snapshot = index.snapshot()

        assert snapshot[ShareTier.SHARED] is None
        assert [record.id for record in snapshot[ShareTier.MANAGE]] == ["ops"]


class TestGroupIndex:
    """Tests for group memberships."""

    @pytest.mark.asyncio
    async def test_each_query_has_its_own_set(self, directory):
        directory.add_group(DirectoryQuery.USER_GROUPS, "alice", "owned-group")
        directory.add_group(DirectoryQuery.GROUPS_MEMBER, "alice", "devs")
        directory.add_group(DirectoryQuery.LISTS_MEMBER, "alice", "announce")
        index = build_index(GroupIndex, directory)

        groups = await index.get(DirectoryQuery.USER_GROUPS)
        member = await index.get(DirectoryQuery.GROUPS_MEMBER)
        lists = await index.get(DirectoryQuery.LISTS_MEMBER)

        assert set(groups) == {"owned-group"}
        assert set(member) == {"devs"}
        assert set(lists) == {"announce"}
        assert directory.calls["fetch_groups:user_groups"] == 1
        assert directory.calls["fetch_groups:groups_member"] == 1
        assert directory.calls["fetch_groups:lists_member"] == 1

    @pytest.mark.asyncio
    async def test_membership_filter_override(self, directory):
        settings = DirectorySettings(
            servers={
                "default": ServerSettings(
                    filters={DirectoryQuery.LISTS_MEMBER: "(mineqMembreListe=alice)"}
                )
            }
        )
        index = build_index(GroupIndex, directory, settings=settings)

        await index.get(DirectoryQuery.LISTS_MEMBER)

        assert directory.filters == [("fetch_groups:lists_member", "(mineqMembreListe=alice)")]


class TestRecordIndex:
    """Tests for the index base class."""

    def test_base_cannot_be_instantiated(self, directory):
        with pytest.raises(TypeError):
            build_index(RecordIndex, directory)

    def test_subclass_must_implement_fetch(self, directory):
        class QueryOnly(RecordIndex):
            keys = (DirectoryQuery.USER_GROUPS,)

            def query_for(self, key):
                return key

        with pytest.raises(TypeError):
            build_index(QueryOnly, directory)
