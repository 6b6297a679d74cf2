"""Tests for membership lookups."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from warden.lookup import FindOutcome, find
from warden.records import MemberStatus
from warden.sinks import MemorySink
from warden.store import WhitelistStore

S1 = "76561198000000001"
S2 = "76561198000000002"


def make_store():
    store = WhitelistStore.open(MemorySink())
    store.approve("A", S1)
    store.approve("B", S1)
    store.approve("C", S2)
    store.reject("R")
    return store


class TestFindByDiscordId:

    def test_found_with_shared_owners(self):
        result = find(make_store(), discord_id="A")

        assert result.found
        assert len(result.users) == 1
        assert result.users[0].steam_id == S1
        assert result.users[0].status is MemberStatus.approved
        assert result.shared_with == ["B"]
        assert result.multiple is False

    def test_sole_owner_has_no_shared(self):
        result = find(make_store(), discord_id="C")
        assert result.found
        assert result.shared_with == []

    def test_rejected_member_reported_without_steam_id(self):
        result = find(make_store(), discord_id="R")

        assert result.found
        assert result.users[0].steam_id is None
        assert result.users[0].status is MemberStatus.rejected

    def test_unknown_member(self):
        result = find(make_store(), discord_id="nobody")
        assert result.outcome is FindOutcome.not_found
        assert result.users == []


class TestFindBySteamId:

    def test_multiple_owners(self):
        result = find(make_store(), steam_id=S1)

        assert result.found
        assert result.multiple is True
        assert [u.discord_id for u in result.users] == ["A", "B"]

    def test_single_owner(self):
        result = find(make_store(), steam_id=S2)
        assert result.found
        assert result.multiple is False
        assert result.users[0].discord_id == "C"

    def test_unknown_steam_id(self):
        result = find(make_store(), steam_id="76561198999999999")
        assert result.outcome is FindOutcome.not_found


class TestFindByBoth:

    def test_matching_pair(self):
        result = find(make_store(), discord_id="A", steam_id=S1)
        assert result.found
        assert result.users[0].discord_id == "A"

    def test_mismatched_pair(self):
        result = find(make_store(), discord_id="A", steam_id=S2)

        assert result.outcome is FindOutcome.mismatch
        assert result.error == "Discord ID and Steam ID do not match in database"
        assert not result.found

    def test_pair_with_unmapped_member(self):
        result = find(make_store(), discord_id="R", steam_id=S1)
        assert result.outcome is FindOutcome.mismatch


class TestNoParameters:

    def test_neither_given(self):
        result = find(make_store())
        assert result.outcome is FindOutcome.no_parameters
        assert result.error == "No search parameters provided"

    def test_empty_strings_count_as_absent(self):
        result = find(make_store(), discord_id="", steam_id="")
        assert result.outcome is FindOutcome.no_parameters
