"""
Tests for the index maintainer.

apply_decision() is the only routine that mutates the mapping and its
derived views, so the invariants are checked here directly on the state.
"""

import os
import random
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from warden.index import apply_decision, find_violations, owners_of, rebuild_index
from warden.records import MemberStatus, WhitelistState

APPROVED = MemberStatus.approved
REJECTED = MemberStatus.rejected

S1 = "76561198000000001"
S2 = "76561198000000002"
S3 = "76561198000000003"


class TestApprove:

    def test_first_approval_creates_mapping(self):
        state = WhitelistState()
        previous = apply_decision(state, "A", APPROVED, S1)

        assert previous is None
        assert state.users == {"A": S1}
        assert state.steamids == {S1}
        assert state.approved == {"A"}
        assert state.rejected == set()

    def test_approval_clears_rejection(self):
        state = WhitelistState()
        apply_decision(state, "A", REJECTED)
        apply_decision(state, "A", APPROVED, S1)

        assert "A" in state.approved
        assert "A" not in state.rejected

    def test_reapproval_with_new_id_prunes_orphan(self):
        state = WhitelistState()
        apply_decision(state, "A", APPROVED, S1)
        previous = apply_decision(state, "A", APPROVED, S2)

        assert previous == S1
        assert state.users == {"A": S2}
        assert state.steamids == {S2}

    def test_reapproval_keeps_old_id_still_shared(self):
        """Old steam_id stays indexed while another member owns it."""
        state = WhitelistState()
        apply_decision(state, "A", APPROVED, S1)
        apply_decision(state, "B", APPROVED, S1)
        apply_decision(state, "A", APPROVED, S2)

        assert state.steamids == {S1, S2}
        assert owners_of(state, S1) == ["B"]

    def test_approve_requires_steam_id(self):
        with pytest.raises(ValueError):
            apply_decision(WhitelistState(), "A", APPROVED)

    def test_unknown_is_not_a_decision(self):
        with pytest.raises(ValueError):
            apply_decision(WhitelistState(), "A", MemberStatus.unknown, S1)


class TestReject:

    def test_reject_prunes_exclusive_id(self):
        state = WhitelistState()
        apply_decision(state, "A", APPROVED, S1)
        previous = apply_decision(state, "A", REJECTED)

        assert previous == S1
        assert state.users == {}
        assert state.steamids == set()
        assert state.rejected == {"A"}
        assert state.approved == set()

    def test_reject_keeps_shared_id(self):
        state = WhitelistState()
        apply_decision(state, "A", APPROVED, S1)
        apply_decision(state, "B", APPROVED, S1)
        apply_decision(state, "A", REJECTED)

        assert state.steamids == {S1}
        assert state.users == {"B": S1}

    def test_reject_unknown_member(self):
        state = WhitelistState()
        assert apply_decision(state, "Z", REJECTED) is None
        assert state.rejected == {"Z"}
        assert find_violations(state) == []


class TestInvariants:

    def test_random_sequences_stay_consistent(self):
        """Invariants hold after every step of many random approve/reject sequences."""
        rng = random.Random(1234)
        members = ["A", "B", "C", "D"]
        steam_ids = [S1, S2, S3]

        for _ in range(50):
            state = WhitelistState()
            for _ in range(40):
                uid = rng.choice(members)
                if rng.random() < 0.6:
                    apply_decision(state, uid, APPROVED, rng.choice(steam_ids))
                else:
                    apply_decision(state, uid, REJECTED)
                assert find_violations(state) == []
                assert not (state.approved & state.rejected)
                assert state.steamids == set(state.users.values())

    def test_find_violations_reports_drift(self):
        state = WhitelistState(
            users={"A": S1},
            steamids={S2},
            approved={"A", "B"},
            rejected={"B"},
        )
        problems = find_violations(state)

        assert "member B is both approved and rejected" in problems
        assert f"steam_id {S2} is indexed but has no owner" in problems
        assert f"steam_id {S1} is owned but missing from the index" in problems

    def test_rebuild_index(self):
        state = WhitelistState(users={"A": S1, "B": S1}, steamids={S2})
        assert rebuild_index(state) is True
        assert state.steamids == {S1}
        assert rebuild_index(state) is False
