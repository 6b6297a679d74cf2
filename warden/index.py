"""
Index maintenance for the whitelist state.

Every approve/reject goes through apply_decision(). It is the only code
that touches the mapping together with its derived views, so the rules
below live in exactly one place:

  1. A member is in at most one of {approved, rejected}.
  2. A steam_id is in the index iff at least one member maps to it.
  3. Approving removes the member from rejected. Rejecting removes it from
     approved and drops its mapping; the steam_id leaves the index only if
     no other member still owns it.
  4. Re-approving with a new steam_id overwrites that member's mapping and
     prunes the old steam_id if it is now orphaned.
"""

from warden.records import MemberStatus, WhitelistState


def owners_of(state: WhitelistState, steam_id: str) -> list[str]:
    """Members mapped to steam_id, in mapping order."""
    return [uid for uid, sid in state.users.items() if sid == steam_id]


def _prune(state: WhitelistState, steam_id: str) -> None:
    if not owners_of(state, steam_id):
        state.steamids.discard(steam_id)


def apply_decision(
    state: WhitelistState,
    discord_id: str,
    status: MemberStatus,
    steam_id: str | None = None,
) -> str | None:
    """Record an approve or reject decision for discord_id.

    Returns the steam_id the member was mapped to before the call, if any.
    """
    previous = state.users.get(discord_id)

    if status is MemberStatus.approved:
        if not steam_id:
            raise ValueError("approving a member requires a steam_id")
        state.users[discord_id] = steam_id
        state.steamids.add(steam_id)
        if previous is not None and previous != steam_id:
            _prune(state, previous)
        state.approved.add(discord_id)
        state.rejected.discard(discord_id)

    elif status is MemberStatus.rejected:
        state.rejected.add(discord_id)
        state.approved.discard(discord_id)
        if previous is not None:
            del state.users[discord_id]
            _prune(state, previous)

    else:
        raise ValueError(f"cannot apply decision {status.value!r}")

    return previous


def rebuild_index(state: WhitelistState) -> bool:
    """Recompute the steam_id index from the mapping. Returns True if it changed."""
    rebuilt = set(state.users.values())
    changed = rebuilt != state.steamids
    state.steamids = rebuilt
    return changed


def find_violations(state: WhitelistState) -> list[str]:
    """Describe every invariant breach in state. Empty list means consistent."""
    problems = []

    for uid in sorted(state.approved & state.rejected):
        problems.append(f"member {uid} is both approved and rejected")

    owned = set(state.users.values())
    for sid in sorted(state.steamids - owned):
        problems.append(f"steam_id {sid} is indexed but has no owner")
    for sid in sorted(owned - state.steamids):
        problems.append(f"steam_id {sid} is owned but missing from the index")

    return problems
