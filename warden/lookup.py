"""
Membership lookups by Discord ID, Steam ID, or both.

The result always says which of four things happened:

  found          -- one or more members reported in `users`
  not_found      -- nothing on file for the given identity
  mismatch       -- both IDs given, but they belong to different records
  no_parameters  -- neither ID given
"""

from dataclasses import dataclass, field
from enum import Enum

from warden.records import MemberStatus, MemberView
from warden.store import WhitelistStore


class FindOutcome(str, Enum):
    found = "found"
    not_found = "not_found"
    mismatch = "mismatch"
    no_parameters = "no_parameters"


@dataclass
class FindResult:
    outcome: FindOutcome
    users: list[MemberView] = field(default_factory=list)
    multiple: bool = False                               # steam_id search with > 1 owner
    shared_with: list[str] = field(default_factory=list)  # other members on the same steam_id
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.outcome is FindOutcome.found


def find(
    store: WhitelistStore,
    discord_id: str | None = None,
    steam_id: str | None = None,
) -> FindResult:
    if discord_id and steam_id:
        if store.get_steam_id(discord_id) != steam_id:
            return FindResult(
                outcome=FindOutcome.mismatch,
                error="Discord ID and Steam ID do not match in database",
            )
        return find_by_discord_id(store, discord_id)

    if discord_id:
        return find_by_discord_id(store, discord_id)

    if steam_id:
        return find_by_steam_id(store, steam_id)

    return FindResult(
        outcome=FindOutcome.no_parameters,
        error="No search parameters provided",
    )


def find_by_discord_id(store: WhitelistStore, discord_id: str) -> FindResult:
    steam_id = store.get_steam_id(discord_id)
    status = store.status_of(discord_id)

    if steam_id is None:
        # Rejection drops the mapping, so a rejected member is still
        # reportable, just without a Steam ID on file.
        if status is MemberStatus.unknown:
            return FindResult(outcome=FindOutcome.not_found)
        return FindResult(
            outcome=FindOutcome.found,
            users=[MemberView(discord_id=discord_id, steam_id=None, status=status)],
        )

    others = [uid for uid in store.owners_of(steam_id) if uid != discord_id]
    return FindResult(
        outcome=FindOutcome.found,
        users=[MemberView(discord_id=discord_id, steam_id=steam_id, status=status)],
        shared_with=others,
    )


def find_by_steam_id(store: WhitelistStore, steam_id: str) -> FindResult:
    owners = store.owners_of(steam_id)
    if not owners:
        return FindResult(outcome=FindOutcome.not_found)

    users = [
        MemberView(discord_id=uid, steam_id=steam_id, status=store.status_of(uid))
        for uid in owners
    ]
    return FindResult(
        outcome=FindOutcome.found,
        users=users,
        multiple=len(users) > 1,
    )
