"""
Membership record types.

WhitelistState is the whole in-memory store: the member -> SteamID mapping
plus the three views derived from it. Only warden.index mutates it.
"""

from dataclasses import dataclass, field
from enum import Enum


class MemberStatus(str, Enum):
    """Decision recorded for a member."""

    approved = "approved"
    rejected = "rejected"
    unknown = "unknown"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS = {
    MemberStatus.approved: "✅ Whitelisted",
    MemberStatus.rejected: "❌ Rejected",
    MemberStatus.unknown: "⚪ Unknown",
}


@dataclass
class WhitelistState:
    users: dict[str, str] = field(default_factory=dict)   # discord_id -> steam_id
    steamids: set[str] = field(default_factory=set)       # every steam_id owned by >= 1 member
    approved: set[str] = field(default_factory=set)       # discord_ids with the approved decision
    rejected: set[str] = field(default_factory=set)       # discord_ids with the rejected decision

    def copy(self) -> "WhitelistState":
        return WhitelistState(
            users=dict(self.users),
            steamids=set(self.steamids),
            approved=set(self.approved),
            rejected=set(self.rejected),
        )


@dataclass
class MemberView:
    """One member as reported by a lookup."""

    discord_id: str
    steam_id: str | None
    status: MemberStatus
