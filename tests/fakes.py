"""In-memory stand-ins for the Discord role system and command relay."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from warden.errors import ExternalServiceError
from warden.records import MemberStatus


class FakeRoles:
    """RoleFlags over a dict. Members missing from `members` are not in the guild."""

    def __init__(self, members: dict[str, set[MemberStatus]] | None = None, fail: bool = False):
        self.members = members if members is not None else {}
        self.fail = fail
        self.fail_writes = False
        self.calls: list[tuple[str, str, MemberStatus | None]] = []

    async def flags(self, discord_id):
        self.calls.append(("flags", discord_id, None))
        if self.fail:
            raise ExternalServiceError("Discord unavailable", status_code=503)
        if discord_id not in self.members:
            return None
        return set(self.members[discord_id])

    async def add(self, discord_id, flag):
        self.calls.append(("add", discord_id, flag))
        if self.fail or self.fail_writes:
            raise ExternalServiceError("Discord unavailable", status_code=503)
        self.members.setdefault(discord_id, set()).add(flag)

    async def remove(self, discord_id, flag):
        self.calls.append(("remove", discord_id, flag))
        if self.fail or self.fail_writes:
            raise ExternalServiceError("Discord unavailable", status_code=503)
        self.members.setdefault(discord_id, set()).discard(flag)

    def writes(self, kind: str) -> list[tuple[str, MemberStatus]]:
        return [(uid, flag) for (k, uid, flag) in self.calls if k == kind]


class FakeRelay:
    def __init__(self, channel_ids=("900", "901")):
        self.channel_ids = list(channel_ids)
        self.sent: list[str] = []

    async def send(self, steam_id):
        self.sent.append(steam_id)
        return list(self.channel_ids)
