"""
External role flags.

A member carries at most two flags we care about: the whitelisted role
(MemberStatus.approved) and the rejected role (MemberStatus.rejected).
The role system is separate from the store and can drift from it, most
often because a member left the guild and came back without roles.

All methods may raise ExternalServiceError.
"""

import logging
from typing import Protocol

from warden.discord_api import DiscordClient
from warden.errors import ExternalServiceError
from warden.records import MemberStatus

logger = logging.getLogger(__name__)


class RoleFlags(Protocol):
    async def flags(self, discord_id: str) -> set[MemberStatus] | None:
        """Flags currently on the member; None if the member is not in the guild."""
        ...

    async def add(self, discord_id: str, flag: MemberStatus) -> None: ...

    async def remove(self, discord_id: str, flag: MemberStatus) -> None: ...


class DiscordRoleFlags:
    """RoleFlags backed by two guild roles."""

    def __init__(
        self,
        client: DiscordClient,
        guild_id: str,
        whitelisted_role_id: str,
        rejected_role_id: str,
    ):
        self.client = client
        self.guild_id = guild_id
        self.role_ids = {
            MemberStatus.approved: whitelisted_role_id,
            MemberStatus.rejected: rejected_role_id,
        }

    def _role_id(self, flag: MemberStatus) -> str:
        try:
            return self.role_ids[flag]
        except KeyError:
            raise ValueError(f"no role is mapped to {flag.value!r}") from None

    async def flags(self, discord_id: str) -> set[MemberStatus] | None:
        member = await self.client.get_member(self.guild_id, discord_id)
        if member is None:
            return None
        held = set(member.get("roles") or [])
        return {flag for flag, role_id in self.role_ids.items() if role_id in held}

    async def add(self, discord_id: str, flag: MemberStatus) -> None:
        await self.client.add_role(self.guild_id, discord_id, self._role_id(flag))
        logger.info("Added %s role to %s", flag.value, discord_id)

    async def remove(self, discord_id: str, flag: MemberStatus) -> None:
        await self.client.remove_role(self.guild_id, discord_id, self._role_id(flag))
        logger.info("Removed %s role from %s", flag.value, discord_id)


OPPOSITE = {
    MemberStatus.approved: MemberStatus.rejected,
    MemberStatus.rejected: MemberStatus.approved,
}


async def assign_status_role(roles: RoleFlags, discord_id: str, flag: MemberStatus) -> bool:
    """Give the member the role for flag and take away the opposite one.

    Best-effort: returns False (and logs) when the member is not in the
    guild or Discord fails. The store is authoritative either way, and a
    missing role is restored when the member rejoins.
    """
    try:
        held = await roles.flags(discord_id)
        if held is None:
            logger.warning(
                "User %s not found in guild - roles will be applied when they rejoin", discord_id,
            )
            return False
        await roles.add(discord_id, flag)
        if OPPOSITE[flag] in held:
            await roles.remove(discord_id, OPPOSITE[flag])
    except ExternalServiceError as e:
        logger.error("Error managing roles for %s: %s", discord_id, e)
        return False
    return True
