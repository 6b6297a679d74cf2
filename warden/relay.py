"""
Game-server command relay.

After a member is whitelisted, the game server's bridge bot picks the new
Steam ID up from one or more Discord channels. We post the same command
to each configured channel; one channel failing does not stop the rest.
"""

import logging

from warden.discord_api import DiscordClient
from warden.errors import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "!com wl.add {steam_id}"


class CommandRelay:

    def __init__(self, client: DiscordClient, channel_ids: list[str], template: str = DEFAULT_COMMAND):
        self.client = client
        self.channel_ids = list(channel_ids)
        self.template = template

    def format(self, steam_id: str) -> str:
        return self.template.format(steam_id=steam_id)

    async def send(self, steam_id: str) -> list[str]:
        """Post the whitelist command everywhere. Returns channel IDs that accepted it."""
        command = self.format(steam_id)
        delivered = []
        for channel_id in self.channel_ids:
            try:
                await self.client.send_message(channel_id, command)
            except ExternalServiceError as e:
                logger.error("Error sending command to channel %s: %s", channel_id, e)
                continue
            logger.info("Command sent to channel %s: %s", channel_id, command)
            delivered.append(channel_id)
        return delivered
