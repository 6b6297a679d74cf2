"""
Runtime configuration, read from environment variables.

A .env file in the working directory is loaded first (python-dotenv) and
never overrides variables that are already set.

Required:
    DISCORD_BOT_TOKEN    -- bot token used for the Discord REST API
    GUILD_ID             -- guild whose roles are managed
    WHITELISTED_ROLE_ID  -- role given to approved members
    REJECTED_ROLE_ID     -- role given to rejected members
    COMMAND_CHANNELS     -- comma-separated channel IDs for the whitelist command

Optional (defaults in parentheses):
    DB_FILE              -- snapshot path (whitelist_db.json)
    UNIQUE_STEAM_IDS     -- one member per Steam ID (false)
    DIVERGENCE_POLICY    -- external | stored (external)
    WHITELIST_COMMAND    -- command template (!com wl.add {steam_id})
    DISCORD_API_URL      -- REST base URL (https://discord.com/api/v10)
    DISCORD_TIMEOUT      -- seconds per Discord call (10)
    LOG_LEVEL            -- logging level (INFO)
"""

import os
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import load_dotenv

from warden.discord_api import DEFAULT_API_URL, DEFAULT_TIMEOUT
from warden.errors import ConfigError
from warden.reconcile import DivergencePolicy
from warden.relay import DEFAULT_COMMAND

REQUIRED = {
    "DISCORD_BOT_TOKEN": "bot_token",
    "GUILD_ID": "guild_id",
    "WHITELISTED_ROLE_ID": "whitelisted_role_id",
    "REJECTED_ROLE_ID": "rejected_role_id",
    "COMMAND_CHANNELS": "command_channels",
}

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    bot_token: str = ""
    guild_id: str = ""
    whitelisted_role_id: str = ""
    rejected_role_id: str = ""
    command_channels: list[str] = field(default_factory=list)
    db_file: str = "whitelist_db.json"
    unique_steam_ids: bool = False
    divergence_policy: DivergencePolicy = DivergencePolicy.external
    whitelist_command: str = DEFAULT_COMMAND
    discord_api_url: str = DEFAULT_API_URL
    discord_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ

        policy = env.get("DIVERGENCE_POLICY", "external").strip().lower()
        try:
            divergence_policy = DivergencePolicy(policy)
        except ValueError:
            raise ConfigError(
                [], f"DIVERGENCE_POLICY must be 'external' or 'stored', got {policy!r}"
            ) from None

        timeout = env.get("DISCORD_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            discord_timeout = float(timeout)
        except ValueError:
            raise ConfigError([], f"DISCORD_TIMEOUT must be a number, got {timeout!r}") from None

        return cls(
            bot_token=env.get("DISCORD_BOT_TOKEN", "").strip(),
            guild_id=env.get("GUILD_ID", "").strip(),
            whitelisted_role_id=env.get("WHITELISTED_ROLE_ID", "").strip(),
            rejected_role_id=env.get("REJECTED_ROLE_ID", "").strip(),
            command_channels=_split_ids(env.get("COMMAND_CHANNELS", "")),
            db_file=env.get("DB_FILE", "whitelist_db.json"),
            unique_steam_ids=env.get("UNIQUE_STEAM_IDS", "").strip().lower() in TRUTHY,
            divergence_policy=divergence_policy,
            whitelist_command=env.get("WHITELIST_COMMAND", DEFAULT_COMMAND),
            discord_api_url=env.get("DISCORD_API_URL", DEFAULT_API_URL),
            discord_timeout=discord_timeout,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Raise ConfigError naming every required variable that is unset."""
        missing = [name for name, attr in REQUIRED.items() if not getattr(self, attr)]
        if missing:
            raise ConfigError(missing)
        if "{steam_id}" not in self.whitelist_command:
            raise ConfigError([], "WHITELIST_COMMAND must contain the {steam_id} placeholder")


def _split_ids(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]
