"""
Exception types.

Validation and conflict errors are raised to the caller and mapped to
HTTP 400 / 409 by the routes. Storage failures never leave the store.
External-service failures are caught and logged by whoever made the call.
"""

from typing import Any, Optional


class WardenError(Exception):
    """Base exception for whitelist errors."""


# ── Validation ────────────────────────────────────────────────────────────


class InvalidSteamId(WardenError):
    def __init__(self, steam_id: str):
        super().__init__("Invalid Steam ID format. Must be 17 digits.")
        self.steam_id = steam_id


class MissingSearchParameters(WardenError):
    def __init__(self):
        super().__init__("You must provide either a Discord ID or a Steam ID (or both).")


# ── Conflicts ─────────────────────────────────────────────────────────────


class MappingConflict(WardenError):
    """The member already owns a different steam_id; overwriting needs confirmation."""

    def __init__(self, discord_id: str, existing_steam_id: str, requested_steam_id: str):
        super().__init__(
            f"User {discord_id} is already whitelisted with Steam ID {existing_steam_id}"
        )
        self.discord_id = discord_id
        self.existing_steam_id = existing_steam_id
        self.requested_steam_id = requested_steam_id


class SteamIdTaken(WardenError):
    """Unique mode only: another member already owns the steam_id."""

    def __init__(self, steam_id: str, owners: list[str]):
        super().__init__(f"Steam ID {steam_id} is already used by another member")
        self.steam_id = steam_id
        self.owners = owners


# ── External systems ──────────────────────────────────────────────────────


class ExternalServiceError(WardenError):
    """A call to Discord (roles, channel messages) failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ── Configuration ─────────────────────────────────────────────────────────


class ConfigError(WardenError):
    def __init__(self, missing: list[str], message: Optional[str] = None):
        super().__init__(
            message or f"Missing required environment variables: {', '.join(missing)}"
        )
        self.missing = missing
