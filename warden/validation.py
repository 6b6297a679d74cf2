import re

from warden.errors import InvalidSteamId

# SteamID64: exactly 17 ASCII digits. re.ASCII keeps \d from matching
# other Unicode digit characters.
STEAM_ID64_PATTERN = re.compile(r"\d{17}", re.ASCII)


def is_valid_steam_id64(steam_id: str | None) -> bool:
    if not isinstance(steam_id, str):
        return False
    return STEAM_ID64_PATTERN.fullmatch(steam_id) is not None


def require_steam_id64(steam_id: str | None) -> str:
    """Return the trimmed steam_id, or raise InvalidSteamId."""
    cleaned = steam_id.strip() if isinstance(steam_id, str) else steam_id
    if not is_valid_steam_id64(cleaned):
        raise InvalidSteamId(str(steam_id))
    return cleaned
