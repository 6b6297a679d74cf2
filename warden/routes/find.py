"""
GET /v1/find -- Look up a member by Discord ID, Steam ID, or both.

- Discord ID only: that member, plus any other members sharing the Steam ID.
- Steam ID only: every member mapped to it (multiple=true if more than one).
- Both: only matches when the stored Steam ID for that Discord ID is the one
  given; otherwise outcome='mismatch' (distinct from 'not_found').
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from warden.deps import get_store
from warden.errors import InvalidSteamId, MissingSearchParameters
from warden.lookup import FindOutcome, find
from warden.models.schemas import FindResponse, MemberRecord
from warden.store import WhitelistStore
from warden.validation import require_steam_id64

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/v1/find",
    response_model=FindResponse,
    summary="Find a member",
    description="Search the whitelist database by Discord ID and/or Steam ID 64.",
    tags=["Admin"],
)
async def find_member(
    discord_id: str | None = Query(default=None, description="Discord user ID to search for."),
    steam_id: str | None = Query(default=None, description="Steam ID 64 to search for."),
    store: WhitelistStore = Depends(get_store),
) -> FindResponse:
    if not discord_id and not steam_id:
        raise HTTPException(status_code=400, detail=str(MissingSearchParameters()))

    if steam_id:
        try:
            steam_id = require_steam_id64(steam_id)
        except InvalidSteamId as e:
            raise HTTPException(status_code=400, detail=str(e))

    result = find(store, discord_id=discord_id, steam_id=steam_id)

    if discord_id:
        search_type, search_value = "discord_id", discord_id
    else:
        search_type, search_value = "steam_id", steam_id

    logger.info("Find: %s=%s, outcome=%s", search_type, search_value, result.outcome.value)

    if result.outcome is FindOutcome.not_found:
        label = "Discord ID" if search_type == "discord_id" else "Steam ID"
        detail = f"No user found for {label}: {search_value}"
    else:
        detail = result.error

    return FindResponse(
        outcome=result.outcome.value,
        found=result.found,
        search_type=search_type,
        search_value=search_value,
        users=[
            MemberRecord(
                discord_id=u.discord_id,
                steam_id=u.steam_id,
                status=u.status,
                label=u.status.label,
            )
            for u in result.users
        ],
        multiple=result.multiple,
        shared_with=result.shared_with,
        detail=detail,
    )
