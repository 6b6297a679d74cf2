"""
POST /v1/whitelist -- Manual approval by an admin.

Maps a Discord member to a Steam ID, gives them the whitelisted role and
relays the whitelist command to the game server channels.

If the member already has a different Steam ID on file, nothing changes
and the caller gets 409 with the existing ID. Repeat the request with
confirm=true to overwrite it. Several members may share one Steam ID
unless the server runs with UNIQUE_STEAM_IDS.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from warden.deps import get_relay, get_roles, get_store
from warden.errors import InvalidSteamId, MappingConflict, SteamIdTaken
from warden.models.schemas import WhitelistRequest, WhitelistResponse
from warden.records import MemberStatus
from warden.relay import CommandRelay
from warden.roles import RoleFlags, assign_status_role
from warden.store import WhitelistStore
from warden.validation import require_steam_id64

logger = logging.getLogger(__name__)

router = APIRouter()


def conflict_detail(e: MappingConflict | SteamIdTaken) -> dict:
    if isinstance(e, MappingConflict):
        return {
            "error": "steam_id_conflict",
            "message": f"{e} -- resend with confirm=true to overwrite with {e.requested_steam_id}.",
            "discord_id": e.discord_id,
            "existing_steam_id": e.existing_steam_id,
            "requested_steam_id": e.requested_steam_id,
        }
    return {
        "error": "steam_id_taken",
        "message": str(e),
        "steam_id": e.steam_id,
        "owners": e.owners,
    }


@router.post(
    "/v1/whitelist",
    response_model=WhitelistResponse,
    summary="Whitelist a member",
    description=(
        "Approve a Discord member with a Steam ID 64. Returns 409 if the member already has a "
        "different Steam ID and confirm is not set."
    ),
    tags=["Admin"],
)
async def whitelist(
    request: WhitelistRequest,
    store: WhitelistStore = Depends(get_store),
    roles: RoleFlags = Depends(get_roles),
    relay: CommandRelay = Depends(get_relay),
) -> WhitelistResponse:
    try:
        steam_id = require_steam_id64(request.steam_id)
    except InvalidSteamId as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        previous = store.approve(request.discord_id, steam_id, overwrite=request.confirm)
    except (MappingConflict, SteamIdTaken) as e:
        raise HTTPException(status_code=409, detail=conflict_detail(e))

    roles_synced = await assign_status_role(roles, request.discord_id, MemberStatus.approved)
    relayed = await relay.send(steam_id)

    logger.info(
        "Manual whitelist: user %s - Steam ID %s (previous: %s)",
        request.discord_id, steam_id, previous,
    )

    return WhitelistResponse(
        discord_id=request.discord_id,
        steam_id=steam_id,
        previous_steam_id=previous,
        roles_synced=roles_synced,
        relayed_to=relayed,
        detail=f"User <@{request.discord_id}> has been whitelisted with Steam ID {steam_id}.",
    )
