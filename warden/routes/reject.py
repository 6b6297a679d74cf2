"""
POST /v1/reject -- Manual rejection by an admin.

The member can be named by Discord ID, by Steam ID, or both. When both
are given they must match the stored mapping (409 otherwise). A Steam ID
alone must resolve to exactly one member: if several members share it
the request is refused with the list of owners.

Rejecting drops the member's Steam ID mapping. The Steam ID itself stays
on the whitelist index while another member still owns it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from warden.deps import get_roles, get_store
from warden.errors import InvalidSteamId, MissingSearchParameters
from warden.models.schemas import RejectRequest, RejectResponse
from warden.records import MemberStatus
from warden.roles import RoleFlags, assign_status_role
from warden.store import WhitelistStore
from warden.validation import require_steam_id64

logger = logging.getLogger(__name__)

router = APIRouter()


def resolve_target(store: WhitelistStore, discord_id: str | None, steam_id: str | None) -> str:
    """Work out which member a reject request is about.

    With both IDs given they must match the stored mapping, as in /v1/find.
    """
    if discord_id:
        if steam_id and store.get_steam_id(discord_id) != steam_id:
            raise HTTPException(
                status_code=409,
                detail={
                    "error": "mismatch",
                    "message": "Discord ID and Steam ID do not match in database",
                    "stored_steam_id": store.get_steam_id(discord_id),
                },
            )
        return discord_id

    owners = store.owners_of(steam_id)
    if not owners:
        raise HTTPException(status_code=404, detail="No user found with that Steam ID.")
    if len(owners) > 1:
        mentions = ", ".join(f"<@{uid}>" for uid in owners)
        raise HTTPException(
            status_code=409,
            detail={
                "error": "multiple_owners",
                "message": (
                    f"Multiple users found with Steam ID {steam_id}: {mentions}. "
                    "Please specify the Discord ID to reject a specific user."
                ),
                "owners": owners,
            },
        )
    return owners[0]


@router.post(
    "/v1/reject",
    response_model=RejectResponse,
    summary="Reject a member",
    description="Reject a member by Discord ID and/or Steam ID 64.",
    tags=["Admin"],
)
async def reject(
    request: RejectRequest,
    store: WhitelistStore = Depends(get_store),
    roles: RoleFlags = Depends(get_roles),
) -> RejectResponse:
    if not request.discord_id and not request.steam_id:
        raise HTTPException(status_code=400, detail=str(MissingSearchParameters()))

    steam_id = None
    if request.steam_id:
        try:
            steam_id = require_steam_id64(request.steam_id)
        except InvalidSteamId as e:
            raise HTTPException(status_code=400, detail=str(e))

    discord_id = resolve_target(store, request.discord_id, steam_id)

    if store.is_rejected(discord_id):
        raise HTTPException(
            status_code=409,
            detail={"error": "already_rejected", "message": "User is already rejected."},
        )

    previous = store.reject(discord_id)
    roles_synced = await assign_status_role(roles, discord_id, MemberStatus.rejected)

    logger.info("Manual reject: user %s - Steam ID %s", discord_id, previous or "N/A")

    return RejectResponse(
        discord_id=discord_id,
        steam_id=previous,
        roles_synced=roles_synced,
        detail=f"User <@{discord_id}> has been rejected.",
    )
