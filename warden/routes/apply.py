"""
POST /v1/apply -- A member applies for the whitelist.

Order of checks:
  1. Reconcile the member's roles with the database. A member who left
     and rejoined gets their whitelisted/rejected role back here.
  2. Already whitelisted or rejected (by role, or by restored role) -> stop.
  3. Steam ID on file without a decision (written by an older version) ->
     treat as already applied, give the whitelisted role back.
  4. No steam_id in the request -> 'steam_id_required'; the client should
     prompt for it and call again.
  5. Validate, approve, assign the role, relay the whitelist command.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from warden.config import Settings
from warden.deps import get_relay, get_roles, get_settings, get_store
from warden.errors import InvalidSteamId, SteamIdTaken
from warden.models.schemas import ApplyRequest, ApplyResponse
from warden.reconcile import reconcile_rejoin
from warden.records import MemberStatus
from warden.relay import CommandRelay
from warden.roles import RoleFlags, assign_status_role
from warden.routes.whitelist import conflict_detail
from warden.store import WhitelistStore
from warden.validation import require_steam_id64

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/v1/apply",
    response_model=ApplyResponse,
    summary="Apply for the whitelist",
    description=(
        "Member-facing application. Restores roles for members who rejoined, refuses members who "
        "already have a decision, and whitelists new applicants with their Steam ID 64."
    ),
    tags=["Members"],
)
async def apply(
    request: ApplyRequest,
    store: WhitelistStore = Depends(get_store),
    roles: RoleFlags = Depends(get_roles),
    relay: CommandRelay = Depends(get_relay),
    settings: Settings = Depends(get_settings),
) -> ApplyResponse:
    discord_id = request.discord_id

    reconciled = await reconcile_rejoin(store, roles, discord_id, settings.divergence_policy)
    status = reconciled.effective

    if status is MemberStatus.approved:
        return ApplyResponse(
            outcome="already_whitelisted",
            discord_id=discord_id,
            steam_id=store.get_steam_id(discord_id),
            roles_restored=reconciled.applied,
            detail="You are already whitelisted.",
        )

    if status is MemberStatus.rejected:
        return ApplyResponse(
            outcome="rejected",
            discord_id=discord_id,
            roles_restored=reconciled.applied,
            detail="Your whitelist application has been rejected.",
        )

    existing = store.get_steam_id(discord_id)
    if existing is not None:
        restored = await assign_status_role(roles, discord_id, MemberStatus.approved)
        logger.info("Re-assigned whitelisted role to %s (rejoined user with Steam ID)", discord_id)
        return ApplyResponse(
            outcome="already_applied",
            discord_id=discord_id,
            steam_id=existing,
            roles_restored=restored,
            detail=f"You have already applied with Steam ID {existing}.",
        )

    if request.steam_id is None:
        return ApplyResponse(
            outcome="steam_id_required",
            discord_id=discord_id,
            detail="Enter your Steam ID 64 to apply.",
        )

    try:
        steam_id = require_steam_id64(request.steam_id)
    except InvalidSteamId as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        store.approve(discord_id, steam_id)
    except SteamIdTaken as e:
        raise HTTPException(status_code=409, detail=conflict_detail(e))

    await assign_status_role(roles, discord_id, MemberStatus.approved)
    relayed = await relay.send(steam_id)

    logger.info("Whitelist application: %s - Steam ID %s", discord_id, steam_id)

    return ApplyResponse(
        outcome="approved",
        discord_id=discord_id,
        steam_id=steam_id,
        relayed_to=relayed,
        detail=f"Steam ID {steam_id} submitted. You are now whitelisted.",
    )
