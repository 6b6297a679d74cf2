"""
POST /v1/members/{discord_id}/rejoin -- Member-join event.

Called by the Discord front end when someone joins the guild. Puts back
the whitelisted or rejected role the database has on file for them.
"""

from fastapi import APIRouter, Depends

from warden.config import Settings
from warden.deps import get_roles, get_settings, get_store
from warden.models.schemas import ReconcileResponse
from warden.reconcile import reconcile_rejoin
from warden.roles import RoleFlags
from warden.store import WhitelistStore

router = APIRouter()


@router.post(
    "/v1/members/{discord_id}/rejoin",
    response_model=ReconcileResponse,
    summary="Reconcile a rejoining member",
    description="Restore the member's whitelisted/rejected role from the database if it is missing.",
    tags=["Members"],
)
async def rejoin(
    discord_id: str,
    store: WhitelistStore = Depends(get_store),
    roles: RoleFlags = Depends(get_roles),
    settings: Settings = Depends(get_settings),
) -> ReconcileResponse:
    outcome = await reconcile_rejoin(store, roles, discord_id, settings.divergence_policy)
    return ReconcileResponse(
        discord_id=outcome.discord_id,
        stored=outcome.stored,
        external=outcome.external,
        action=outcome.action,
        applied=outcome.applied,
    )
