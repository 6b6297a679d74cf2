"""
GET /v1/stats -- Whitelist database counts.
"""

from fastapi import APIRouter, Depends

from warden.deps import get_store
from warden.models.schemas import StatsResponse
from warden.store import WhitelistStore

router = APIRouter()


@router.get(
    "/v1/stats",
    response_model=StatsResponse,
    summary="Database statistics",
    tags=["Admin"],
)
async def stats(store: WhitelistStore = Depends(get_store)) -> StatsResponse:
    return StatsResponse(**store.stats())
