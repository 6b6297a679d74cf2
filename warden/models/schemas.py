"""
Whitelist Warden API -- Pydantic Data Models

Every request and response in the API is defined here. Field() carries
the descriptions and examples shown in the Swagger docs at /docs.

Steam IDs are accepted as plain strings and validated by the routes, so
a malformed ID gets the same 400 error everywhere instead of a generic
422 from request parsing.
"""

from typing import Literal

from pydantic import BaseModel, Field

from warden.records import MemberStatus
from warden.reconcile import ReconcileAction


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class MemberRecord(BaseModel):
    """One member as stored in the whitelist database."""

    discord_id: str = Field(
        description="Discord user ID.",
        examples=["123456789012345678"],
    )
    steam_id: str | None = Field(
        default=None,
        description="Steam ID 64 on file. None for rejected members (rejection drops the mapping).",
        examples=["76561198000000000"],
    )
    status: MemberStatus = Field(
        description="Stored decision: approved, rejected or unknown.",
        examples=["approved"],
    )
    label: str = Field(
        description="Display form of the status.",
        examples=["✅ Whitelisted"],
    )


# ---------------------------------------------------------------------------
# POST /v1/whitelist -- Manual approval
# ---------------------------------------------------------------------------

class WhitelistRequest(BaseModel):
    """Admin request to whitelist a member with a Steam ID."""

    discord_id: str = Field(
        min_length=1,
        description="Discord user ID to whitelist.",
        examples=["123456789012345678"],
    )
    steam_id: str = Field(
        description="Steam ID 64 (exactly 17 digits).",
        examples=["76561198000000000"],
    )
    confirm: bool = Field(
        default=False,
        description=(
            "Set to true to overwrite a different Steam ID already on file for this member. "
            "Without it, that case returns 409 and nothing changes."
        ),
    )


class WhitelistResponse(BaseModel):
    discord_id: str
    steam_id: str
    previous_steam_id: str | None = Field(
        default=None,
        description="Steam ID the member had before this call, if any.",
    )
    roles_synced: bool = Field(
        description="Whether the whitelisted role was applied. False if the member is not in the guild "
                    "or Discord could not be reached -- the role is restored when they rejoin.",
    )
    relayed_to: list[str] = Field(
        default=[],
        description="Command channels that received the whitelist command.",
    )
    detail: str


# ---------------------------------------------------------------------------
# POST /v1/reject -- Manual rejection
# ---------------------------------------------------------------------------

class RejectRequest(BaseModel):
    """Admin request to reject a member, by Discord ID, Steam ID, or both.

    With only a Steam ID the owner is looked up; if several members share
    it the request is refused and the Discord ID must be given."""

    discord_id: str | None = Field(
        default=None,
        description="Discord user ID to reject.",
        examples=["123456789012345678"],
    )
    steam_id: str | None = Field(
        default=None,
        description="Steam ID 64 of the member to reject.",
        examples=["76561198000000000"],
    )


class RejectResponse(BaseModel):
    discord_id: str
    steam_id: str | None = Field(
        default=None,
        description="Steam ID the member had on file before rejection.",
    )
    roles_synced: bool
    detail: str


# ---------------------------------------------------------------------------
# GET /v1/find -- Lookup
# ---------------------------------------------------------------------------

class FindResponse(BaseModel):
    """Search result.

    outcome is 'found', 'not_found', or 'mismatch' (both IDs were given
    but they belong to different records)."""

    outcome: Literal["found", "not_found", "mismatch"] = Field(
        examples=["found"],
    )
    found: bool
    search_type: Literal["discord_id", "steam_id"] = Field(
        description="Which identity the search was resolved by.",
    )
    search_value: str
    users: list[MemberRecord] = Field(default=[])
    multiple: bool = Field(
        default=False,
        description="True when a Steam ID search matched more than one member.",
    )
    shared_with: list[str] = Field(
        default=[],
        description="Other Discord IDs mapped to the same Steam ID as the member found.",
    )
    detail: str | None = None


# ---------------------------------------------------------------------------
# POST /v1/apply -- Member self-application
# ---------------------------------------------------------------------------

class ApplyRequest(BaseModel):
    """A member applying for the whitelist.

    Send without steam_id first: if the member already has a decision on
    file the response says so (and restores lost roles). Otherwise the
    outcome is 'steam_id_required' and the client asks for the ID."""

    discord_id: str = Field(
        min_length=1,
        description="Discord user ID of the applicant.",
        examples=["123456789012345678"],
    )
    steam_id: str | None = Field(
        default=None,
        description="Steam ID 64 submitted by the applicant.",
        examples=["76561198000000000"],
    )


class ApplyResponse(BaseModel):
    outcome: Literal[
        "approved",
        "already_whitelisted",
        "rejected",
        "already_applied",
        "steam_id_required",
    ] = Field(examples=["approved"])
    discord_id: str
    steam_id: str | None = None
    roles_restored: bool = Field(
        default=False,
        description="True when a role lost on leaving the guild was put back.",
    )
    relayed_to: list[str] = Field(default=[])
    detail: str


# ---------------------------------------------------------------------------
# POST /v1/members/{discord_id}/rejoin -- Rejoin reconciliation
# ---------------------------------------------------------------------------

class ReconcileResponse(BaseModel):
    discord_id: str
    stored: MemberStatus | None = Field(
        description="Decision on file, or null if none.",
    )
    external: MemberStatus | None = Field(
        description="Status implied by the member's current roles, or null if they hold neither role "
                    "(or the roles could not be read).",
    )
    action: ReconcileAction
    applied: bool = Field(
        description="Whether a role change was made.",
    )


# ---------------------------------------------------------------------------
# GET /v1/stats -- Counts
# ---------------------------------------------------------------------------

class StatsResponse(BaseModel):
    total_steam_ids: int = Field(description="Distinct Steam IDs owned by at least one member.")
    total_users: int = Field(description="Members with a Steam ID on file.")
    whitelisted_users: int
    rejected_users: int
