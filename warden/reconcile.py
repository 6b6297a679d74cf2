"""
Rejoin reconciliation.

Discord forgets a member's roles when they leave the guild. The store
does not. When a member shows up again (rejoin event, or they click
"apply"), compare what the store says with the roles they actually hold:

    stored     external   action
    --------   --------   --------------------------------------------
    approved   none       restore_approved
    rejected   none       restore_rejected
    none       any        none
    X          X          none
    approved   rejected   divergent            (policy=external, default)
    rejected   approved   divergent            (policy=external, default)
    approved   rejected   replace_with_stored  (policy=stored)
    rejected   approved   replace_with_stored  (policy=stored)

Under the default policy the role, once present, is what the current
session trusts; the store is only used to put a missing role back.

Role calls are best-effort. A failure is logged and reported in the
outcome; it never raises and never touches the store.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from warden.errors import ExternalServiceError
from warden.records import MemberStatus
from warden.roles import RoleFlags
from warden.store import WhitelistStore

logger = logging.getLogger(__name__)


class DivergencePolicy(str, Enum):
    external = "external"
    stored = "stored"


class ReconcileAction(str, Enum):
    none = "none"
    restore_approved = "restore_approved"
    restore_rejected = "restore_rejected"
    divergent = "divergent"
    replace_with_stored = "replace_with_stored"
    absent = "absent"              # member is not in the guild
    unavailable = "unavailable"    # role system could not be read


@dataclass
class ReconcileOutcome:
    discord_id: str
    stored: MemberStatus | None
    external: MemberStatus | None
    action: ReconcileAction
    applied: bool = False

    @property
    def effective(self) -> MemberStatus | None:
        """Status the member should be treated as having for this session."""
        if self.action in (ReconcileAction.restore_approved, ReconcileAction.restore_rejected,
                           ReconcileAction.replace_with_stored):
            return self.stored
        if self.external is not None:
            return self.external
        return self.stored


def external_status(flags: set[MemberStatus]) -> MemberStatus | None:
    """Collapse a member's flags to one status. Whitelisted wins over rejected."""
    if MemberStatus.approved in flags:
        return MemberStatus.approved
    if MemberStatus.rejected in flags:
        return MemberStatus.rejected
    return None


def decide(
    stored: MemberStatus | None,
    external: MemberStatus | None,
    policy: DivergencePolicy = DivergencePolicy.external,
) -> ReconcileAction:
    if stored is None or stored == external:
        return ReconcileAction.none
    if external is None:
        if stored is MemberStatus.approved:
            return ReconcileAction.restore_approved
        return ReconcileAction.restore_rejected
    if policy is DivergencePolicy.stored:
        return ReconcileAction.replace_with_stored
    return ReconcileAction.divergent


async def reconcile_rejoin(
    store: WhitelistStore,
    roles: RoleFlags,
    discord_id: str,
    policy: DivergencePolicy = DivergencePolicy.external,
) -> ReconcileOutcome:
    stored = store.stored_status(discord_id)

    try:
        flags = await roles.flags(discord_id)
    except ExternalServiceError as e:
        logger.error("Could not read roles for %s: %s", discord_id, e)
        return ReconcileOutcome(discord_id, stored, None, ReconcileAction.unavailable)

    if flags is None:
        logger.info("Member %s is not in the guild; nothing to reconcile", discord_id)
        return ReconcileOutcome(discord_id, stored, None, ReconcileAction.absent)

    external = external_status(flags)
    action = decide(stored, external, policy)
    outcome = ReconcileOutcome(discord_id, stored, external, action)

    if action is ReconcileAction.none:
        return outcome

    if action is ReconcileAction.divergent:
        logger.warning(
            "Member %s holds the %s role but is %s in the database; leaving roles as they are",
            discord_id, external.value, stored.value,
        )
        return outcome

    try:
        if action is ReconcileAction.replace_with_stored:
            await roles.remove(discord_id, external)
        await roles.add(discord_id, stored)
    except ExternalServiceError as e:
        logger.error("Error re-assigning %s role to %s: %s", stored.value, discord_id, e)
        return outcome

    outcome.applied = True
    logger.info("Re-assigned %s role to %s (rejoined user)", stored.value, discord_id)
    return outcome
