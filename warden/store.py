"""
Whitelist record store.

Holds every membership fact in memory and mirrors it to a ByteSink as a
full JSON snapshot after each mutation:

    {
      "steamids": [...],                 # steam_ids owned by >= 1 member
      "users": {"<discord_id>": "<steam_id>", ...},
      "whitelistedUsers": [...],         # approved discord_ids
      "rejectedUsers": [...]             # rejected discord_ids
    }

Storage problems never reach the caller. A snapshot that can't be parsed
resets the store to empty; a write that fails is logged and the in-memory
state stays authoritative until the next successful persist.

Mutations are plain synchronous calls. On the asyncio event loop that
means a whole approve/reject (state update + snapshot write) finishes
before any other request handler runs.
"""

import json
import logging

from warden.errors import MappingConflict, SteamIdTaken
from warden.index import apply_decision, owners_of, rebuild_index
from warden.records import MemberStatus, WhitelistState
from warden.sinks import ByteSink

logger = logging.getLogger(__name__)


class WhitelistStore:

    def __init__(self, sink: ByteSink, *, unique_steam_ids: bool = False):
        self.sink = sink
        self.unique_steam_ids = unique_steam_ids
        self._state = WhitelistState()

    @classmethod
    def open(cls, sink: ByteSink, **kwargs) -> "WhitelistStore":
        store = cls(sink, **kwargs)
        store.load()
        return store

    # ── Load / persist ────────────────────────────────────────────────

    def load(self) -> None:
        """Replace in-memory state with the sink's snapshot.

        A missing snapshot starts an empty store and writes it out right
        away, so the first run leaves a file behind.
        """
        try:
            raw = self.sink.read()
        except OSError as e:
            logger.error("Error reading whitelist database from %r: %s", self.sink, e)
            self._state = WhitelistState()
            return

        if raw is None:
            logger.info("Database file not found, starting with empty database")
            self._state = WhitelistState()
            self.persist()
            return

        try:
            self._state = _decode(raw)
        except (UnicodeDecodeError, ValueError, TypeError, RecursionError) as e:
            logger.error("Whitelist database is malformed, resetting to empty: %s", e)
            self._state = WhitelistState()
            return

        self._normalize()
        logger.info(
            "Loaded database: %d Steam IDs, %d whitelisted users, %d rejected users",
            len(self._state.steamids), len(self._state.approved), len(self._state.rejected),
        )

    def persist(self) -> bool:
        """Overwrite the sink with a full snapshot. Returns False if the write failed."""
        try:
            self.sink.write(_encode(self._state))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving whitelist database to %r: %s", self.sink, e)
            return False
        logger.debug("Database saved")
        return True

    def _normalize(self) -> None:
        # Older snapshots were written by code that maintained the derived
        # lists by hand; they may disagree with the mapping.
        if rebuild_index(self._state):
            logger.warning("Steam ID index did not match the user mapping; rebuilt it")
        both = self._state.approved & self._state.rejected
        if both:
            logger.warning(
                "%d member(s) were both whitelisted and rejected; keeping them rejected", len(both),
            )
            self._state.approved -= both

    # ── Mutations ─────────────────────────────────────────────────────

    def approve(self, discord_id: str, steam_id: str, *, overwrite: bool = True) -> str | None:
        """Map discord_id to steam_id and mark the member approved.

        Returns the steam_id the member had before, if any. With
        overwrite=False a different existing steam_id raises MappingConflict
        instead of being replaced. In unique mode a steam_id owned by
        another member raises SteamIdTaken. Neither error mutates anything.
        """
        existing = self._state.users.get(discord_id)
        if not overwrite and existing is not None and existing != steam_id:
            raise MappingConflict(discord_id, existing, steam_id)

        if self.unique_steam_ids:
            others = [uid for uid in owners_of(self._state, steam_id) if uid != discord_id]
            if others:
                raise SteamIdTaken(steam_id, others)

        previous = apply_decision(self._state, discord_id, MemberStatus.approved, steam_id)
        self.persist()
        return previous

    def reject(self, discord_id: str) -> str | None:
        """Mark the member rejected and drop its mapping.

        Returns the steam_id the member was mapped to, if any.
        """
        previous = apply_decision(self._state, discord_id, MemberStatus.rejected)
        self.persist()
        return previous

    # ── Queries ───────────────────────────────────────────────────────

    def is_approved(self, discord_id: str) -> bool:
        return discord_id in self._state.approved

    def is_rejected(self, discord_id: str) -> bool:
        return discord_id in self._state.rejected

    def has_mapping(self, discord_id: str) -> bool:
        return discord_id in self._state.users

    def get_steam_id(self, discord_id: str) -> str | None:
        return self._state.users.get(discord_id)

    def is_steam_id_known(self, steam_id: str) -> bool:
        return steam_id in self._state.steamids

    def owners_of(self, steam_id: str) -> list[str]:
        return owners_of(self._state, steam_id)

    def status_of(self, discord_id: str) -> MemberStatus:
        if discord_id in self._state.approved:
            return MemberStatus.approved
        if discord_id in self._state.rejected:
            return MemberStatus.rejected
        return MemberStatus.unknown

    def stored_status(self, discord_id: str) -> MemberStatus | None:
        """approved / rejected, or None when no decision is on file."""
        status = self.status_of(discord_id)
        return None if status is MemberStatus.unknown else status

    def stats(self) -> dict[str, int]:
        return {
            "total_steam_ids": len(self._state.steamids),
            "total_users": len(self._state.users),
            "whitelisted_users": len(self._state.approved),
            "rejected_users": len(self._state.rejected),
        }

    def snapshot(self) -> WhitelistState:
        """Detached copy of the current state."""
        return self._state.copy()


# ── Encoding ──────────────────────────────────────────────────────────────


def _encode(state: WhitelistState) -> bytes:
    doc = {
        "steamids": sorted(state.steamids),
        "users": dict(state.users),
        "whitelistedUsers": sorted(state.approved),
        "rejectedUsers": sorted(state.rejected),
    }
    return json.dumps(doc, indent=2, ensure_ascii=False).encode("utf-8")


def _decode(raw: bytes) -> WhitelistState:
    doc = json.loads(raw.decode("utf-8"))
    if not isinstance(doc, dict):
        raise ValueError(f"expected a JSON object, got {type(doc).__name__}")

    users = doc.get("users") or {}
    if not isinstance(users, dict):
        raise ValueError("'users' must be an object")

    mapping = {}
    for uid, sid in users.items():
        if not isinstance(sid, str) or not sid:
            logger.warning("Dropping mapping for %s: %r is not a Steam ID", uid, sid)
            continue
        mapping[str(uid)] = sid

    return WhitelistState(
        users=mapping,
        steamids=_string_set(doc, "steamids"),
        approved=_string_set(doc, "whitelistedUsers"),
        rejected=_string_set(doc, "rejectedUsers"),
    )


def _string_set(doc: dict, key: str) -> set[str]:
    value = doc.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return {str(v) for v in value if v is not None}
