"""
Whitelist Warden API -- Application entry point.

Run with:
    warden
or:
    uvicorn warden.main:create_app --factory --reload

Then open http://localhost:8000/docs for the interactive Swagger UI.

This file:
  1. Configures logging
  2. Loads settings and the whitelist database
  3. Wires the Discord role flags and command relay
  4. Mounts all route modules (whitelist, reject, find, apply, members, stats)
  5. Defines the health check endpoint
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from warden.config import Settings
from warden.discord_api import DiscordClient
from warden.relay import CommandRelay
from warden.roles import DiscordRoleFlags, RoleFlags
from warden.routes import apply, find, members, reject, stats, whitelist
from warden.sinks import FileSink
from warden.store import WhitelistStore

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    store: WhitelistStore | None = None,
    roles: RoleFlags | None = None,
    relay: CommandRelay | None = None,
) -> FastAPI:
    """Build the application.

    Anything not passed in is built from settings; settings themselves
    come from the environment and must validate (ConfigError otherwise).
    """
    if settings is None:
        settings = Settings.from_env()
        settings.validate()
    configure_logging(settings.log_level)

    if store is None:
        store = WhitelistStore.open(
            FileSink(settings.db_file),
            unique_steam_ids=settings.unique_steam_ids,
        )

    client = None
    if roles is None or relay is None:
        client = DiscordClient(
            settings.bot_token,
            base_url=settings.discord_api_url,
            timeout=settings.discord_timeout,
        )
    if roles is None:
        roles = DiscordRoleFlags(
            client,
            settings.guild_id,
            settings.whitelisted_role_id,
            settings.rejected_role_id,
        )
    if relay is None:
        relay = CommandRelay(client, settings.command_channels, settings.whitelist_command)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Whitelist Warden ready: %s, divergence policy=%s, unique Steam IDs=%s",
            store.sink, settings.divergence_policy.value, settings.unique_steam_ids,
        )
        yield
        if client is not None:
            await client.aclose()
        logger.info("Whitelist Warden is shutting down")

    app = FastAPI(
        title="Whitelist Warden",
        version=VERSION,
        description=(
            "Membership whitelist for a Discord community and its game server. "
            "Tracks which members are approved or rejected, the Steam ID each approved "
            "member plays with, and keeps Discord roles in step with the database.\n\n"
            "| Endpoint | Purpose |\n"
            "|----------|--------|\n"
            "| `POST /v1/whitelist` | Approve a member with a Steam ID (admin) |\n"
            "| `POST /v1/reject` | Reject a member (admin) |\n"
            "| `GET /v1/find` | Look up by Discord ID and/or Steam ID (admin) |\n"
            "| `POST /v1/apply` | Member self-application |\n"
            "| `POST /v1/members/{id}/rejoin` | Restore roles for a rejoining member |\n"
            "| `GET /v1/stats` | Database counts |\n"
        ),
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.roles = roles
    app.state.relay = relay

    app.include_router(whitelist.router)
    app.include_router(reject.router)
    app.include_router(find.router)
    app.include_router(apply.router)
    app.include_router(members.router)
    app.include_router(stats.router)

    # -----------------------------------------------------------------------
    # Health check
    # -----------------------------------------------------------------------

    @app.get(
        "/v1/health",
        summary="Health check",
        description="Returns the current status of the API. Use this for uptime monitoring.",
        tags=["System"],
    )
    async def health():
        return {
            "status": "healthy",
            "version": VERSION,
            **store.stats(),
        }

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
