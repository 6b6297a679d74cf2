"""
Request dependencies.

create_app() puts the store and its collaborators on app.state; routes
pull them out with Depends() so tests can build an app around fakes.
"""

from fastapi import Request

from warden.config import Settings
from warden.relay import CommandRelay
from warden.roles import RoleFlags
from warden.store import WhitelistStore


def get_store(request: Request) -> WhitelistStore:
    return request.app.state.store


def get_roles(request: Request) -> RoleFlags:
    return request.app.state.roles


def get_relay(request: Request) -> CommandRelay:
    return request.app.state.relay


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
