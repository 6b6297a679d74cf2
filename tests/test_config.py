import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from warden.config import Settings
from warden.errors import ConfigError
from warden.reconcile import DivergencePolicy

FULL_ENV = {
    "DISCORD_BOT_TOKEN": "token",
    "GUILD_ID": "111",
    "WHITELISTED_ROLE_ID": "222",
    "REJECTED_ROLE_ID": "333",
    "COMMAND_CHANNELS": "900, 901,,",
}


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env(FULL_ENV)
        settings.validate()

        assert settings.command_channels == ["900", "901"]
        assert settings.db_file == "whitelist_db.json"
        assert settings.unique_steam_ids is False
        assert settings.divergence_policy is DivergencePolicy.external
        assert settings.whitelist_command == "!com wl.add {steam_id}"
        assert settings.discord_timeout == 10.0
        assert settings.log_level == "INFO"

    def test_optional_overrides(self):
        env = dict(
            FULL_ENV,
            DB_FILE="/data/db.json",
            UNIQUE_STEAM_IDS="yes",
            DIVERGENCE_POLICY="Stored",
            DISCORD_TIMEOUT="2.5",
            LOG_LEVEL="debug",
        )
        settings = Settings.from_env(env)

        assert settings.db_file == "/data/db.json"
        assert settings.unique_steam_ids is True
        assert settings.divergence_policy is DivergencePolicy.stored
        assert settings.discord_timeout == 2.5
        assert settings.log_level == "DEBUG"

    def test_missing_required_are_all_named(self):
        env = {"DISCORD_BOT_TOKEN": "token", "GUILD_ID": "111"}
        with pytest.raises(ConfigError) as exc:
            Settings.from_env(env).validate()

        assert exc.value.missing == ["WHITELISTED_ROLE_ID", "REJECTED_ROLE_ID", "COMMAND_CHANNELS"]

    def test_bad_policy(self):
        with pytest.raises(ConfigError):
            Settings.from_env(dict(FULL_ENV, DIVERGENCE_POLICY="roles"))

    def test_bad_timeout(self):
        with pytest.raises(ConfigError):
            Settings.from_env(dict(FULL_ENV, DISCORD_TIMEOUT="soon"))

    def test_command_template_needs_placeholder(self):
        settings = Settings.from_env(dict(FULL_ENV, WHITELIST_COMMAND="!com wl.add"))
        with pytest.raises(ConfigError):
            settings.validate()
