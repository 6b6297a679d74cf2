import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from warden.errors import InvalidSteamId
from warden.validation import is_valid_steam_id64, require_steam_id64


class TestSteamId64:

    @pytest.mark.parametrize("value", [
        "76561198000000001",
        "00000000000000000",
    ])
    def test_valid(self, value):
        assert is_valid_steam_id64(value)

    @pytest.mark.parametrize("value", [
        "",
        "7656119800000000",      # 16 digits
        "765611980000000011",    # 18 digits
        "7656119800000000a",
        "76561198 00000001",
        "７６５６１１９８０００００００００１",  # full-width digits
        None,
        76561198000000001,
    ])
    def test_invalid(self, value):
        assert not is_valid_steam_id64(value)

    def test_require_strips_whitespace(self):
        assert require_steam_id64("  76561198000000001\n") == "76561198000000001"

    def test_require_raises_with_message(self):
        with pytest.raises(InvalidSteamId) as exc:
            require_steam_id64("12345")
        assert str(exc.value) == "Invalid Steam ID format. Must be 17 digits."
        assert exc.value.steam_id == "12345"
