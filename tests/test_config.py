"""
Tests for configuration loading
"""

from token_ledger import config as config_module
from token_ledger.config import TokenConfig, get_config, reload_config


class TestTokenConfig:
    """Test environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("TOKEN_TOKEN_NAME", "TOKEN_TOKEN_DECIMALS", "TOKEN_MINT_POLICY"):
            monkeypatch.delenv(name, raising=False)

        config = TokenConfig()

        assert config.token_name == "Token"
        assert config.token_symbol == "TKN"
        assert config.token_decimals == 18
        assert config.initial_supply_units == 1_000_000
        assert config.mint_policy == "owner"
        assert config.log_format == "json"
        assert config.enable_event_hashing is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TOKEN_TOKEN_NAME", "Env Token")
        monkeypatch.setenv("TOKEN_TOKEN_DECIMALS", "6")
        monkeypatch.setenv("token_mint_policy", "open")

        config = TokenConfig()

        assert config.token_name == "Env Token"
        assert config.token_decimals == 6
        assert config.mint_policy == "open"

    def test_reload_config(self, monkeypatch):
        original = get_config()
        try:
            monkeypatch.setenv("TOKEN_TOKEN_SYMBOL", "RLD")
            reloaded = reload_config()

            assert reloaded.token_symbol == "RLD"
            assert get_config() is reloaded
        finally:
            config_module.config = original
