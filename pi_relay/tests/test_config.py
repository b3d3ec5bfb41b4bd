"""
Tests for configuration loading and startup validation.

Run locally:
    python -m pytest pi_relay/tests/test_config.py -v
"""

from __future__ import annotations

import pytest

from pi_relay.app import create_app
from pi_relay.config import Config, ConfigError, DEFAULT_MAINNET_URL, DEFAULT_TESTNET_URL
from pi_relay.tests.util import make_config


class TestRequiredSettings:
    def test_complete_config_has_nothing_missing(self):
        assert make_config().missing_required() == []

    def test_missing_api_key_and_origin_reported(self):
        cfg = make_config(PI_API_KEY="", FRONTEND_URL="")
        missing = cfg.missing_required()
        assert "PI_API_KEY" in missing
        assert "FRONTEND_URL" in missing

    def test_require_raises_config_error(self):
        cfg = make_config(PI_API_KEY="")
        with pytest.raises(ConfigError) as exc_info:
            cfg.require()
        assert exc_info.value.missing == ["PI_API_KEY"]
        assert "PI_API_KEY" in str(exc_info.value)

    def test_unknown_network_is_rejected(self):
        cfg = make_config(PI_NETWORK="devnet")
        assert any(m.startswith("PI_NETWORK") for m in cfg.missing_required())

    def test_out_of_range_port_is_rejected(self):
        cfg = make_config(PORT=70000)
        assert any(m.startswith("PORT") for m in cfg.missing_required())

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout_is_rejected(self, timeout):
        cfg = make_config(PI_API_TIMEOUT=timeout)
        assert any(m.startswith("PI_API_TIMEOUT") for m in cfg.missing_required())

    def test_non_positive_timeout_blocks_startup(self):
        with pytest.raises(ConfigError):
            create_app(make_config(PI_API_TIMEOUT=0))

    def test_create_app_refuses_to_start_without_key(self):
        with pytest.raises(ConfigError):
            create_app(make_config(PI_API_KEY=""))

    def test_create_app_refuses_to_start_without_origin(self):
        with pytest.raises(ConfigError):
            create_app(make_config(FRONTEND_URL=""))


class TestNetworkSelection:
    def test_mainnet_url(self):
        cfg = make_config(PI_NETWORK="mainnet", PI_API_URL_MAINNET="https://main.test/v2/")
        assert cfg.PI_API_URL == "https://main.test/v2"

    def test_testnet_url(self):
        cfg = make_config(PI_NETWORK="testnet", PI_API_URL_TESTNET="https://test.test/v2")
        assert cfg.PI_API_URL == "https://test.test/v2"


class TestEnvironmentLoading:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PI_API_KEY", "  env-key  ")
        monkeypatch.setenv("FRONTEND_URL", "https://frontend.test/")
        monkeypatch.setenv("PORT", "8443")
        monkeypatch.setenv("PI_NETWORK", "TESTNET")
        monkeypatch.setenv("RELAY_DIAGNOSTICS", "yes")
        monkeypatch.delenv("PI_API_URL_TESTNET", raising=False)

        cfg = Config()

        assert cfg.PI_API_KEY == "env-key"
        assert cfg.ALLOWED_ORIGINS == ["https://frontend.test"]
        assert cfg.PORT == 8443
        assert cfg.PI_NETWORK == "testnet"
        assert cfg.PI_API_URL == DEFAULT_TESTNET_URL
        assert cfg.DIAGNOSTICS_ENABLED is True

    def test_defaults(self, monkeypatch):
        for key in ("PORT", "PI_NETWORK", "RELAY_DIAGNOSTICS", "FLASK_ENV", "PI_API_URL_MAINNET", "PI_API_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)

        cfg = Config()

        assert cfg.PORT == 443
        assert cfg.PI_NETWORK == "mainnet"
        assert cfg.PI_API_URL == DEFAULT_MAINNET_URL
        assert cfg.DIAGNOSTICS_ENABLED is False
        assert cfg.IS_PROD is True
        assert cfg.PI_API_TIMEOUT == 15.0

    def test_bad_numbers_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        monkeypatch.setenv("PI_API_TIMEOUT", "soon")

        cfg = Config()

        assert cfg.PORT == 443
        assert cfg.PI_API_TIMEOUT == 15.0


class TestWarnings:
    def test_diagnostics_in_production_warns(self):
        cfg = make_config(DIAGNOSTICS_ENABLED=True)
        assert any("RELAY_DIAGNOSTICS" in w for w in cfg.validate())

    def test_development_has_no_warnings(self):
        cfg = make_config(FLASK_ENV="development", DIAGNOSTICS_ENABLED=True, PI_NETWORK="testnet")
        assert cfg.validate() == []
