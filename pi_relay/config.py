"""
Configuration module for the Pi relay.
Centralizes all environment variables and settings.

Required:
- PI_API_KEY: Pi Server API key (sent upstream as "Authorization: Key <key>")
- FRONTEND_URL: The single browser origin allowed to call /api/*

Usage:
    from pi_relay.config import config

    if config.IS_DEV:
        print("Running in development mode")

    base = config.PI_API_URL
"""

import os
from typing import List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file (safe - won't override existing env vars)
load_dotenv()


class ConfigError(RuntimeError):
    """Raised when the relay cannot start with the current configuration."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing or invalid settings: {', '.join(missing)}")


def _get_env(key: str, default: str = "") -> str:
    """Safely get and strip an environment variable."""
    return os.getenv(key, default).strip()


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get an environment variable as boolean."""
    val = _get_env(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int = 0) -> int:
    """Get an environment variable as integer."""
    try:
        return int(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float = 0.0) -> float:
    """Get an environment variable as float."""
    try:
        return float(_get_env(key, str(default)))
    except ValueError:
        return default


# Upstream base URLs per Pi network
DEFAULT_MAINNET_URL = "https://api.minepi.com/v2"
DEFAULT_TESTNET_URL = "https://api.testnet.minepi.com/v2"
PI_NETWORKS = ("mainnet", "testnet")


@dataclass
class Config:
    """
    Application configuration with all settings.
    Loaded from environment variables; tests construct it with explicit values.
    """

    # ─────────────────────────────────────────────────────────────
    # Environment
    # ─────────────────────────────────────────────────────────────
    FLASK_ENV: str = field(default_factory=lambda: _get_env("FLASK_ENV", "production").lower())

    @property
    def IS_DEV(self) -> bool:
        """True if running in development mode."""
        return self.FLASK_ENV in ("development", "dev", "local")

    @property
    def IS_PROD(self) -> bool:
        """True if running in production mode."""
        return not self.IS_DEV

    # Error bodies carry a "detail" field only when this is on
    DIAGNOSTICS_ENABLED: bool = field(default_factory=lambda: _get_env_bool("RELAY_DIAGNOSTICS", False))

    # ─────────────────────────────────────────────────────────────
    # Server
    # ─────────────────────────────────────────────────────────────
    PORT: int = field(default_factory=lambda: _get_env_int("PORT", 443))
    HOST: str = field(default_factory=lambda: _get_env("HOST", "0.0.0.0"))

    # Request body cap (10kb of JSON)
    MAX_BODY_BYTES: int = field(default_factory=lambda: _get_env_int("MAX_BODY_BYTES", 10 * 1024))

    # ─────────────────────────────────────────────────────────────
    # CORS
    # ─────────────────────────────────────────────────────────────
    FRONTEND_URL: str = field(default_factory=lambda: _get_env("FRONTEND_URL"))

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        """Origins allowed for cross-origin calls (a single frontend)."""
        if not self.FRONTEND_URL:
            return []
        return [self.FRONTEND_URL.rstrip("/")]

    # ─────────────────────────────────────────────────────────────
    # Pi Network upstream
    # ─────────────────────────────────────────────────────────────
    PI_API_KEY: str = field(default_factory=lambda: _get_env("PI_API_KEY"))
    PI_NETWORK: str = field(default_factory=lambda: _get_env("PI_NETWORK", "mainnet").lower())
    PI_API_URL_MAINNET: str = field(default_factory=lambda: _get_env("PI_API_URL_MAINNET", DEFAULT_MAINNET_URL))
    PI_API_URL_TESTNET: str = field(default_factory=lambda: _get_env("PI_API_URL_TESTNET", DEFAULT_TESTNET_URL))
    PI_API_TIMEOUT: float = field(default_factory=lambda: _get_env_float("PI_API_TIMEOUT", 15.0))

    # Browser SDK host allowed by the Content-Security-Policy
    PI_SDK_URL: str = "https://sdk.minepi.com"

    @property
    def PI_API_URL(self) -> str:
        """Upstream base URL for the selected network (no trailing slash)."""
        if self.PI_NETWORK == "testnet":
            return self.PI_API_URL_TESTNET.rstrip("/")
        return self.PI_API_URL_MAINNET.rstrip("/")

    @property
    def PI_CONFIGURED(self) -> bool:
        """True if the service credential is present."""
        return bool(self.PI_API_KEY)

    # ─────────────────────────────────────────────────────────────
    # Validation & Summary
    # ─────────────────────────────────────────────────────────────

    def missing_required(self) -> List[str]:
        """
        Return the names of required settings that are missing or invalid.
        Empty list means the relay can start.
        """
        missing = []
        if not self.PI_API_KEY:
            missing.append("PI_API_KEY")
        if not self.FRONTEND_URL:
            missing.append("FRONTEND_URL")
        if self.PI_NETWORK not in PI_NETWORKS:
            missing.append(f"PI_NETWORK (got {self.PI_NETWORK!r}, expected one of {', '.join(PI_NETWORKS)})")
        if not 0 < self.PORT < 65536:
            missing.append(f"PORT (got {self.PORT})")
        if not self.PI_API_TIMEOUT > 0:
            missing.append(f"PI_API_TIMEOUT (got {self.PI_API_TIMEOUT})")
        return missing

    def require(self) -> "Config":
        """Raise ConfigError unless every required setting is present."""
        missing = self.missing_required()
        if missing:
            print(f"[CONFIG] FATAL: {', '.join(missing)}")
            raise ConfigError(missing)
        return self

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of warnings.
        Returns empty list if nothing looks risky.
        """
        warnings = []

        if self.IS_PROD:
            if self.DIAGNOSTICS_ENABLED:
                warnings.append("RELAY_DIAGNOSTICS enabled in production - error details will reach clients")
            if self.PI_NETWORK == "testnet":
                warnings.append("PI_NETWORK=testnet while FLASK_ENV=production")
            if self.FRONTEND_URL.startswith("http://"):
                warnings.append("FRONTEND_URL is not HTTPS")

        return warnings

    def log_summary(self) -> None:
        """Print configuration summary (no secrets)."""
        print("=" * 60)
        print("[CONFIG] Pi Relay Configuration")
        print("=" * 60)
        print(f"  Environment: {self.FLASK_ENV} (IS_DEV={self.IS_DEV})")
        print(f"  Listen: {self.HOST}:{self.PORT}")
        print(f"  Allowed origin: {self.FRONTEND_URL or '(not set)'}")
        print("-" * 60)
        print(f"  Pi network: {self.PI_NETWORK}")
        print(f"  Pi API URL: {self.PI_API_URL}")
        print(f"  Pi API key configured: {self.PI_CONFIGURED}")
        print(f"  Upstream timeout: {self.PI_API_TIMEOUT}s")
        print(f"  Diagnostics: {self.DIAGNOSTICS_ENABLED}")
        print("=" * 60)
        for warning in self.validate():
            print(f"[CONFIG] WARNING: {warning}")


# ─────────────────────────────────────────────────────────────
# Singleton instance
# ─────────────────────────────────────────────────────────────
# Not validated here: create_app() calls require() so a missing key stops
# startup without breaking imports.
config = Config()


def get_config() -> Config:
    """
    Return the Config bound to the current Flask app.
    Falls back to the module singleton outside an app context.
    """
    from flask import current_app, has_app_context

    if has_app_context():
        return current_app.config.get("RELAY_CONFIG", config)
    return config

