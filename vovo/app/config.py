#!/usr/bin/env python3
"""
Configuration management for the storefront backend and its clients.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "vovo.db")


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


class Config:
    """Configuration class for the application."""

    # Storage
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.abspath(_DEFAULT_DB_PATH)}")
    UPLOAD_DIR = os.getenv("VOVO_UPLOAD_DIR", os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "uploads")))
    PUBLIC_URL = os.getenv("VOVO_PUBLIC_URL", "").rstrip("/")

    # Client side (workflow and admin console)
    API_URL = os.getenv("VOVO_API_URL", "http://127.0.0.1:8000").rstrip("/")
    REQUEST_TIMEOUT = float(os.getenv("VOVO_REQUEST_TIMEOUT", 10))
    BOOKING_WINDOW_DAYS = int(os.getenv("VOVO_BOOKING_WINDOW_DAYS", 30))
    WHATSAPP_NUMBER = os.getenv("VOVO_WHATSAPP_NUMBER", "")

    # Admin
    ADMIN_PASSWORD = os.getenv("VOVO_ADMIN_PASSWORD")
    # historical|current, see vovo.admin.console.RepricePolicy
    REPRICE_POLICY = os.getenv("VOVO_REPRICE_POLICY", "historical").lower()

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def debug_print(cls):
        print(f"[CONFIG] DATABASE_URL={cls.DATABASE_URL}")
        print(f"[CONFIG] API_URL={cls.API_URL} timeout={cls.REQUEST_TIMEOUT}s")
        print(f"[CONFIG] UPLOAD_DIR={cls.UPLOAD_DIR} public_url={cls.PUBLIC_URL or '(relative)'}")
        print(f"[CONFIG] ADMIN_PASSWORD set={bool(cls.ADMIN_PASSWORD)} reprice={cls.REPRICE_POLICY}")

    @classmethod
    def validate(cls):
        """Validate that all required configuration is present."""
        missing = []

        if not cls.ADMIN_PASSWORD:
            missing.append("VOVO_ADMIN_PASSWORD")

        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        if cls.REPRICE_POLICY not in ("historical", "current"):
            raise ConfigError(f"VOVO_REPRICE_POLICY must be 'historical' or 'current', got {cls.REPRICE_POLICY!r}")
        if cls.REQUEST_TIMEOUT <= 0:
            raise ConfigError("VOVO_REQUEST_TIMEOUT must be positive")

        return True
