"""
Configuration for PrintShop Desk.

Process-level settings (storage locations, session policy, inventory
policy) come from the environment and an optional .env file. Pricing and
order-limit parameters are NOT here: they live in SystemConfig and are
persisted to system_config.txt so administrators can change them at runtime.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env before the Config class reads the environment
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str, default: str):
    raw = os.environ.get(name, default).strip()
    return int(raw) if raw else None


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "print_shop_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Storage
    DATA_DIR = os.environ.get("PRINT_SHOP_DATA_DIR", str(BASE_DIR / "data"))
    BACKUP_DIR = os.environ.get("PRINT_SHOP_BACKUP_DIR", str(BASE_DIR / "backups"))
    AUTOLOAD_DATA = _env_flag("PRINT_SHOP_AUTOLOAD", "1")
    AUTOSAVE_DATA = _env_flag("PRINT_SHOP_AUTOSAVE", "1")

    # ==========================================================================
    # Session policy
    # ==========================================================================
    # SESSION_TIMEOUT_MINUTES: idle time after which a token is treated as
    #   expired on its next use (sessions are never swept in the background)
    # MAX_SESSIONS_PER_USER: concurrent tokens per account; the oldest is
    #   evicted when a new login would exceed the cap
    # ==========================================================================
    SESSION_TIMEOUT_MINUTES = int(os.environ.get("SESSION_TIMEOUT_MINUTES", "30"))
    MAX_SESSIONS_PER_USER = int(os.environ.get("MAX_SESSIONS_PER_USER", "3"))
    SESSION_ID_LENGTH = int(os.environ.get("SESSION_ID_LENGTH", "32"))

    # ==========================================================================
    # Inventory and order policy
    # ==========================================================================
    # DEFAULT_STOCK_GRAMS: stock reported for a material that was never
    #   stocked. Leave empty to treat unknown materials as out of stock.
    # STRICT_STATUS_TRANSITIONS: reject backwards status changes
    #   (completed -> pending etc.) instead of assigning any known status.
    # ==========================================================================
    DEFAULT_STOCK_GRAMS = _env_optional_int("DEFAULT_STOCK_GRAMS", "1000")
    STRICT_STATUS_TRANSITIONS = _env_flag("STRICT_STATUS_TRANSITIONS", "0")

    # Password hashing method passed to werkzeug.security
    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")

    # Default admin account created by a factory reset
    DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "admin@printshop.local")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "ChangeMe!2024")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    AUTOLOAD_DATA = False
    AUTOSAVE_DATA = False
    DEFAULT_STOCK_GRAMS = 1000
    STRICT_STATUS_TRANSITIONS = False
