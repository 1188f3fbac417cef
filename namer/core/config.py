# /namer/core/config.py

"""
Central runtime configuration.

Values come from the process environment (optionally seeded from a local
`.env` file) and are exposed as plain module constants so that every layer
reads the same settings.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Database & Storage ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./namer.db")
STORAGE_ROOT = os.getenv("STORAGE_ROOT", "./storage")

# --- Logging & HTTP ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# --- Provider Credentials ---
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
XAI_API_KEY = os.getenv("XAI_API_KEY")

# --- Timeouts (seconds). No automatic retries are performed. ---
AI_REQUEST_TIMEOUT_SECONDS = float(os.getenv("AI_REQUEST_TIMEOUT_SECONDS", "60"))
DOMAIN_CHECK_TIMEOUT_SECONDS = float(os.getenv("DOMAIN_CHECK_TIMEOUT_SECONDS", "5"))
LOGO_REQUEST_TIMEOUT_SECONDS = float(os.getenv("LOGO_REQUEST_TIMEOUT_SECONDS", "120"))

# --- Caching & Lifetimes ---
CACHE_TTL_HOURS = int(os.getenv("CACHE_TTL_HOURS", "24"))
CANCELLATION_FLAG_TTL_SECONDS = int(os.getenv("CANCELLATION_FLAG_TTL_SECONDS", "3600"))
CANCELLATION_FLAG_MAX_ENTRIES = int(os.getenv("CANCELLATION_FLAG_MAX_ENTRIES", "10000"))
EXPORT_DEFAULT_EXPIRES_DAYS = int(os.getenv("EXPORT_DEFAULT_EXPIRES_DAYS", "7"))

# --- Feature Switches ---
ENABLE_DOMAIN_CHECKS = _env_bool("ENABLE_DOMAIN_CHECKS", True)
