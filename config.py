"""
Configuration module for the Greeting Card Image Generator.

This module centralizes all configuration values and supports environment variable overrides.
All settings can be customized via environment variables.
"""

import logging
import os

# ========= IMAGE CONFIGURATION =========

def _get_default_size() -> tuple[int, int]:
    """Get default card size from environment or use default."""
    width = int(os.getenv("IMG_WIDTH", "1200"))
    height = int(os.getenv("IMG_HEIGHT", "630"))
    return (width, height)

DEFAULT_WIDTH, DEFAULT_HEIGHT = _get_default_size()

MIN_DIMENSION = int(os.getenv("IMG_MIN_DIMENSION", "100"))
MAX_DIMENSION = int(os.getenv("IMG_MAX_DIMENSION", "2000"))

DEFAULT_USER = os.getenv("DEFAULT_USER", "user")
DEFAULT_FONT_FAMILY = os.getenv("FONT_FAMILY", "Arial, sans-serif")

# ========= GITHUB API CONFIGURATION =========

def get_github_api_url() -> str:
    """Get GitHub API base URL from environment or use default."""
    return os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")

GITHUB_API_TIMEOUT = float(os.getenv("GITHUB_API_TIMEOUT", "10"))  # Timeout in seconds
GITHUB_USER_AGENT = os.getenv("GITHUB_USER_AGENT", "Greeting-Image-Generator/1.0")
GITHUB_RETRY_ATTEMPTS = int(os.getenv("GITHUB_RETRY_ATTEMPTS", "3"))  # Total attempts per lookup
GITHUB_RETRY_BACKOFF = float(os.getenv("GITHUB_RETRY_BACKOFF", "0.5"))  # Backoff factor in seconds

# ========= PROFILE CACHE CONFIGURATION =========

PROFILE_CACHE_TTL = float(os.getenv("PROFILE_CACHE_TTL", "300"))  # 5 minutes
PROFILE_CACHE_MAX_ENTRIES = int(os.getenv("PROFILE_CACHE_MAX_ENTRIES", "256"))

# ========= HTTP CACHING CONFIGURATION =========

IMAGE_CACHE_MAX_AGE = int(os.getenv("IMAGE_CACHE_MAX_AGE", "300"))  # Profile cards, 5 minutes
STATIC_CACHE_MAX_AGE = int(os.getenv("STATIC_CACHE_MAX_AGE", "86400"))  # Static assets, 1 day

# ========= STATIC FILES CONFIGURATION =========

PUBLIC_DIR = os.getenv("PUBLIC_DIR", os.path.join(os.path.dirname(__file__), "public"))

# ========= LOGGING CONFIGURATION =========

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the app and the command line."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
