"""
Configuration management for Recipe Finder.

This module centralizes environment variable loading from .env file at project root.
It should be imported early in both backend (api/main.py) and frontend (streamlit_app/app.py)
to ensure .env is loaded before any other code accesses environment variables.

In production, .env will not exist; load_dotenv() is safe to call and will no-op.
Environment variables from the hosting platform will be used instead.

Environment Variables:
- SPOONACULAR_API_KEY: Required for the recipe proxy endpoints (never sent to the browser)
- SPOONACULAR_BASE_URL: Optional, defaults to "https://api.spoonacular.com"
- SPOONACULAR_TIMEOUT: Optional, provider request timeout in seconds (default: 10)
- BACKEND_URL: Optional, backend URL used by the Streamlit app (defaults to http://localhost:8000)
- RECIPES_CLIENT_TIMEOUT: Optional, timeout in seconds for Streamlit -> backend calls (default: none)
- LOG_LEVEL: Optional, root log level for the API (default: "INFO")
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SPOONACULAR_BASE_URL = "https://api.spoonacular.com"
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 10.0
DEFAULT_BACKEND_URL = "http://localhost:8000"


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    The project root is found by going up from this file's location
    (api/config.py -> project root). override=False means variables already set in
    the environment take precedence over the file.

    Safe to call multiple times.
    """
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env", override=False)


# Load .env file on module import
load_env_file()


def _read_float(name: str) -> Optional[float]:
    """Read a positive float from the environment, None when unset or invalid."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return None
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return None
    return value


class SpoonacularConfig:
    """Configuration for the Spoonacular recipe provider."""

    @staticmethod
    def get_api_key() -> Optional[str]:
        """
        Get the Spoonacular API key from environment.

        Returns:
            API key string or None if not set (blank values count as not set)

        Note:
            This does not raise an error - the endpoints answer 500 themselves.
        """
        key = os.getenv("SPOONACULAR_API_KEY")
        if key is None or not key.strip():
            return None
        return key.strip()

    @staticmethod
    def get_base_url() -> str:
        """
        Get the provider base URL.

        Returns:
            Base URL without trailing slash (default: "https://api.spoonacular.com")
        """
        return os.getenv("SPOONACULAR_BASE_URL", DEFAULT_SPOONACULAR_BASE_URL).rstrip("/")

    @staticmethod
    def get_timeout() -> float:
        """
        Get the provider request timeout in seconds.

        Returns:
            Timeout in seconds (default: 10)
        """
        return _read_float("SPOONACULAR_TIMEOUT") or DEFAULT_PROVIDER_TIMEOUT_SECONDS


class ClientConfig:
    """Configuration for the Streamlit front-end."""

    @staticmethod
    def get_backend_url() -> str:
        """
        Get the backend API base URL.

        Returns:
            Backend URL with trailing slash removed (default: http://localhost:8000)
        """
        return os.getenv("BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/")

    @staticmethod
    def get_timeout() -> Optional[float]:
        """
        Get the timeout for front-end -> backend calls.

        Returns:
            Timeout in seconds, or None to rely on transport defaults
        """
        return _read_float("RECIPES_CLIENT_TIMEOUT")


def get_log_level() -> str:
    """Root log level name for the API process (default: "INFO")."""
    return os.getenv("LOG_LEVEL", "INFO").upper()
