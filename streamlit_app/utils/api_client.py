"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls from the Streamlit app to the FastAPI backend go through it.

Key principles:
- Centralized error handling for network issues
- Every request asks for JSON (Accept: application/json)
- A non-JSON success response is its own failure (UnexpectedResponseError), it is never
  parsed on a guess
- Errors are raised as BackendError with a message ready for a toast; the session
  state layer (utils/state.py) turns them into notifications

# NOTE: This hop has no timeout unless RECIPES_CLIENT_TIMEOUT is set; the backend
    already bounds the provider call to 10 seconds.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

import requests
import streamlit as st

from api.config import ClientConfig
from recipe_search.models import SearchFilters

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Accept": "application/json"}

# Longest chunk of an unexpected body echoed back in error messages
BODY_PREVIEW_CHARS = 120


class BackendError(Exception):
    """
    Failure talking to the backend.

    Attributes:
        message: Message suitable for showing to the user
        status: HTTP status code, if the backend answered
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class UnexpectedResponseError(BackendError):
    """The backend answered 2xx but the body is not JSON."""


def get_backend_url() -> str:
    """
    Get the backend API base URL from environment variable or use default.

    Returns:
        Backend URL string with trailing slash removed. Defaults to http://localhost:8000
        for local development; set BACKEND_URL in production.
    """
    return ClientConfig.get_backend_url()


@st.cache_data(ttl=60)  # Cache for 60 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling /health endpoint.

    Returns:
        The /health body when the backend reports status "ok", otherwise None.
        Never raises: the sidebar status badge is a nice-to-have.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", headers=JSON_HEADERS, timeout=5)
        response.raise_for_status()
        data = response.json()
    except (requests.exceptions.RequestException, ValueError):
        return None
    if isinstance(data, dict) and data.get("status") == "ok":
        return data
    return None


def _filter_params(filters: Optional[Union[SearchFilters, Mapping[str, Any]]]) -> Dict[str, Any]:
    """Only filters with values are sent."""
    if filters is None:
        return {}
    if not isinstance(filters, SearchFilters):
        filters = SearchFilters.model_validate(dict(filters))
    return {key: value for key, value in filters.to_params().items() if value}


def _error_message(response: requests.Response) -> Optional[str]:
    """The `error` field of a JSON error body, or the text of a non-JSON one."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = response.json()
        except ValueError:
            return None
        error = body.get("error") if isinstance(body, dict) else None
        return str(error) if error else None
    text = (response.text or "").strip()
    return text[:BODY_PREVIEW_CHARS] or None


def _get_json(path: str, params: Optional[Dict[str, Any]], failure_label: str) -> Any:
    """
    GET a backend path and return its parsed JSON body.

    Raises:
        BackendError: On transport failure or non-2xx status.
        UnexpectedResponseError: On a 2xx response that is not JSON.
    """
    url = f"{get_backend_url()}{path}"
    try:
        response = requests.get(
            url,
            params=params,
            headers=JSON_HEADERS,
            timeout=ClientConfig.get_timeout(),
        )
    except requests.exceptions.Timeout as e:
        raise BackendError("Request timed out. The backend may be slow or unreachable.") from e
    except requests.exceptions.ConnectionError as e:
        raise BackendError(
            "Could not connect to backend. Please check your connection and that the backend is running."
        ) from e
    except requests.exceptions.RequestException as e:
        raise BackendError(f"{failure_label}: {e}") from e

    if not response.ok:
        message = _error_message(response) or f"{failure_label} ({response.status_code})"
        logger.warning("Backend %s returned %s: %s", path, response.status_code, message)
        raise BackendError(message, status=response.status_code)

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        preview = (response.text or "")[:BODY_PREVIEW_CHARS]
        logger.warning("Backend %s returned non-JSON content type %r", path, content_type)
        raise UnexpectedResponseError(
            f"Unexpected non-JSON response. First {BODY_PREVIEW_CHARS} chars: {preview}",
            status=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        preview = (response.text or "")[:BODY_PREVIEW_CHARS]
        raise UnexpectedResponseError(
            f"Unexpected non-JSON response. First {BODY_PREVIEW_CHARS} chars: {preview}",
            status=response.status_code,
        ) from e


def search_recipes(
    query: str,
    filters: Optional[Union[SearchFilters, Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Search recipes through the backend.

    Args:
        query: Search term (e.g., "pasta")
        filters: Optional SearchFilters or mapping (diet, cuisine, intolerances, type, maxReadyTime)

    Returns:
        The provider search JSON relayed by the backend ({"results": [...], ...}).

    Raises:
        BackendError: With the backend's `error` message when there is one,
            otherwise "Failed to search recipes (<status>)".
    """
    params: Dict[str, Any] = {"query": query}
    params.update(_filter_params(filters))
    return _get_json("/recipes/search", params, "Failed to search recipes")


def get_recipe_details(recipe_id: int) -> Dict[str, Any]:
    """
    Fetch full recipe details through the backend.

    Args:
        recipe_id: Provider recipe id

    Returns:
        The provider recipe JSON relayed by the backend.

    Raises:
        BackendError: With the backend's `error` message when there is one,
            otherwise "Failed to fetch recipe details (<status>)".
    """
    return _get_json(f"/recipe/{recipe_id}", None, "Failed to fetch recipe details")
