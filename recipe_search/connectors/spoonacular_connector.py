"""
Spoonacular connector using the requests library.

This connector talks to the Spoonacular REST API on behalf of the proxy endpoints.
It owns the API key, so the key never reaches the browser.

The connector:
- Searches recipes via GET /recipes/complexSearch, always asking for recipe
  information and ingredient fill-in so results carry summary, cuisine and diet
  fields without a second round trip
- Fetches one recipe via GET /recipes/{id}/information with nutrition included
- Applies a fixed request timeout (10 seconds unless SPOONACULAR_TIMEOUT overrides it)
- Maps every failure (network, timeout, non-2xx, malformed body) to ProviderError,
  logging one line per failure. There are no retries.

Requires SPOONACULAR_API_KEY in .env or the environment (or an explicit api_key).
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Union

import requests

from api.config import SpoonacularConfig
from recipe_search.models import DEFAULT_PAGE_SIZE, SearchFilters

from .base import BaseRecipeConnector, ProviderError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/recipes/complexSearch"
DETAILS_PATH = "/recipes/{recipe_id}/information"

DEFAULT_SEARCH_ERROR = "Failed to search recipes"
DEFAULT_DETAILS_ERROR = "Failed to get recipe details"

_API_KEY_PARAM = re.compile(r"(apiKey=)[^&\s'\"]+")


class SpoonacularConnector(BaseRecipeConnector):
    """
    Connector for the Spoonacular recipe API.

    Returns the provider's JSON bodies unchanged; shaping them into view models is
    the front-end's job (see streamlit_app/utils/transform.py).
    """
    provider = "spoonacular"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the Spoonacular connector.

        Args:
            api_key: Spoonacular API key (optional, reads from SPOONACULAR_API_KEY if not provided)
            base_url: API base URL (optional, reads from SPOONACULAR_BASE_URL or uses the public API)
            timeout: Request timeout in seconds (optional, defaults to 10)
            session: requests.Session to use (optional, a new session is created if not provided)

        Raises:
            RuntimeError: If no API key is available.
        """
        key = api_key or SpoonacularConfig.get_api_key()
        if not key:
            raise RuntimeError(
                "SPOONACULAR_API_KEY is not set. Please add it to your .env file at the project root:\n"
                "SPOONACULAR_API_KEY=your_spoonacular_key_here"
            )

        self.api_key = key
        self.base_url = (base_url or SpoonacularConfig.get_base_url()).rstrip("/")
        self.timeout = timeout or SpoonacularConfig.get_timeout()
        self.session = session or requests.Session()

    def search_recipes(
        self,
        query: str,
        filters: Optional[Union[SearchFilters, Mapping[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Search recipes on Spoonacular.

        Args:
            query: Search term (e.g., "pasta")
            filters: Optional SearchFilters or mapping; unknown keys are forwarded as-is

        Returns:
            Provider JSON, e.g. {"results": [...], "offset": 0, "number": 12, "totalResults": 220}

        Raises:
            ProviderError: On timeout, network failure, non-2xx response or malformed body.
        """
        if filters is None:
            filters = SearchFilters()
        elif not isinstance(filters, SearchFilters):
            filters = SearchFilters.model_validate(dict(filters))

        params: Dict[str, Any] = {
            "query": query,
            "number": filters.number or DEFAULT_PAGE_SIZE,
            "addRecipeInformation": "true",
            "fillIngredients": "true",
        }
        params.update(filters.to_params())

        logger.info("Spoonacular search: query=%r filters=%r", query, filters.to_params())
        return self._get(SEARCH_PATH, params, operation="search", default_message=DEFAULT_SEARCH_ERROR)

    def get_recipe_details(self, recipe_id: int) -> Dict[str, Any]:
        """
        Get full recipe information from Spoonacular, nutrition included.

        Args:
            recipe_id: Spoonacular recipe id

        Returns:
            Provider JSON for the recipe (title, extendedIngredients, analyzedInstructions,
            instructions, nutrition, ...)

        Raises:
            ProviderError: On timeout, network failure, non-2xx response or malformed body.
        """
        path = DETAILS_PATH.format(recipe_id=recipe_id)
        logger.info("Spoonacular details: recipe_id=%s", recipe_id)
        return self._get(
            path,
            {"includeNutrition": "true"},
            operation="details",
            default_message=DEFAULT_DETAILS_ERROR,
        )

    def _get(
        self,
        path: str,
        params: Dict[str, Any],
        operation: str,
        default_message: str,
    ) -> Dict[str, Any]:
        """Perform one GET against the provider and return its JSON object body."""
        url = f"{self.base_url}{path}"
        # The key is applied last so no filter can replace it
        request_params = dict(params)
        request_params["apiKey"] = self.api_key

        try:
            response = self.session.get(url, params=request_params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            transport_message = self._redact(str(e))
            self._log_failure(operation, None, transport_message, None)
            raise ProviderError(transport_message or default_message) from e

        if not response.ok:
            provider_message = self._provider_message(response)
            transport_message = f"Request failed with status code {response.status_code}"
            self._log_failure(operation, response.status_code, transport_message, provider_message)
            raise ProviderError(provider_message or default_message, status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            self._log_failure(operation, response.status_code, "Invalid JSON in provider response", None)
            raise ProviderError("Invalid JSON in provider response", status=response.status_code) from e

        if not isinstance(data, dict):
            self._log_failure(operation, response.status_code, "Unexpected provider response format", None)
            raise ProviderError("Unexpected provider response format", status=response.status_code)

        return data

    @staticmethod
    def _provider_message(response: requests.Response) -> Optional[str]:
        """Extract `message`, then `statusMessage`, from an error body if it is JSON."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        message = body.get("message") or body.get("statusMessage")
        return str(message) if message else None

    def _redact(self, text: str) -> str:
        """Remove the API key from transport error text (requests puts the URL in it)."""
        if not text:
            return text
        text = text.replace(self.api_key, "***")
        return _API_KEY_PARAM.sub(r"\1***", text)

    def _log_failure(
        self,
        operation: str,
        status: Optional[int],
        transport_message: Optional[str],
        provider_message: Optional[str],
    ) -> None:
        logger.error(
            "Spoonacular API %s error: status=%s message=%s provider_message=%s",
            operation,
            status,
            transport_message,
            provider_message,
        )
