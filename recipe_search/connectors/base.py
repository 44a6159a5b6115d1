"""
Base connector abstract class for recipe provider integrations.

This module defines the interface every recipe provider connector implements and
the single error type connectors raise. Callers (the API routers) only ever see
ProviderError, whatever went wrong on the way to the provider.

All connectors must:
- Implement the provider attribute (e.g., "spoonacular")
- Provide search_recipes returning the provider's raw search JSON
- Provide get_recipe_details returning the provider's raw recipe JSON
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union

from recipe_search.models import SearchFilters


class ProviderError(Exception):
    """
    Normalized provider failure.

    Raised for transport failures, timeouts, non-2xx provider responses and
    malformed response bodies.

    Attributes:
        message: Best-available human readable message
        status: HTTP status returned by the provider, if a response was received
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f"ProviderError(message={self.message!r}, status={self.status!r})"


class BaseRecipeConnector(ABC):
    """
    Abstract base class for all recipe provider connectors.

    Attributes:
        provider: String identifier for the provider (e.g., "spoonacular")
    """
    provider: str

    @abstractmethod
    def search_recipes(
        self,
        query: str,
        filters: Optional[Union[SearchFilters, Mapping[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Search recipes on the provider.

        Args:
            query: Search term, already trimmed and non-empty
            filters: Optional filters; unknown keys are forwarded unmodified

        Returns:
            The provider's JSON body (a dict containing a "results" list).

        Raises:
            ProviderError: On any failure talking to the provider.
        """
        pass

    @abstractmethod
    def get_recipe_details(self, recipe_id: int) -> Dict[str, Any]:
        """
        Fetch full recipe information, including nutrition.

        Args:
            recipe_id: Provider recipe identifier

        Returns:
            The provider's JSON body for the recipe.

        Raises:
            ProviderError: On any failure talking to the provider.
        """
        pass
