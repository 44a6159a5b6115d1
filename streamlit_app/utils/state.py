"""
Search Session State Module.

This module holds the front-end's per-session state in one explicit object,
SearchSession, instead of loose st.session_state keys. Streamlit pages get the
session's instance with get_search_session() and call its transition methods.

Phases and transitions:
- IDLE -> SEARCHING on submit with a non-blank query
- SEARCHING -> RESULTS on success, SEARCHING -> IDLE on failure (results cleared)
- RESULTS -> DETAIL_LOADING on recipe selection
- DETAIL_LOADING -> DETAIL_SHOWN on success, DETAIL_LOADING -> RESULTS on failure
  (selection cleared, results kept)
- DETAIL_SHOWN -> RESULTS on close

Every search and detail request is issued a token from a counter. A completion
whose token is not the latest one issued is discarded, so a slow response can never
overwrite the state produced by a newer request.

Favorites are a local flag only; toggling never calls the backend.

# NOTE: This module uses session_state, so state persists only for the current
    Streamlit session. Refreshing the page starts a new, empty session.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

import streamlit as st

from recipe_search.models import RecipeDetail, RecipeSummary, SearchFilters

from . import api_client
from .api_client import BackendError
from .transform import transform_recipe_detail, transform_search_results

logger = logging.getLogger(__name__)

# Session state key for the search session
SESSION_KEY = "recipe_search_session"

UNEXPECTED_RESPONSE = "Unexpected response from the recipe service"

# Python attribute name -> query parameter name
_FILTER_ALIASES = {"dish_type": "type", "max_ready_time": "maxReadyTime"}


class Phase(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS = "results"
    DETAIL_LOADING = "detail_loading"
    DETAIL_SHOWN = "detail_shown"


@dataclass
class Notification:
    """A toast to show the user."""
    title: str
    description: str = ""
    variant: str = "default"  # "default" or "destructive"


@dataclass
class SearchSession:
    """
    Ephemeral UI state for one user session.

    Attributes:
        input_query: Text currently in the search box
        submitted_query: Trimmed query of the latest search that was started
        filters: Active search filters
        results: Current result set, in provider order
        selected: Recipe detail currently shown, if any
        selected_id: Id of the recipe being loaded or shown
        phase: Current Phase
        last_error: Message of the most recent failure
        notifications: Pending toasts, oldest first
    """
    input_query: str = ""
    submitted_query: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    results: List[RecipeSummary] = field(default_factory=list)
    selected: Optional[RecipeDetail] = None
    selected_id: Optional[int] = None
    phase: Phase = Phase.IDLE
    last_error: Optional[str] = None
    notifications: List[Notification] = field(default_factory=list)
    search_token: int = 0
    detail_token: int = 0

    # --- derived flags -------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.phase == Phase.SEARCHING

    @property
    def is_loading_details(self) -> bool:
        return self.phase == Phase.DETAIL_LOADING

    @property
    def has_active_filters(self) -> bool:
        return not self.filters.is_empty()

    # --- notifications -------------------------------------------------------

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        self.notifications.append(Notification(title=title, description=description, variant=variant))

    def drain_notifications(self) -> List[Notification]:
        """Return and clear the pending notifications."""
        pending, self.notifications = self.notifications, []
        return pending

    # --- filters -------------------------------------------------------------

    def set_filter(self, key: str, value: Any) -> None:
        """
        Set one filter. None or "" removes it.

        Accepts the query parameter name ("type", "maxReadyTime"), the attribute name
        ("dish_type", "max_ready_time") or any pass-through key.
        """
        key = _FILTER_ALIASES.get(key, key)
        params = self.filters.model_dump(by_alias=True)
        if value is None or value == "":
            params.pop(key, None)
        else:
            params[key] = value
        self.filters = SearchFilters.model_validate(params)

    def clear_filters(self) -> None:
        self.filters = SearchFilters()

    # --- search --------------------------------------------------------------

    def begin_search(self, query: Optional[str] = None) -> Optional[int]:
        """
        Start a search for `query` (or the current input_query).

        Returns:
            The request token, or None when the query is blank (a notification is
            queued and nothing else changes).
        """
        term = self.input_query if query is None else query
        if not term or not term.strip():
            self.notify(
                "Please enter a search term",
                "Try searching for 'chicken', 'pasta', or 'vegan'",
                variant="destructive",
            )
            return None

        self.input_query = term
        self.submitted_query = term.strip()
        self.search_token += 1
        # A pending or open detail belongs to the previous result set
        self.detail_token += 1
        self.selected = None
        self.selected_id = None
        self.last_error = None
        self.phase = Phase.SEARCHING
        return self.search_token

    def complete_search(self, token: int, payload: Any) -> bool:
        """
        Apply a search response.

        Returns:
            False if the response was stale and discarded, True otherwise.
        """
        if token != self.search_token:
            logger.debug("Discarding stale search response (token=%d, latest=%d)", token, self.search_token)
            return False
        try:
            results = transform_search_results(payload)
        except ValueError as e:
            logger.warning("Could not transform search response: %s", e)
            return self.fail_search(token, UNEXPECTED_RESPONSE)

        self.results = results
        self.phase = Phase.RESULTS
        self.notify("Search completed", f"Found {len(results)} recipes")
        return True

    def fail_search(self, token: int, message: Optional[str]) -> bool:
        """Record a failed search. Results are cleared. Stale failures are ignored."""
        if token != self.search_token:
            logger.debug("Discarding stale search failure (token=%d, latest=%d)", token, self.search_token)
            return False
        self.results = []
        self.last_error = message
        self.phase = Phase.IDLE
        self.notify(
            "Search failed",
            message or "Unable to search recipes. Please try again.",
            variant="destructive",
        )
        return True

    def run_search(self, client: Any = api_client, query: Optional[str] = None) -> bool:
        """
        Run a complete search: begin, call the backend, apply the outcome.

        Args:
            client: Object with search_recipes(query, filters); defaults to utils.api_client
            query: Query to search; defaults to input_query

        Returns:
            True if the search succeeded.
        """
        token = self.begin_search(query)
        if token is None:
            return False
        try:
            payload = client.search_recipes(self.submitted_query, self.filters)
        except BackendError as e:
            logger.warning("Search error: %s", e.message)
            self.fail_search(token, e.message)
            return False
        return self.complete_search(token, payload) and self.phase == Phase.RESULTS

    # --- details -------------------------------------------------------------

    def begin_detail(self, recipe_id: int) -> int:
        """Start loading the detail of `recipe_id`. Returns the request token."""
        self.detail_token += 1
        self.selected_id = recipe_id
        self.phase = Phase.DETAIL_LOADING
        return self.detail_token

    def complete_detail(self, token: int, payload: Any) -> bool:
        """
        Apply a recipe detail response. The favorite flag is carried over from the
        matching summary.

        Returns:
            False if the response was stale and discarded, True otherwise.
        """
        if token != self.detail_token:
            logger.debug("Discarding stale detail response (token=%d, latest=%d)", token, self.detail_token)
            return False
        summary = self._find_summary(self.selected_id)
        try:
            detail = transform_recipe_detail(payload, is_favorite=bool(summary and summary.is_favorite))
        except ValueError as e:
            logger.warning("Could not transform recipe detail response: %s", e)
            return self.fail_detail(token, UNEXPECTED_RESPONSE)

        self.selected = detail
        self.phase = Phase.DETAIL_SHOWN
        return True

    def fail_detail(self, token: int, message: Optional[str]) -> bool:
        """Record a failed detail fetch. Existing results are kept. Stale failures are ignored."""
        if token != self.detail_token:
            logger.debug("Discarding stale detail failure (token=%d, latest=%d)", token, self.detail_token)
            return False
        self.selected = None
        self.selected_id = None
        self.last_error = message
        self.phase = Phase.RESULTS if self.results else Phase.IDLE
        self.notify(
            "Failed to load recipe details",
            message or "Unable to load recipe. Please try again.",
            variant="destructive",
        )
        return True

    def run_detail(self, recipe_id: int, client: Any = api_client) -> bool:
        """
        Load and show one recipe's detail.

        Args:
            recipe_id: Recipe to show
            client: Object with get_recipe_details(recipe_id); defaults to utils.api_client

        Returns:
            True if the detail is now shown.
        """
        token = self.begin_detail(recipe_id)
        try:
            payload = client.get_recipe_details(recipe_id)
        except BackendError as e:
            logger.warning("Error fetching recipe details: %s", e.message)
            self.fail_detail(token, e.message)
            return False
        return self.complete_detail(token, payload) and self.phase == Phase.DETAIL_SHOWN

    def close_detail(self) -> None:
        """Close the detail view (also abandons a detail that is still loading)."""
        self.detail_token += 1
        self.selected = None
        self.selected_id = None
        if self.phase in (Phase.DETAIL_LOADING, Phase.DETAIL_SHOWN):
            self.phase = Phase.RESULTS if self.results else Phase.IDLE

    # --- favorites -----------------------------------------------------------

    def toggle_favorite(self, recipe_id: int) -> Optional[bool]:
        """
        Flip the favorite flag of one recipe, in the results and on the shown detail.

        Returns:
            The new flag value, or None if the recipe is neither in the results nor shown.
        """
        new_value: Optional[bool] = None
        title = ""

        summary = self._find_summary(recipe_id)
        if summary is not None:
            summary.is_favorite = not summary.is_favorite
            new_value = summary.is_favorite
            title = summary.title

        if self.selected is not None and self.selected.id == recipe_id:
            self.selected.is_favorite = not self.selected.is_favorite
            if new_value is None:
                new_value = self.selected.is_favorite
                title = self.selected.title

        if new_value is not None:
            self.notify("Added to favorites" if new_value else "Removed from favorites", title)
        return new_value

    def favorites(self) -> List[RecipeSummary]:
        return [recipe for recipe in self.results if recipe.is_favorite]

    def _find_summary(self, recipe_id: Optional[int]) -> Optional[RecipeSummary]:
        if recipe_id is None:
            return None
        return next((recipe for recipe in self.results if recipe.id == recipe_id), None)


def get_search_session() -> SearchSession:
    """
    Get the SearchSession of the current Streamlit session, creating it on first use.

    Call this at the start of any page that reads or changes search state.
    """
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SearchSession()
    return st.session_state[SESSION_KEY]
