"""
Tests for SearchSession, the front-end's per-session state.

The backend client is a Mock in every test. These tests verify that:
- Searches and detail loads move through the expected phases
- A response that is not for the latest request is discarded
- A failed detail load keeps the current results
- Favorites toggle locally and toggling twice restores the original state
"""

from unittest.mock import Mock

import pytest

from recipe_search.models import SearchFilters
from streamlit_app.utils.api_client import BackendError
from streamlit_app.utils.state import Phase, SearchSession

SEARCH_PAYLOAD = {
    "results": [
        {"id": 1, "title": "Pasta Primavera", "cuisines": ["Italian"]},
        {"id": 2, "title": "Pasta Carbonara", "cuisines": None},
    ]
}

DETAIL_PAYLOAD = {
    "id": 1,
    "title": "Pasta Primavera",
    "instructions": "<ol><li>Boil</li><li>Toss</li></ol>",
}


@pytest.fixture
def client():
    mock = Mock()
    mock.search_recipes.return_value = SEARCH_PAYLOAD
    mock.get_recipe_details.return_value = DETAIL_PAYLOAD
    return mock


@pytest.fixture
def session_with_results(client):
    session = SearchSession(input_query="pasta")
    session.run_search(client=client)
    session.drain_notifications()
    return session


class TestSearch:
    """Tests for the search transitions."""

    def test_successful_search(self, client):
        """Test a search ends in RESULTS with summaries and a notification."""
        session = SearchSession(input_query="  pasta ")

        assert session.run_search(client=client) is True

        assert session.phase == Phase.RESULTS
        assert session.submitted_query == "pasta"
        assert [r.id for r in session.results] == [1, 2]
        assert session.results[1].cuisines == []
        client.search_recipes.assert_called_once_with("pasta", session.filters)
        [notification] = session.drain_notifications()
        assert notification.title == "Search completed"
        assert notification.description == "Found 2 recipes"

    def test_blank_query_does_nothing(self, client):
        """Test a blank query only queues a destructive notification."""
        session = SearchSession(input_query="   ")

        assert session.run_search(client=client) is False

        client.search_recipes.assert_not_called()
        assert session.phase == Phase.IDLE
        [notification] = session.drain_notifications()
        assert notification.title == "Please enter a search term"
        assert notification.variant == "destructive"

    def test_begin_search_sets_loading(self):
        """Test SEARCHING is reported through is_loading."""
        session = SearchSession()

        token = session.begin_search("soup")

        assert token == 1
        assert session.is_loading is True
        assert session.phase == Phase.SEARCHING

    def test_failed_search_clears_results(self, session_with_results, client):
        """Test a failed search ends in IDLE with no results and a notification."""
        client.search_recipes.side_effect = BackendError("Failed to search recipes (500)", status=500)

        assert session_with_results.run_search(client=client, query="soup") is False

        assert session_with_results.phase == Phase.IDLE
        assert session_with_results.results == []
        assert session_with_results.last_error == "Failed to search recipes (500)"
        [notification] = session_with_results.drain_notifications()
        assert notification.title == "Search failed"
        assert notification.description == "Failed to search recipes (500)"

    def test_unexpected_payload_fails_search(self):
        """Test a body that cannot be transformed is a failed search."""
        session = SearchSession()
        token = session.begin_search("pasta")

        session.complete_search(token, ["not", "an", "object"])

        assert session.phase == Phase.IDLE
        assert session.last_error == "Unexpected response from the recipe service"

    def test_stale_search_response_is_discarded(self):
        """Test an older search completing last cannot overwrite the newer results."""
        session = SearchSession()
        first = session.begin_search("pasta")
        second = session.begin_search("soup")

        assert session.complete_search(second, {"results": [{"id": 9, "title": "Soup"}]}) is True
        assert session.complete_search(first, SEARCH_PAYLOAD) is False

        assert [r.id for r in session.results] == [9]
        assert session.phase == Phase.RESULTS

    def test_stale_search_failure_is_discarded(self):
        """Test an older failure cannot clear newer results."""
        session = SearchSession()
        first = session.begin_search("pasta")
        second = session.begin_search("soup")
        session.complete_search(second, {"results": [{"id": 9, "title": "Soup"}]})

        assert session.fail_search(first, "timeout") is False
        assert [r.id for r in session.results] == [9]

    def test_new_search_closes_detail(self, session_with_results, client):
        """Test starting a search clears the selected recipe."""
        session_with_results.run_detail(1, client=client)

        session_with_results.begin_search("soup")

        assert session_with_results.selected is None
        assert session_with_results.selected_id is None


class TestDetail:
    """Tests for the detail transitions."""

    def test_successful_detail(self, session_with_results, client):
        """Test a detail load ends in DETAIL_SHOWN with parsed steps."""
        assert session_with_results.run_detail(1, client=client) is True

        assert session_with_results.phase == Phase.DETAIL_SHOWN
        assert session_with_results.selected.title == "Pasta Primavera"
        assert [s.step for s in session_with_results.selected.steps] == ["Boil", "Toss"]
        client.get_recipe_details.assert_called_once_with(1)

    def test_begin_detail_sets_loading(self, session_with_results):
        """Test DETAIL_LOADING is reported through is_loading_details."""
        session_with_results.begin_detail(2)

        assert session_with_results.is_loading_details is True
        assert session_with_results.selected_id == 2

    def test_failed_detail_keeps_results(self, session_with_results, client):
        """Test a failed detail load returns to RESULTS with results intact."""
        client.get_recipe_details.side_effect = BackendError("Failed to get recipe details", status=500)

        assert session_with_results.run_detail(1, client=client) is False

        assert session_with_results.phase == Phase.RESULTS
        assert [r.id for r in session_with_results.results] == [1, 2]
        assert session_with_results.selected is None
        [notification] = session_with_results.drain_notifications()
        assert notification.title == "Failed to load recipe details"
        assert notification.variant == "destructive"

    def test_stale_detail_response_is_discarded(self, session_with_results):
        """Test selecting another recipe discards the first recipe's late response."""
        first = session_with_results.begin_detail(1)
        second = session_with_results.begin_detail(2)

        assert session_with_results.complete_detail(second, {"id": 2, "title": "Pasta Carbonara"}) is True
        assert session_with_results.complete_detail(first, DETAIL_PAYLOAD) is False

        assert session_with_results.selected.id == 2

    def test_response_after_close_is_discarded(self, session_with_results):
        """Test a detail that arrives after the view was closed is not shown."""
        token = session_with_results.begin_detail(1)
        session_with_results.close_detail()

        assert session_with_results.complete_detail(token, DETAIL_PAYLOAD) is False
        assert session_with_results.selected is None
        assert session_with_results.phase == Phase.RESULTS

    def test_close_detail(self, session_with_results, client):
        """Test closing returns to RESULTS."""
        session_with_results.run_detail(1, client=client)

        session_with_results.close_detail()

        assert session_with_results.phase == Phase.RESULTS
        assert session_with_results.selected is None

    def test_detail_inherits_favorite_flag(self, session_with_results, client):
        """Test a detail opened for a favorite recipe is marked as favorite."""
        session_with_results.toggle_favorite(1)

        session_with_results.run_detail(1, client=client)

        assert session_with_results.selected.is_favorite is True


class TestFavorites:
    """Tests for toggle_favorite."""

    def test_toggle_twice_restores_state(self, session_with_results):
        """Test toggling a recipe twice leaves it where it started."""
        assert session_with_results.toggle_favorite(2) is True
        assert session_with_results.favorites()[0].id == 2
        assert session_with_results.toggle_favorite(2) is False

        assert session_with_results.favorites() == []
        titles = [n.title for n in session_with_results.drain_notifications()]
        assert titles == ["Added to favorites", "Removed from favorites"]

    def test_toggle_updates_shown_detail(self, session_with_results, client):
        """Test the open detail and its summary flip together."""
        session_with_results.run_detail(1, client=client)

        session_with_results.toggle_favorite(1)

        assert session_with_results.selected.is_favorite is True
        assert session_with_results.results[0].is_favorite is True

    def test_toggle_unknown_recipe(self, session_with_results):
        """Test an id that is neither listed nor shown changes nothing."""
        assert session_with_results.toggle_favorite(12345) is None
        assert session_with_results.drain_notifications() == []

    def test_toggle_never_calls_backend(self, session_with_results, client):
        """Test favorites are local only."""
        client.reset_mock()

        session_with_results.toggle_favorite(1)

        client.search_recipes.assert_not_called()
        client.get_recipe_details.assert_not_called()


class TestFilters:
    """Tests for filter editing on the session."""

    def test_set_and_remove_filter(self):
        """Test setting a filter and removing it with an empty value."""
        session = SearchSession()

        session.set_filter("diet", "vegan")
        session.set_filter("max_ready_time", 30)
        assert session.filters.to_params() == {"diet": "vegan", "maxReadyTime": 30}
        assert session.has_active_filters is True

        session.set_filter("diet", "")
        session.set_filter("maxReadyTime", None)
        assert session.has_active_filters is False

    def test_pass_through_filter(self):
        """Test an unknown filter key is kept for the provider."""
        session = SearchSession()

        session.set_filter("sort", "popularity")

        assert session.filters.extras == {"sort": "popularity"}

    def test_filters_reach_the_client(self, client):
        """Test the active filters are sent with the search."""
        session = SearchSession(input_query="curry", filters=SearchFilters(cuisine="indian"))

        session.run_search(client=client)

        _, filters = client.search_recipes.call_args[0]
        assert filters.cuisine == "indian"

    def test_clear_filters(self):
        """Test clear_filters removes every filter."""
        session = SearchSession(filters=SearchFilters(diet="vegan", sort="popularity"))

        session.clear_filters()

        assert session.filters.is_empty()


class TestMalformedResponses:
    """Valid JSON in an unexpected shape ends in a notification, never an exception."""

    @pytest.mark.parametrize("entry", [None, 1, "pasta", ["nested"]])
    def test_non_object_result_entry_fails_search(self, client, entry):
        """Test a result entry that is not an object is a failed search."""
        client.search_recipes.return_value = {"results": [{"id": 1, "title": "Pasta"}, entry]}
        session = SearchSession(input_query="pasta")

        assert session.run_search(client=client) is False

        assert session.phase == Phase.IDLE
        assert session.results == []
        assert session.last_error == "Unexpected response from the recipe service"
        [notification] = session.drain_notifications()
        assert notification.title == "Search failed"
        assert notification.variant == "destructive"

    def test_result_without_id_fails_search(self, client):
        """Test a result entry without an id is a failed search."""
        client.search_recipes.return_value = {"results": [{"title": "No id"}]}
        session = SearchSession(input_query="pasta")

        assert session.run_search(client=client) is False
        assert session.phase == Phase.IDLE

    def test_non_object_steps_are_skipped(self, session_with_results, client):
        """Test structured steps that are not objects fall back to the HTML instructions."""
        client.get_recipe_details.return_value = {
            "id": 1,
            "title": "Pasta Primavera",
            "analyzedInstructions": [{"steps": ["Boil"]}],
            "instructions": "<ol><li>Boil</li><li>Toss</li></ol>",
        }

        assert session_with_results.run_detail(1, client=client) is True

        assert [s.step for s in session_with_results.selected.steps] == ["Boil", "Toss"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"analyzedInstructions": "Boil the pasta"},
            {"analyzedInstructions": [{"steps": {"number": 1}}]},
            {"nutrition": ["Calories"]},
            {"nutrition": {"nutrients": "Calories"}},
            {"extendedIngredients": 3},
            {"instructions": 42},
        ],
    )
    def test_odd_detail_fields_do_not_crash(self, session_with_results, client, overrides):
        """Test oddly typed optional detail fields are ignored or reported, never raised."""
        client.get_recipe_details.return_value = {"id": 1, "title": "Pasta Primavera", **overrides}

        session_with_results.run_detail(1, client=client)

        assert session_with_results.phase in (Phase.DETAIL_SHOWN, Phase.RESULTS)
        assert [r.id for r in session_with_results.results] == [1, 2]

    def test_non_object_detail_fails_detail(self, session_with_results, client):
        """Test a detail body that is not an object keeps the results and notifies."""
        client.get_recipe_details.return_value = [DETAIL_PAYLOAD]

        assert session_with_results.run_detail(1, client=client) is False

        assert session_with_results.phase == Phase.RESULTS
        [notification] = session_with_results.drain_notifications()
        assert notification.title == "Failed to load recipe details"
        assert notification.description == "Unexpected response from the recipe service"


class TestRepeatedSearch:
    """Tests for repeating a search."""

    def test_identical_searches_give_identical_results(self, client):
        """Test the same search against an unchanged backend yields the same result set."""
        session = SearchSession(input_query="pasta", filters=SearchFilters(diet="vegetarian"))

        session.run_search(client=client)
        first = [recipe.model_dump() for recipe in session.results]
        session.run_search(client=client)
        second = [recipe.model_dump() for recipe in session.results]

        assert first == second
        assert len(first) == 2
        assert client.search_recipes.call_count == 2
