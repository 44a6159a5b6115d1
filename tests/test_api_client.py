"""
Tests for the Streamlit backend client.

requests.get is patched in every test. These tests verify that:
- Requests go to the configured backend with only the filters that have values
- The backend's {"error": ...} message is surfaced as BackendError
- A 2xx response that is not JSON is an UnexpectedResponseError
- Transport failures become readable BackendErrors
"""

import os
from unittest.mock import Mock, patch

import pytest
import requests

from streamlit_app.utils import api_client
from streamlit_app.utils.api_client import BackendError, UnexpectedResponseError

GET_PATH = "streamlit_app.utils.api_client.requests.get"


def make_response(status_code=200, json_body=None, text="", content_type="application/json"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = {"content-type": content_type}
    response.text = text
    response.json.return_value = json_body
    return response


@pytest.fixture(autouse=True)
def backend_url():
    with patch.dict(os.environ, {"BACKEND_URL": "http://backend.test/"}):
        yield


class TestSearchRecipes:
    """Tests for api_client.search_recipes."""

    def test_search_request(self):
        """Test the search call targets /recipes/search with query and set filters only."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(json_body={"results": []})
            result = api_client.search_recipes("pasta", {"diet": "vegan", "cuisine": "", "maxReadyTime": 30})

        assert result == {"results": []}
        args, kwargs = mock_get.call_args
        assert args[0] == "http://backend.test/recipes/search"
        assert kwargs["params"] == {"query": "pasta", "diet": "vegan", "maxReadyTime": 30}
        assert kwargs["headers"]["Accept"] == "application/json"

    def test_no_timeout_by_default(self, monkeypatch):
        """Test the backend hop has no timeout unless configured."""
        monkeypatch.delenv("RECIPES_CLIENT_TIMEOUT", raising=False)
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(json_body={"results": []})
            api_client.search_recipes("pasta")

        assert mock_get.call_args[1]["timeout"] is None

    def test_configured_timeout(self):
        """Test RECIPES_CLIENT_TIMEOUT is applied to backend calls."""
        with patch.dict(os.environ, {"RECIPES_CLIENT_TIMEOUT": "15"}):
            with patch(GET_PATH) as mock_get:
                mock_get.return_value = make_response(json_body={"results": []})
                api_client.search_recipes("pasta")

        assert mock_get.call_args[1]["timeout"] == 15.0

    def test_backend_error_message(self):
        """Test the backend's error field becomes the exception message."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(
                status_code=500, json_body={"error": "Your daily points limit of 150 has been reached."}
            )
            with pytest.raises(BackendError) as exc_info:
                api_client.search_recipes("pasta")

        assert exc_info.value.message == "Your daily points limit of 150 has been reached."
        assert exc_info.value.status == 500

    def test_status_fallback_message(self):
        """Test a failure without an error field reports the status."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(status_code=502, json_body={})
            with pytest.raises(BackendError) as exc_info:
                api_client.search_recipes("pasta")

        assert exc_info.value.message == "Failed to search recipes (502)"

    def test_non_json_error_body_is_truncated(self):
        """Test a non-JSON error body is echoed, cut to 120 characters."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(status_code=502, text="x" * 500, content_type="text/html")
            with pytest.raises(BackendError) as exc_info:
                api_client.search_recipes("pasta")

        assert exc_info.value.message == "x" * 120

    def test_non_json_success_is_unexpected(self):
        """Test a 2xx HTML body raises UnexpectedResponseError instead of being parsed."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(
                status_code=200, text="<!doctype html><html>...</html>", content_type="text/html"
            )
            with pytest.raises(UnexpectedResponseError) as exc_info:
                api_client.search_recipes("pasta")

        assert exc_info.value.message.startswith("Unexpected non-JSON response. First 120 chars:")
        assert "<!doctype html>" in exc_info.value.message

    def test_timeout(self):
        """Test a timeout becomes a readable BackendError."""
        with patch(GET_PATH, side_effect=requests.exceptions.Timeout()):
            with pytest.raises(BackendError, match="Request timed out"):
                api_client.search_recipes("pasta")

    def test_connection_error(self):
        """Test an unreachable backend becomes a readable BackendError."""
        with patch(GET_PATH, side_effect=requests.exceptions.ConnectionError()):
            with pytest.raises(BackendError, match="Could not connect to backend"):
                api_client.search_recipes("pasta")


class TestGetRecipeDetails:
    """Tests for api_client.get_recipe_details."""

    def test_details_request(self):
        """Test the detail call targets /recipe/{id} without query params."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(json_body={"id": 42})
            result = api_client.get_recipe_details(42)

        assert result == {"id": 42}
        args, kwargs = mock_get.call_args
        assert args[0] == "http://backend.test/recipe/42"
        assert kwargs["params"] is None

    def test_details_status_fallback(self):
        """Test the detail fallback message names the operation and status."""
        with patch(GET_PATH) as mock_get:
            mock_get.return_value = make_response(status_code=503, json_body=None)
            with pytest.raises(BackendError) as exc_info:
                api_client.get_recipe_details(42)

        assert exc_info.value.message == "Failed to fetch recipe details (503)"
