"""
Recipes router: the two proxy endpoints in front of the recipe provider.

- GET /recipes/search: search recipes by free text plus optional filters
- GET /recipe/{id}: full recipe information (ingredients, instructions, nutrition)

Both handlers are stateless. They check the API key first, then validate input
(400 without contacting the provider), then call the connector. Successful
responses carry the provider JSON unchanged plus CORS headers; failures carry
{"error": "<message>"}.
"""

import logging
import re
from typing import Optional, Union

from fastapi import APIRouter, Query, Response, status
from fastapi.responses import JSONResponse

from api.config import SpoonacularConfig
from api.schemas import ErrorResponse
from recipe_search.connectors.base import ProviderError
from recipe_search.connectors.spoonacular_connector import (
    DEFAULT_DETAILS_ERROR,
    DEFAULT_SEARCH_ERROR,
    SpoonacularConnector,
)
from recipe_search.models import SearchFilters

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipes"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

API_KEY_MISSING = "API key not configured"
QUERY_REQUIRED = "Query parameter is required"
INVALID_RECIPE_ID = "Valid recipe ID is required"
INTERNAL_ERROR = "Internal server error"

_RECIPE_ID = re.compile(r"\s*-?[0-9]+\s*")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid or missing parameter"},
    500: {"model": ErrorResponse, "description": "Provider failure or missing API key"},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build an {"error": message} JSON response."""
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def parse_max_ready_time(value: str) -> Union[int, str]:
    """
    Parse maxReadyTime to an integer.

    Non-numeric values are not rejected: they are passed through as the raw string
    and the provider decides what to do with them.
    """
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("maxReadyTime is not an integer, passing through as-is: %r", value)
        return value


def parse_recipe_id(value: str) -> Optional[int]:
    """
    Return the recipe id as int, or None if it is not an integer.

    Only ASCII digits with an optional leading minus count, so "+5", "1_000" and
    non-ASCII digits are rejected even though int() would accept them.
    """
    if not _RECIPE_ID.fullmatch(value):
        return None
    return int(value.strip())


def build_search_filters(
    diet: Optional[str] = None,
    cuisine: Optional[str] = None,
    intolerances: Optional[str] = None,
    dish_type: Optional[str] = None,
    max_ready_time: Optional[str] = None,
) -> SearchFilters:
    """Collect the non-empty filter query params into SearchFilters."""
    filters = SearchFilters()
    if diet:
        filters.diet = diet
    if cuisine:
        filters.cuisine = cuisine
    if intolerances:
        filters.intolerances = intolerances
    if dish_type:
        filters.dish_type = dish_type
    if max_ready_time:
        filters.max_ready_time = parse_max_ready_time(max_ready_time)
    return filters


@router.get(
    "/recipes/search",
    summary="Search recipes",
    description="Search the recipe provider by free text. Optional filters: diet, cuisine, "
                "intolerances, type and maxReadyTime. Returns the provider JSON unchanged.",
    responses=_ERROR_RESPONSES,
)
def search_recipes(
    query: Optional[str] = Query(None, description="Search term (required, e.g. 'pasta')"),
    diet: Optional[str] = Query(None, description="Diet filter (e.g. 'vegetarian')"),
    cuisine: Optional[str] = Query(None, description="Cuisine filter (e.g. 'italian')"),
    intolerances: Optional[str] = Query(None, description="Comma-separated intolerances"),
    dish_type: Optional[str] = Query(None, alias="type", description="Dish type (e.g. 'dessert')"),
    max_ready_time: Optional[str] = Query(None, alias="maxReadyTime", description="Max ready time in minutes"),
) -> Response:
    """
    Search recipes through the provider.

    Returns:
        200 with provider JSON ({"results": [...], ...}) and CORS headers.

    Errors:
        400 {"error": "Query parameter is required"}: query missing, empty or blank
        500 {"error": "API key not configured"}: SPOONACULAR_API_KEY not set
        500 {"error": <provider message>}: provider call failed

    Example:
        ```bash
        GET /recipes/search?query=pasta&diet=vegetarian&maxReadyTime=30
        ```
    """
    api_key = SpoonacularConfig.get_api_key()
    if not api_key:
        logger.error("Search request rejected: SPOONACULAR_API_KEY is not configured")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, API_KEY_MISSING)

    logger.info(
        "Search request received: query=%r diet=%r cuisine=%r intolerances=%r type=%r maxReadyTime=%r",
        query, diet, cuisine, intolerances, dish_type, max_ready_time,
    )

    if query is None or not query.strip():
        logger.info("Missing query parameter")
        return error_response(status.HTTP_400_BAD_REQUEST, QUERY_REQUIRED)

    filters = build_search_filters(
        diet=diet,
        cuisine=cuisine,
        intolerances=intolerances,
        dish_type=dish_type,
        max_ready_time=max_ready_time,
    )

    try:
        connector = SpoonacularConnector(api_key=api_key)
        results = connector.search_recipes(query.strip(), filters)
    except ProviderError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message or DEFAULT_SEARCH_ERROR)
    except Exception as e:
        logger.exception("Error in recipes search")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or INTERNAL_ERROR)

    return JSONResponse(content=results, headers=CORS_HEADERS)


@router.get(
    "/recipe/{recipe_id}",
    summary="Get recipe details",
    description="Full recipe information including ingredients, instructions and nutrition. "
                "Returns the provider JSON unchanged.",
    responses=_ERROR_RESPONSES,
)
def get_recipe_details(recipe_id: str) -> Response:
    """
    Get one recipe through the provider.

    Returns:
        200 with provider JSON and CORS headers.

    Errors:
        400 {"error": "Valid recipe ID is required"}: id is not an integer
        500 {"error": "API key not configured"}: SPOONACULAR_API_KEY not set
        500 {"error": <provider message>}: provider call failed
    """
    api_key = SpoonacularConfig.get_api_key()
    if not api_key:
        logger.error("Recipe details request rejected: SPOONACULAR_API_KEY is not configured")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, API_KEY_MISSING)

    logger.info("Recipe details request received: id=%r", recipe_id)

    parsed_id = parse_recipe_id(recipe_id)
    if parsed_id is None:
        logger.info("Invalid recipe ID: %r", recipe_id)
        return error_response(status.HTTP_400_BAD_REQUEST, INVALID_RECIPE_ID)

    try:
        connector = SpoonacularConnector(api_key=api_key)
        recipe = connector.get_recipe_details(parsed_id)
    except ProviderError as e:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message or DEFAULT_DETAILS_ERROR)
    except Exception as e:
        logger.exception("Error in recipe details")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or INTERNAL_ERROR)

    return JSONResponse(content=recipe, headers=CORS_HEADERS)


@router.options("/recipes/search", include_in_schema=False)
def search_recipes_preflight() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.options("/recipe/{recipe_id}", include_in_schema=False)
def get_recipe_details_preflight(recipe_id: str) -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
