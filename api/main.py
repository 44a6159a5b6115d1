"""
FastAPI application for the Recipe Finder API.

This module wires the REST API that sits between the front-end and the recipe
provider:
- GET /recipes/search: Search recipes (proxied to Spoonacular complexSearch)
- GET /recipe/{id}: Recipe details with nutrition (proxied to Spoonacular information)
- GET /health: Health check

The provider API key is read from SPOONACULAR_API_KEY and never leaves the server.
Every error response has the shape {"error": "<message>"}.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
from api.config import SpoonacularConfig, get_log_level

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers.recipes import router as recipes_router
from api.schemas import ErrorResponse, HealthResponse

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_NAME = "Recipe Finder API"
API_VERSION = "1.0.0"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

app = FastAPI(
    title=API_NAME,
    description="Proxy API for searching recipes and reading recipe details from Spoonacular",
    version=API_VERSION,
    openapi_tags=[
        {
            "name": "recipes",
            "description": "Recipe search and recipe details, proxied to the recipe provider.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)

app.include_router(recipes_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (404, 405, ...) as {"error": "..."}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors as a 400 {"error": "..."}."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.get("/health", tags=["health"], response_model=HealthResponse)
def health() -> HealthResponse:
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Status, API metadata, uptime and whether the provider key is configured.
        Always returns 200 OK if the endpoint is reachable.
    """
    return HealthResponse(
        status="ok",
        name=API_NAME,
        version=API_VERSION,
        uptime_seconds=int(time.time() - _APP_START_TIME),
        api_key_configured=SpoonacularConfig.get_api_key() is not None,
    )


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }
