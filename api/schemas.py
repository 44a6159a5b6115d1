"""
Pydantic schemas for FastAPI responses.

The recipe endpoints pass the provider's JSON through unchanged, so only the
shapes this API produces itself are modelled here:
- ErrorResponse: body of every error response ({"error": "..."})
- HealthResponse: body of GET /health
"""

from pydantic import BaseModel, Field, ConfigDict


class ErrorResponse(BaseModel):
    """Error body returned by every failing request."""
    error: str = Field(..., description="Human readable error message")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"error": "Query parameter is required"}
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field("ok", description="Always 'ok' when the API is reachable")
    name: str = Field(..., description="API name")
    version: str = Field(..., description="API version")
    uptime_seconds: int = Field(..., ge=0, description="Seconds since the process started")
    api_key_configured: bool = Field(..., description="Whether SPOONACULAR_API_KEY is set")
