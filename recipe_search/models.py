"""
Recipe models for the recipe search system.

This module defines the schemas used throughout the project:
- SearchFilters: the optional filter set sent along with a search term
- SearchQuery: a search term plus its filters
- RecipeSummary: one entry of a search result (what the result grid shows)
- RecipeDetail: full recipe with ingredients, instruction steps and nutrition

Field names are snake_case in Python and keep the provider's camelCase names as
aliases, so `model_dump(by_alias=True)` yields the same keys the provider and the
front-end use (readyInMinutes, dishTypes, isFavorite, ...).

# NOTE: isFavorite is a client-only flag. The provider never sends it and it is
    never sent back upstream.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator

# Default number of results requested from the provider per search
DEFAULT_PAGE_SIZE = 12

# Display value used for nutrients the provider did not report
NOT_AVAILABLE = "N/A"


class SearchFilters(BaseModel):
    """
    Optional filters for a recipe search.

    The named fields cover the filters the UI offers. Any other key is kept as an
    extra field and forwarded to the provider unmodified, so new provider filters
    (e.g. `sort`, `offset`, `equipment`) work without a code change.
    """
    diet: Optional[str] = Field(None, description="Diet filter (e.g. 'vegetarian', 'vegan')")
    cuisine: Optional[str] = Field(None, description="Cuisine filter (e.g. 'italian')")
    intolerances: Optional[str] = Field(None, description="Comma-separated intolerances (e.g. 'gluten,dairy')")
    dish_type: Optional[str] = Field(None, alias="type", description="Dish/meal type (e.g. 'dessert')")
    max_ready_time: Optional[Union[int, str]] = Field(
        None,
        alias="maxReadyTime",
        description="Maximum ready time in minutes. Kept as the raw string when it is not numeric.",
    )
    number: Optional[int] = Field(None, ge=1, description="Page size override (provider default used when unset)")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_params(self) -> Dict[str, Any]:
        """
        Render the filters as provider query parameters.

        Returns:
            Dictionary keyed by the provider's parameter names (type, maxReadyTime, ...)
            including pass-through keys. Unset and empty values are omitted.
        """
        params = self.model_dump(by_alias=True)
        return {key: value for key, value in params.items() if value is not None and value != ""}

    @property
    def extras(self) -> Dict[str, Any]:
        """Pass-through keys that are not one of the named filters."""
        return dict(self.model_extra or {})

    def is_empty(self) -> bool:
        """True when no filter (named or pass-through) carries a value."""
        return not self.to_params()


class SearchQuery(BaseModel):
    """A free-text search term plus optional filters."""
    term: str = Field(..., description="Search term, non-empty once trimmed")
    filters: SearchFilters = Field(default_factory=SearchFilters)

    @field_validator("term")
    @classmethod
    def _term_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Search term must not be empty")
        return value.strip()


class RecipeSummary(BaseModel):
    """
    One recipe in a search result.

    cuisines, diets and dish_types are always lists (never None) so presentation
    code can iterate them without checks.
    """
    id: int = Field(..., description="Provider recipe identifier")
    title: str = Field("", description="Recipe title")
    image: Optional[str] = Field(None, description="URL to recipe image")
    ready_in_minutes: Optional[int] = Field(None, alias="readyInMinutes", description="Total time in minutes")
    servings: Optional[int] = Field(None, description="Number of servings")
    summary: Optional[str] = Field(None, description="HTML-bearing summary text")
    cuisines: List[str] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    dish_types: List[str] = Field(default_factory=list, alias="dishTypes")
    is_favorite: bool = Field(False, alias="isFavorite", description="Client-only favorite flag")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 715538,
                "title": "Bruschetta Style Pork & Pasta",
                "image": "https://img.spoonacular.com/recipes/715538-312x231.jpg",
                "readyInMinutes": 35,
                "servings": 5,
                "summary": "<b>Bruschetta Style Pork & Pasta</b> is a main course...",
                "cuisines": ["Mediterranean", "Italian"],
                "diets": [],
                "dishTypes": ["lunch", "main course", "dinner"],
                "isFavorite": False,
            }
        },
    )


class Ingredient(BaseModel):
    """Ingredient line of a recipe detail."""
    id: Optional[int] = None
    name: str = ""
    amount: Optional[float] = None
    unit: str = ""
    original: str = Field("", description="Display string as written in the recipe")


class InstructionStep(BaseModel):
    """Numbered instruction step."""
    number: int
    step: str


class Nutrition(BaseModel):
    """Headline nutrients as display strings."""
    calories: str = NOT_AVAILABLE
    protein: str = NOT_AVAILABLE
    carbs: str = NOT_AVAILABLE
    fat: str = NOT_AVAILABLE


class RecipeDetail(RecipeSummary):
    """
    Full recipe view: a RecipeSummary plus ingredients, steps and nutrition.

    `steps` comes from the provider's structured instructions when present,
    otherwise it is parsed from the `instructions` HTML blob.
    """
    extended_ingredients: List[Ingredient] = Field(default_factory=list, alias="extendedIngredients")
    steps: List[InstructionStep] = Field(default_factory=list)
    nutrition: Optional[Nutrition] = None
    instructions: Optional[str] = Field(None, description="Raw HTML instructions from the provider")
    source_url: Optional[str] = Field(None, alias="sourceUrl")
