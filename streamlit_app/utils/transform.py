"""
Response transforms: provider JSON (as relayed by the backend) -> view models.

Pure functions, no Streamlit and no network. The rules:
- cuisines / diets / dishTypes default to [] so presentation code never null-checks
- isFavorite starts as False on every freshly received summary
- nutrition keeps four headline nutrients (Calories, Protein, Carbohydrates, Fat),
  matched by exact name; a missing nutrient shows as "N/A"
- instruction steps come from analyzedInstructions when present, otherwise they are
  parsed out of the HTML `instructions` blob (list items first, sentences second)
"""

import re
from html.parser import HTMLParser
from typing import Any, Dict, List, Mapping, Optional

from recipe_search.models import (
    NOT_AVAILABLE,
    Ingredient,
    InstructionStep,
    Nutrition,
    RecipeDetail,
    RecipeSummary,
)

# Provider nutrient name -> Nutrition field
HEADLINE_NUTRIENTS = {
    "Calories": "calories",
    "Protein": "protein",
    "Carbohydrates": "carbs",
    "Fat": "fat",
}

_SENTENCE_BOUNDARY = re.compile(r"\.\s+")

# Closing these tags ends a line of text
_BLOCK_TAGS = {"p", "div", "br", "ol", "ul", "h1", "h2", "h3", "h4", "h5", "h6"}


class _HtmlTextParser(HTMLParser):
    """Collects the flat text of an HTML fragment and the text of each <li>."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.text_parts: List[str] = []
        self.list_items: List[str] = []
        self._item_parts: Optional[List[str]] = None

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag == "li":
            # An open <li> is implicitly closed by the next one
            self._flush_item()
            self._item_parts = []
        elif tag == "br":
            self.text_parts.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag == "li" or tag in ("ol", "ul"):
            self._flush_item()
        if tag in _BLOCK_TAGS:
            self.text_parts.append("\n")

    def handle_data(self, data: str) -> None:
        self.text_parts.append(data)
        if self._item_parts is not None:
            self._item_parts.append(data)

    def close(self) -> None:
        super().close()
        self._flush_item()

    def _flush_item(self) -> None:
        if self._item_parts is not None:
            self.list_items.append("".join(self._item_parts))
            self._item_parts = None

    @property
    def text(self) -> str:
        return "".join(self.text_parts)


def _parse_html(html: str) -> _HtmlTextParser:
    parser = _HtmlTextParser()
    parser.feed(html)
    parser.close()
    return parser


def strip_html(html: Optional[str]) -> str:
    """Plain text of an HTML fragment (used for recipe summaries)."""
    if not html or not isinstance(html, str):
        return ""
    return _parse_html(html).text.strip()


def parse_html_instructions(html: Optional[str]) -> List[str]:
    """
    Split an HTML instruction blob into step texts.

    List items win when there are any. Otherwise the flat text is split on a
    period followed by whitespace. Empty fragments are dropped in both cases.

    Block-level tags (p, div, br, lists, headings) end a line in the flat text,
    so "<p>One.</p><p>Two.</p>" gives two steps rather than one run-on sentence.

    Example:
        >>> parse_html_instructions("<ol><li>Boil water</li><li>Add pasta</li></ol>")
        ['Boil water', 'Add pasta']
        >>> parse_html_instructions("Boil water. Add pasta.")
        ['Boil water', 'Add pasta.']
    """
    if not html or not isinstance(html, str):
        return []
    parsed = _parse_html(html)
    items = [item.strip() for item in parsed.list_items]
    items = [item for item in items if item]
    if items:
        return items
    fragments = (fragment.strip() for fragment in _SENTENCE_BOUNDARY.split(parsed.text))
    return [fragment for fragment in fragments if fragment]


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _object_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _summary_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": raw.get("id"),
        "title": raw.get("title") or "",
        "image": raw.get("image"),
        "ready_in_minutes": _as_int(raw.get("readyInMinutes")),
        "servings": _as_int(raw.get("servings")),
        "summary": raw.get("summary"),
        "cuisines": _string_list(raw.get("cuisines")),
        "diets": _string_list(raw.get("diets")),
        "dish_types": _string_list(raw.get("dishTypes")),
    }


def to_recipe_summary(raw: Mapping[str, Any]) -> RecipeSummary:
    """
    Convert one provider search result into a RecipeSummary.

    Raises:
        ValueError: If the entry has no usable id (pydantic ValidationError).
    """
    return RecipeSummary(**_summary_fields(raw), is_favorite=False)


def transform_search_results(payload: Any) -> List[RecipeSummary]:
    """
    Convert a search response body into an ordered list of RecipeSummary.

    A body without `results` (or with results set to null) yields an empty list.

    Raises:
        ValueError: If the body is not a JSON object or results is not a list.
    """
    if not isinstance(payload, dict):
        raise ValueError("Unexpected search response: expected a JSON object")
    results = payload.get("results")
    if results is None:
        return []
    if not isinstance(results, list):
        raise ValueError("Unexpected search response: 'results' is not a list")
    summaries = []
    for item in results:
        if not isinstance(item, dict):
            raise ValueError(f"Unexpected search response: result entry is {type(item).__name__}, not an object")
        summaries.append(to_recipe_summary(item))
    return summaries


def _display_amount(nutrient: Mapping[str, Any]) -> str:
    amount = _as_float(nutrient.get("amount"))
    if amount is None:
        return NOT_AVAILABLE
    text = str(int(amount)) if amount.is_integer() else f"{amount:.1f}"
    unit = nutrient.get("unit")
    return f"{text} {unit}" if unit else text


def extract_nutrition(nutrition: Optional[Mapping[str, Any]]) -> Optional[Nutrition]:
    """
    Pick the headline nutrients out of the provider's flat nutrient list.

    Args:
        nutrition: The provider's `nutrition` block ({"nutrients": [{"name", "amount", "unit"}, ...]})

    Returns:
        Nutrition with "N/A" for every nutrient that is missing, or None when the block
        itself is absent.
    """
    if not nutrition or not isinstance(nutrition, dict):
        return None
    values: Dict[str, str] = {}
    nutrients = nutrition.get("nutrients")
    if not isinstance(nutrients, list):
        nutrients = []
    for provider_name, field_name in HEADLINE_NUTRIENTS.items():
        match = next(
            (n for n in nutrients if isinstance(n, dict) and n.get("name") == provider_name),
            None,
        )
        values[field_name] = _display_amount(match) if match else NOT_AVAILABLE
    return Nutrition(**values)


def to_ingredient(raw: Mapping[str, Any]) -> Ingredient:
    return Ingredient(
        id=_as_int(raw.get("id")),
        name=raw.get("name") or "",
        amount=_as_float(raw.get("amount")),
        unit=raw.get("unit") or "",
        original=raw.get("original") or "",
    )


def instruction_steps(raw: Mapping[str, Any]) -> List[InstructionStep]:
    """
    Ordered instruction steps for a recipe.

    Uses the first structured instruction list when it has steps, otherwise parses
    the HTML `instructions` blob and numbers the pieces from 1.
    """
    analyzed = _object_list(raw.get("analyzedInstructions"))
    # Step entries that are not objects carry no step text
    structured = _object_list(analyzed[0].get("steps")) if analyzed else []
    if structured:
        steps = []
        for index, step in enumerate(structured, start=1):
            number = _as_int(step.get("number")) or index
            steps.append(InstructionStep(number=number, step=str(step.get("step") or "").strip()))
        return steps
    return [
        InstructionStep(number=index, step=text)
        for index, text in enumerate(parse_html_instructions(raw.get("instructions")), start=1)
    ]


def transform_recipe_detail(raw: Any, is_favorite: bool = False) -> RecipeDetail:
    """
    Convert a recipe information body into a RecipeDetail.

    Args:
        raw: Provider recipe JSON
        is_favorite: Favorite flag carried over from the matching summary

    Raises:
        ValueError: If the body is not a JSON object or has no usable id.
    """
    if not isinstance(raw, dict):
        raise ValueError("Unexpected recipe response: expected a JSON object")
    return RecipeDetail(
        **_summary_fields(raw),
        is_favorite=is_favorite,
        extended_ingredients=[
            to_ingredient(item) for item in _object_list(raw.get("extendedIngredients"))
        ],
        steps=instruction_steps(raw),
        nutrition=extract_nutrition(raw.get("nutrition")),
        instructions=raw.get("instructions"),
        source_url=raw.get("sourceUrl"),
    )
