"""
Search filter options offered by the UI.

Values are the provider's filter values; labels are what the user sees. The
lists are suggestions only: SearchFilters accepts any value.
"""

from typing import Dict, List, Optional, Tuple

from recipe_search.models import SearchFilters

DIET_OPTIONS: List[str] = [
    "Vegetarian", "Vegan", "Gluten Free", "Ketogenic", "Paleo", "Pescetarian",
]

CUISINE_OPTIONS: List[str] = [
    "Italian", "Mexican", "Asian", "American", "Mediterranean", "Indian", "French", "Thai",
]

MEAL_TYPES: List[str] = [
    "Breakfast", "Lunch", "Dinner", "Dessert", "Snack", "Appetizer",
]

# (label, maxReadyTime value)
TIME_OPTIONS: List[Tuple[str, Optional[int]]] = [
    ("Quick (≤30 min)", 30),
    ("Medium (≤60 min)", 60),
    ("Any time", None),
]

SEARCH_SUGGESTIONS: List[str] = ["Pasta", "Chicken", "Vegetarian", "Dessert", "Quick meals", "Healthy"]


def active_filter_labels(filters: SearchFilters) -> Dict[str, str]:
    """
    Badge label for every active filter, keyed by query parameter name.

    maxReadyTime reads as "≤<n> min"; every other filter shows its value.

    Example:
        >>> active_filter_labels(SearchFilters(diet="Vegan", maxReadyTime=30))
        {'diet': 'Vegan', 'maxReadyTime': '≤30 min'}
    """
    labels: Dict[str, str] = {}
    for key, value in filters.to_params().items():
        if key == "number":
            continue
        labels[key] = f"≤{value} min" if key == "maxReadyTime" else str(value)
    return labels
