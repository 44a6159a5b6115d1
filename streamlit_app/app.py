"""
Recipe Finder - Streamlit Frontend Main Entry Point.

A single search page: search box, filters in the sidebar, a grid of results and a
detail panel with ingredients, instructions and nutrition. All state lives in the
session's SearchSession (utils/state.py); this file only renders it and forwards
user events to it.

Run with:
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and recipe_search
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

from typing import List, Optional

import streamlit as st

from recipe_search.models import RecipeDetail, RecipeSummary
from utils.api_client import get_health_status
from utils.filters import (
    CUISINE_OPTIONS,
    DIET_OPTIONS,
    MEAL_TYPES,
    SEARCH_SUGGESTIONS,
    TIME_OPTIONS,
    active_filter_labels,
)
from utils.state import Phase, SearchSession, get_search_session
from utils.transform import strip_html
from ui.feedback import show_empty_state, show_error, show_notifications, working_spinner

ANY = "Any"
GRID_COLUMNS = 3

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Finder",
    page_icon="🍳",
    layout="wide",
    initial_sidebar_state="expanded",
)

session = get_search_session()


def _select_filter(label: str, key: str, options: List[str]) -> None:
    """Selectbox bound to one filter; "Any" clears it."""
    current = session.filters.to_params().get(key)
    choices = [ANY] + options
    index = choices.index(current) if current in choices else 0
    choice = st.selectbox(label, choices, index=index, key=f"filter-{key}")
    session.set_filter(key, None if choice == ANY else choice)


def render_filters() -> None:
    st.markdown("#### Filters")
    st.caption("Refine your recipe search")

    _select_filter("Diet", "diet", DIET_OPTIONS)
    _select_filter("Cuisine", "cuisine", CUISINE_OPTIONS)
    _select_filter("Meal type", "type", MEAL_TYPES)

    time_labels = [label for label, _ in TIME_OPTIONS]
    current_time = session.filters.max_ready_time
    time_index = next(
        (i for i, (_, value) in enumerate(TIME_OPTIONS) if value == current_time),
        len(TIME_OPTIONS) - 1,
    )
    time_label = st.selectbox("Cooking time", time_labels, index=time_index, key="filter-maxReadyTime")
    session.set_filter("maxReadyTime", dict(TIME_OPTIONS)[time_label])

    intolerances = st.text_input(
        "Intolerances",
        value=session.filters.intolerances or "",
        placeholder="e.g. gluten, dairy",
        key="filter-intolerances",
    )
    session.set_filter("intolerances", intolerances.strip())

    labels = active_filter_labels(session.filters)
    if labels:
        st.caption(" · ".join(labels.values()))
        if st.button("Clear all", use_container_width=True):
            session.clear_filters()
            for key in ("diet", "cuisine", "type", "maxReadyTime", "intolerances"):
                st.session_state.pop(f"filter-{key}", None)
            st.rerun()


def _open_detail(recipe_id: int) -> None:
    session.run_detail(recipe_id)


def _toggle_favorite(recipe_id: int) -> None:
    session.toggle_favorite(recipe_id)


def _use_suggestion(suggestion: str) -> None:
    # Fill the search box only; the user still submits the search
    session.input_query = suggestion.lower()
    st.session_state["search-input"] = session.input_query


def render_recipe_card(recipe: RecipeSummary) -> None:
    with st.container(border=True):
        if recipe.image:
            st.image(recipe.image, use_container_width=True)
        st.markdown(f"**{recipe.title}**")
        meta = []
        if recipe.ready_in_minutes:
            meta.append(f"⏱ {recipe.ready_in_minutes} min")
        if recipe.servings:
            meta.append(f"👥 {recipe.servings} servings")
        if meta:
            st.caption(" · ".join(meta))
        tags = (recipe.diets + recipe.cuisines)[:3]
        if tags:
            st.caption(", ".join(tags))

        view_col, fav_col = st.columns([3, 1])
        view_col.button(
            "View recipe",
            key=f"view-{recipe.id}",
            on_click=_open_detail,
            args=(recipe.id,),
            use_container_width=True,
        )
        fav_col.button(
            "❤️" if recipe.is_favorite else "🤍",
            key=f"fav-{recipe.id}",
            on_click=_toggle_favorite,
            args=(recipe.id,),
            help="Remove from favorites" if recipe.is_favorite else "Add to favorites",
        )


def render_detail(recipe: RecipeDetail) -> None:
    st.divider()
    header_col, close_col = st.columns([5, 1])
    header_col.subheader(recipe.title)
    close_col.button("Close", key="close-detail", on_click=session.close_detail)

    if recipe.image:
        st.image(recipe.image, use_container_width=True)

    meta = []
    if recipe.ready_in_minutes:
        meta.append(f"⏱ {recipe.ready_in_minutes} min")
    if recipe.servings:
        meta.append(f"👥 {recipe.servings} servings")
    st.caption(" · ".join(meta))
    st.button(
        "❤️ Favorite" if recipe.is_favorite else "🤍 Add to favorites",
        key=f"detail-fav-{recipe.id}",
        on_click=_toggle_favorite,
        args=(recipe.id,),
    )

    summary = strip_html(recipe.summary)
    if summary:
        st.write(summary)

    if recipe.nutrition:
        st.markdown("#### Nutrition (per serving)")
        cols = st.columns(4)
        cols[0].metric("Calories", recipe.nutrition.calories)
        cols[1].metric("Protein", recipe.nutrition.protein)
        cols[2].metric("Carbs", recipe.nutrition.carbs)
        cols[3].metric("Fat", recipe.nutrition.fat)

    ingredients_col, steps_col = st.columns(2)
    with ingredients_col:
        st.markdown("#### Ingredients")
        for ingredient in recipe.extended_ingredients:
            st.markdown(f"- {ingredient.original or ingredient.name}")
    with steps_col:
        st.markdown("#### Instructions")
        if recipe.steps:
            for step in recipe.steps:
                st.markdown(f"**{step.number}.** {step.step}")
        else:
            st.caption("No instructions available for this recipe.")

    if recipe.source_url:
        st.markdown(f"[View original recipe]({recipe.source_url})")


def render_results(current: SearchSession) -> None:
    if current.submitted_query:
        count = len(current.results)
        st.subheader(f'Recipes matching "{current.submitted_query}"')
        st.caption(f"{count} delicious {'option' if count == 1 else 'options'} ready to try")
    else:
        st.subheader("Let's cook something amazing!")

    if not current.results:
        if current.submitted_query and current.last_error and current.phase == Phase.IDLE:
            show_error(current.last_error, hint="Check that the backend is running, then search again.")
        elif current.submitted_query:
            show_empty_state(
                "Hmm, no matches yet",
                "Don't worry! Let's try a different approach",
                tips=[
                    'Use simpler keywords like "chicken" instead of "grilled chicken breast"',
                    "Remove some filters to see more results",
                    'Try popular searches: "pasta", "salad", "soup", "dessert"',
                ],
            )
        else:
            show_empty_state(
                "Your kitchen adventure awaits!",
                "Tell us what you're hungry for and we'll find the perfect recipe",
            )
            cols = st.columns(len(SEARCH_SUGGESTIONS))
            for col, suggestion in zip(cols, SEARCH_SUGGESTIONS):
                col.button(suggestion, key=f"suggest-{suggestion}", on_click=_use_suggestion, args=(suggestion,))
        return

    for start in range(0, len(current.results), GRID_COLUMNS):
        cols = st.columns(GRID_COLUMNS)
        for col, recipe in zip(cols, current.results[start:start + GRID_COLUMNS]):
            with col:
                render_recipe_card(recipe)


def _backend_status() -> Optional[str]:
    health = get_health_status()
    if not health:
        return "🔴 Backend offline"
    if not health.get("api_key_configured"):
        return "🟠 Backend online, recipe API key missing"
    return "🟢 Backend online"


with st.sidebar:
    st.markdown("### 🍳 **Recipe Finder**")
    st.caption(_backend_status())
    st.divider()
    render_filters()
    favorites = session.favorites()
    if favorites:
        st.divider()
        st.markdown("#### Favorites")
        for recipe in favorites:
            st.caption(f"❤️ {recipe.title}")

st.title("Discover Your Next Favorite Recipe")
st.caption("Search thousands of delicious recipes, filter by your dietary preferences, and cook something amazing tonight.")

st.session_state.setdefault("search-input", session.input_query)

with st.form("search-form", clear_on_submit=False):
    query = st.text_input(
        "Search",
        placeholder="What sounds delicious today?",
        key="search-input",
        label_visibility="collapsed",
    )
    submitted = st.form_submit_button("Search", type="primary", use_container_width=True)

if submitted:
    session.input_query = query
    with working_spinner("Finding your perfect recipe…"):
        session.run_search()

if session.is_loading_details:
    st.caption("Loading recipe details…")
if session.selected is not None:
    render_detail(session.selected)

render_results(session)

show_notifications(session.drain_notifications())
