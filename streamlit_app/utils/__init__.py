"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Backend API communication
- transform: Provider JSON -> RecipeSummary / RecipeDetail view models
- state: SearchSession, the per-session state holder
- filters: Filter options and active filter labels
"""
