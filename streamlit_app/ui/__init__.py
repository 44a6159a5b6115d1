"""
UI feedback components for the Recipe Finder Streamlit app.
"""

from ui.feedback import show_notifications, show_error, show_empty_state, working_spinner

__all__ = [
    "show_notifications",
    "show_error",
    "show_empty_state",
    "working_spinner",
]
