"""
Standardized feedback utilities for notifications, empty and loading states.

Provides reusable components so the search page shows toasts, empty states and
spinners the same way everywhere.
"""

from contextlib import contextmanager
from typing import Iterable, Optional
import streamlit as st

from utils.state import Notification


def show_notifications(notifications: Iterable[Notification]) -> None:
    """
    Render queued notifications as toasts.

    Destructive notifications get a warning icon.
    """
    for notification in notifications:
        icon = "⚠️" if notification.variant == "destructive" else "✅"
        body = f"**{notification.title}**"
        if notification.description:
            body = f"{body}\n\n{notification.description}"
        st.toast(body, icon=icon)


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_empty_state(title: str, subtitle: Optional[str] = None, tips: Optional[Iterable[str]] = None) -> None:
    """
    Display a standardized empty state.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
        tips: Optional bullet points shown below the subtitle
    """
    st.info(f"🔎 **{title}**")
    if subtitle:
        st.caption(subtitle)
    for tip in tips or []:
        st.markdown(f"- {tip}")


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Finding your perfect recipe…"):
            session.run_search()
    """
    with st.spinner(label):
        yield
