"""Utility helpers shared across Streamlit app modules."""

from utils.settings import DashboardDefaults, get_setting, load_dashboard_defaults

__all__ = [
    "DashboardDefaults",
    "get_setting",
    "load_dashboard_defaults",
]
