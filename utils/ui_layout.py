"""Reusable layout helpers for Streamlit pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from services.materials import ETA_GEN, ETA_LIFT, ETA_RT, GRAVITY, MATERIALS

LayoutRenderer = Callable[[], None]


@dataclass(frozen=True)
class _NavigationLink:
    label: str
    target: str
    help_text: Optional[str] = None


_NAV_LINKS = (
    _NavigationLink("Dashboard", "app.py", "Parameters, results, charts and material optimization."),
    _NavigationLink("Practical estimation", "pages/01_Practical_Estimation.py", "Size a system for real loads."),
    _NavigationLink("Constants & equations", "pages/02_Assumptions.py"),
)


def _render_navigation_block(container: DeltaGenerator) -> None:
    """Render standardized navigation links for the workspace."""

    container.markdown("#### Navigate")
    for link in _NAV_LINKS:
        container.page_link(link.target, label=link.label, help=link.help_text)


def _render_status_block(container: DeltaGenerator) -> None:
    """Show the model constants every page relies on."""

    container.markdown("#### Model constants")
    container.caption(f"Materials in catalog: {', '.join(m.name for m in MATERIALS.values())}")
    container.caption(f"g = {GRAVITY} m/s² · 1 kWh = 3.6 MJ")
    container.caption(
        f"Project efficiencies: η_lift = {ETA_LIFT:.0%} · η_gen = {ETA_GEN:.0%} · η_rt = {ETA_RT:.0%}"
    )


def init_page_layout(
    *,
    page_title: str,
    main_title: str,
    description: Optional[str] = None,
) -> LayoutRenderer:
    """Initialize the page layout with shared navigation and status blocks.

    The helper sets ``st.set_page_config`` immediately, reserves a header slot at
    the top of the page, and returns a renderer that fills it once the page is
    ready to draw.
    """

    st.set_page_config(page_title=page_title, layout="wide")
    header_container = st.container()

    def _render() -> None:
        with header_container:
            st.title(main_title)
            if description:
                st.caption(description)

            nav_col, status_col = st.columns([3, 2])
            _render_navigation_block(nav_col)
            _render_status_block(status_col)

        st.divider()

    return _render
