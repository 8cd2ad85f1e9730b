"""Dashboard configuration lookup.

Settings resolve in the order Streamlit secrets → ``GESS_*`` environment
variable → built-in default, so a deployment can override slider defaults
without code changes.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

T = TypeVar("T")

ENV_PREFIX = "GESS_"


@dataclass(frozen=True)
class SliderRange:
    min_value: float
    max_value: float
    step: float


MASS_RANGE = SliderRange(1000.0, 10000.0, 500.0)  # kg
HEIGHT_RANGE = SliderRange(5.0, 200.0, 5.0)  # m
SYSTEM_EFFICIENCY_RANGE = SliderRange(60.0, 100.0, 1.0)  # %
CYCLES_RANGE = SliderRange(100.0, 5000.0, 100.0)
TIME_ELAPSED_RANGE = SliderRange(0.0, 168.0, 1.0)  # h


@dataclass(frozen=True)
class DashboardDefaults:
    """Initial slider positions and optimizer behavior for the dashboard."""

    mass: float = 5000.0
    height: float = 100.0
    system_efficiency: float = 85.0
    cycles: int = 1000
    time_elapsed: float = 1.0
    criterion: str = "efficiency"
    strict_criteria: bool = False
    log_level: str = "INFO"


def _read_raw(name: str) -> Optional[Any]:
    try:
        secret_value = st.secrets.get(name)
    except StreamlitSecretNotFoundError:
        secret_value = None
    if secret_value is not None:
        return secret_value
    return os.environ.get(f"{ENV_PREFIX}{name.upper()}")


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def get_setting(name: str, default: T, parser: Optional[Callable[[Any], T]] = None) -> T:
    """Return a setting, falling back to ``default`` when unset or unparsable."""

    raw = _read_raw(name)
    if raw is None or raw == "":
        return default
    convert = parser or type(default)
    try:
        return convert(raw)
    except (TypeError, ValueError):
        logging.getLogger(__name__).warning(
            "Setting '%s' has invalid value %r; using default %r.",
            name,
            raw,
            default,
        )
        return default


def _clamp(value: float, slider: SliderRange) -> float:
    return min(max(value, slider.min_value), slider.max_value)


def load_dashboard_defaults() -> DashboardDefaults:
    """Build dashboard defaults from secrets/environment overrides."""

    base = DashboardDefaults()
    return DashboardDefaults(
        mass=_clamp(get_setting("default_mass_kg", base.mass, float), MASS_RANGE),
        height=_clamp(get_setting("default_height_m", base.height, float), HEIGHT_RANGE),
        system_efficiency=_clamp(
            get_setting("default_system_efficiency_pct", base.system_efficiency, float),
            SYSTEM_EFFICIENCY_RANGE,
        ),
        cycles=int(_clamp(get_setting("default_cycles", base.cycles, int), CYCLES_RANGE)),
        time_elapsed=_clamp(get_setting("default_time_elapsed_h", base.time_elapsed, float), TIME_ELAPSED_RANGE),
        criterion=get_setting("default_criterion", base.criterion, str),
        strict_criteria=get_setting("strict_criteria", base.strict_criteria, _parse_bool),
        log_level=get_setting("log_level", base.log_level, str).upper(),
    )
