"""Editor tunables and file locations.

The angle-snap tolerance and rotation sensitivity are feel settings rather
than rules, so they live here and can be overridden from ``QSettings``.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Optional
from PySide6.QtCore import QSettings
from .models import DisplayMode
from .utils import (GRID_STEP, GRID_ORIGIN, GRID_COLUMNS, MIN_WIDTH, SNAP_STEP,
                    SNAP_TOLERANCE, ROTATION_SENSITIVITY)

ORG_NAME = "FloorPlan"
APP_NAME = "Editor"

SETTINGS_PATH = "restaurant_settings.json"
LOCAL_LAYOUT_PATH = "table_layout.json"
RESTAURANT_ID = "rest001"
DEFAULT_TABLE_COUNT = 15
OCCUPANCY_POLL_MS = 5000


@dataclass
class EditorConfig:
    snap_step: float = SNAP_STEP
    snap_tolerance: float = SNAP_TOLERANCE
    rotation_sensitivity: float = ROTATION_SENSITIVITY
    min_width: float = MIN_WIDTH
    grid_step: float = GRID_STEP
    grid_origin: float = GRID_ORIGIN
    grid_columns: int = GRID_COLUMNS
    display_mode: str = DisplayMode.EXPANDED
    scale: float = 1.0
    poll_interval_ms: int = OCCUPANCY_POLL_MS
    settings_path: str = SETTINGS_PATH
    local_layout_path: str = LOCAL_LAYOUT_PATH

    @classmethod
    def from_qsettings(cls, settings: Optional[QSettings] = None) -> "EditorConfig":
        st = settings or QSettings(ORG_NAME, APP_NAME)
        cfg = cls()
        for f in fields(cls):
            key = f"editor/{f.name}"
            if not st.contains(key):
                continue
            default = getattr(cfg, f.name)
            value = st.value(key, default, type(default))
            setattr(cfg, f.name, value)
        return cfg
