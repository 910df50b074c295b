from __future__ import annotations
import math
from PySide6.QtGui import QColor

# ===== Canvas / grid =====
GRID_STEP = 130.0
GRID_ORIGIN = 20.0
GRID_COLUMNS = 5
CANVAS_W = 700.0
CANVAS_H = 450.0
EPS = 1e-9

# ===== Geometry limits =====
MIN_WIDTH = 20.0
SNAP_STEP = 45.0
SNAP_TOLERANCE = 5.0
ROTATION_SENSITIVITY = 1.5

# ===== Colors =====
TABLE_COLOR = QColor("#FFFFFF")
TABLE_BORDER = QColor("#E2E8F0")
TABLE_ACTIVE_COLOR = QColor("#FEF08A")
TABLE_ACTIVE_BORDER = QColor("#EAB308")
WALL_COLOR = QColor("#475569")
DESK_COLOR = QColor(180, 140, 90, 200)
DESK_BORDER = QColor("#7C5A32")
UNKNOWN_BORDER = QColor("#94A3B8")
SELECTED_BORDER = QColor(255, 140, 0)
BG_COLOR = QColor("#F8FAFC")
GRID_MINOR = QColor("#E2E8F0")


def normalize_angle(deg: float) -> float:
    a = math.fmod(float(deg), 360.0)
    if a < 0:
        a += 360.0
    # fmod of a tiny negative can land on 360.0 after the shift
    return 0.0 if a >= 360.0 else a


def snap_angle(deg: float, step: float = SNAP_STEP, tolerance: float = SNAP_TOLERANCE) -> float:
    """Normalise `deg` and pull it onto the nearest multiple of `step` inside the tolerance band."""
    a = normalize_angle(deg)
    nearest = round(a / step) * step
    if abs(a - nearest) <= tolerance + EPS:
        return normalize_angle(nearest)
    return a


def clamp_width(width: float, minimum: float = MIN_WIDTH) -> float:
    return max(minimum, float(width))


def grid_position(number: int, step: float = GRID_STEP, origin: float = GRID_ORIGIN,
                  columns: int = GRID_COLUMNS):
    idx = number - 1
    return (idx % columns) * step + origin, (idx // columns) * step + origin
