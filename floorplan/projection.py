from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple
from .models import DisplayMode, LayoutItem

HANDLE_SIZE = 10.0
ROTATE_HANDLE_OFFSET = 24.0


@dataclass(frozen=True)
class ScreenBox:
    item_id: str
    left: float
    top: float
    width: float
    height: float
    rotation: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2

    def map_local(self, lx: float, ly: float) -> Tuple[float, float]:
        """Box-local point to screen, rotating about the box centre."""
        cx, cy = self.width / 2, self.height / 2
        t = math.radians(self.rotation)
        dx, dy = lx - cx, ly - cy
        ox, oy = self.center
        return (ox + dx * math.cos(t) - dy * math.sin(t),
                oy + dx * math.sin(t) + dy * math.cos(t))


def project(item: LayoutItem, scale: float = 1.0, mode: str = DisplayMode.EXPANDED) -> ScreenBox:
    w, h = item.effective_size(mode)
    return ScreenBox(item.id, item.x * scale, item.y * scale, w * scale, h * scale, item.rotation)


def project_all(items: Sequence[LayoutItem], scale: float = 1.0,
                mode: str = DisplayMode.EXPANDED) -> List[ScreenBox]:
    return [project(it, scale, mode) for it in items]


def to_model_point(sx: float, sy: float, scale: float = 1.0) -> Tuple[float, float]:
    return sx / scale, sy / scale


def resize_handle_anchor(box: ScreenBox) -> Tuple[float, float]:
    # middle of the right edge: resizing is along the width axis only
    return box.width, box.height / 2


def rotate_handle_anchor(box: ScreenBox) -> Tuple[float, float]:
    return box.width / 2, -ROTATE_HANDLE_OFFSET
