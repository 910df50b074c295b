from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


class ItemKind:
    TABLE = "table"
    WALL = "wall"
    DESK = "desk"
    UNKNOWN = "unknown"

    KNOWN = (TABLE, WALL, DESK)


class DisplayMode:
    COMPACT = "compact"
    EXPANDED = "expanded"


class Mode:
    EDIT = "edit"
    VIEW = "view"


class InteractionMode:
    BODY = "body"
    RESIZE = "resize"
    ROTATE = "rotate"


TABLE_SIZES: Dict[str, Tuple[float, float]] = {
    DisplayMode.COMPACT: (60.0, 40.0),
    DisplayMode.EXPANDED: (90.0, 90.0),
}
WALL_SIZE = (150.0, 10.0)
DESK_SIZE = (100.0, 60.0)
UNKNOWN_SIZE = (40.0, 40.0)


def default_size(kind: str, mode: str = DisplayMode.EXPANDED) -> Tuple[float, float]:
    if kind == ItemKind.TABLE:
        return TABLE_SIZES.get(mode, TABLE_SIZES[DisplayMode.EXPANDED])
    if kind == ItemKind.WALL:
        return WALL_SIZE
    if kind == ItemKind.DESK:
        return DESK_SIZE
    return UNKNOWN_SIZE


@dataclass(frozen=True)
class LayoutItem:
    id: str
    kind: str
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: float = 0.0
    label: Optional[str] = None  # tables only
    # unknown kinds keep what they were stored with
    raw_kind: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def is_table(self) -> bool:
        return self.kind == ItemKind.TABLE

    @property
    def is_inert(self) -> bool:
        return self.kind not in ItemKind.KNOWN

    def effective_size(self, mode: str = DisplayMode.EXPANDED) -> Tuple[float, float]:
        dw, dh = default_size(self.kind, mode)
        return (self.width if self.width is not None else dw,
                self.height if self.height is not None else dh)


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in screen (scaled canvas) coordinates."""
    x: float
    y: float
