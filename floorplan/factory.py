from __future__ import annotations
import time
from typing import Callable, Iterable, List, Optional
from .models import ItemKind, DisplayMode, LayoutItem, default_size
from .utils import GRID_STEP, GRID_ORIGIN, GRID_COLUMNS, grid_position

WALL_ORIGIN = (50.0, 50.0)
DESK_ORIGIN = (100.0, 100.0)


def table_id(number: int) -> str:
    return f"table-{number}"


class ItemFactory:
    def __init__(self, mode: str = DisplayMode.EXPANDED,
                 clock: Optional[Callable[[], float]] = None,
                 grid_step: float = GRID_STEP, grid_origin: float = GRID_ORIGIN,
                 grid_columns: int = GRID_COLUMNS):
        self.mode = mode
        self._clock = clock or time.time
        self.grid_step = grid_step
        self.grid_origin = grid_origin
        self.grid_columns = grid_columns
        self._last_stamp: Optional[int] = None
        self._same_stamp = 0

    def make_default_table(self, number: int, index: int = 0) -> LayoutItem:
        # position depends on the table number only, so a re-added table lands where it used to
        x, y = grid_position(number, self.grid_step, self.grid_origin, self.grid_columns)
        # no stored size: tables follow the display mode until someone resizes them
        return LayoutItem(id=table_id(number), kind=ItemKind.TABLE, x=x, y=y,
                          rotation=0.0, label=str(number))

    def make_wall(self) -> LayoutItem:
        return self._make_fixture(ItemKind.WALL, WALL_ORIGIN)

    def make_desk(self) -> LayoutItem:
        return self._make_fixture(ItemKind.DESK, DESK_ORIGIN)

    def default_layout(self, roster: Iterable[int]) -> List[LayoutItem]:
        return [self.make_default_table(n, i) for i, n in enumerate(roster)]

    def _make_fixture(self, kind: str, origin) -> LayoutItem:
        w, h = default_size(kind, self.mode)
        return LayoutItem(id=self._new_id(kind), kind=kind, x=origin[0], y=origin[1],
                          width=w, height=h, rotation=0.0)

    def _new_id(self, prefix: str) -> str:
        stamp = int(self._clock() * 1000)
        if stamp == self._last_stamp:
            self._same_stamp += 1
            return f"{prefix}-{stamp}-{self._same_stamp}"
        self._last_stamp = stamp
        self._same_stamp = 0
        return f"{prefix}-{stamp}"
