from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional, Set
from .config import EditorConfig
from .errors import ControlledModeError, UnknownItemError
from .factory import ItemFactory
from .interaction import InteractionController
from .models import InteractionMode, LayoutItem, PointerEvent
from .occupancy import OccupancySource
from .projection import ScreenBox, project_all
from .reconcile import normalize_roster, reconcile, table_number
from .state import decode_layout
from .store import LayoutStore

logger = logging.getLogger(__name__)

DELETE_TABLE_MESSAGE = "Tables cannot be deleted individually. Reduce the table count instead."


class FloorPlanEditor:
    """The host-facing side of the layout engine.

    Holds no item list of its own: every read and write goes through `store`.
    Listeners are called after each committed change and after anything that
    changes how the plan looks (selection, occupancy, scale).
    """

    def __init__(self, store: LayoutStore, roster: Iterable[int] = (),
                 config: Optional[EditorConfig] = None, read_only: bool = False,
                 factory: Optional[ItemFactory] = None,
                 occupancy: Optional[OccupancySource] = None,
                 on_message: Optional[Callable[[str], None]] = None,
                 on_table_click: Optional[Callable[[int], None]] = None):
        self.config = config or EditorConfig()
        self.factory = factory or ItemFactory(self.config.display_mode,
                                              grid_step=self.config.grid_step,
                                              grid_origin=self.config.grid_origin,
                                              grid_columns=self.config.grid_columns)
        self.store = store
        self.interaction = InteractionController(self.config, read_only=read_only)
        self.occupancy = occupancy
        self.active_tables: Set[int] = set()
        self._on_message = on_message
        self._on_table_click = on_table_click
        self._listeners: List[Callable[[], None]] = []
        self._roster = normalize_roster(roster)
        self._reconcile()

    # ---- reads ----
    @property
    def items(self) -> List[LayoutItem]:
        return self.store.read()

    @property
    def roster(self) -> List[int]:
        return list(self._roster)

    @property
    def selected_id(self) -> Optional[str]:
        return self.interaction.selected_id

    @property
    def state(self) -> str:
        return self.interaction.state

    @property
    def read_only(self) -> bool:
        return self.interaction.read_only

    @read_only.setter
    def read_only(self, value: bool):
        self.interaction.cancel()
        self.interaction.read_only = bool(value)
        self._notify()

    @property
    def scale(self) -> float:
        return self.interaction.scale

    @property
    def display_mode(self) -> str:
        return self.factory.mode

    def find(self, item_id: str) -> LayoutItem:
        for it in self.items:
            if it.id == item_id:
                return it
        raise UnknownItemError(item_id)

    def is_active(self, item: LayoutItem) -> bool:
        return item.is_table and table_number(item) in self.active_tables

    def screen_boxes(self) -> List[ScreenBox]:
        return project_all(self.items, self.scale, self.display_mode)

    # ---- listeners ----
    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self):
        for cb in list(self._listeners):
            cb()

    def _commit(self, items: List[LayoutItem]):
        self.store.write(items)
        self._notify()

    def _message(self, text: str):
        logger.info(text)
        if self._on_message:
            self._on_message(text)

    # ---- roster ----
    def _reconcile(self):
        current = self.items
        fixed = reconcile(current, self._roster, self.factory)
        if fixed != current:
            self._forget_missing(fixed)
            self._commit(fixed)

    def _forget_missing(self, items: List[LayoutItem]):
        ids = {it.id for it in items}
        session = self.interaction.session
        if session is not None and session.item_id not in ids:
            self.interaction.pointer_up()
        if self.selected_id is not None and self.selected_id not in ids:
            self.interaction.selected_id = None

    def set_roster(self, roster: Iterable[int]):
        new = normalize_roster(roster)
        if new == self._roster:
            return
        self._roster = new
        self._reconcile()

    # ---- pointer ----
    def on_pointer_down(self, item_id: str, mode: str = InteractionMode.BODY,
                        event: Optional[PointerEvent] = None) -> bool:
        """Start a drag, resize or rotate on `item_id`.

        Table clicks reach `on_table_click` only in read-only mode, where the
        plan is a picker; while editing, a press on a table starts a drag.
        """
        event = event or PointerEvent(0.0, 0.0)
        items = self.items
        if self.read_only and mode == InteractionMode.BODY and self._on_table_click:
            item = next((it for it in items if it.id == item_id), None)
            n = table_number(item) if item is not None and item.is_table else None
            if n is not None:
                self._on_table_click(n)
        started = self.interaction.pointer_down(items, item_id, mode, event)
        if started:
            self._notify()
        return started

    def on_canvas_pointer_down(self):
        before = self.selected_id
        self.interaction.canvas_pointer_down()
        if before != self.selected_id:
            self._notify()

    def on_pointer_move(self, event: PointerEvent) -> bool:
        updated = self.interaction.pointer_move(self.items, event)
        if updated is None:
            return False
        self._commit(updated)
        return True

    def on_pointer_up(self):
        if self.interaction.active:
            self.interaction.pointer_up()
            self._notify()

    on_pointer_leave = on_pointer_up

    # ---- commands ----
    def add_wall(self) -> Optional[LayoutItem]:
        return self._add(self.factory.make_wall())

    def add_desk(self) -> Optional[LayoutItem]:
        return self._add(self.factory.make_desk())

    def _add(self, item: LayoutItem) -> Optional[LayoutItem]:
        if self.read_only:
            return None
        self.interaction.selected_id = item.id
        self._commit(self.items + [item])
        return item

    def delete_item(self, item_id: str) -> bool:
        if self.read_only:
            return False
        item = self.find(item_id)
        if item.is_table:
            self._message(DELETE_TABLE_MESSAGE)
            return False
        if self.interaction.session and self.interaction.session.item_id == item_id:
            self.interaction.pointer_up()
        if self.selected_id == item_id:
            self.interaction.selected_id = None
        self._commit([it for it in self.items if it.id != item_id])
        return True

    def delete_selected(self) -> bool:
        if self.selected_id is None:
            return False
        return self.delete_item(self.selected_id)

    def set_items(self, items: Iterable):
        if not self.store.controlled:
            raise ControlledModeError("set_items is only available when the caller owns the layout")
        self.interaction.pointer_up()
        fixed = reconcile(decode_layout(list(items)), self._roster, self.factory)
        self._forget_missing(fixed)
        self._commit(fixed)

    def set_display_mode(self, mode: str):
        if mode == self.factory.mode:
            return
        self.factory.mode = mode
        self.interaction.display_mode = mode
        self._notify()

    def set_scale(self, scale: float):
        if scale <= 0:
            raise ValueError("scale must be positive")
        # offsets captured at the old scale would be wrong
        self.interaction.pointer_up()
        self.interaction.scale = float(scale)
        self._notify()

    # ---- occupancy ----
    def refresh_occupancy(self) -> Set[int]:
        if self.occupancy is None:
            return set()
        active = self.occupancy.snapshot()
        if active != self.active_tables:
            self.active_tables = active
            self._notify()
        return set(active)

    def close(self):
        self.interaction.cancel()
        self._listeners.clear()
        self.occupancy = None
