"""Pointer handling for the plan: drag, resize and rotate.

One session at a time. A pointer-down while a session is open is ignored
until the pointer is released, so overlapping events from a second finger or
a stray press cannot start a competing edit.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence
from .config import EditorConfig
from .models import DisplayMode, InteractionMode, LayoutItem, PointerEvent
from .utils import normalize_angle, snap_angle, clamp_width

logger = logging.getLogger(__name__)


class InteractionState:
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    ROTATING = "rotating"


_STATE_FOR_MODE = {
    InteractionMode.BODY: InteractionState.DRAGGING,
    InteractionMode.RESIZE: InteractionState.RESIZING,
    InteractionMode.ROTATE: InteractionState.ROTATING,
}


@dataclass(frozen=True)
class Session:
    item_id: str
    state: str
    start_x: float
    start_y: float
    offset_x: float
    offset_y: float
    snapshot: LayoutItem


def dragged(session: Session, event: PointerEvent, scale: float) -> LayoutItem:
    return replace(session.snapshot,
                   x=(event.x - session.offset_x) / scale,
                   y=(event.y - session.offset_y) / scale)


def resized(session: Session, event: PointerEvent, scale: float,
            min_width: float, mode: str = DisplayMode.EXPANDED) -> LayoutItem:
    snap = session.snapshot
    t = math.radians(snap.rotation)
    dx, dy = event.x - session.start_x, event.y - session.start_y
    # project onto the item's own width axis so a rotated wall grows along itself
    along = dx * math.cos(t) + dy * math.sin(t)
    w0, _ = snap.effective_size(mode)
    return replace(snap, width=clamp_width(w0 + along / scale, min_width))


def rotated(session: Session, event: PointerEvent, sensitivity: float,
            step: float, tolerance: float) -> LayoutItem:
    raw = session.snapshot.rotation + (event.x - session.start_x) * sensitivity
    return replace(session.snapshot, rotation=snap_angle(normalize_angle(raw), step, tolerance))


class InteractionController:
    def __init__(self, config: Optional[EditorConfig] = None, read_only: bool = False):
        self.config = config or EditorConfig()
        self.scale = self.config.scale
        self.display_mode = self.config.display_mode
        self.read_only = read_only
        self.session: Optional[Session] = None
        self.selected_id: Optional[str] = None

    @property
    def state(self) -> str:
        return self.session.state if self.session else InteractionState.IDLE

    @property
    def active(self) -> bool:
        return self.session is not None

    def pointer_down(self, items: Sequence[LayoutItem], item_id: str, mode: str,
                     event: PointerEvent) -> bool:
        if self.session is not None or self.read_only:
            return False
        item = next((it for it in items if it.id == item_id), None)
        if item is None or item.is_inert:
            return False
        state = _STATE_FOR_MODE.get(mode)
        if state is None:
            raise ValueError(f"unknown interaction mode {mode!r}")

        if mode == InteractionMode.BODY:
            self.selected_id = item.id
        elif self.selected_id != item.id:
            # handles only exist on the selected item
            return False

        s = self.scale
        self.session = Session(item_id=item.id, state=state,
                               start_x=event.x, start_y=event.y,
                               offset_x=event.x - item.x * s, offset_y=event.y - item.y * s,
                               snapshot=item)
        logger.debug("%s %s", state, item.id)
        return True

    def canvas_pointer_down(self):
        if self.session is None:
            self.selected_id = None

    def pointer_move(self, items: Sequence[LayoutItem],
                     event: PointerEvent) -> Optional[List[LayoutItem]]:
        sess = self.session
        if sess is None:
            return None
        if not any(it.id == sess.item_id for it in items):
            # the item went away under us (roster shrank mid-drag)
            self.session = None
            return None

        cfg = self.config
        if sess.state == InteractionState.DRAGGING:
            updated = dragged(sess, event, self.scale)
        elif sess.state == InteractionState.RESIZING:
            updated = resized(sess, event, self.scale, cfg.min_width, self.display_mode)
        else:
            updated = rotated(sess, event, cfg.rotation_sensitivity, cfg.snap_step, cfg.snap_tolerance)
        return [updated if it.id == sess.item_id else it for it in items]

    def pointer_up(self):
        self.session = None

    pointer_leave = pointer_up

    def cancel(self):
        self.session = None
        self.selected_id = None
