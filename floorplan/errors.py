from __future__ import annotations


class FloorPlanError(Exception):
    """Base class for layout engine errors."""


class LayoutDecodeError(FloorPlanError, ValueError):
    """Persisted layout is malformed or has the wrong shape."""


class ControlledModeError(FloorPlanError):
    """Operation is only valid when the layout is owned by the caller."""


class UnknownItemError(FloorPlanError, KeyError):
    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"no layout item with id {self.item_id!r}"
