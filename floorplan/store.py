"""Where the item list lives.

Two strategies behind one interface: ``ExternalStore`` when a caller owns and
persists the layout (controlled), ``LocalFallbackStore`` when the editor owns
it and keeps it in a local JSON file (uncontrolled). Reconciliation and
pointer handling only ever see ``read()`` / ``write()``.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence, Union

from .errors import LayoutDecodeError
from .factory import ItemFactory
from .models import LayoutItem
from .persistence import SaveStatus
from .state import decode_layout, encode_layout

logger = logging.getLogger(__name__)


class LayoutStore(Protocol):
    controlled: bool

    def read(self) -> List[LayoutItem]: ...

    def write(self, items: Sequence[LayoutItem]) -> None: ...


class ExternalStore:
    controlled = True

    def __init__(self, get_items: Callable[[], Optional[Iterable[Any]]],
                 on_change: Callable[[List[LayoutItem]], None]):
        self._get_items = get_items
        self._on_change = on_change

    def read(self) -> List[LayoutItem]:
        raw = self._get_items()
        return decode_layout(list(raw) if raw is not None else None)

    def write(self, items: Sequence[LayoutItem]) -> None:
        self._on_change(list(items))


class LocalFallbackStore:
    controlled = False

    def __init__(self, path: Union[str, Path], roster: Iterable[int] = (),
                 factory: Optional[ItemFactory] = None,
                 on_status: Optional[Callable[[str], None]] = None):
        self.path = Path(path)
        self._factory = factory or ItemFactory()
        self._on_status = on_status
        self._items: List[LayoutItem] = self._load(list(roster))

    def _load(self, roster: List[int]) -> List[LayoutItem]:
        if not self.path.exists():
            return self._factory.default_layout(roster)
        try:
            # bytes: a bad encoding surfaces as LayoutDecodeError like any other bad file
            with open(self.path, "rb") as f:
                return decode_layout(f.read())
        except (OSError, LayoutDecodeError) as e:
            logger.warning("saved layout %s is unusable (%s); using the default grid", self.path, e)
            return self._factory.default_layout(roster)

    def read(self) -> List[LayoutItem]:
        return list(self._items)

    def write(self, items: Sequence[LayoutItem]) -> None:
        self._items = list(items)
        self._save()

    def _save(self):
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(encode_layout(self._items), f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("could not write layout to %s: %s", self.path, e)
            self._report(SaveStatus.ERROR)
            return
        self._report(SaveStatus.SAVED)

    def _report(self, status: str):
        if self._on_status:
            self._on_status(status)
