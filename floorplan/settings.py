from __future__ import annotations
import json
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from .config import DEFAULT_TABLE_COUNT, RESTAURANT_ID

logger = logging.getLogger(__name__)


def roster_from_count(count: int) -> List[int]:
    return list(range(1, max(0, int(count)) + 1))


@dataclass
class RestaurantSettings:
    id: str = RESTAURANT_ID
    table_count: int = DEFAULT_TABLE_COUNT
    table_layout: Optional[List[Dict[str, Any]]] = None
    updated_at: Optional[str] = None

    @property
    def roster(self) -> List[int]:
        return roster_from_count(self.table_count)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "table_count": self.table_count,
                "table_layout": self.table_layout, "updated_at": self.updated_at}


class SettingsRepository:
    """Restaurant settings document kept as one JSON file.

    A missing file reads as the defaults (15 tables, no saved layout). A file
    that cannot be parsed is logged and also read as the defaults; it is only
    overwritten by the next save.

    Layout saves arrive from the saver thread and table count changes from
    the UI thread; each is a load-modify-save of the whole document, so they
    share one lock.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> RestaurantSettings:
        if not self.path.exists():
            return RestaurantSettings()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("settings file %s is unreadable (%s); using defaults", self.path, e)
            return RestaurantSettings()
        if not isinstance(data, dict):
            logger.warning("settings file %s does not hold an object; using defaults", self.path)
            return RestaurantSettings()
        count = data.get("table_count", DEFAULT_TABLE_COUNT)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            logger.warning("ignoring bad table_count %r", count)
            count = DEFAULT_TABLE_COUNT
        layout = data.get("table_layout")
        return RestaurantSettings(id=str(data.get("id", RESTAURANT_ID)), table_count=count,
                                  table_layout=layout if isinstance(layout, list) else None,
                                  updated_at=data.get("updated_at"))

    def save(self, settings: RestaurantSettings) -> RestaurantSettings:
        with self._lock:
            return self._write(settings)

    def _write(self, settings: RestaurantSettings) -> RestaurantSettings:
        settings.updated_at = datetime.now(timezone.utc).isoformat()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)
        return settings

    def save_layout(self, blob: List[Dict[str, Any]]) -> bool:
        with self._lock:
            current = self.load()
            current.table_layout = list(blob)
            self._write(current)
        return True

    def save_table_count(self, count: int) -> RestaurantSettings:
        if count < 0:
            raise ValueError("table_count must not be negative")
        with self._lock:
            current = self.load()
            current.table_count = int(count)
            return self._write(current)
