"""Keeps the table items of a layout in line with the configured roster.

Walls, desks and anything the decoder could not classify pass through
untouched; only tables are added or dropped here.
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence
from .models import LayoutItem
from .factory import ItemFactory

logger = logging.getLogger(__name__)


def table_number(item: LayoutItem) -> Optional[int]:
    """Numeric value of a table's label, falling back to a ``table-<n>`` id."""
    for text in (item.label, item.id[len("table-"):] if item.id.startswith("table-") else None):
        if text is None:
            continue
        try:
            return int(str(text).strip())
        except ValueError:
            continue
    return None


def normalize_roster(roster: Iterable[int]) -> List[int]:
    out: List[int] = []
    seen = set()
    for n in roster:
        n = int(n)
        if n <= 0 or n in seen:
            continue
        seen.add(n)
        out.append(n)
    return out


def reconcile(items: Sequence[LayoutItem], roster: Iterable[int],
              factory: Optional[ItemFactory] = None) -> List[LayoutItem]:
    """Return ``others + kept tables + new tables`` for `roster`.

    The first table seen for a number wins; later duplicates, tables whose
    number left the roster and tables without a usable number are dropped.
    Running it again on its own output changes nothing.
    """
    factory = factory or ItemFactory()
    wanted = normalize_roster(roster)
    wanted_set = set(wanted)

    others: List[LayoutItem] = []
    kept: List[LayoutItem] = []
    seen = set()
    dropped = 0
    for it in items:
        if not it.is_table:
            others.append(it)
            continue
        n = table_number(it)
        if n is None or n not in wanted_set or n in seen:
            dropped += 1
            continue
        seen.add(n)
        kept.append(it)

    added = [factory.make_default_table(n, i) for i, n in enumerate(wanted) if n not in seen]
    if added or dropped:
        logger.info("reconciled layout: %d table(s) added, %d dropped", len(added), dropped)
    return others + kept + added
