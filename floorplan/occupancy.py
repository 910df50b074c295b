"""Which tables currently have an order open.

Read-only input for highlighting; it never touches geometry. The engine pulls
a snapshot when the host asks it to, the host owns the polling timer.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, Mapping, Protocol, Set

logger = logging.getLogger(__name__)

# paid and cancelled orders free the table
ACTIVE_ORDER_STATUSES = frozenset({"new", "preparing", "done"})


class OccupancySource(Protocol):
    def snapshot(self) -> Set[int]: ...


def active_tables_from_orders(orders: Iterable[Mapping[str, Any]]) -> Set[int]:
    out: Set[int] = set()
    for order in orders:
        if order.get("status") not in ACTIVE_ORDER_STATUSES:
            continue
        raw = order.get("tableNumber", order.get("table_number"))
        try:
            out.add(int(str(raw).strip()))
        except (TypeError, ValueError):
            logger.debug("order %r has no usable table number", order.get("id"))
    return out


class StaticOccupancy:
    def __init__(self, tables: Iterable[int] = ()):
        self.tables = set(tables)

    def snapshot(self) -> Set[int]:
        return set(self.tables)


class OrdersOccupancy:
    def __init__(self, fetch_orders: Callable[[], Iterable[Mapping[str, Any]]]):
        self._fetch = fetch_orders
        self._last: Set[int] = set()

    def snapshot(self) -> Set[int]:
        # a failed poll keeps the previous overlay; the next tick tries again
        try:
            self._last = active_tables_from_orders(self._fetch())
        except (OSError, ValueError) as e:
            logger.warning("could not fetch orders: %s", e)
        return set(self._last)
