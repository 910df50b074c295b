"""Decoding and encoding of stored layouts.

Stored layouts come in two shapes: the current one, with a ``kind`` (or
``type``) discriminant, and the legacy one written before walls and desks
existed, which is just ``{"id": <table number>, "x": .., "y": ..}``. Legacy
entries are upgraded to table items here so nothing past the store boundary
sees them.
"""
from __future__ import annotations
import json
import logging
import math
from typing import Any, Dict, List, Optional, Union
from .errors import LayoutDecodeError
from .models import ItemKind, LayoutItem
from .factory import table_id
from .utils import normalize_angle, clamp_width

logger = logging.getLogger(__name__)

_FIELDS = {"id", "kind", "type", "x", "y", "width", "height", "rotation", "label"}


def _number(raw: Dict[str, Any], key: str, default: Optional[float] = None,
            required: bool = False) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        if required:
            raise LayoutDecodeError(f"layout item is missing {key!r}: {raw!r}")
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutDecodeError(f"layout item field {key!r} is not a number: {value!r}")
    if not math.isfinite(value):
        raise LayoutDecodeError(f"layout item field {key!r} is not finite: {value!r}")
    return float(value)


def _legacy_table(raw: Dict[str, Any]) -> LayoutItem:
    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)) or not math.isfinite(raw_id):
        raise LayoutDecodeError(f"legacy layout item needs a numeric id: {raw!r}")
    number = int(raw_id)
    return LayoutItem(id=table_id(number), kind=ItemKind.TABLE,
                      x=_number(raw, "x", required=True), y=_number(raw, "y", required=True),
                      label=str(number))


def decode_layout_item(raw: Union[LayoutItem, Dict[str, Any]]) -> LayoutItem:
    if isinstance(raw, LayoutItem):
        return raw
    if not isinstance(raw, dict):
        raise LayoutDecodeError(f"layout item must be an object, got {type(raw).__name__}")

    kind_raw = raw.get("kind", raw.get("type"))
    if kind_raw is None:
        return _legacy_table(raw)
    if not isinstance(kind_raw, str):
        raise LayoutDecodeError(f"layout item kind must be a string: {kind_raw!r}")

    raw_id = raw.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int, float)):
        raise LayoutDecodeError(f"layout item needs an id: {raw!r}")
    if isinstance(raw_id, float) and not math.isfinite(raw_id):
        raise LayoutDecodeError(f"layout item id is not finite: {raw!r}")

    kind = kind_raw.strip().lower()
    raw_kind = None
    extra: Dict[str, Any] = {}
    if kind not in ItemKind.KNOWN:
        logger.warning("unknown layout item kind %r (id %r); keeping it inert", kind_raw, raw_id)
        raw_kind, kind = kind_raw, ItemKind.UNKNOWN
        extra = {k: v for k, v in raw.items() if k not in _FIELDS}

    if kind == ItemKind.TABLE and isinstance(raw_id, (int, float)):
        item_id = table_id(int(raw_id))
    else:
        item_id = str(raw_id)

    label = None
    if kind == ItemKind.TABLE:
        label = raw.get("label")
        if label is None:
            label = item_id[len("table-"):] if item_id.startswith("table-") else item_id
        label = str(label)

    width = _number(raw, "width")
    return LayoutItem(
        id=item_id,
        kind=kind,
        x=_number(raw, "x", required=True),
        y=_number(raw, "y", required=True),
        width=clamp_width(width) if width is not None else None,
        height=_number(raw, "height"),
        rotation=normalize_angle(_number(raw, "rotation", 0.0)),
        label=label,
        raw_kind=raw_kind,
        extra=extra,
    )


def decode_layout(raw: Union[str, bytes, List[Any], None]) -> List[LayoutItem]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise LayoutDecodeError(f"layout is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise LayoutDecodeError(f"layout must be a list, got {type(raw).__name__}")
    return [decode_layout_item(r) for r in raw]


def encode_layout_item(item: LayoutItem) -> Dict[str, Any]:
    out: Dict[str, Any] = dict(item.extra)
    out.update({
        "id": item.id,
        "kind": item.raw_kind if item.kind == ItemKind.UNKNOWN and item.raw_kind else item.kind,
        "x": item.x,
        "y": item.y,
        "rotation": item.rotation,
    })
    if item.width is not None:
        out["width"] = item.width
    if item.height is not None:
        out["height"] = item.height
    if item.is_table:
        out["label"] = item.label
    return out


def encode_layout(items: List[LayoutItem]) -> List[Dict[str, Any]]:
    return [encode_layout_item(it) for it in items]
