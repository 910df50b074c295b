from __future__ import annotations
from typing import Dict, Optional
from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QFont
from PySide6.QtWidgets import QGraphicsRectItem, QGraphicsItem
from .models import InteractionMode, ItemKind, LayoutItem
from .projection import HANDLE_SIZE, ScreenBox, resize_handle_anchor, rotate_handle_anchor
from .utils import (TABLE_COLOR, TABLE_BORDER, TABLE_ACTIVE_COLOR, TABLE_ACTIVE_BORDER,
                    WALL_COLOR, DESK_COLOR, DESK_BORDER, UNKNOWN_BORDER, SELECTED_BORDER)


class HandleItem(QGraphicsRectItem):
    SIZE = HANDLE_SIZE

    def __init__(self, owner: "LayoutGraphicsItem", role: str):
        super().__init__(0, 0, self.SIZE, self.SIZE, owner)
        self.owner = owner
        self.role = role
        self.setZValue(1000)
        self.setBrush(QColor(255, 255, 255))
        self.setPen(QPen(QColor(80, 80, 80), 1))
        self.setCursor(Qt.SizeHorCursor if role == InteractionMode.RESIZE else Qt.CrossCursor)

    def update_pos(self, cx: float, cy: float):
        self.setPos(cx - self.SIZE / 2, cy - self.SIZE / 2)

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setPen(self.pen())
        painter.setBrush(self.brush())
        if self.role == InteractionMode.ROTATE:
            painter.drawEllipse(self.rect())
        else:
            painter.drawRect(self.rect())


class LayoutGraphicsItem(QGraphicsRectItem):
    """Screen box of one layout item. Position and size come from the projection only."""

    def __init__(self, item: LayoutItem):
        super().__init__()
        self.item = item
        self.item_id = item.id
        self.active = False
        self.selected = False
        self._handles: Dict[str, HandleItem] = {}
        self.setAcceptHoverEvents(True)
        self.setFlag(QGraphicsItem.ItemIsMovable, False)
        self.setFlag(QGraphicsItem.ItemIsSelectable, False)
        self.setZValue(1 if item.is_table else 0)

    def apply(self, item: LayoutItem, box: ScreenBox, selected: bool, active: bool, show_handles: bool):
        self.item = item
        self.selected = selected
        self.active = active
        self.setRect(QRectF(0, 0, box.width, box.height))
        self.setPos(QPointF(box.left, box.top))
        self.setTransformOriginPoint(box.width / 2, box.height / 2)
        self.setRotation(box.rotation)
        if show_handles:
            self._create_handles()
            self._layout_handles(box)
        else:
            self._remove_handles()
        self.update_tooltip()
        self.update()

    def handle(self, role: str) -> Optional[HandleItem]:
        return self._handles.get(role)

    def _create_handles(self):
        if self._handles:
            return
        for role in (InteractionMode.RESIZE, InteractionMode.ROTATE):
            self._handles[role] = HandleItem(self, role)

    def _remove_handles(self):
        for h in self._handles.values():
            h.setParentItem(None)
            scene = self.scene()
            if scene:
                scene.removeItem(h)
        self._handles.clear()

    def _layout_handles(self, box: ScreenBox):
        self._handles[InteractionMode.RESIZE].update_pos(*resize_handle_anchor(box))
        self._handles[InteractionMode.ROTATE].update_pos(*rotate_handle_anchor(box))

    def update_tooltip(self):
        it = self.item
        if it.is_table:
            self.setToolTip(f"Table {it.label}\n{'Active order' if self.active else 'Empty table'}")
        elif it.is_inert:
            self.setToolTip(f"Unsupported item: {it.raw_kind or '?'}")
        else:
            self.setToolTip(f"{it.kind.capitalize()} · {self.rect().width():.0f} px · {it.rotation:.0f}°")

    def paint(self, painter: QPainter, option, widget=None):
        painter.setRenderHint(QPainter.Antialiasing, True)
        r = self.rect()
        kind = self.item.kind

        if kind == ItemKind.TABLE:
            fill = TABLE_ACTIVE_COLOR if self.active else TABLE_COLOR
            border = TABLE_ACTIVE_BORDER if self.active else TABLE_BORDER
            if self.selected:
                border = SELECTED_BORDER
            painter.setPen(QPen(border, 3))
            painter.setBrush(QBrush(fill))
            painter.drawEllipse(r.adjusted(1.5, 1.5, -1.5, -1.5))
            painter.setPen(QColor("#334155"))
            painter.setFont(QFont("", max(7, int(r.height() / 5)), QFont.Bold))
            if self.active:
                top = QRectF(r.left(), r.top(), r.width(), r.height() * 0.65)
                painter.drawText(top, Qt.AlignHCenter | Qt.AlignBottom, self.item.label or "")
                painter.setPen(QColor("#854D0E"))
                painter.setFont(QFont("", max(6, int(r.height() / 10)), QFont.DemiBold))
                bottom = QRectF(r.left(), r.top() + r.height() * 0.65, r.width(), r.height() * 0.35)
                painter.drawText(bottom, Qt.AlignHCenter | Qt.AlignTop, "BUSY")
            else:
                painter.drawText(r, Qt.AlignCenter, self.item.label or "")
            return

        if kind == ItemKind.WALL:
            painter.setPen(QPen(SELECTED_BORDER, 2, Qt.DashLine) if self.selected else Qt.NoPen)
            painter.setBrush(QBrush(WALL_COLOR))
            painter.drawRect(r)
        elif kind == ItemKind.DESK:
            painter.setPen(QPen(SELECTED_BORDER, 2, Qt.DashLine) if self.selected else QPen(DESK_BORDER, 1))
            painter.setBrush(QBrush(DESK_COLOR))
            painter.drawRoundedRect(r, 6, 6)
        else:
            # keep it visible so nothing disappears silently, but plain
            painter.setPen(QPen(UNKNOWN_BORDER, 1, Qt.DashLine))
            painter.setBrush(Qt.NoBrush)
            painter.drawRect(r)
