from __future__ import annotations
import math
from typing import Dict, Optional
from PySide6.QtCore import Qt, QRectF, QPointF, Signal
from PySide6.QtGui import QPainter, QPen, QColor, QWheelEvent
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QApplication
from .editor import FloorPlanEditor
from .items import HandleItem, LayoutGraphicsItem
from .models import InteractionMode, PointerEvent
from .projection import project
from .utils import BG_COLOR, GRID_MINOR, CANVAS_W, CANVAS_H

GRID_PX = 10.0
ZOOM_STEP = 1.15
MIN_SCALE, MAX_SCALE = 0.25, 4.0


class PlanScene(QGraphicsScene):
    """Draws the editor's items and feeds it raw pointer events.

    Scene coordinates are screen coordinates: the view is never transformed,
    zoom goes through the editor's scale so the projection does the mapping.
    """

    def __init__(self, editor: FloorPlanEditor, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.editor = editor
        self._gitems: Dict[str, LayoutGraphicsItem] = {}
        self.setItemIndexMethod(QGraphicsScene.NoIndex)
        self._unsubscribe = editor.subscribe(self.sync)
        self.sync()

    # ---- model -> scene ----
    def sync(self):
        ed = self.editor
        items = ed.items
        seen = set()
        for it in items:
            seen.add(it.id)
            g = self._gitems.get(it.id)
            if g is None:
                g = LayoutGraphicsItem(it)
                self.addItem(g)
                self._gitems[it.id] = g
            selected = ed.selected_id == it.id
            g.apply(it, project(it, ed.scale, ed.display_mode), selected=selected,
                    active=ed.is_active(it),
                    show_handles=selected and not ed.read_only and not it.is_inert)
        for gid in [k for k in self._gitems if k not in seen]:
            self.removeItem(self._gitems.pop(gid))

        bounds = self.itemsBoundingRect()
        canvas = QRectF(0, 0, CANVAS_W * ed.scale, CANVAS_H * ed.scale)
        self.setSceneRect(canvas.united(bounds.adjusted(-40, -40, 40, 40)))
        self.update()

    def graphics_item(self, item_id: str) -> Optional[LayoutGraphicsItem]:
        return self._gitems.get(item_id)

    # ---- pointer ----
    def press_at(self, pos: QPointF):
        ev = PointerEvent(pos.x(), pos.y())
        for hit in self.items(pos):
            if isinstance(hit, HandleItem):
                self.editor.on_pointer_down(hit.owner.item_id, hit.role, ev)
                return
            if isinstance(hit, LayoutGraphicsItem):
                self.editor.on_pointer_down(hit.item_id, InteractionMode.BODY, ev)
                return
        self.editor.on_canvas_pointer_down()

    def move_to(self, pos: QPointF):
        self.editor.on_pointer_move(PointerEvent(pos.x(), pos.y()))

    def release(self):
        self.editor.on_pointer_up()

    def mousePressEvent(self, e):
        if e.button() != Qt.LeftButton:
            super().mousePressEvent(e)
            return
        self.press_at(e.scenePos())
        e.accept()

    def mouseMoveEvent(self, e):
        self.move_to(e.scenePos())
        e.accept()

    def mouseReleaseEvent(self, e):
        if e.button() == Qt.LeftButton:
            self.release()
        e.accept()

    def keyPressEvent(self, e):
        if e.key() in (Qt.Key_Delete, Qt.Key_Backspace) and self.editor.selected_id:
            self.editor.delete_selected()
            e.accept()
            return
        super().keyPressEvent(e)

    # ---- drawing ----
    def drawBackground(self, painter: QPainter, rect: QRectF):
        painter.fillRect(rect, BG_COLOR)
        step = GRID_PX * self.editor.scale * 5
        if step < 8:
            return
        painter.setPen(QPen(GRID_MINOR, 1, Qt.SolidLine))
        x = math.floor(rect.left() / step) * step
        while x < rect.right():
            painter.drawLine(QPointF(x, rect.top()), QPointF(x, rect.bottom()))
            x += step
        y = math.floor(rect.top() / step) * step
        while y < rect.bottom():
            painter.drawLine(QPointF(rect.left(), y), QPointF(rect.right(), y))
            y += step

    def drawForeground(self, painter: QPainter, rect: QRectF):
        if self._gitems:
            return
        painter.setPen(QColor("#64748B"))
        painter.drawText(self.sceneRect(), Qt.AlignCenter, "No tables configured")

    def detach(self):
        self.editor.on_pointer_up()
        self._unsubscribe()


class PlanView(QGraphicsView):
    scaleChanged = Signal(float)

    def __init__(self, scene: PlanScene):
        super().__init__(scene)
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setViewportUpdateMode(QGraphicsView.BoundingRectViewportUpdate)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setMouseTracking(True)

    def leaveEvent(self, event):
        # leaving the canvas ends any drag the same way a release does
        scene = self.scene()
        if isinstance(scene, PlanScene):
            scene.release()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        scene = self.scene()
        if QApplication.keyboardModifiers() & Qt.ControlModifier and isinstance(scene, PlanScene):
            factor = ZOOM_STEP if event.angleDelta().y() > 0 else 1.0 / ZOOM_STEP
            s = min(MAX_SCALE, max(MIN_SCALE, scene.editor.scale * factor))
            scene.editor.set_scale(s)
            self.scaleChanged.emit(s)
            event.accept()
            return
        super().wheelEvent(event)

