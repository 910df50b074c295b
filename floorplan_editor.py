#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional
from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QToolBar, QStatusBar, QMessageBox, QLabel, QSpinBox, QStyle
)
from floorplan import (
    EditorConfig, FloorPlanEditor, ExternalStore, LocalFallbackStore, LayoutSaver, SaveStatus,
    SettingsRepository, OrdersOccupancy, DisplayMode, Mode, LayoutDecodeError, decode_layout, encode_layout
)
from floorplan.scene import PlanScene, PlanView

logger = logging.getLogger("floorplan_editor")

STATUS_TEXT = {
    SaveStatus.IDLE: "",
    SaveStatus.SAVING: "Saving…",
    SaveStatus.SAVED: "Saved",
    SaveStatus.ERROR: "Save failed, the next change will retry",
}


def _read_orders(path: Optional[str]) -> List[Dict[str, Any]]:
    if not path or not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return data if isinstance(data, list) else []


class MainWindow(QMainWindow):
    saveStatusChanged = Signal(str)

    def __init__(self, config: Optional[EditorConfig] = None, local: bool = False,
                 orders_path: Optional[str] = None, read_only: bool = False):
        super().__init__()
        self.setWindowTitle("Floor plan")
        self.resize(1100, 760)
        self.config = config or EditorConfig.from_qsettings()
        self.repo = SettingsRepository(self.config.settings_path)
        self.settings = self.repo.load()
        self.saver: Optional[LayoutSaver] = None

        # 1) Store: the settings document owns the layout unless we run on the local copy
        if local:
            store = LocalFallbackStore(self.config.local_layout_path, self.settings.roster,
                                       on_status=self._on_save_status)
        else:
            self._layout = self.settings.table_layout
            try:
                decode_layout(self._layout)
            except LayoutDecodeError as e:
                logger.warning("stored layout is unusable (%s); starting from the default grid", e)
                self._layout = None
            self.saver = LayoutSaver(self.repo.save_layout, on_status=self._on_save_status)
            store = ExternalStore(lambda: self._layout, self._on_layout_change)

        # 2) Editor/scene/view
        self.editor = FloorPlanEditor(
            store, self.settings.roster, config=self.config, read_only=read_only,
            occupancy=OrdersOccupancy(lambda: _read_orders(orders_path)),
            on_message=self._show_message, on_table_click=self._on_table_click,
        )
        self.scene = PlanScene(self.editor)
        self.view = PlanView(self.scene)
        self.setCentralWidget(self.view)

        # 3) Toolbar/status
        self.setStatusBar(QStatusBar(self))
        self.lbl_save = QLabel("")
        self.statusBar().addPermanentWidget(self.lbl_save)
        self.saveStatusChanged.connect(lambda s: self.lbl_save.setText(STATUS_TEXT.get(s, s)))
        self._build_toolbar()
        self.view.scaleChanged.connect(lambda _s: self._update_status())

        # 4) Occupancy overlay polling belongs to the window, not the engine
        self.poll = QTimer(self)
        self.poll.setInterval(int(self.config.poll_interval_ms))
        self.poll.timeout.connect(self.editor.refresh_occupancy)
        self.poll.start()
        self.editor.refresh_occupancy()
        self._update_status()

    def _build_toolbar(self):
        tb = QToolBar("Plan", self)
        tb.setMovable(False)
        tb.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
        self.addToolBar(Qt.TopToolBarArea, tb)
        style = self.style()

        self.act_wall = QAction(style.standardIcon(QStyle.SP_TitleBarShadeButton), "Add wall", self)
        self.act_wall.triggered.connect(self.editor.add_wall)
        self.act_desk = QAction(style.standardIcon(QStyle.SP_DesktopIcon), "Add desk", self)
        self.act_desk.triggered.connect(self.editor.add_desk)
        self.act_delete = QAction(style.standardIcon(QStyle.SP_TrashIcon), "Delete", self)
        self.act_delete.setShortcut(QKeySequence.Delete)
        self.act_delete.triggered.connect(self._delete_selected)

        self.act_compact = QAction("Compact tables", self, checkable=True)
        self.act_compact.setChecked(self.editor.display_mode == DisplayMode.COMPACT)
        self.act_compact.toggled.connect(
            lambda on: self.editor.set_display_mode(DisplayMode.COMPACT if on else DisplayMode.EXPANDED))

        self.act_viewmode = QAction(style.standardIcon(QStyle.SP_FileDialogContentsView), "View only",
                                    self, checkable=True)
        self.act_viewmode.setChecked(self.editor.read_only)
        self.act_viewmode.toggled.connect(self._toggle_viewmode)

        self.sp_tables = QSpinBox()
        self.sp_tables.setRange(0, 200)
        self.sp_tables.setPrefix("Tables: ")
        self.sp_tables.setValue(self.settings.table_count)
        self.sp_tables.editingFinished.connect(self._apply_table_count)

        for a in (self.act_wall, self.act_desk, self.act_delete):
            tb.addAction(a)
        tb.addSeparator()
        tb.addWidget(self.sp_tables)
        tb.addSeparator()
        tb.addAction(self.act_compact)
        tb.addAction(self.act_viewmode)
        self._sync_actions()

    def _sync_actions(self):
        editable = not self.editor.read_only
        for a in (self.act_wall, self.act_desk, self.act_delete):
            a.setEnabled(editable)
        self.sp_tables.setEnabled(editable)

    # ---- editor callbacks ----
    def _on_layout_change(self, items):
        self._layout = items
        if self.saver:
            self.saver.submit(encode_layout(items))

    def _on_save_status(self, status: str):
        # may arrive from the saver thread
        self.saveStatusChanged.emit(status)

    def _show_message(self, text: str):
        QMessageBox.information(self, "Tables", text)

    def _on_table_click(self, number: int):
        active = number in self.editor.active_tables
        self._status(f"Table {number}: {'active order' if active else 'empty'}")

    # ---- actions ----
    def _delete_selected(self):
        if not self.editor.delete_selected() and self.editor.selected_id is None:
            self._status("Nothing selected.")

    def _apply_table_count(self):
        count = self.sp_tables.value()
        if count == self.settings.table_count:
            return
        try:
            self.settings = self.repo.save_table_count(count)
        except OSError as e:
            QMessageBox.critical(self, "Settings", f"Could not save the table count:\n{e}")
            self.sp_tables.setValue(self.settings.table_count)
            return
        self.editor.set_roster(self.settings.roster)
        self._status(f"{count} tables configured")

    def _toggle_viewmode(self, on: bool):
        self.editor.read_only = on
        self._sync_actions()
        self._update_status()

    def _status(self, text: str):
        self.statusBar().showMessage(text, 3000)

    def _update_status(self):
        mode = Mode.VIEW if self.editor.read_only else Mode.EDIT
        self.statusBar().showMessage(
            f"Mode: {'View' if mode == Mode.VIEW else 'Edit'} | "
            f"Tables: {len(self.editor.roster)} | Scale: {int(self.editor.scale * 100)}%"
        )

    def closeEvent(self, event):
        self.poll.stop()
        self.scene.detach()
        self.editor.close()
        if self.saver:
            self.saver.shutdown(wait=True)
        super().closeEvent(event)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Restaurant floor plan editor")
    parser.add_argument("--local", action="store_true", help="edit the local layout copy instead of the settings")
    parser.add_argument("--orders", help="JSON file with current orders for the occupancy overlay")
    parser.add_argument("--view", action="store_true", help="open read-only")
    parser.add_argument("--debug", action="store_true")
    args, qt_args = parser.parse_known_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication([sys.argv[0]] + qt_args)
    win = MainWindow(local=args.local, orders_path=args.orders, read_only=args.view)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
