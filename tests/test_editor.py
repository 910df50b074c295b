"""
Tests for the host-facing editor: roster sync, commands and modes
"""

from unittest.mock import MagicMock

import pytest

from floorplan.editor import DELETE_TABLE_MESSAGE, FloorPlanEditor
from floorplan.errors import ControlledModeError, UnknownItemError
from floorplan.interaction import InteractionState
from floorplan.models import DisplayMode, InteractionMode, ItemKind, PointerEvent
from floorplan.occupancy import StaticOccupancy
from floorplan.store import ExternalStore, LocalFallbackStore


class Holder:
    """Caller-side owner of a controlled layout."""

    def __init__(self, items=None):
        self.items = items if items is not None else []
        self.writes = 0

    def get(self):
        return self.items

    def set(self, items):
        self.items = items
        self.writes += 1

    def store(self):
        return ExternalStore(self.get, self.set)


@pytest.fixture
def holder():
    return Holder()


@pytest.fixture
def editor(holder):
    return FloorPlanEditor(holder.store(), [1, 2, 3])


class TestRoster:
    def test_initial_reconcile_writes_default_grid(self, editor, holder):
        assert [it.id for it in holder.items] == ["table-1", "table-2", "table-3"]
        assert [(it.x, it.y) for it in holder.items] == [(20.0, 20.0), (150.0, 20.0), (280.0, 20.0)]
        assert holder.writes == 1

    def test_unchanged_roster_no_write(self, holder):
        FloorPlanEditor(holder.store(), [1, 2, 3])
        FloorPlanEditor(holder.store(), [1, 2, 3])
        assert holder.writes == 1

    def test_shrink_keeps_others(self, editor, holder):
        wall = editor.add_wall()
        editor.set_roster([1, 2])
        assert [it.id for it in holder.items] == [wall.id, "table-1", "table-2"]

    def test_same_roster_is_noop(self, editor, holder):
        before = holder.writes
        editor.set_roster([1, 2, 3])
        assert holder.writes == before

    def test_shrink_clears_selection_of_dropped_table(self, editor):
        editor.on_pointer_down("table-3", InteractionMode.BODY, PointerEvent(290, 30))
        editor.set_roster([1, 2])
        assert editor.selected_id is None
        assert editor.state == InteractionState.IDLE
        assert not editor.delete_selected()

    def test_shrink_keeps_selection_of_surviving_item(self, editor):
        editor.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(30, 30))
        editor.on_pointer_up()
        editor.set_roster([1])
        assert editor.selected_id == "table-1"

    def test_empty_roster(self, editor, holder):
        editor.set_roster([])
        assert holder.items == []
        assert editor.roster == []

    def test_legacy_controlled_input(self):
        holder = Holder([{"id": 1, "x": 5, "y": 6}])
        ed = FloorPlanEditor(holder.store(), [1])
        item = ed.find("table-1")
        assert (item.label, item.x, item.y) == ("1", 5.0, 6.0)


class TestCommands:
    def test_delete_table_refused_with_message(self, holder):
        on_message = MagicMock()
        ed = FloorPlanEditor(holder.store(), [1], on_message=on_message)
        assert not ed.delete_item("table-1")
        on_message.assert_called_once_with(DELETE_TABLE_MESSAGE)
        assert len(holder.items) == 1

    def test_add_and_delete_wall(self, editor, holder):
        wall = editor.add_wall()
        assert wall.kind == ItemKind.WALL
        assert (wall.x, wall.y, wall.width, wall.height) == (50.0, 50.0, 150.0, 10.0)
        assert editor.selected_id == wall.id
        assert editor.delete_selected()
        assert editor.selected_id is None
        assert all(it.id != wall.id for it in holder.items)

    def test_add_desk(self, editor):
        desk = editor.add_desk()
        assert (desk.x, desk.y, desk.width, desk.height) == (100.0, 100.0, 100.0, 60.0)
        assert editor.items[-1] == desk

    def test_delete_unknown_id(self, editor):
        with pytest.raises(UnknownItemError):
            editor.delete_item("nope")

    def test_delete_during_drag_ends_session(self, editor):
        wall = editor.add_wall()
        editor.on_pointer_down(wall.id, InteractionMode.BODY, PointerEvent(60, 60))
        assert editor.delete_item(wall.id)
        assert editor.state == InteractionState.IDLE
        assert not editor.on_pointer_move(PointerEvent(90, 90))

    def test_set_items_controlled_keeps_roster(self, editor, holder):
        editor.set_items([{"id": "d", "kind": "desk", "x": 1, "y": 1}])
        assert [it.id for it in holder.items] == ["d", "table-1", "table-2", "table-3"]

    def test_set_items_drops_tables_outside_roster(self, editor, holder):
        editor.set_items([{"id": 1, "x": 7, "y": 8}, {"id": 9, "x": 0, "y": 0}])
        assert [it.label for it in holder.items] == ["1", "2", "3"]
        assert editor.find("table-1").x == 7.0

    def test_set_items_clears_vanished_selection(self, editor):
        wall = editor.add_wall()
        editor.set_items([])
        assert editor.selected_id is None
        assert not editor.delete_selected()
        assert wall.id not in [it.id for it in editor.items]

    def test_set_items_uncontrolled_raises(self, tmp_path):
        ed = FloorPlanEditor(LocalFallbackStore(tmp_path / "layout.json", [1]), [1])
        with pytest.raises(ControlledModeError):
            ed.set_items([])


class TestPointer:
    def test_drag_commits_through_store(self, editor, holder):
        assert editor.on_pointer_down("table-2", InteractionMode.BODY, PointerEvent(160, 30))
        assert editor.on_pointer_move(PointerEvent(170, 50))
        assert (editor.find("table-2").x, editor.find("table-2").y) == (160.0, 40.0)
        editor.on_pointer_up()
        assert editor.state == InteractionState.IDLE
        assert editor.selected_id == "table-2"

    def test_scale_change_ends_session(self, editor):
        editor.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(0, 0))
        editor.set_scale(2.0)
        assert editor.state == InteractionState.IDLE
        assert editor.screen_boxes()[0].width == 180.0

    def test_bad_scale(self, editor):
        with pytest.raises(ValueError):
            editor.set_scale(0)

    def test_canvas_click_deselects(self, editor):
        editor.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(0, 0))
        editor.on_pointer_up()
        editor.on_canvas_pointer_down()
        assert editor.selected_id is None


class TestReadOnly:
    def test_table_click_reports_number(self, holder):
        clicked = MagicMock()
        ed = FloorPlanEditor(holder.store(), [1, 2], read_only=True, on_table_click=clicked)
        assert not ed.on_pointer_down("table-2", InteractionMode.BODY, PointerEvent(0, 0))
        clicked.assert_called_once_with(2)
        assert ed.selected_id is None

    def test_no_edits(self, holder):
        ed = FloorPlanEditor(holder.store(), [1], read_only=True)
        writes = holder.writes
        assert ed.add_wall() is None
        assert not ed.delete_item("table-1")
        assert holder.writes == writes

    def test_edit_mode_does_not_report_clicks(self, holder):
        clicked = MagicMock()
        ed = FloorPlanEditor(holder.store(), [1], on_table_click=clicked)
        ed.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(0, 0))
        clicked.assert_not_called()

    def test_toggle_cancels_session(self, editor):
        editor.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(0, 0))
        editor.read_only = True
        assert editor.state == InteractionState.IDLE
        assert editor.read_only


class TestListenersAndOccupancy:
    def test_listener_called_and_unsubscribed(self, editor):
        listener = MagicMock()
        unsubscribe = editor.subscribe(listener)
        editor.add_wall()
        assert listener.call_count == 1
        unsubscribe()
        editor.add_desk()
        assert listener.call_count == 1

    def test_occupancy_marks_tables(self, holder):
        ed = FloorPlanEditor(holder.store(), [1, 2, 3], occupancy=StaticOccupancy({2}))
        assert ed.refresh_occupancy() == {2}
        assert ed.is_active(ed.find("table-2"))
        assert not ed.is_active(ed.find("table-1"))

    def test_occupancy_notifies_only_on_change(self, holder):
        ed = FloorPlanEditor(holder.store(), [1], occupancy=StaticOccupancy({1}))
        listener = MagicMock()
        ed.subscribe(listener)
        ed.refresh_occupancy()
        ed.refresh_occupancy()
        assert listener.call_count == 1

    def test_display_mode_resizes_existing_tables(self, holder):
        ed = FloorPlanEditor(holder.store(), [1])
        assert (ed.screen_boxes()[0].width, ed.screen_boxes()[0].height) == (90.0, 90.0)
        ed.set_display_mode(DisplayMode.COMPACT)
        assert (ed.screen_boxes()[0].width, ed.screen_boxes()[0].height) == (60.0, 40.0)

    def test_resized_table_keeps_its_width(self, holder):
        ed = FloorPlanEditor(holder.store(), [1])
        ed.on_pointer_down("table-1", InteractionMode.BODY, PointerEvent(30, 30))
        ed.on_pointer_up()
        ed.on_pointer_down("table-1", InteractionMode.RESIZE, PointerEvent(110, 65))
        ed.on_pointer_move(PointerEvent(130, 65))
        ed.on_pointer_up()
        ed.set_display_mode(DisplayMode.COMPACT)
        box = ed.screen_boxes()[0]
        assert (box.width, box.height) == (110.0, 40.0)

    def test_close_drops_listeners(self, editor):
        listener = MagicMock()
        editor.subscribe(listener)
        editor.close()
        editor.add_wall()
        listener.assert_not_called()
