from .models import ItemKind, DisplayMode, Mode, InteractionMode, LayoutItem, PointerEvent
from .errors import FloorPlanError, LayoutDecodeError, ControlledModeError, UnknownItemError
from .factory import ItemFactory, table_id
from .reconcile import reconcile, table_number, normalize_roster
from .state import decode_layout_item, decode_layout, encode_layout_item, encode_layout
from .store import LayoutStore, ExternalStore, LocalFallbackStore
from .projection import ScreenBox, project, project_all, to_model_point
from .interaction import InteractionController, InteractionState, Session
from .occupancy import OccupancySource, StaticOccupancy, OrdersOccupancy, active_tables_from_orders
from .persistence import SaveStatus, LayoutSaver
from .settings import RestaurantSettings, SettingsRepository, roster_from_count
from .config import EditorConfig
from .editor import FloorPlanEditor, DELETE_TABLE_MESSAGE

__all__ = [
    "ItemKind", "DisplayMode", "Mode", "InteractionMode", "LayoutItem", "PointerEvent",
    "FloorPlanError", "LayoutDecodeError", "ControlledModeError", "UnknownItemError",
    "ItemFactory", "table_id", "reconcile", "table_number", "normalize_roster",
    "decode_layout_item", "decode_layout", "encode_layout_item", "encode_layout",
    "LayoutStore", "ExternalStore", "LocalFallbackStore",
    "ScreenBox", "project", "project_all", "to_model_point",
    "InteractionController", "InteractionState", "Session",
    "OccupancySource", "StaticOccupancy", "OrdersOccupancy", "active_tables_from_orders",
    "SaveStatus", "LayoutSaver", "RestaurantSettings", "SettingsRepository", "roster_from_count",
    "EditorConfig", "FloorPlanEditor", "DELETE_TABLE_MESSAGE",
]
