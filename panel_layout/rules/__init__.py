"""Rule map — load, validate, normalise, and serialize PanelLayoutMap.json."""

from .models import (
    SelectorRule, LegacyRule, AttributeTags, LayoutMapConfig,
    ValidationError, LayoutMapResult, LayoutMapError,
    selector_sort_key, sort_selector_rules,
)
from .loader import (
    load_layout_map, save_layout_map, parse_layout_map, validate_layout_map,
    default_map_path, MAP_DIR, MAP_FILENAME,
)
from .serialization import layout_map_to_dict, layout_map_result_to_dict

__all__ = [
    # Models
    "SelectorRule", "LegacyRule", "AttributeTags", "LayoutMapConfig",
    "ValidationError", "LayoutMapResult", "LayoutMapError",
    "selector_sort_key", "sort_selector_rules",
    # Loader
    "load_layout_map", "save_layout_map", "parse_layout_map", "validate_layout_map",
    "default_map_path", "MAP_DIR", "MAP_FILENAME",
    # Serialization
    "layout_map_to_dict", "layout_map_result_to_dict",
]
