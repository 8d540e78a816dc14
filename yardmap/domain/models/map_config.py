# yardmap/domain/models/map_config.py
"""
Explicit configuration for one map view.

Replaces the values an embedding page used to provide as globals: the image
path, the record dataset and the region definitions.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DEFAULT_MAP_IMAGE = "yard_map.jpg"
DEFAULT_MATCH_FIELD = "причал"


def default_detail_fields() -> List[Dict[str, str]]:
    """Popup rows shown for every matched record of a berth dataset."""
    return [
        {"field": "судно", "label": "Судно"},
        {"field": "причал", "label": "Причал"},
        {"field": "вид_подхода", "label": "Вид подхода"},
        {"field": "дата_швартовки", "label": "Дата швартовки", "format": "datetime"},
        {"field": "дата_выбытия", "label": "Дата выбытия", "format": "datetime"},
    ]


@dataclass
class MapConfig:
    """
    Attributes:
        map_image_path: Path or URL of the map image
        records_source: Dataset as (near-)JSON text or an already parsed list
        regions_source: Region definitions as inline text or a URL/path to fetch
        fallback_image_path: Relative path tried once when the image fails to load
        popup_delay_ms: Hover delay before the popup is shown
        status_hide_delay_ms: How long a success status stays visible
        fetch_timeout_seconds: Timeout for fetching region definitions over HTTP
        default_match_field: Field used when a region leaves matchField blank
        detail_fields: Popup rows; each has field, label and an optional format
    """
    map_image_path: str = DEFAULT_MAP_IMAGE
    records_source: Optional[Union[str, List[Dict[str, Any]]]] = None
    regions_source: Optional[str] = None
    fallback_image_path: str = DEFAULT_MAP_IMAGE
    popup_delay_ms: int = 200
    status_hide_delay_ms: int = 2000
    fetch_timeout_seconds: float = 10.0
    default_match_field: str = DEFAULT_MATCH_FIELD
    detail_fields: List[Dict[str, str]] = field(default_factory=default_detail_fields)
