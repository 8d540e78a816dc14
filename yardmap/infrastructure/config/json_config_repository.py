# yardmap/infrastructure/config/json_config_repository.py

"""
JSON-based implementation of the configuration repository.

Reads the map configuration from a JSON file such as

    {
        "mapImagePath": "yard_map.jpg",
        "regionsSource": "interactiveAreas.json",
        "recordsSource": [{"причал": "A1", "судно": "Nord"}]
    }

Relative paths are resolved against the directory of the configuration file.
The file is never written: a missing file simply yields the defaults.
"""
import copy
import json
import os
import threading
from typing import Any, Dict, Optional

from yardmap.domain.common.errors import ConfigurationError
from yardmap.domain.common.result import Result
from yardmap.domain.models.map_config import (
    DEFAULT_MAP_IMAGE, DEFAULT_MATCH_FIELD, MapConfig, default_detail_fields
)
from yardmap.domain.services.i_config_repository_service import IConfigRepository
from yardmap.domain.services.i_logger_service import ILoggerService

URL_PREFIXES = ("http://", "https://", "file://")


class JsonConfigRepository(IConfigRepository):
    """
    JSON-based implementation of the configuration repository.

    Keys use the camelCase names of the embedding page options.
    """

    DEFAULT_CONFIG = {
        "mapImagePath": DEFAULT_MAP_IMAGE,
        "recordsSource": None,
        "regionsSource": None,
        "fallbackImagePath": DEFAULT_MAP_IMAGE,
        "popupDelayMs": 200,
        "statusHideDelayMs": 2000,
        "fetchTimeoutSeconds": 10.0,
        "defaultMatchField": DEFAULT_MATCH_FIELD,
        "detailFields": None,
    }

    def __init__(self, config_file: Optional[str], logger: ILoggerService):
        """
        Initialize the repository.

        Args:
            config_file: Path to the JSON configuration file, or None for defaults
            logger: Logger service
        """
        self.config_file = config_file
        self.logger = logger
        self._raw_config: Optional[Dict[str, Any]] = None
        self._overrides: Dict[str, Any] = {}
        self._lock = threading.RLock()

    @property
    def base_dir(self) -> str:
        if self.config_file:
            return os.path.dirname(os.path.abspath(self.config_file))
        return os.getcwd()

    def load_config(self, force_reload: bool = False) -> Result[MapConfig]:
        with self._lock:
            if self._raw_config is None or force_reload:
                loaded = self._read_file()
                if loaded.is_failure:
                    return Result.fail(loaded.error)
                self._raw_config = loaded.value

            merged = dict(self._raw_config)
            merged.update(self._overrides)
            return self._build_config(merged)

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key in self._overrides:
                return self._overrides[key]
            config_result = self.load_config()
            if config_result.is_failure:
                self.logger.error(f"Error loading config: {config_result.error}")
                return default
            value = self._raw_config.get(key)
            return default if value is None else value

    def apply_overrides(self, overrides: Dict[str, Any]) -> Result[MapConfig]:
        with self._lock:
            for key, value in overrides.items():
                if value is None:
                    continue
                if key not in self.DEFAULT_CONFIG:
                    return Result.fail(ConfigurationError(
                        message=f"Unknown configuration key: {key}",
                        details={"key": key}
                    ))
                self._overrides[key] = value
            return self.load_config()

    def _read_file(self) -> Result[Dict[str, Any]]:
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if not self.config_file:
            return Result.ok(config)

        if not os.path.exists(self.config_file):
            self.logger.warning(f"Config file not found: {self.config_file}. Using default settings.")
            return Result.ok(config)

        try:
            with open(self.config_file, "r", encoding="utf-8-sig") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            error = ConfigurationError(
                message=f"Error loading config from {self.config_file}: {e}",
                details={"path": self.config_file},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        if not isinstance(loaded, dict):
            return Result.fail(ConfigurationError(
                message="Configuration file must contain a JSON object",
                details={"path": self.config_file}
            ))

        unknown = sorted(set(loaded) - set(self.DEFAULT_CONFIG))
        if unknown:
            self.logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        for key in self.DEFAULT_CONFIG:
            if key in loaded:
                config[key] = loaded[key]

        self.logger.info(f"Config loaded successfully from {self.config_file}")
        return Result.ok(config)

    def _build_config(self, raw: Dict[str, Any]) -> Result[MapConfig]:
        popup_delay = self._as_int(raw, "popupDelayMs")
        status_delay = self._as_int(raw, "statusHideDelayMs")
        fetch_timeout = self._as_float(raw, "fetchTimeoutSeconds")

        detail_fields = raw.get("detailFields")
        if detail_fields is None:
            detail_fields = default_detail_fields()
        elif not isinstance(detail_fields, list) or not all(
                isinstance(item, dict) and "field" in item for item in detail_fields):
            return Result.fail(ConfigurationError(
                message="detailFields must be a list of objects with a 'field' key",
                details={"detailFields": detail_fields}
            ))

        records_source = raw.get("recordsSource")
        if records_source is not None and not isinstance(records_source, (str, list)):
            return Result.fail(ConfigurationError(
                message="recordsSource must be text or an array of objects",
                details={"type": type(records_source).__name__}
            ))

        regions_source = raw.get("regionsSource")
        if isinstance(regions_source, list):
            # An inline array in the JSON file is re-serialized for the parser
            regions_source = json.dumps(regions_source, ensure_ascii=False)

        return Result.ok(MapConfig(
            map_image_path=self._resolve_path(raw.get("mapImagePath") or DEFAULT_MAP_IMAGE),
            records_source=records_source,
            regions_source=self._resolve_path(regions_source) if regions_source else None,
            fallback_image_path=self._resolve_path(raw.get("fallbackImagePath") or DEFAULT_MAP_IMAGE),
            popup_delay_ms=popup_delay,
            status_hide_delay_ms=status_delay,
            fetch_timeout_seconds=fetch_timeout,
            default_match_field=raw.get("defaultMatchField") or DEFAULT_MATCH_FIELD,
            detail_fields=detail_fields,
        ))

    def _resolve_path(self, value: str) -> str:
        """Resolve a relative path against the config directory; inline data and URLs pass through."""
        text = str(value).strip()
        if (text.startswith(("[", "{")) or text.startswith(URL_PREFIXES)
                or os.path.isabs(text) or (len(text) > 1 and text[1] == ":")):
            return text
        if not self.config_file:
            return text
        return os.path.join(self.base_dir, text)

    def _as_int(self, raw: Dict[str, Any], key: str) -> int:
        try:
            return int(raw.get(key))
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid value for {key}, using default", value=raw.get(key))
            return self.DEFAULT_CONFIG[key]

    def _as_float(self, raw: Dict[str, Any], key: str) -> float:
        try:
            return float(raw.get(key))
        except (ValueError, TypeError):
            self.logger.warning(f"Invalid value for {key}, using default", value=raw.get(key))
            return self.DEFAULT_CONFIG[key]
