# yardmap/domain/services/i_config_repository_service.py
"""
Configuration repository interface.

The map configuration is read-only at runtime: it is loaded once at startup
and never written back.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from yardmap.domain.common.result import Result
from yardmap.domain.models.map_config import MapConfig


class IConfigRepository(ABC):
    """Interface for the map configuration source."""

    @abstractmethod
    def load_config(self, force_reload: bool = False) -> Result[MapConfig]:
        """
        Load the map configuration.

        Args:
            force_reload: Ignore the cached configuration

        Returns:
            Result containing the MapConfig
        """
        pass

    @abstractmethod
    def get_setting(self, key: str, default: Any = None) -> Any:
        """Raw configuration value, or default when missing."""
        pass

    @abstractmethod
    def apply_overrides(self, overrides: Dict[str, Any]) -> Result[MapConfig]:
        """Override settings for this run (e.g. from command line flags)."""
        pass
