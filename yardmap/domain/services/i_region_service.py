# yardmap/domain/services/i_region_service.py
from abc import ABC, abstractmethod
from typing import List, Tuple

from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Region


class IRegionService(ABC):
    """Service for loading region definitions and checking them against the image."""

    @abstractmethod
    def is_inline_source(self, source: str) -> bool:
        """Whether source holds the definitions themselves rather than a location."""
        pass

    @abstractmethod
    def resolve_location(self, location: str) -> str:
        """Turn a configured path into something the resource loader can fetch."""
        pass

    @abstractmethod
    def parse_regions(self, text: str) -> Result[List[Region]]:
        """Parse and validate region definitions from text."""
        pass

    @abstractmethod
    def validate_bounds(self, region: Region, natural_width: float, natural_height: float) -> List[str]:
        """Human-readable violations of the region against the image size."""
        pass

    @abstractmethod
    def get_renderable_regions(self, regions: List[Region], natural_width: float,
                               natural_height: float) -> List[Region]:
        """Regions without bound violations; the others are logged and skipped."""
        pass

    @abstractmethod
    def scale_region(self, region: Region, scale_x: float,
                     scale_y: float) -> Tuple[float, float, float, float]:
        """Display rectangle (x, y, width, height) for the given scale factors."""
        pass
