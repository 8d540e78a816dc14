# yardmap/domain/services/i_image_service.py
from abc import ABC, abstractmethod
from dataclasses import dataclass

from yardmap.domain.common.result import Result


@dataclass
class MapImage:
    """A loaded map image and its natural pixel size."""
    path: str
    natural_width: int
    natural_height: int


class IImageService(ABC):
    """Loads the map image and reports its natural dimensions."""

    @abstractmethod
    def normalize_path(self, path: str) -> str:
        """Path form suitable for loading (forward slashes, file URLs resolved)."""
        pass

    @abstractmethod
    def load_image(self, path: str) -> Result[MapImage]:
        """
        Open the image at path.

        Returns:
            Result containing the MapImage, or an ImageError
        """
        pass
