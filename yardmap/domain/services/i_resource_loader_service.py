# yardmap/domain/services/i_resource_loader_service.py
from abc import ABC, abstractmethod

from yardmap.domain.common.result import Result


class IResourceLoaderService(ABC):
    """Reads a static text resource from a URL or the local filesystem."""

    @abstractmethod
    def fetch_text(self, location: str) -> Result[str]:
        """
        Fetch a text resource once; there is no retry.

        Args:
            location: http(s) URL, file:// URL or filesystem path

        Returns:
            Result containing the text, or a ResourceError
        """
        pass
