# yardmap/domain/services/i_map_surface.py
"""
Display surface interface.

The controller only talks to the map through these capabilities, so the
loading and matching logic runs the same against a Qt widget or a test fake.
"""
from abc import ABC, abstractmethod
from typing import Callable, Tuple

from yardmap.domain.models.region_model import Region

Rect = Tuple[float, float, float, float]
Point = Tuple[int, int]


class IMapSurface(ABC):
    """Capabilities the map controller needs from a display surface."""

    @abstractmethod
    def set_map_image(self, path: str) -> None:
        """Display the image at path as the map background."""
        pass

    @abstractmethod
    def get_display_size(self) -> Tuple[int, int]:
        """Current (width, height) of the displayed image."""
        pass

    @abstractmethod
    def clear_regions(self) -> None:
        pass

    @abstractmethod
    def draw_region(self, region: Region, rect: Rect) -> None:
        """Place a hoverable region at rect (display pixels)."""
        pass

    @abstractmethod
    def show_tooltip(self, title: str, content_html: str, point: Point) -> None:
        """Show the popup with title and content near point."""
        pass

    @abstractmethod
    def move_tooltip(self, point: Point) -> None:
        pass

    @abstractmethod
    def hide_tooltip(self) -> None:
        pass

    @abstractmethod
    def show_status(self, message: str, loading: bool = False, error: bool = False) -> None:
        """Show the data status indicator."""
        pass

    @abstractmethod
    def hide_status(self) -> None:
        pass

    @abstractmethod
    def show_loading(self, visible: bool, text: str = "") -> None:
        """Toggle the map loading overlay."""
        pass

    @abstractmethod
    def show_map_error(self, message: str) -> None:
        """Show the persistent map error overlay."""
        pass

    @abstractmethod
    def hide_map_error(self) -> None:
        pass

    @abstractmethod
    def set_event_handlers(self,
                           on_region_enter: Callable[[Region, Point], None],
                           on_region_move: Callable[[Region, Point], None],
                           on_region_leave: Callable[[Region], None],
                           on_background_click: Callable[[], None],
                           on_resize: Callable[[], None]) -> None:
        """Register the controller's pointer and resize handlers."""
        pass
