# yardmap/presentation/map_view.py
"""
Qt display surface for the yard map.

MapWindow holds the widgets: the scaled map image with its region overlays,
the hover popup, the data status indicator and the loading/error overlays.
QtMapSurface exposes them to the controller through IMapSurface.
"""
from typing import Callable, Optional, Tuple

from PySide6.QtCore import Qt, QPoint, QRect, QSize
from PySide6.QtGui import QPainter, QPixmap
from PySide6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QMainWindow, QProgressBar, QVBoxLayout, QWidget
)

from yardmap.domain.models.region_model import Region
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_map_surface import IMapSurface, Point, Rect
from yardmap.presentation.popup_presenter import compute_popup_position

REGION_STYLE = (
    "QFrame { background-color: rgba(58, 124, 165, 40); border: 2px solid rgba(58, 124, 165, 160); }"
    "QFrame:hover { background-color: rgba(58, 124, 165, 90); border-color: #3a7ca5; }"
)
POPUP_STYLE = (
    "QFrame#popup { background-color: white; border: 1px solid #888; border-radius: 6px; }"
)
STATUS_STYLE = "background-color: rgba(0, 0, 0, 150); color: white; padding: 6px; border-radius: 4px;"
STATUS_ERROR_STYLE = "background-color: rgba(180, 30, 30, 200); color: white; padding: 6px; border-radius: 4px;"
OVERLAY_STYLE = "color: white; background-color: rgba(0, 0, 0, 170); padding: 20px; font-size: 14px;"


def _window_point(widget: QWidget, global_pos) -> Point:
    """Global position -> (x, y) in the coordinates of the widget's window."""
    local = widget.window().mapFromGlobal(global_pos.toPoint())
    return local.x(), local.y()


class RegionItem(QFrame):
    """A hoverable rectangle over the map image."""

    def __init__(self, region: Region, parent: QWidget):
        super().__init__(parent)
        self.region = region
        self.setStyleSheet(REGION_STYLE)
        self.setAccessibleName(region.name)
        self.setMouseTracking(True)
        self.setCursor(Qt.PointingHandCursor)

        self.on_enter: Optional[Callable[[Region, Point], None]] = None
        self.on_move: Optional[Callable[[Region, Point], None]] = None
        self.on_leave: Optional[Callable[[Region], None]] = None

    def enterEvent(self, event):
        if self.on_enter:
            self.on_enter(self.region, _window_point(self, event.globalPosition()))
        super().enterEvent(event)

    def mouseMoveEvent(self, event):
        if self.on_move:
            self.on_move(self.region, _window_point(self, event.globalPosition()))
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        if self.on_leave:
            self.on_leave(self.region)
        super().leaveEvent(event)

    def mousePressEvent(self, event):
        # Clicks on a region must not reach the canvas, which closes the popup
        event.accept()


class MapCanvas(QWidget):
    """Paints the map image scaled to fit, anchored top-left, and hosts the regions."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.pixmap: Optional[QPixmap] = None
        self.region_items = []
        self.on_background_click: Optional[Callable[[], None]] = None
        self.on_resize: Optional[Callable[[], None]] = None
        self.setMinimumSize(200, 150)

    def set_pixmap(self, pixmap: QPixmap) -> None:
        self.pixmap = pixmap
        self.update()

    def image_rect(self) -> QRect:
        if self.pixmap is None or self.pixmap.isNull():
            return QRect()
        scaled = self.pixmap.size().scaled(self.size(), Qt.KeepAspectRatio)
        return QRect(QPoint(0, 0), scaled)

    def paintEvent(self, event):
        if self.pixmap is None or self.pixmap.isNull():
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.drawPixmap(self.image_rect(), self.pixmap)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self.on_resize:
            self.on_resize()

    def mousePressEvent(self, event):
        if self.on_background_click:
            self.on_background_click()
        super().mousePressEvent(event)


class PopupWidget(QFrame):
    """Tooltip with a header and a rich-text body."""

    def __init__(self, parent: QWidget):
        super().__init__(parent)
        self.setObjectName("popup")
        self.setStyleSheet(POPUP_STYLE)
        self.setMaximumWidth(360)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)

        self.header = QLabel(self)
        self.header.setStyleSheet("font-weight: bold; font-size: 13px;")
        layout.addWidget(self.header)

        self.content = QLabel(self)
        self.content.setTextFormat(Qt.RichText)
        self.content.setWordWrap(True)
        layout.addWidget(self.content)

        self.hide()


class StatusIndicator(QFrame):
    """Data status message with a busy spinner."""

    def __init__(self, parent: QWidget):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self.spinner = QProgressBar(self)
        self.spinner.setRange(0, 0)  # busy indicator
        self.spinner.setFixedSize(QSize(60, 12))
        self.spinner.setTextVisible(False)
        layout.addWidget(self.spinner)

        self.text = QLabel(self)
        layout.addWidget(self.text)

        self.hide()

    def set_state(self, message: str, loading: bool, error: bool) -> None:
        self.text.setText(message)
        self.spinner.setVisible(loading)
        self.text.setStyleSheet(STATUS_ERROR_STYLE if error else STATUS_STYLE)
        self.adjustSize()
        self.show()
        self.raise_()


class MapWindow(QMainWindow):
    """Main window: map canvas plus floating popup, status and overlays."""

    def __init__(self, title: str = "Yard Map"):
        super().__init__()
        self.setWindowTitle(title)
        self.resize(1200, 800)

        self.canvas = MapCanvas(self)
        self.setCentralWidget(self.canvas)

        self.popup = PopupWidget(self)
        self.status = StatusIndicator(self)

        self.loading_overlay = QLabel(self)
        self.loading_overlay.setAlignment(Qt.AlignCenter)
        self.loading_overlay.setStyleSheet(OVERLAY_STYLE)
        self.loading_overlay.hide()

        self.error_overlay = QLabel(self)
        self.error_overlay.setAlignment(Qt.AlignCenter)
        self.error_overlay.setWordWrap(True)
        self.error_overlay.setStyleSheet(OVERLAY_STYLE)
        self.error_overlay.hide()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.layout_overlays()

    def layout_overlays(self) -> None:
        geometry = self.centralWidget().geometry()
        self.loading_overlay.setGeometry(geometry)
        self.error_overlay.setGeometry(geometry)
        self.status.move(10, geometry.bottom() - self.status.height() - 10)


class QtMapSurface(IMapSurface):
    """IMapSurface backed by a MapWindow."""

    def __init__(self, logger: ILoggerService, window: Optional[MapWindow] = None):
        self.logger = logger
        self.window = window or MapWindow()
        self.canvas = self.window.canvas
        self._on_region_enter = None
        self._on_region_move = None
        self._on_region_leave = None

    def set_map_image(self, path: str) -> None:
        pixmap = QPixmap(path)
        if pixmap.isNull():
            self.logger.error(f"Qt could not display the map image: {path}")
        self.canvas.set_pixmap(pixmap)

    def get_display_size(self) -> Tuple[int, int]:
        rect = self.canvas.image_rect()
        return rect.width(), rect.height()

    def clear_regions(self) -> None:
        for item in self.canvas.region_items:
            item.hide()
            item.deleteLater()
        self.canvas.region_items = []

    def draw_region(self, region: Region, rect: Rect) -> None:
        x, y, width, height = rect
        origin = self.canvas.image_rect().topLeft()
        item = RegionItem(region, self.canvas)
        item.setGeometry(origin.x() + round(x), origin.y() + round(y),
                         max(1, round(width)), max(1, round(height)))
        item.on_enter = self._on_region_enter
        item.on_move = self._on_region_move
        item.on_leave = self._on_region_leave
        item.show()
        self.canvas.region_items.append(item)

    def show_tooltip(self, title: str, content_html: str, point: Point) -> None:
        popup = self.window.popup
        popup.header.setText(title)
        popup.content.setText(content_html)
        popup.adjustSize()
        popup.show()
        popup.raise_()
        self.move_tooltip(point)

    def move_tooltip(self, point: Point) -> None:
        popup = self.window.popup
        if not popup.isVisible() or point is None:
            return
        left, top = compute_popup_position(
            point,
            (popup.width(), popup.height()),
            (self.window.width(), self.window.height()),
        )
        popup.move(left, top)

    def hide_tooltip(self) -> None:
        self.window.popup.hide()

    def show_status(self, message: str, loading: bool = False, error: bool = False) -> None:
        self.window.status.set_state(message, loading, error)
        self.window.layout_overlays()

    def hide_status(self) -> None:
        self.window.status.hide()

    def show_loading(self, visible: bool, text: str = "") -> None:
        if text:
            self.window.loading_overlay.setText(text)
        self.window.loading_overlay.setVisible(bool(visible))
        if visible:
            self.window.loading_overlay.raise_()

    def show_map_error(self, message: str) -> None:
        if message:
            self.window.error_overlay.setText(message)
        self.window.error_overlay.show()
        self.window.error_overlay.raise_()

    def hide_map_error(self) -> None:
        self.window.error_overlay.hide()

    def set_event_handlers(self,
                           on_region_enter: Callable[[Region, Point], None],
                           on_region_move: Callable[[Region, Point], None],
                           on_region_leave: Callable[[Region], None],
                           on_background_click: Callable[[], None],
                           on_resize: Callable[[], None]) -> None:
        self._on_region_enter = on_region_enter
        self._on_region_move = on_region_move
        self._on_region_leave = on_region_leave
        self.canvas.on_background_click = on_background_click
        self.canvas.on_resize = on_resize

    def show(self) -> None:
        self.window.show()
