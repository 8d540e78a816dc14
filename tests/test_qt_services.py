"""
Qt-backed services: deferred popup timer, background fetch and the map surface.
"""
import json

from PySide6.QtGui import QColor, QImage

from yardmap.application.app import initialize_app
from yardmap.application.map_controller import MapController
from yardmap.domain.common.result import Result
from yardmap.domain.models.map_config import MapConfig
from yardmap.domain.models.region_model import Region
from yardmap.domain.services.i_map_surface import IMapSurface
from yardmap.infrastructure.parsing.schema_validator import RegionSchemaValidator
from yardmap.infrastructure.parsing.tolerant_parser import TolerantJsonParser
from yardmap.infrastructure.regions.region_service import RegionFetchWorker, RegionService
from yardmap.infrastructure.threading.qt_background_task_service import QtBackgroundTaskService
from yardmap.infrastructure.threading.qt_deferred_task import QtDeferredTaskService
from yardmap.presentation.map_view import QtMapSurface


def test_deferred_task_runs_once_after_delay(qtbot, logger):
    timer = QtDeferredTaskService(logger)
    calls = []

    timer.schedule(20, lambda: calls.append("shown"))
    assert timer.is_pending()

    qtbot.waitUntil(lambda: calls == ["shown"], timeout=1000)
    assert not timer.is_pending()


def test_rescheduling_replaces_pending_task(qtbot, logger):
    timer = QtDeferredTaskService(logger)
    calls = []

    timer.schedule(20, lambda: calls.append("first"))
    timer.schedule(20, lambda: calls.append("second"))

    qtbot.waitUntil(lambda: bool(calls), timeout=1000)
    qtbot.wait(50)
    assert calls == ["second"]


def test_cancelled_task_never_runs(qtbot, logger):
    timer = QtDeferredTaskService(logger)
    calls = []

    timer.schedule(20, lambda: calls.append("shown"))
    assert timer.cancel()

    qtbot.wait(60)
    assert calls == []
    assert not timer.cancel()


class StaticLoader:
    def fetch_text(self, location):
        return Result.ok(json.dumps([
            {"name": "A1", "x": 1, "y": 2, "width": 3, "height": 4, "matchField": "причал"}
        ]))


def test_region_fetch_runs_in_background_thread(qtbot, logger):
    service = QtBackgroundTaskService(logger)
    parser = TolerantJsonParser(logger)
    region_service = RegionService(parser, RegionSchemaValidator(logger), logger)
    received = []

    started = service.execute_ui_task(
        "fetch_regions",
        RegionFetchWorker("interactiveAreas.json", StaticLoader(), region_service, logger),
        received.append,
    )

    assert started.is_success
    qtbot.waitUntil(lambda: bool(received), timeout=2000)
    assert [region.name for region in received[0].value] == ["A1"]
    assert not service.is_task_running("fetch_regions")


def test_map_surface_places_regions_over_the_image(qtbot, logger, tmp_path):
    image_path = tmp_path / "yard.png"
    image = QImage(400, 200, QImage.Format_RGB32)
    image.fill(QColor("white"))
    image.save(str(image_path))

    surface = QtMapSurface(logger)
    qtbot.addWidget(surface.window)
    surface.show()
    surface.window.resize(800, 600)
    surface.set_map_image(str(image_path))

    width, height = surface.get_display_size()
    assert width > 0 and height > 0
    assert abs(width / height - 2.0) < 0.05

    surface.draw_region(Region("Dock A", 0, 0, 10, 10, "причал"), (10.0, 20.0, 30.0, 40.0))
    item = surface.canvas.region_items[0]
    assert (item.x(), item.y(), item.width(), item.height()) == (10, 20, 30, 40)

    surface.clear_regions()
    assert surface.canvas.region_items == []


def test_map_surface_status_and_tooltip(qtbot, logger):
    surface = QtMapSurface(logger)
    qtbot.addWidget(surface.window)
    surface.show()

    surface.show_status("Interactive regions loaded")
    assert surface.window.status.isVisible()
    surface.hide_status()
    assert not surface.window.status.isVisible()

    surface.show_tooltip("Dock A", "<b>Record 1</b>", (20, 20))
    assert surface.window.popup.isVisible()
    assert surface.window.popup.header.text() == "Dock A"
    surface.hide_tooltip()
    assert not surface.window.popup.isVisible()


def test_initialize_app_wires_a_controller(qtbot, logger):
    surface = QtMapSurface(logger)
    qtbot.addWidget(surface.window)
    container = initialize_app(MapConfig(regions_source="[]"), logger, surface)

    controller = container.resolve(MapController)

    assert container.resolve(IMapSurface) is surface
    assert controller.surface is surface
    assert controller.popup_timer is not controller.status_timer
