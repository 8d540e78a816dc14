"""
Map controller against in-memory fakes of the surface, timers, image
loading and background tasks.
"""
import json

import pytest

from yardmap.application.map_controller import MAP_UNAVAILABLE_MESSAGE, MapController
from yardmap.domain.common.errors import ImageError, ResourceError
from yardmap.domain.common.result import Result
from yardmap.domain.models.map_config import MapConfig
from yardmap.domain.services.i_background_task_service import IBackgroundTaskService
from yardmap.domain.services.i_deferred_task_service import IDeferredTaskService
from yardmap.domain.services.i_image_service import IImageService, MapImage
from yardmap.domain.services.i_map_surface import IMapSurface
from yardmap.infrastructure.matching.record_matcher import RecordMatcher
from yardmap.infrastructure.parsing.schema_validator import RegionSchemaValidator
from yardmap.infrastructure.parsing.tolerant_parser import TolerantJsonParser
from yardmap.infrastructure.regions.region_service import RegionService

AREAS = [
    {"name": "Dock A", "x": 10, "y": 10, "width": 100, "height": 50, "matchField": "причал", "matchValue": "A1"},
    {"name": "Dock B", "x": 950, "y": 10, "width": 100, "height": 50, "matchField": "причал", "matchValue": "B2"},
]
RECORDS = '[{причал: A1, судно: Nord}]'


class FakeSurface(IMapSurface):
    def __init__(self, display_size=(500, 250)):
        self.display_size = display_size
        self.image_path = None
        self.drawn = []
        self.tooltip = None
        self.status = None
        self.status_history = []
        self.loading = False
        self.map_error = None
        self.handlers = {}

    def set_map_image(self, path):
        self.image_path = path

    def get_display_size(self):
        return self.display_size

    def clear_regions(self):
        self.drawn = []

    def draw_region(self, region, rect):
        self.drawn.append((region.name, rect))

    def show_tooltip(self, title, content_html, point):
        self.tooltip = (title, content_html, point)

    def move_tooltip(self, point):
        if self.tooltip:
            self.tooltip = (self.tooltip[0], self.tooltip[1], point)

    def hide_tooltip(self):
        self.tooltip = None

    def show_status(self, message, loading=False, error=False):
        self.status = (message, loading, error)
        self.status_history.append(message)

    def hide_status(self):
        self.status = None

    def show_loading(self, visible, text=""):
        self.loading = visible

    def show_map_error(self, message):
        self.map_error = message

    def hide_map_error(self):
        self.map_error = None

    def set_event_handlers(self, **handlers):
        self.handlers = handlers


class FakeTimer(IDeferredTaskService):
    """Keeps the pending callback until fire() is called."""

    def __init__(self):
        self.pending = None
        self.delay = None

    def schedule(self, delay_ms, callback):
        self.delay = delay_ms
        self.pending = callback

    def cancel(self):
        was_pending = self.pending is not None
        self.pending = None
        return was_pending

    def is_pending(self):
        return self.pending is not None

    def fire(self):
        callback, self.pending = self.pending, None
        callback()


class FakeImageService(IImageService):
    def __init__(self, sizes):
        self.sizes = sizes
        self.requested = []

    def normalize_path(self, path):
        return path

    def load_image(self, path):
        self.requested.append(path)
        if path not in self.sizes:
            return Result.fail(ImageError(message=f"Map image not found: {path}"))
        width, height = self.sizes[path]
        return Result.ok(MapImage(path, width, height))


class InlineTaskService(IBackgroundTaskService):
    """Runs workers synchronously on the calling thread."""

    def __init__(self):
        self.task_ids = []

    def execute_ui_task(self, task_id, worker, ui_callback):
        self.task_ids.append(task_id)
        ui_callback(worker.execute())
        return Result.ok(task_id)

    def cancel_task(self, task_id):
        return Result.ok(False)

    def is_task_running(self, task_id):
        return False

    def cancel_all_tasks(self):
        pass


class DeferredTaskService(InlineTaskService):
    """Holds the worker until finish(), like a fetch still in flight."""

    def __init__(self):
        super().__init__()
        self.waiting = []

    def execute_ui_task(self, task_id, worker, ui_callback):
        self.task_ids.append(task_id)
        self.waiting.append((worker, ui_callback))
        return Result.ok(task_id)

    def finish(self):
        for worker, ui_callback in self.waiting:
            ui_callback(worker.execute())
        self.waiting = []


class StaticLoader:
    def __init__(self, result):
        self.result = result

    def fetch_text(self, location):
        return self.result


def make_controller(logger, surface=None, images=None, loader=None, tasks=None, **config_values):
    config_values.setdefault("map_image_path", "yard.jpg")
    config_values.setdefault("regions_source", json.dumps(AREAS))
    config_values.setdefault("records_source", RECORDS)
    config = MapConfig(**config_values)
    parser = TolerantJsonParser(logger)

    controller = MapController(
        config=config,
        surface=surface or FakeSurface(),
        parser=parser,
        matcher=RecordMatcher(logger),
        region_service=RegionService(parser, RegionSchemaValidator(logger), logger),
        resource_loader=loader or StaticLoader(Result.ok(json.dumps(AREAS))),
        image_service=FakeImageService(images if images is not None else {"yard.jpg": (1000, 500)}),
        popup_timer=FakeTimer(),
        status_timer=FakeTimer(),
        background_tasks=tasks or InlineTaskService(),
        logger=logger,
    )
    return controller


def test_renders_only_regions_inside_the_image(logger):
    controller = make_controller(logger)

    controller.initialize()

    surface = controller.surface
    assert controller.map_ready and controller.regions_ready
    assert surface.drawn == [("Dock A", (5.0, 5.0, 50.0, 25.0))]
    assert any("Dock B" in message for message in logger.messages("WARNING"))


def test_hover_shows_matching_records_after_delay(logger):
    controller = make_controller(logger)
    controller.initialize()
    region = controller.regions[0]

    controller.on_region_enter(region, (30, 40))
    assert controller.surface.tooltip is None
    assert controller.popup_timer.delay == 200

    controller.popup_timer.fire()

    title, body, point = controller.surface.tooltip
    assert title == "Dock A"
    assert "Nord" in body
    assert point == (30, 40)


def test_leave_before_delay_cancels_popup(logger):
    controller = make_controller(logger)
    controller.initialize()
    region = controller.regions[0]

    controller.on_region_enter(region, (30, 40))
    controller.on_region_leave(region)

    assert not controller.popup_timer.is_pending()
    assert controller.surface.tooltip is None


def test_popup_without_dataset_says_no_data(logger):
    controller = make_controller(logger, records_source=None)
    controller.initialize()

    controller.show_popup(controller.regions[0], (1, 1))

    assert "No data to display" in controller.surface.tooltip[1]


def test_fetched_regions_go_through_background_task(logger):
    controller = make_controller(logger, regions_source="interactiveAreas.json")

    controller.initialize()

    assert controller.background_tasks.task_ids == ["fetch_regions"]
    assert [region.name for region in controller.regions] == ["Dock A", "Dock B"]


def test_fetch_failure_surfaces_status(logger):
    loader = StaticLoader(Result.fail(ResourceError(message="Response status: 404")))
    controller = make_controller(logger, regions_source="interactiveAreas.json", loader=loader)

    controller.initialize()

    assert controller.surface.status == ("Failed to load interactive regions", False, True)
    assert not controller.regions_ready


def test_malformed_regions_surface_parse_status(logger):
    controller = make_controller(logger, regions_source="[{name: Dock A, x: 1}]")

    controller.initialize()

    assert controller.surface.status == ("Failed to parse interactive regions", False, True)


def test_record_parse_error_outlives_late_region_fetch(logger):
    tasks = DeferredTaskService()
    controller = make_controller(logger, tasks=tasks, regions_source="interactiveAreas.json",
                                 records_source="not json at all")

    controller.initialize()
    assert controller.surface.status == ("Failed to parse records", False, True)

    tasks.finish()

    assert controller.regions_ready
    assert controller.surface.status == ("Failed to parse records", False, True)
    assert not controller.status_timer.is_pending()


def test_empty_region_list(logger):
    controller = make_controller(logger, regions_source="[]")

    controller.initialize()

    assert controller.surface.status == ("No region data found", False, True)


def test_image_falls_back_once_then_shows_error(logger):
    controller = make_controller(logger, images={}, map_image_path="missing.jpg",
                                 fallback_image_path="yard_map.jpg")

    controller.initialize()

    assert controller.image_service.requested == ["missing.jpg", "yard_map.jpg"]
    assert controller.surface.map_error == MAP_UNAVAILABLE_MESSAGE
    assert not controller.map_ready
    assert controller.surface.drawn == []


def test_image_fallback_succeeds(logger):
    controller = make_controller(logger, images={"yard_map.jpg": (1000, 500)},
                                 map_image_path="missing.jpg", fallback_image_path="yard_map.jpg")

    controller.initialize()

    assert controller.surface.image_path == "yard_map.jpg"
    assert controller.surface.map_error is None
    assert controller.surface.drawn


def test_success_status_hides_after_delay(logger):
    controller = make_controller(logger)
    controller.initialize()

    assert controller.status_timer.delay == 2000
    controller.status_timer.fire()

    assert controller.surface.status is None


def test_unexpected_errors_do_not_escape_initialize(logger):
    controller = make_controller(logger)

    def explode():
        raise RuntimeError("boom")

    controller.load_records = explode
    controller.initialize()

    assert any("boom" in message for message in logger.messages("CRITICAL"))


@pytest.mark.parametrize("records", [[{"причал": "A1", "судно": "Nord"}], RECORDS])
def test_records_accept_text_or_list(logger, records):
    controller = make_controller(logger, records_source=records)

    controller.initialize()

    assert controller.records == [{"причал": "A1", "судно": "Nord"}]
