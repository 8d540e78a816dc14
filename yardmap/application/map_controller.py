# yardmap/application/map_controller.py
"""
Map controller: loads the image, regions and records, and drives the popup.

All state is owned by the UI thread. Only the initialization and
load-completion paths write it; rendering and hover handling read it.
"""
from typing import List, Optional

from yardmap.domain.common.errors import DomainError, ErrorCategory
from yardmap.domain.common.result import Result
from yardmap.domain.models.map_config import MapConfig
from yardmap.domain.models.region_model import Record, Region
from yardmap.domain.services.i_background_task_service import IBackgroundTaskService
from yardmap.domain.services.i_deferred_task_service import IDeferredTaskService
from yardmap.domain.services.i_image_service import IImageService, MapImage
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_map_surface import IMapSurface, Point
from yardmap.domain.services.i_matcher_service import IMatcherService
from yardmap.domain.services.i_record_parser_service import IRecordParserService
from yardmap.domain.services.i_region_service import IRegionService
from yardmap.domain.services.i_resource_loader_service import IResourceLoaderService
from yardmap.infrastructure.regions.region_service import RegionFetchWorker
from yardmap.presentation.popup_presenter import PopupPresenter

FETCH_REGIONS_TASK = "fetch_regions"

MAP_UNAVAILABLE_MESSAGE = (
    "The map image is unavailable. Check the image path or serve the map "
    "folder through a local web server."
)


class MapController:
    """Coordinates loading and hover behaviour for one map surface."""

    def __init__(self,
                 config: MapConfig,
                 surface: IMapSurface,
                 parser: IRecordParserService,
                 matcher: IMatcherService,
                 region_service: IRegionService,
                 resource_loader: IResourceLoaderService,
                 image_service: IImageService,
                 popup_timer: IDeferredTaskService,
                 status_timer: IDeferredTaskService,
                 background_tasks: IBackgroundTaskService,
                 logger: ILoggerService):
        self.config = config
        self.surface = surface
        self.parser = parser
        self.matcher = matcher
        self.region_service = region_service
        self.resource_loader = resource_loader
        self.image_service = image_service
        self.popup_timer = popup_timer
        self.status_timer = status_timer
        self.background_tasks = background_tasks
        self.logger = logger
        self.presenter = PopupPresenter(config.detail_fields)

        self.records: Optional[List[Record]] = None
        self.regions: List[Region] = []
        self.map_image: Optional[MapImage] = None
        self.map_ready = False
        self.regions_ready = False
        self.fallback_tried = False
        self.last_pointer: Optional[Point] = None
        self.status_error = False

    def initialize(self) -> None:
        """Start every loading path. Errors are reported on the surface, never raised."""
        self.surface.set_event_handlers(
            on_region_enter=self.on_region_enter,
            on_region_move=self.on_region_move,
            on_region_leave=self.on_region_leave,
            on_background_click=self.close_popup,
            on_resize=self.render_regions,
        )

        for step in (self.load_map_image, self.load_regions, self.load_records):
            try:
                step()
            except Exception as e:
                self.logger.critical(f"Unexpected error during initialization: {e}",
                                     step=step.__name__)
                self.surface.show_status("Initialization failed", error=True)

    def shutdown(self) -> None:
        self.popup_timer.cancel()
        self.status_timer.cancel()
        self.background_tasks.cancel_all_tasks()

    # Map image

    def load_map_image(self) -> None:
        path = self.config.map_image_path
        if not path:
            self.logger.warning("Map image path is not set. Set mapImagePath in the configuration.")
            return

        self.surface.hide_map_error()
        self.surface.show_loading(True, "Loading map...")
        self._load_image(self.image_service.normalize_path(path))

    def _load_image(self, path: str) -> None:
        result = self.image_service.load_image(path)
        if result.is_success:
            self._on_image_loaded(result.value)
            return

        self.logger.error(f"Failed to load map image from {path}: {result.error.message}")

        fallback = self.config.fallback_image_path
        if not self.fallback_tried and fallback and path != fallback:
            self.fallback_tried = True
            self.logger.warning(f"Trying the default relative map path: {fallback}")
            self._load_image(fallback)
            return

        self.surface.show_loading(False)
        self.surface.show_map_error(MAP_UNAVAILABLE_MESSAGE)

    def _on_image_loaded(self, image: MapImage) -> None:
        self.map_image = image
        self.surface.set_map_image(image.path)
        self.map_ready = True
        self.surface.show_loading(False)
        self.surface.hide_map_error()
        self.logger.info(f"Map image loaded: {image.path}",
                         width=image.natural_width, height=image.natural_height)
        self.render_regions()

    # Regions

    def load_regions(self) -> None:
        source = self.config.regions_source
        if not source:
            self.logger.warning("Region definitions are not set. Set regionsSource in the configuration.")
            return

        self.set_status("Loading interactive regions...", loading=True)

        if self.region_service.is_inline_source(source):
            self._on_regions_loaded(self.region_service.parse_regions(source))
            return

        location = self.region_service.resolve_location(source)
        worker = RegionFetchWorker(location, self.resource_loader, self.region_service, self.logger)
        started = self.background_tasks.execute_ui_task(FETCH_REGIONS_TASK, worker, self._on_regions_loaded)
        if started.is_failure:
            self._on_regions_loaded(Result.fail(started.error))

    def _on_regions_loaded(self, result: Result[List[Region]]) -> None:
        if result.is_failure:
            self._report_region_error(result.error)
            return

        regions = result.value
        if not regions:
            self.logger.warning("Region definitions were loaded but contain no regions.")
            self.set_status("No region data found", error=True)
            return

        self.regions = regions
        self.regions_ready = True
        self.render_regions()
        self.set_status("Interactive regions loaded")

    def _report_region_error(self, error: DomainError) -> None:
        if error.category in (ErrorCategory.PARSE, ErrorCategory.SCHEMA):
            self.set_status("Failed to parse interactive regions", error=True)
            self.logger.error(f"Error parsing interactive regions: {error}")
        else:
            self.set_status("Failed to load interactive regions", error=True)
            self.logger.error(f"Error loading interactive regions: {error}")

    def render_regions(self) -> None:
        if not (self.map_ready and self.regions_ready and self.map_image):
            return

        client_width, client_height = self.surface.get_display_size()
        natural_width = self.map_image.natural_width
        natural_height = self.map_image.natural_height
        if not client_width or not client_height or not natural_width or not natural_height:
            return

        scale_x = client_width / natural_width
        scale_y = client_height / natural_height

        self.surface.clear_regions()

        if not self.regions:
            self.logger.warning("No interactive regions to render.")
            return

        renderable = self.region_service.get_renderable_regions(self.regions, natural_width, natural_height)
        for region in renderable:
            self.surface.draw_region(region, self.region_service.scale_region(region, scale_x, scale_y))
        self.logger.debug(f"Rendered {len(renderable)} of {len(self.regions)} regions",
                          scale_x=round(scale_x, 4), scale_y=round(scale_y, 4))

    # Records

    def load_records(self) -> None:
        source = self.config.records_source
        if source is None:
            return

        # Records only claim the status indicator on failure.
        if isinstance(source, str):
            result = self.parser.parse_records(source)
            if result.is_failure:
                self.set_status("Failed to parse records", error=True)
                self.logger.error(result.error.message, fragment=result.error.details.get("fragment"))
                return
            self.records = result.value
        elif isinstance(source, list):
            self.records = source
        else:
            self.logger.warning(f"Unsupported records source type: {type(source).__name__}")
            return

        self.logger.info(f"Records ready: {len(self.records or [])}")

    # Popup

    def on_region_enter(self, region: Region, point: Point) -> None:
        self.last_pointer = point
        self.popup_timer.schedule(self.config.popup_delay_ms, lambda: self.show_popup(region))

    def on_region_move(self, region: Region, point: Point) -> None:
        self.last_pointer = point
        self.surface.move_tooltip(point)

    def on_region_leave(self, region: Region) -> None:
        self.close_popup()

    def show_popup(self, region: Region, point: Optional[Point] = None) -> None:
        match = None
        if isinstance(self.records, list):
            match = self.matcher.match_region(self.records, region)
        title, body = self.presenter.build(match, region.name)
        self.surface.show_tooltip(title, body, point or self.last_pointer)

    def close_popup(self) -> None:
        self.popup_timer.cancel()
        self.surface.hide_tooltip()

    # Status

    def set_status(self, message: str, loading: bool = False, error: bool = False) -> None:
        # An error status stays up; later progress or success messages never replace it.
        if self.status_error and not error:
            self.logger.debug(f"Status kept after an earlier error: {message}")
            return
        self.status_error = self.status_error or error
        self.status_timer.cancel()
        self.surface.show_status(message, loading=loading, error=error)
        if not loading and not error:
            self.status_timer.schedule(self.config.status_hide_delay_ms, self.surface.hide_status)
