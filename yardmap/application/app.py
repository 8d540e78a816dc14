# yardmap/application/app.py

import argparse
import logging
import os
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from yardmap.application.map_controller import MapController
from yardmap.domain.common.di_container import DIContainer
from yardmap.domain.models.map_config import MapConfig
from yardmap.domain.services.i_background_task_service import IBackgroundTaskService
from yardmap.domain.services.i_config_repository_service import IConfigRepository
from yardmap.domain.services.i_image_service import IImageService
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_map_surface import IMapSurface
from yardmap.domain.services.i_matcher_service import IMatcherService
from yardmap.domain.services.i_record_parser_service import IRecordParserService
from yardmap.domain.services.i_region_service import IRegionService
from yardmap.domain.services.i_resource_loader_service import IResourceLoaderService
from yardmap.domain.services.i_schema_validator_service import ISchemaValidatorService

from yardmap.infrastructure.config.json_config_repository import JsonConfigRepository
from yardmap.infrastructure.imaging.image_service import PillowImageService
from yardmap.infrastructure.logging.logger_service import ConsoleLoggerService
from yardmap.infrastructure.matching.record_matcher import RecordMatcher
from yardmap.infrastructure.parsing.schema_validator import RegionSchemaValidator
from yardmap.infrastructure.parsing.tolerant_parser import TolerantJsonParser
from yardmap.infrastructure.regions.region_service import RegionService
from yardmap.infrastructure.resources.resource_loader import RequestsResourceLoader
from yardmap.infrastructure.threading.qt_background_task_service import QtBackgroundTaskService
from yardmap.infrastructure.threading.qt_deferred_task import QtDeferredTaskService
from yardmap.presentation.map_view import QtMapSurface
from yardmap.utils.logging_config import setup_logging


def initialize_app(config: MapConfig,
                   logger: Optional[ILoggerService] = None,
                   surface: Optional[IMapSurface] = None) -> DIContainer:
    container = DIContainer()

    # Core services
    logger = logger or ConsoleLoggerService(level=logging.DEBUG)
    container.register_instance(ILoggerService, logger)
    container.register_instance(MapConfig, config)

    thread_service = QtBackgroundTaskService(logger)
    container.register_instance(IBackgroundTaskService, thread_service)

    # Data services
    container.register_factory(
        IRecordParserService,
        lambda: TolerantJsonParser(container.resolve(ILoggerService))
    )

    container.register_factory(
        ISchemaValidatorService,
        lambda: RegionSchemaValidator(container.resolve(ILoggerService))
    )

    container.register_factory(
        IMatcherService,
        lambda: RecordMatcher(
            logger=container.resolve(ILoggerService),
            default_match_field=config.default_match_field
        )
    )

    container.register_factory(
        IRegionService,
        lambda: RegionService(
            parser=container.resolve(IRecordParserService),
            validator=container.resolve(ISchemaValidatorService),
            logger=container.resolve(ILoggerService)
        )
    )

    container.register_factory(
        IResourceLoaderService,
        lambda: RequestsResourceLoader(
            logger=container.resolve(ILoggerService),
            timeout_seconds=config.fetch_timeout_seconds
        )
    )

    container.register_factory(
        IImageService,
        lambda: PillowImageService(container.resolve(ILoggerService))
    )

    # UI
    if surface is not None:
        container.register_instance(IMapSurface, surface)
    else:
        container.register_factory(
            IMapSurface,
            lambda: QtMapSurface(container.resolve(ILoggerService))
        )

    # Each controller gets its own pair of timers: popup debounce and status auto-hide
    container.register_factory(
        MapController,
        lambda: MapController(
            config=container.resolve(MapConfig),
            surface=container.resolve(IMapSurface),
            parser=container.resolve(IRecordParserService),
            matcher=container.resolve(IMatcherService),
            region_service=container.resolve(IRegionService),
            resource_loader=container.resolve(IResourceLoaderService),
            image_service=container.resolve(IImageService),
            popup_timer=QtDeferredTaskService(container.resolve(ILoggerService)),
            status_timer=QtDeferredTaskService(container.resolve(ILoggerService)),
            background_tasks=container.resolve(IBackgroundTaskService),
            logger=container.resolve(ILoggerService)
        )
    )

    logger.info("Application dependencies initialized")

    return container


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yardmap",
        description="Interactive yard map with hover popups for berth records."
    )
    parser.add_argument("--config", default="map_config.json",
                        help="Path to the map configuration JSON (default: map_config.json)")
    parser.add_argument("--image", help="Map image path (overrides mapImagePath)")
    parser.add_argument("--records", help="Path to a JSON/near-JSON records file (overrides recordsSource)")
    parser.add_argument("--regions", help="Region definitions path, URL or inline JSON (overrides regionsSource)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Console log level (default: INFO)")
    parser.add_argument("--log-dir", help="Directory for rotating log files")
    return parser


def load_config(args: argparse.Namespace, logger: ILoggerService) -> Optional[MapConfig]:
    repository: IConfigRepository = JsonConfigRepository(args.config, logger)

    overrides = {"mapImagePath": args.image, "regionsSource": args.regions}
    if args.records:
        try:
            with open(args.records, "r", encoding="utf-8-sig") as f:
                overrides["recordsSource"] = f.read()
        except OSError as e:
            logger.error(f"Unable to read records file {os.path.abspath(args.records)}: {e}")
            return None

    result = repository.apply_overrides(overrides)
    if result.is_failure:
        logger.error(f"Configuration error: {result.error}")
        return None
    return result.value


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = getattr(logging, args.log_level)

    setup_logging(level, args.log_dir)
    logger = ConsoleLoggerService(level=logging.DEBUG, use_root_handlers=True)

    config = load_config(args, logger)
    if config is None:
        return 1

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Yard Map")

    container = initialize_app(config, logger)
    surface = container.resolve(IMapSurface)
    controller = container.resolve(MapController)

    surface.show()
    controller.initialize()
    app.aboutToQuit.connect(controller.shutdown)

    return app.exec()
