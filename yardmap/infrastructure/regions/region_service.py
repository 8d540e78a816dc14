# yardmap/infrastructure/regions/region_service.py
import math
import re
from typing import Any, List, Tuple

from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Region
from yardmap.domain.services.i_background_task_service import Worker
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_record_parser_service import IRecordParserService
from yardmap.domain.services.i_region_service import IRegionService
from yardmap.domain.services.i_resource_loader_service import IResourceLoaderService
from yardmap.domain.services.i_schema_validator_service import ISchemaValidatorService

WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:")
URL_PREFIXES = ("http://", "https://", "file://")


def normalize_path(path: str) -> str:
    """Replace Windows backslashes with forward slashes."""
    if not path or not isinstance(path, str):
        return path
    return path.replace("\\", "/")


def convert_to_file_url(path: str) -> str:
    """C:\\maps\\areas.json -> file:///C:/maps/areas.json; URLs are left alone."""
    if not path or not isinstance(path, str):
        return path
    if path.startswith(URL_PREFIXES):
        return path
    if WINDOWS_DRIVE.match(path):
        return "file:///" + normalize_path(path)
    return normalize_path(path)


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


class RegionService(IRegionService):
    """Service implementation for loading and checking map regions."""

    def __init__(self, parser: IRecordParserService,
                 validator: ISchemaValidatorService,
                 logger: ILoggerService):
        self.parser = parser
        self.validator = validator
        self.logger = logger

    def is_inline_source(self, source: str) -> bool:
        trimmed = str(source).strip()
        return trimmed.startswith("{") or trimmed.startswith("[")

    def resolve_location(self, location: str) -> str:
        return convert_to_file_url(str(location).strip())

    def parse_regions(self, text: str) -> Result[List[Region]]:
        """Parse region definitions (strict or repaired) and validate the schema."""
        parsed = self.parser.parse_array(text)
        if parsed.is_failure:
            return Result.fail(parsed.error)

        result = self.validator.validate_regions(parsed.value)
        if result.is_success:
            self.logger.info(f"Loaded {len(result.value)} interactive regions")
        return result

    def validate_bounds(self, region: Region, natural_width: float, natural_height: float) -> List[str]:
        if region is None:
            return ["Region definition is missing or malformed"]

        errors = []
        values = {}
        for field in ("x", "y", "width", "height"):
            value = _as_number(getattr(region, field, None))
            values[field] = value

            if not math.isfinite(value):
                errors.append(f"Field {field} must be a number")
                continue
            if field in ("width", "height") and value <= 0:
                errors.append(f"Field {field} must be greater than 0")
            if field in ("x", "y") and value < 0:
                errors.append(f"Field {field} cannot be negative")

        if math.isfinite(values["x"]) and math.isfinite(values["width"]):
            if values["x"] + values["width"] > natural_width:
                errors.append("Region extends past the right edge of the map")

        if math.isfinite(values["y"]) and math.isfinite(values["height"]):
            if values["y"] + values["height"] > natural_height:
                errors.append("Region extends past the bottom edge of the map")

        return errors

    def get_renderable_regions(self, regions: List[Region], natural_width: float,
                               natural_height: float) -> List[Region]:
        renderable = []
        for region in regions:
            violations = self.validate_bounds(region, natural_width, natural_height)
            if violations:
                name = getattr(region, "name", None) or "unnamed"
                self.logger.warning(f"Region '{name}' skipped: {'; '.join(violations)}")
                continue
            renderable.append(region)
        return renderable

    def scale_region(self, region: Region, scale_x: float,
                     scale_y: float) -> Tuple[float, float, float, float]:
        x, y, width, height = region.coordinates
        return x * scale_x, y * scale_y, width * scale_x, height * scale_y


class RegionFetchWorker(Worker[Result[List[Region]]]):
    """Fetches and parses the region definition resource off the UI thread."""

    def __init__(self, location: str, loader: IResourceLoaderService,
                 region_service: IRegionService, logger: ILoggerService):
        super().__init__()
        self.location = location
        self.loader = loader
        self.region_service = region_service
        self.logger = logger

    def execute(self) -> Result[List[Region]]:
        self.logger.info(f"Fetching interactive regions from {self.location}")
        fetched = self.loader.fetch_text(self.location)
        if fetched.is_failure:
            return Result.fail(fetched.error)

        self.check_cancellation()
        return self.region_service.parse_regions(fetched.value)
