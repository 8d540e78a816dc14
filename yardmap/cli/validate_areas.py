# yardmap/cli/validate_areas.py
"""
Offline consistency check between the region definitions and a dataset.

    yardmap-validate --data berths.json [--areas interactiveAreas.json] [--image yard_map.jpg]

Every region's matchField/matchValue must resolve to at least one record.
Unmatched regions are reported as warnings (exit 0); unreadable or malformed
input is fatal (exit 1).
"""
import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional, Tuple

from yardmap.domain.models.region_model import Region
from yardmap.infrastructure.imaging.image_service import PillowImageService
from yardmap.infrastructure.logging.logger_service import LOG_FORMAT, ConsoleLoggerService
from yardmap.infrastructure.matching.record_matcher import RecordMatcher
from yardmap.infrastructure.parsing.schema_validator import RegionSchemaValidator, coerce_number
from yardmap.infrastructure.parsing.tolerant_parser import TolerantJsonParser
from yardmap.infrastructure.regions.region_service import RegionService

REQUIRED_AREA_FIELDS = ("name", "x", "y", "width", "height", "matchField")
DEFAULT_AREAS_FILE = "interactiveAreas.json"

SUCCESS_MESSAGE = "All matchField/matchValue combinations have matches in the provided data."
WARNING_HEADER = "Some interactive areas do not have corresponding records in the data:"

# (area label, message)
AreaWarning = Tuple[str, str]


class CheckError(Exception):
    """Fatal input problem; the message is printed as-is."""


class CheckArgumentParser(argparse.ArgumentParser):
    """Bad command lines are fatal input errors too: exit 1, not argparse's 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = CheckArgumentParser(
        prog="yardmap-validate",
        description="Check that every interactive area matches at least one record in the data."
    )
    ap.add_argument(
        "--data", "-d",
        required=True,
        help="Path to JSON file with the data used on the map",
    )
    ap.add_argument(
        "--areas", "-a",
        default=DEFAULT_AREAS_FILE,
        help=f"Path to the interactive areas file (default: {DEFAULT_AREAS_FILE})",
    )
    ap.add_argument(
        "--image",
        help="Map image; when given, areas outside the image bounds are reported too",
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Diagnostic log level (default: WARNING)",
    )
    return ap


def read_file(path: str, description: str) -> str:
    resolved = os.path.abspath(path)
    try:
        with open(resolved, "r", encoding="utf-8-sig") as f:
            return f.read()
    except OSError as e:
        raise CheckError(f"Unable to read {description} at {resolved}: {e.strerror or e}")
    except UnicodeDecodeError as e:
        raise CheckError(f"Unable to read {description} at {resolved}: not valid UTF-8 ({e.reason} at byte {e.start})")


def parse_json_array(raw: str, description: str) -> List[Any]:
    trimmed = raw.strip()
    if not trimmed:
        raise CheckError(f"{description} is empty.")

    try:
        parsed = json.loads(trimmed)
    except json.JSONDecodeError as e:
        raise CheckError(f"Failed to parse {description}: {e}")

    if not isinstance(parsed, list):
        raise CheckError(f"Failed to parse {description}: {description} must be a JSON array.")
    return parsed


def check_areas_shape(areas: List[Any]) -> List[dict]:
    for index, area in enumerate(areas, start=1):
        if not isinstance(area, dict):
            raise CheckError(f"Area #{index} must be an object.")
        for field in REQUIRED_AREA_FIELDS:
            if field not in area:
                raise CheckError(f'Area #{index} is missing required field "{field}".')
    return areas


def check_data_objects(data: List[Any]) -> List[dict]:
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise CheckError(f"Data entry #{index} must be an object.")
    return data


def _as_text(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return ""


def find_unmatched(areas: List[dict], data: List[dict], matcher: RecordMatcher) -> List[AreaWarning]:
    warnings = []
    for index, area in enumerate(areas, start=1):
        label = area.get("name") or f"#{index}"
        match_field = _as_text(area.get("matchField"))
        match_value = _as_text(area["matchValue"] if "matchValue" in area else area.get("name"))

        if not match_field:
            warnings.append((label, "matchField is missing or empty"))
            continue
        if not match_value:
            warnings.append((label, "matchValue is missing or empty"))
            continue

        if not matcher.find_matches(data, match_field, match_value):
            warnings.append((label, f'Value "{match_value}" not found in field "{match_field}"'))
    return warnings


def find_out_of_bounds(areas: List[dict], image_path: str,
                       logger: ConsoleLoggerService) -> List[AreaWarning]:
    image = PillowImageService(logger).load_image(image_path)
    if image.is_failure:
        raise CheckError(f"Unable to read map image at {os.path.abspath(image_path)}: {image.error.message}")

    region_service = RegionService(TolerantJsonParser(logger), RegionSchemaValidator(logger), logger)
    warnings = []
    for index, area in enumerate(areas, start=1):
        region = Region(
            name=area.get("name") or f"#{index}",
            x=coerce_number(area["x"]),
            y=coerce_number(area["y"]),
            width=coerce_number(area["width"]),
            height=coerce_number(area["height"]),
            match_field=area.get("matchField"),
        )
        violations = region_service.validate_bounds(
            region, image.value.natural_width, image.value.natural_height)
        warnings.extend((region.name, violation) for violation in violations)
    return warnings


def run_cli(data_path: str, areas_path: str, image_path: Optional[str] = None,
            log_level: int = logging.WARNING) -> int:
    # Diagnostics go to stderr; stdout carries the report
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr)
    logger = ConsoleLoggerService(level=log_level, name="yardmap.validate", use_root_handlers=True)

    try:
        areas_content = read_file(areas_path, "interactive areas file")
        data_content = read_file(data_path, "data file")

        areas = check_areas_shape(parse_json_array(areas_content, "interactive areas"))
        data = check_data_objects(parse_json_array(data_content, "data array"))

        warnings = find_unmatched(areas, data, RecordMatcher(logger))
        if image_path:
            warnings.extend(find_out_of_bounds(areas, image_path, logger))
    except CheckError as e:
        print(str(e), file=sys.stderr)
        return 1

    logger.info(f"Checked {len(areas)} areas against {len(data)} records", warnings=len(warnings))

    if not warnings:
        print(SUCCESS_MESSAGE)
    else:
        print(WARNING_HEADER)
        for label, message in warnings:
            print(f" - {label}: {message}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return run_cli(args.data, args.areas, args.image, getattr(logging, args.log_level))


if __name__ == "__main__":
    sys.exit(main())
