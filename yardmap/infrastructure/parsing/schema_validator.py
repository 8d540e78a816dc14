# yardmap/infrastructure/parsing/schema_validator.py
"""
Schema validation for region definitions.

Note: validate_regions() mutates its input. The numeric fields of every
definition are replaced by their coerced float values, so callers holding the
parsed dictionaries see the coerced numbers afterwards.
"""
import math
from typing import Any, Dict, List

from yardmap.domain.common.errors import SchemaError
from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Region
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_schema_validator_service import ISchemaValidatorService

REQUIRED_FIELDS = ("name", "x", "y", "width", "height", "matchField")
NUMERIC_FIELDS = ("x", "y", "width", "height")
PROPERTY_TYPES = {
    "name": "string",
    "x": "number",
    "y": "number",
    "width": "number",
    "height": "number",
    "matchField": "string",
    "matchValue": "string",
}


def coerce_number(value: Any) -> float:
    """
    Convert a coordinate to a float, accepting a comma as decimal separator.

    Values that do not read as a number become NaN; bounds validation
    reports them later.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip().replace(",", ".", 1)
    if not text:
        return 0.0
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def has_type(value: Any, type_name: str) -> bool:
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, str)


class RegionSchemaValidator(ISchemaValidatorService):
    """Checks required fields and value types of region definitions."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger

    def validate_regions(self, definitions: Any) -> Result[List[Region]]:
        if not isinstance(definitions, list):
            return Result.fail(SchemaError(
                message="Interactive regions must be an array of objects.",
                details={"type": type(definitions).__name__}
            ))

        for position, definition in enumerate(definitions, start=1):
            check = self._validate_definition(definition, position)
            if check.is_failure:
                self.logger.error(str(check.error), index=position)
                return Result.fail(check.error)

        regions = [Region.from_dict(definition) for definition in definitions]
        self.logger.debug(f"Validated {len(regions)} region definitions")
        return Result.ok(regions)

    @staticmethod
    def _validate_definition(definition: Any, index: int) -> Result[Dict[str, Any]]:
        if not isinstance(definition, dict):
            return Result.fail(SchemaError(
                message=f"Region #{index} must be an object.",
                details={"index": index}
            ))

        for field in REQUIRED_FIELDS:
            if field not in definition:
                return Result.fail(SchemaError(
                    message=f'Region #{index} is missing required field "{field}".',
                    details={"index": index, "field": field}
                ))

        for field in NUMERIC_FIELDS:
            definition[field] = coerce_number(definition[field])

        for field, type_name in PROPERTY_TYPES.items():
            if field in definition and not has_type(definition[field], type_name):
                return Result.fail(SchemaError(
                    message=f'Field "{field}" in region #{index} must be of type {type_name}.',
                    details={"index": index, "field": field, "expected": type_name}
                ))

        return Result.ok(definition)
