# yardmap/domain/services/i_schema_validator_service.py
from abc import ABC, abstractmethod
from typing import Any, List

from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Region


class ISchemaValidatorService(ABC):
    """Checks region definitions for required fields and value types."""

    @abstractmethod
    def validate_regions(self, definitions: Any) -> Result[List[Region]]:
        """
        Validate region definitions and coerce their numeric fields.

        The numeric fields of the input dictionaries are rewritten in place.

        Args:
            definitions: Parsed region definitions (expected to be a list of dicts)

        Returns:
            Result containing Region models, or a SchemaError naming the
            1-based index and the offending field
        """
        pass
