# yardmap/domain/services/i_record_parser_service.py
"""
Parser interface for loosely formatted array-of-objects text.

Upstream exports are sometimes near-JSON: unquoted keys and values, and
decimal commas. Implementations try strict JSON first and fall back to a
repair pass.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Record


class IRecordParserService(ABC):
    """Interface for tolerant text parsing."""

    @abstractmethod
    def parse_array(self, text: str) -> Result[List[Any]]:
        """
        Parse text that should encode an array of flat objects.

        Args:
            text: Raw JSON or near-JSON text

        Returns:
            Result containing the parsed list, or a ParseError
        """
        pass

    @abstractmethod
    def parse_records(self, text: Optional[str]) -> Result[Optional[List[Record]]]:
        """
        Parse a record dataset.

        Args:
            text: Raw dataset text

        Returns:
            Result containing the records, None when no text was supplied,
            or a ParseError
        """
        pass
