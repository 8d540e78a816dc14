# yardmap/domain/services/i_matcher_service.py
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from yardmap.domain.models.region_model import MatchResult, Record, Region


class IMatcherService(ABC):
    """Finds the records associated with a region."""

    @abstractmethod
    def normalize(self, value: Any) -> str:
        """Text form used for comparison: trimmed, single-spaced, lowercase."""
        pass

    @abstractmethod
    def find_matches(self, records: Optional[List[Record]], match_field: str,
                     match_value: Any) -> List[Record]:
        """
        Return the records whose match_field value matches match_value.

        Two values match when their normalized forms are equal or one
        contains the other. Input order is preserved.
        """
        pass

    @abstractmethod
    def match_region(self, records: Optional[List[Record]], region: Region) -> MatchResult:
        """Match a region against the records using its effective match value."""
        pass
