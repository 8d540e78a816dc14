# yardmap/infrastructure/matching/record_matcher.py
import math
import re
from typing import Any, List, Optional

from yardmap.domain.models.map_config import DEFAULT_MATCH_FIELD
from yardmap.domain.models.region_model import MatchResult, Record, Region
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_matcher_service import IMatcherService

WHITESPACE_RUN = re.compile(r"\s+")


def normalize_value(value: Any) -> str:
    """'  Pier   A ' -> 'pier a'"""
    if value is None:
        return ""
    return WHITESPACE_RUN.sub(" ", str(value).strip()).lower()


def is_blank(value: Any) -> bool:
    """Absent, null, empty and zero values never take part in matching."""
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


class RecordMatcher(IMatcherService):
    """
    Associates records with regions by loose text comparison.

    A record matches when its normalized field value equals the normalized
    target, contains it, or is contained in it. Results are recomputed on
    every call.
    """

    def __init__(self, logger: ILoggerService, default_match_field: str = DEFAULT_MATCH_FIELD):
        self.logger = logger
        self.default_match_field = default_match_field

    def normalize(self, value: Any) -> str:
        return normalize_value(value)

    def find_matches(self, records: Optional[List[Record]], match_field: str,
                     match_value: Any) -> List[Record]:
        if not records or not isinstance(records, list):
            return []

        target = normalize_value(match_value)
        if not target:
            # An empty target would be contained in every value
            self.logger.debug("Empty match value, no records matched", field=match_field)
            return []

        matches = []
        for record in records:
            if not isinstance(record, dict):
                continue
            field_value = record.get(match_field)
            if is_blank(field_value):
                continue
            candidate = normalize_value(field_value)
            if not candidate:
                continue
            if candidate == target or target in candidate or candidate in target:
                matches.append(record)
        return matches

    def match_region(self, records: Optional[List[Record]], region: Region) -> MatchResult:
        match_field = (region.match_field or "").strip() or self.default_match_field
        match_value = region.effective_match_value
        matches = self.find_matches(records, match_field, match_value)
        self.logger.debug(f"Region '{region.name}' matched {len(matches)} records",
                          field=match_field, value=match_value)
        return MatchResult(
            region=region,
            match_field=match_field,
            match_value=match_value,
            records=matches,
        )
