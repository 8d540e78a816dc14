# yardmap/infrastructure/parsing/tolerant_parser.py
"""
Tolerant parser for array-of-objects text.

Well-formed JSON goes through json.loads untouched. Anything else gets a
best-effort repair pass aimed at near-JSON exports such as

    [{name: Pier A, x: 10, y: 5,5}, {name: Pier B, x: 20, y: 7}]

The repair pass is not a grammar. Objects are split on "}" + "," + "{", so a
value containing a literal "},{" breaks the split; this is a known limitation.
"""
import json
import re
from typing import Any, List, Optional

from yardmap.domain.common.errors import ParseError
from yardmap.domain.common.result import Result
from yardmap.domain.models.region_model import Record
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_record_parser_service import IRecordParserService

OBJECT_SEPARATOR = re.compile(r"}\s*,\s*{")
UNQUOTED_KEY = re.compile(r"([{,]\s*)([^,{:]+?)(\s*:\s*)")
# A decimal-comma number has to be tried before the generic value, which
# stops at the first comma.
UNQUOTED_VALUE = re.compile(r":\s*(-?\d+,\d+(?=\s*[},])|[^,\"}{\[\]]+(?=\s*[},]))")
NUMERIC_VALUE = re.compile(r"^-?\d+(?:[.,]\d+)?$")

FRAGMENT_RADIUS = 40


class TolerantJsonParser(IRecordParserService):
    """Strict JSON first, repair pass second."""

    def __init__(self, logger: ILoggerService):
        self.logger = logger

    def parse_array(self, text: str) -> Result[List[Any]]:
        if not isinstance(text, str) or not text.strip():
            return Result.ok([])

        trimmed = text.strip()

        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError as e:
            self.logger.debug("Strict JSON parsing failed, running repair pass",
                              line=e.lineno, column=e.colno)
            return self._parse_repaired(trimmed)

        if isinstance(parsed, list):
            return Result.ok(parsed)

        # Valid JSON that is not an array, e.g. a single bare object
        self.logger.debug("Strict JSON is not an array, running repair pass",
                          type=type(parsed).__name__)
        return self._parse_repaired(trimmed)

    def parse_records(self, text: Optional[str]) -> Result[Optional[List[Record]]]:
        if not isinstance(text, str) or not text.strip():
            return Result.ok(None)

        result = self.parse_array(text)
        if result.is_success:
            self.logger.info(f"Parsed {len(result.value)} records")
        return result

    def repair(self, text: str) -> str:
        """
        Rewrite near-JSON array text into JSON text.

        Args:
            text: Text without strict JSON syntax

        Returns:
            JSON array text (not guaranteed to be valid)
        """
        cleaned = text.strip()
        if cleaned.startswith("["):
            cleaned = cleaned[1:]
        if cleaned.endswith("]"):
            cleaned = cleaned[:-1]
        if not cleaned.strip():
            return "[]"

        chunks = [self._rewrap_chunk(chunk) for chunk in OBJECT_SEPARATOR.split(cleaned)]
        return "[" + ",".join(self._quote_chunk(chunk) for chunk in chunks) + "]"

    def _parse_repaired(self, text: str) -> Result[List[Any]]:
        repaired = self.repair(text)
        try:
            parsed = json.loads(repaired)
        except json.JSONDecodeError as e:
            fragment = self._fragment_around(repaired, e.pos)
            error = ParseError(
                message=f"Unable to parse data after repair: {e.msg}",
                details={"fragment": fragment, "position": e.pos},
                inner_error=e
            )
            self.logger.error(str(error), fragment=fragment)
            return Result.fail(error)

        if not isinstance(parsed, list):
            return Result.fail(ParseError(
                message="Expected an array of objects",
                details={"fragment": self._fragment_around(repaired, 0)}
            ))

        self.logger.debug(f"Repair pass produced {len(parsed)} objects")
        return Result.ok(parsed)

    @staticmethod
    def _rewrap_chunk(chunk: str) -> str:
        normalized = chunk.strip()
        if not normalized.startswith("{"):
            normalized = "{" + normalized
        if not normalized.endswith("}"):
            normalized = normalized + "}"
        return normalized

    def _quote_chunk(self, chunk: str) -> str:
        escaped = chunk.replace("\\", "\\\\")
        with_keys = UNQUOTED_KEY.sub(self._quote_key, escaped)
        return UNQUOTED_VALUE.sub(self._quote_value, with_keys)

    @staticmethod
    def _quote_key(match) -> str:
        prefix, key, separator = match.groups()
        key = key.strip()
        if len(key) >= 2 and key.startswith('"') and key.endswith('"'):
            return f"{prefix}{key}{separator}"
        safe_key = key.replace('"', '\\"')
        return f'{prefix}"{safe_key}"{separator}'

    @staticmethod
    def _quote_value(match) -> str:
        value = match.group(1).strip()
        if NUMERIC_VALUE.match(value):
            return f": {value.replace(',', '.')}"
        safe_value = value.replace('"', '\\"')
        return f': "{safe_value}"'

    @staticmethod
    def _fragment_around(text: str, position: int) -> str:
        start = max(0, position - FRAGMENT_RADIUS)
        end = min(len(text), position + FRAGMENT_RADIUS)
        return text[start:end]
