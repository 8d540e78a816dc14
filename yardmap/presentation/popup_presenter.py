# yardmap/presentation/popup_presenter.py
"""
Popup content and placement for hovered regions.

Everything here is plain Python so it can be tested without a display; the
Qt surface only receives the finished title, HTML body and position.
"""
import html
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from yardmap.domain.models.region_model import MatchResult

POPUP_CURSOR_OFFSET = 15

DOTTED_DATE_TIME = re.compile(
    r"(\d{1,2})\.(\d{1,2})\.(\d{4})\s+(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?"
)


def parse_date_time(value: Any) -> Optional[datetime]:
    """
    Read ISO timestamps ("2024-03-05T14:30") and "05.03.2024 14:30[:15]".

    Returns None when the value is empty or cannot be read.
    """
    if not value:
        return None
    text = str(value).strip()

    if "-" in text or "T" in text:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed.astimezone() if parsed.tzinfo else parsed

    match = DOTTED_DATE_TIME.search(text)
    if match:
        day, month, year, hour, minute, second = match.groups()
        try:
            return datetime(int(year), int(month), int(day),
                            int(hour), int(minute), int(second or 0))
        except ValueError:
            return None

    return None


def format_date_time(value: Any) -> str:
    """Render as "DD.MM.YYYY, HH:MM"; unreadable values are returned verbatim."""
    if not value:
        return ""
    parsed = parse_date_time(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%d.%m.%Y, %H:%M")


def compute_popup_position(cursor: Tuple[int, int], popup_size: Tuple[int, int],
                           viewport_size: Tuple[int, int],
                           offset: int = POPUP_CURSOR_OFFSET) -> Tuple[int, int]:
    """
    Top-left corner for the popup: below-right of the cursor, flipped to the
    other side on each axis where it would leave the viewport.
    """
    cursor_x, cursor_y = cursor
    popup_width, popup_height = popup_size
    viewport_width, viewport_height = viewport_size

    left = cursor_x + offset
    top = cursor_y + offset

    if left + popup_width > viewport_width:
        left = cursor_x - popup_width - offset
    if top + popup_height > viewport_height:
        top = cursor_y - popup_height - offset

    return left, top


class PopupPresenter:
    """Turns a MatchResult into the popup title and HTML body."""

    NO_DATA = "No data to display"

    def __init__(self, detail_fields: List[Dict[str, str]]):
        self.detail_fields = detail_fields

    def build(self, match: Optional[MatchResult], region_name: str) -> Tuple[str, str]:
        """
        Args:
            match: Match for the hovered region, or None when no dataset is loaded
            region_name: Title of the popup

        Returns:
            (title, html_body)
        """
        if match is None:
            return region_name, self._no_data(self.NO_DATA)

        if not match.has_matches:
            message = f'No matches for "{match.match_field}" = "{match.match_value}"'
            return region_name, self._no_data(message)

        items = [self._render_record(index, record)
                 for index, record in enumerate(match.records, start=1)]
        return region_name, "".join(items)

    def _render_record(self, index: int, record: Dict[str, Any]) -> str:
        rows = [f'<div class="popup-item-title"><b>Record {index}</b></div>']
        for detail in self.detail_fields:
            value = record.get(detail["field"])
            if not value:
                continue
            if detail.get("format") == "datetime":
                value = format_date_time(value)
            label = html.escape(str(detail.get("label") or detail["field"]))
            rows.append(
                f'<div class="popup-item-detail"><b>{label}:</b> {html.escape(str(value))}</div>'
            )
        return f'<div class="popup-item">{"".join(rows)}</div>'

    @staticmethod
    def _no_data(message: str) -> str:
        return f'<div class="popup-no-data">{html.escape(message)}</div>'
