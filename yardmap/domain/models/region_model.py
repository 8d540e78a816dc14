# yardmap/domain/models/region_model.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# One dataset row, keyed by field name. Values are str or numbers.
Record = Dict[str, Any]


@dataclass
class Region:
    """Clickable rectangle over the map image, in the image's natural pixels."""
    name: str
    x: float
    y: float
    width: float
    height: float
    match_field: str  # Record field the region is matched against
    match_value: Optional[str] = None  # Defaults to name when absent

    @property
    def coordinates(self) -> Tuple[float, float, float, float]:
        """(x, y, width, height)"""
        return self.x, self.y, self.width, self.height

    @property
    def effective_match_value(self) -> str:
        if self.match_value is None:
            return self.name
        return self.match_value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Region':
        """Build a region from an already validated definition (wire field names)."""
        return cls(
            name=data["name"],
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            match_field=data["matchField"],
            match_value=data.get("matchValue"),
        )


@dataclass
class MatchResult:
    """
    Records associated with a region.

    Attributes:
        region: The region that was hovered or checked
        match_field: Field that was compared
        match_value: Value the records were compared against
        records: Matching records in dataset order
    """
    region: Region
    match_field: str
    match_value: str
    records: List[Record] = field(default_factory=list)

    @property
    def has_matches(self) -> bool:
        return len(self.records) > 0
