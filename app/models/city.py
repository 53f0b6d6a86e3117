"""City record model for gazetteer rows."""

import math
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

NAME_INDEX = 1
ASCII_NAME_INDEX = 2
ALTERNATE_NAMES_INDEX = 3
LATITUDE_INDEX = 4
LONGITUDE_INDEX = 5
COUNTRY_CODE_INDEX = 8
ADMIN1_CODE_INDEX = 10

MISSING_TEXT = "-"
MISSING_COORDINATE = 0.0


def parse_float(text: str) -> Optional[float]:
    """Parse a finite decimal number, returning None when it is not one.

    Surrounding whitespace and digit separators are rejected.
    """
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _text_at(row: Sequence[str], index: int) -> str:
    return row[index] if len(row) > index else MISSING_TEXT


def _coordinate_at(row: Sequence[str], index: int) -> float:
    if len(row) <= index:
        return MISSING_COORDINATE
    value = parse_float(row[index])
    return MISSING_COORDINATE if value is None else value


class CityRecord(BaseModel):
    """One city from the gazetteer, immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    name: str = MISSING_TEXT
    ascii_name: str = MISSING_TEXT
    alternate_names: str = MISSING_TEXT
    latitude: float = MISSING_COORDINATE
    longitude: float = MISSING_COORDINATE
    country_code: str = MISSING_TEXT
    admin1_code: str = MISSING_TEXT

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "CityRecord":
        """Create a CityRecord from a GeoNames-style row.

        Args:
            row: Tab-separated fields of one gazetteer line, any width.

        Returns:
            A CityRecord with defaults for missing or unparsable fields.
        """
        return cls(
            name=_text_at(row, NAME_INDEX),
            ascii_name=_text_at(row, ASCII_NAME_INDEX),
            alternate_names=_text_at(row, ALTERNATE_NAMES_INDEX),
            latitude=_coordinate_at(row, LATITUDE_INDEX),
            longitude=_coordinate_at(row, LONGITUDE_INDEX),
            country_code=_text_at(row, COUNTRY_CODE_INDEX),
            admin1_code=_text_at(row, ADMIN1_CODE_INDEX),
        )

    @property
    def display_name(self) -> str:
        """Human-readable "<name>, <admin1 code>, <country code>" label."""
        return f"{self.name}, {self.admin1_code}, {self.country_code}"
