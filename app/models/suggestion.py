"""Query and suggestion models for the suggestions endpoint."""

import math
import struct
from typing import List

from pydantic import BaseModel, field_serializer

FLOAT32_MAX = 3.4028234663852886e38


def narrow_to_float32(value: float) -> float:
    """Round a float to the nearest float32 value.

    Args:
        value: Double precision value.

    Returns:
        The float32 value as a Python float, +/-inf when out of range.
    """
    if math.isfinite(value) and abs(value) > FLOAT32_MAX:
        return math.copysign(math.inf, value)
    return struct.unpack("f", struct.pack("f", value))[0]


def shortest_float32_repr(value: float) -> float:
    """Return the shortest decimal that narrows back to the same float32."""
    if not math.isfinite(value):
        return value
    for digits in range(1, 10):
        candidate = float(f"{value:.{digits}g}")
        if narrow_to_float32(candidate) == value:
            return candidate
    return value


class CityQuery(BaseModel):
    """Raw suggestion query as received from the caller."""

    name: str = ""
    latitude: str = ""
    longitude: str = ""


class Suggestion(BaseModel):
    """A single ranked city suggestion."""

    name: str
    latitude: float
    longitude: float
    score: float

    @field_serializer("score")
    def serialize_score(self, score: float) -> float:
        return shortest_float32_repr(score)


class Suggestions(BaseModel):
    """Ranked suggestion list, best match first."""

    suggestions: List[Suggestion] = []
