"""City suggestion matching, scoring and ranking."""

from typing import Iterable, List, Optional

from app.models.city import CityRecord, parse_float
from app.models.suggestion import CityQuery, Suggestion, narrow_to_float32

LATITUDE_RANGE = 180.0
LONGITUDE_RANGE = 360.0
ALTERNATE_NAMES_SEPARATOR = ","
FINAL_SIGMA = "ς"
SIGMA = "σ"


def parse_coordinate(text: str) -> Optional[float]:
    """Parse a coordinate hint from the query, None when absent or invalid."""
    return parse_float(text)


def _lower_char(char: str) -> str:
    lowered = char.lower()[0]
    return SIGMA if lowered == FINAL_SIGMA else lowered


def lower_name(text: str) -> str:
    """Lower-case a name one code point at a time.

    The result always has the same length as the input, so positions found in
    it are valid in the original text. Final and medial sigma compare equal.

    Args:
        text: Name as stored or typed.

    Returns:
        The lower-cased name.
    """
    return "".join(_lower_char(char) for char in text)


def extract_alternate_name(alternate_names: str, query_name: str) -> str:
    """Return the comma-delimited alternate name containing the query.

    Args:
        alternate_names: Comma-separated alias list of a record.
        query_name: Query name lower-cased with lower_name.

    Returns:
        The alias enclosing the first match, without the delimiting commas.

    Raises:
        ValueError: If the query does not occur in the alias list.
    """
    match_start = lower_name(alternate_names).index(query_name)
    match_end = match_start + len(query_name)

    word_start = alternate_names.rfind(ALTERNATE_NAMES_SEPARATOR, 0, match_start) + 1
    word_end = alternate_names.find(ALTERNATE_NAMES_SEPARATOR, match_end)
    if word_end < 0:
        word_end = len(alternate_names)
    return alternate_names[word_start:word_end]


def match_record(record: CityRecord, query_name: str) -> Optional[str]:
    """Find the word of a record matched by the query name.

    Fields are tried in order name, ASCII name, alternate names and the first
    one containing the query wins.

    Args:
        record: City record to test.
        query_name: Non-empty query name lower-cased with lower_name.

    Returns:
        The matched word used for scoring, or None when nothing matches.
    """
    if query_name in lower_name(record.name):
        return record.name
    if query_name in lower_name(record.ascii_name):
        return record.ascii_name
    if query_name in lower_name(record.alternate_names):
        return extract_alternate_name(record.alternate_names, query_name)
    return None


def matching_char_weight(query_name: str, matched_word: str) -> float:
    """Ratio of query length to matched word length, in code points."""
    return len(query_name) / len(matched_word)


def latitude_weight(query_latitude: Optional[float], record: CityRecord) -> float:
    """Latitude closeness in [0, 1] for real coordinates, 1.0 without a hint."""
    if query_latitude is None:
        return 1.0
    return 1 - abs(query_latitude - record.latitude) / LATITUDE_RANGE


def longitude_weight(query_longitude: Optional[float], record: CityRecord) -> float:
    """Longitude closeness in [0, 1] for real coordinates, 1.0 without a hint."""
    if query_longitude is None:
        return 1.0
    return 1 - abs(query_longitude - record.longitude) / LONGITUDE_RANGE


def compute_score(
    query_name: str,
    matched_word: str,
    record: CityRecord,
    query_latitude: Optional[float] = None,
    query_longitude: Optional[float] = None,
) -> float:
    """Score a match by name closeness and distance to the location hint.

    Returns:
        The product of the three weights, narrowed to float32.
    """
    score = (
        matching_char_weight(query_name, matched_word)
        * latitude_weight(query_latitude, record)
        * longitude_weight(query_longitude, record)
    )
    return narrow_to_float32(score)


def find_suggestions(query: CityQuery, records: Iterable[CityRecord]) -> List[Suggestion]:
    """Return every record matching the query, in record order."""
    if not query.name:
        return []

    query_name = lower_name(query.name)
    query_latitude = parse_coordinate(query.latitude)
    query_longitude = parse_coordinate(query.longitude)

    suggestions = []
    for record in records:
        matched_word = match_record(record, query_name)
        if matched_word is None:
            continue
        suggestions.append(
            Suggestion(
                name=record.display_name,
                latitude=record.latitude,
                longitude=record.longitude,
                score=compute_score(
                    query_name, matched_word, record, query_latitude, query_longitude
                ),
            )
        )
    return suggestions


def find_ranked_suggestions(
    query: CityQuery, records: Iterable[CityRecord]
) -> List[Suggestion]:
    """Return matching suggestions sorted by descending score.

    Args:
        query: Raw query with name and optional latitude/longitude hints.
        records: City records to scan.

    Returns:
        Suggestions ordered best first; equal scores keep record order.
    """
    suggestions = find_suggestions(query, records)
    return sorted(suggestions, key=lambda suggestion: suggestion.score, reverse=True)
