"""Gazetteer loading and the read-only city record store."""

import csv
import hashlib
import os
from typing import Iterator, List, Sequence

from app.logging_config import logger
from app.models.city import CityRecord
from app.models.suggestion import CityQuery, Suggestion
from app.suggestion_service.engine import find_ranked_suggestions

GAZETTEER_PATH = os.getenv("GAZETTEER_PATH", "data/cities.tsv")


class GazetteerLoadError(Exception):
    """Raised when the gazetteer file cannot be read or parsed."""
    pass


class CityRepository:
    """Immutable, ordered snapshot of gazetteer city records."""

    def __init__(self, records: Sequence[CityRecord]):
        self._records = tuple(records)
        self.fingerprint = self._fingerprint_of(self._records)

    def __iter__(self) -> Iterator[CityRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @staticmethod
    def _fingerprint_of(records) -> str:
        """Digest of the record contents, used to scope cached results."""
        digest = hashlib.sha256()
        for record in records:
            digest.update(record.model_dump_json().encode("utf-8"))
            digest.update(b"\n")
        return digest.hexdigest()[:16]

    def find_ranked_suggestions(self, query: CityQuery) -> List[Suggestion]:
        """Rank the records of this repository against a query."""
        return find_ranked_suggestions(query, self._records)

    @classmethod
    def from_tsv(cls, path: str) -> "CityRepository":
        """Load a repository from a tab-separated gazetteer file.

        Every non-blank line becomes a record. Quotes are kept as literal
        characters and rows may have any number of fields.

        Args:
            path: Location of the TSV file.

        Returns:
            A repository holding one record per line, in file order.

        Raises:
            GazetteerLoadError: If the file is missing, unreadable or malformed.
        """
        try:
            with open(path, newline="", encoding="utf-8") as tsv_file:
                reader = csv.reader(
                    tsv_file, delimiter="\t", quoting=csv.QUOTE_NONE, strict=True
                )
                records = [CityRecord.from_row(row) for row in reader if row]
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.error("GAZETTEER_LOAD_FAILED", path=path, error=str(exc))
            raise GazetteerLoadError(f"Could not load gazetteer: {path}") from exc

        repository = cls(records)
        logger.info(
            "GAZETTEER_LOADED",
            path=path,
            records=len(repository),
            fingerprint=repository.fingerprint,
        )
        return repository
