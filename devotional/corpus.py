"""Loader for the devotional corpus (local JSON file or HTTP)."""

import json
import logging
from pathlib import Path
from typing import Any

import requests

from .config import DEFAULT_EXPECTED_ITEMS
from .errors import DataUnavailable
from .models import CorpusItem

logger = logging.getLogger(__name__)

# JSON key -> (CorpusItem field, expected type)
FIELD_MAP: dict[str, tuple[str, type]] = {
    "capitulo_titulo": ("chapter_title", str),
    "capitulo_num": ("chapter_number", int),
    "paragrafo_num": ("paragraph_number", int),
    "texto_wcf": ("text", str),
    "referencias_biblicas": ("references", str),
    "comentario_devocional": ("commentary", str),
}


def parse_item(record: Any, position: int) -> CorpusItem:
    """Convert one JSON record into a CorpusItem."""
    if not isinstance(record, dict):
        raise DataUnavailable(f"Record {position} is not an object")

    values: dict[str, Any] = {}
    for key, (field, expected) in FIELD_MAP.items():
        if key not in record:
            raise DataUnavailable(f"Record {position} is missing '{key}'")
        value = record[key]
        # bool is an int subclass but never a valid number here
        if not isinstance(value, expected) or isinstance(value, bool):
            raise DataUnavailable(
                f"Record {position} field '{key}' should be {expected.__name__}"
            )
        values[field] = value
    return CorpusItem(**values)


def parse_items(records: Any) -> tuple[CorpusItem, ...]:
    """Convert the decoded data file into an ordered corpus."""
    if not isinstance(records, list):
        raise DataUnavailable("Data file must contain a JSON array")
    return tuple(parse_item(record, i) for i, record in enumerate(records))


class CorpusClient:
    """Fetches the corpus once and keeps it for the session."""

    def __init__(
        self,
        source: str | Path,
        expected_count: int = DEFAULT_EXPECTED_ITEMS,
        timeout: int = 10,
    ):
        self.source = str(source)
        self.expected_count = expected_count
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "WCFDevotionalPlan/1.0"})
        adapter = requests.adapters.HTTPAdapter(max_retries=1)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self._items: tuple[CorpusItem, ...] | None = None

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    @property
    def items(self) -> tuple[CorpusItem, ...]:
        """Load and cache the corpus."""
        if self._items is None:
            self._items = self.load()
        return self._items

    def _fetch_remote(self) -> Any:
        try:
            response = self.session.get(self.source, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DataUnavailable(f"Failed to fetch {self.source}: {e}") from e
        try:
            return response.json()
        except ValueError as e:
            raise DataUnavailable(f"Invalid JSON from {self.source}: {e}") from e

    def _read_local(self) -> Any:
        path = Path(self.source)
        if not path.exists():
            raise DataUnavailable(f"Data file not found at {path}")
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise DataUnavailable(f"Failed to read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise DataUnavailable(f"Invalid JSON in {path}: {e}") from e

    def load(self) -> tuple[CorpusItem, ...]:
        """Fetch, parse and validate the corpus."""
        raw = self._fetch_remote() if self.is_remote else self._read_local()
        items = parse_items(raw)

        if len(items) != self.expected_count:
            raise DataUnavailable(
                f"Incomplete data: expected {self.expected_count} records, "
                f"got {len(items)}"
            )

        logger.info(f"Loaded {len(items)} paragraphs from {self.source}")
        return items
