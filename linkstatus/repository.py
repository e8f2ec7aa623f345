"""In-memory store of link sets, persisted to JSON files."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable

from linkstatus.models import sort_strings

HASH_TO_LINK_NUM_FILE = "hash_to_link_num.json"
LINK_NUM_TO_LINKS_FILE = "link_num_to_links.json"

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK64 = 2**64 - 1

logger = logging.getLogger(__name__)


def hash_links(links: Iterable[str]) -> int:
    """64-bit FNV-1a hash of the links concatenated in the given order."""
    value = _FNV64_OFFSET
    for byte in "".join(links).encode("utf-8"):
        value = ((value ^ byte) * _FNV64_PRIME) & _MASK64
    return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class LinkRepository:
    """Assigns numbers to link sets and keeps the links of each set."""

    def __init__(self, data_dir: str | Path = "data") -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self._counter = 1
        self._hash_to_link_num: dict[int, int] = {}
        self._link_num_to_links: dict[int, list[str]] = {}

    def get_link_num(self, links: list[str]) -> tuple[int, bool]:
        """Return the number of this link set and whether it was just assigned.

        The given list is sorted in place.
        """
        link_hash = hash_links(sort_strings(links))
        with self._lock:
            existing = self._hash_to_link_num.get(link_hash)
            if existing is not None:
                return existing, False
            link_num = self._counter
            self._hash_to_link_num[link_hash] = link_num
            self._counter += 1
            return link_num, True

    def store_links(self, links: list[str], link_num: int) -> None:
        """Store the links (sorted in place) under the given number."""
        sorted_links = sort_strings(links)
        with self._lock:
            self._link_num_to_links[link_num] = list(sorted_links)

    def get_links_by_link_num(self, link_num: int) -> list[str]:
        """Return the links stored under the number, or an empty list."""
        with self._lock:
            return list(self._link_num_to_links.get(link_num, []))

    def store_data_to_json(self) -> None:
        """Write both maps to JSON files in the data directory."""
        with self._lock:
            hashes = {str(h): num for h, num in self._hash_to_link_num.items()}
            link_sets = {str(num): list(links) for num, links in self._link_num_to_links.items()}
        self._save(self.data_dir / HASH_TO_LINK_NUM_FILE, hashes)
        self._save(self.data_dir / LINK_NUM_TO_LINKS_FILE, link_sets)

    @staticmethod
    def _save(path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
        logger.info("Successfully saved data to %s.", path)

    def load_data_from_json(self) -> None:
        """Load both maps from the data directory; missing files are skipped."""
        try:
            hashes = self._parse_hashes(self._load(self.data_dir / HASH_TO_LINK_NUM_FILE))
        except (OSError, ValueError) as exc:
            raise ValueError(f"failed to load hash_to_link_num data: {exc}") from exc
        try:
            link_sets = self._parse_link_sets(self._load(self.data_dir / LINK_NUM_TO_LINKS_FILE))
        except (OSError, ValueError) as exc:
            raise ValueError(f"failed to load link_num_to_links data: {exc}") from exc

        with self._lock:
            self._hash_to_link_num.update(hashes)
            self._link_num_to_links.update(link_sets)
            self._counter = max([0, *link_sets]) + 1

    @staticmethod
    def _load(path: Path) -> Any:
        if not path.exists():
            logger.info("Data file %s not found, skipping load.", path)
            return None
        text = path.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"failed to unmarshal JSON data from {path}: {exc}") from exc
        logger.info("Successfully loaded data from %s.", path)
        return data

    @staticmethod
    def _parse_hashes(data: Any) -> dict[int, int]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object of hashes")
        result = {}
        for key, value in data.items():
            if not key.isascii() or not key.isdigit() or int(key) > _MASK64:
                raise ValueError(f"invalid hash key {key!r}")
            if value is None:
                value = 0
            if not _is_int(value):
                raise ValueError(f"invalid link number {value!r} for hash {key}")
            result[int(key)] = value
        return result

    @staticmethod
    def _parse_link_sets(data: Any) -> dict[int, list[str]]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object of link sets")
        result = {}
        for key, value in data.items():
            try:
                link_num = int(key)
            except ValueError as exc:
                raise ValueError(f"invalid link number key {key!r}") from exc
            if value is None:
                value = []
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"invalid links for link number {key}")
            result[link_num] = value
        return result