"""
History Log

Per-project sequence of raw write snapshots, oldest first on disk and
capped at MAX_HISTORY_ENTRIES with FIFO eviction.
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, List

from ..schemas.sync import HistoryEntry, parse_timestamp
from .base import CollectionStore

logger = logging.getLogger(__name__)

MAX_HISTORY_ENTRIES = 50
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100

_INT_PREFIX = re.compile(r"^\s*([+-]?)([0-9]+)")
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

# Longer digit runs are saturated rather than converted
_MAX_DIGITS = 9


def parse_int(value: Any, default: int = 0) -> int:
    """
    Leading-integer parse of a query value.

    "12" -> 12, "12abc" -> 12, "abc" / None -> default. Real ints pass
    through; booleans are not numbers here. Only ASCII digits count, and
    absurdly long digit runs saturate at +/- 10**9.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if not isinstance(value, str):
        return default
    match = _INT_PREFIX.match(value)
    if not match:
        return default
    sign = -1 if match.group(1) == "-" else 1
    digits = match.group(2).lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        return sign * 10 ** _MAX_DIGITS
    return sign * int(digits)


def clamp_limit(value: Any) -> int:
    """
    Normalise a history limit to [1, MAX_HISTORY_LIMIT].

    Non-numeric or non-positive input falls back to DEFAULT_HISTORY_LIMIT;
    anything above the maximum is clamped to it.
    """
    limit = parse_int(value, default=0)
    if limit < 1:
        return DEFAULT_HISTORY_LIMIT
    return min(limit, MAX_HISTORY_LIMIT)


class HistoryLog(CollectionStore):
    """Owns HistoryEntry sequences. Never references live project records."""

    collection = "history"

    async def append(self, name: str, entry: HistoryEntry) -> int:
        """Append entry, evict the oldest beyond the cap, persist. Returns the new length."""
        async with self._lock:
            history = await self._load()
            entries = history.get(name)
            if not isinstance(entries, list):
                entries = []
            entries.append(entry.to_document())
            if len(entries) > MAX_HISTORY_ENTRIES:
                evicted = len(entries) - MAX_HISTORY_ENTRIES
                entries = entries[-MAX_HISTORY_ENTRIES:]
                logger.debug(f"Evicted {evicted} history entries for '{name}'")
            history[name] = entries
            await self._save(history)
        return len(entries)

    async def list(self, name: str, limit: Any = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
        """Entries for name, newest synced_at first, at most clamp_limit(limit)."""
        history = await self._load()
        entries = history.get(name)
        if not isinstance(entries, list):
            return []
        ordered = sorted(
            (entry for entry in entries if isinstance(entry, dict)),
            key=lambda entry: parse_timestamp(entry.get("synced_at")) or _OLDEST,
            reverse=True,
        )
        return [HistoryEntry.model_validate(entry) for entry in ordered[:clamp_limit(limit)]]

    async def delete_all(self, name: str) -> bool:
        """Drop the whole sequence for name. Returns whether it existed."""
        async with self._lock:
            history = await self._load()
            existed = history.pop(name, None) is not None
            await self._save(history)
        return existed
