"""Per-document memoization of tracking results and diagnostics.

Entries are keyed by document URI and always checked against the document
version, so a result computed for one version is never served for another.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Optional

from lsprotocol import types as lsp

from .tracker import TrackingState

logger = logging.getLogger("slim-tools.cache")

DEFAULT_CAPACITY = 50


@dataclass
class CacheEntry:
    version: int
    tracking_state: Optional[TrackingState] = None
    diagnostics: Optional[list[lsp.Diagnostic]] = None


@dataclass(frozen=True)
class CacheStats:
    size: int
    entries: tuple[str, ...]
    capacity: int
    hits: int
    misses: int
    hit_rate: float
    evictions: int


class DocumentCache:
    """Fixed-capacity LRU over :class:`CacheEntry`.

    A read hit moves the document to the most-recently-used end; inserting a
    new document at capacity evicts the least recently used one. A write for
    an older version than the cached one is dropped.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __len__(self):
        return len(self._entries)

    def __contains__(self, uri: str):
        return uri in self._entries

    # --- reads ---

    def get_tracking_state(self, uri: str, version: int) -> Optional[TrackingState]:
        return self._read(uri, version, "tracking_state")

    def get_diagnostics(self, uri: str, version: int) -> Optional[list[lsp.Diagnostic]]:
        return self._read(uri, version, "diagnostics")

    def _read(self, uri: str, version: int, field_name: str) -> Any:
        entry = self._entries.get(uri)
        value = getattr(entry, field_name) if entry and entry.version == version else None
        if value is None:
            self.misses += 1
            return None
        self.hits += 1
        self._entries.move_to_end(uri)
        return value

    # --- writes ---

    def set_tracking_state(self, uri: str, version: int, state: TrackingState):
        self._write(uri, version, "tracking_state", state)

    def set_diagnostics(self, uri: str, version: int, diagnostics: list[lsp.Diagnostic]):
        self._write(uri, version, "diagnostics", diagnostics)

    def _write(self, uri: str, version: int, field_name: str, value: Any):
        if self.capacity <= 0:
            return
        entry = self._entries.get(uri)
        if entry is not None and entry.version > version:
            logger.debug("Ignoring stale %s for %s (v%d < cached v%d)",
                         field_name, uri, version, entry.version)
            return

        if entry is None or entry.version < version:
            if entry is None and len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug("Evicted %s", evicted)
            entry = CacheEntry(version)
            self._entries[uri] = entry

        setattr(entry, field_name, value)
        self._entries.move_to_end(uri)

    def delete(self, uri: str):
        self._entries.pop(uri, None)

    def clear(self):
        self._entries.clear()
        self.hits = self.misses = self.evictions = 0

    def stats(self) -> CacheStats:
        lookups = self.hits + self.misses
        return CacheStats(
            size=len(self._entries),
            entries=tuple(self._entries),
            capacity=self.capacity,
            hits=self.hits,
            misses=self.misses,
            hit_rate=self.hits / lookups if lookups else 0.0,
            evictions=self.evictions,
        )
