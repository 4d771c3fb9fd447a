"""Bounded LRU cache for parsed candidate names."""
import logging
import threading
from collections import OrderedDict

from plantmatch.matching.name_parser import PlantNameComponents, parse_plant_name

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 10_000


class ParsedNameCache:
    """Read/write cache of parsed names, keyed by the raw name string.

    Least recently used entries are evicted once ``max_size`` is reached.
    Safe to share between threads.
    """

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._entries: OrderedDict[str, PlantNameComponents] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def get(self, name: str) -> PlantNameComponents | None:
        with self._lock:
            components = self._entries.get(name)
            if components is None:
                self.misses += 1
                return None
            self._entries.move_to_end(name)
            self.hits += 1
            return components

    def put(self, name: str, components: PlantNameComponents) -> None:
        with self._lock:
            self._entries[name] = components
            self._entries.move_to_end(name)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted parsed name %r", evicted)

    def parse(self, name: str) -> PlantNameComponents:
        """Parse through the cache."""
        components = self.get(name)
        if components is None:
            components = parse_plant_name(name)
            self.put(name, components)
        return components

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
