"""Columnizer registry — discover, validate, and pick columnizers.

Discovery order:
  1. Built-in columnizers registered at import time.
  2. Entry-points under the "starborne.columnizers" group (third-party packages).
  3. Columnizers explicitly registered at runtime via ColumnizerRegistry.register().
"""
from __future__ import annotations

import importlib.metadata
import logging
from typing import Iterable

from ..columnizers.base import LogLineColumnizer
from ..columnizers.models import Priority
from ..columnizers.server import ServerColumnizer

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "starborne.columnizers"


class ColumnizerRegistry:
    """Central registry of columnizers, keyed by name.

    Usage::

        registry = ColumnizerRegistry()
        registry.discover()  # loads entry-point columnizers

        columnizer, priority = registry.select("Prosper.log", sample_lines)
        if priority is Priority.NOT_SUPPORTED:
            ...
    """

    def __init__(self) -> None:
        self._columnizers: dict[str, LogLineColumnizer] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, columnizer: LogLineColumnizer) -> None:
        if not isinstance(columnizer, LogLineColumnizer):
            raise TypeError(f"{columnizer!r} does not implement LogLineColumnizer")
        self._columnizers[columnizer.name] = columnizer
        logger.debug("Registered columnizer: %s", columnizer.name)

    # ------------------------------------------------------------------
    # Discovery via entry-points
    # ------------------------------------------------------------------

    def discover(self) -> int:
        """Load columnizers from the 'starborne.columnizers' entry-point group.

        Returns the number of columnizers newly loaded. Entry points naming
        an already registered columnizer are skipped.
        """
        loaded = 0
        try:
            eps = importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)
        except Exception as exc:
            logger.warning("Entry-point discovery failed: %s", exc)
            return 0

        for ep in eps:
            try:
                obj = ep.load()
                instance = obj() if isinstance(obj, type) else obj
                if getattr(instance, "name", None) in self._columnizers:
                    continue
                self.register(instance)
                loaded += 1
            except Exception as exc:
                logger.warning("Failed to load columnizer %r: %s", ep.name, exc)

        return loaded

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> LogLineColumnizer | None:
        return self._columnizers.get(name)

    def list_columnizers(self) -> list[str]:
        return sorted(self._columnizers)

    def rank(self, file_name: str, samples: Iterable[str]) -> list[tuple[LogLineColumnizer, Priority]]:
        """Every columnizer with its confidence, in registration order."""
        sample_list = list(samples)
        return [
            (c, Priority(c.match_confidence(file_name, sample_list)))
            for c in self._columnizers.values()
        ]

    def select(
        self, file_name: str, samples: Iterable[str]
    ) -> tuple[LogLineColumnizer | None, Priority]:
        """Return the most confident columnizer; earliest registered wins ties."""
        best: LogLineColumnizer | None = None
        best_priority = Priority.NOT_SUPPORTED
        for columnizer, priority in self.rank(file_name, samples):
            if best is None or priority > best_priority:
                best, best_priority = columnizer, priority
        return best, best_priority


# Module-level singleton with the built-in columnizer pre-registered
default_registry = ColumnizerRegistry()
default_registry.register(ServerColumnizer())
