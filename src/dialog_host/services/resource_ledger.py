"""Resource ledger for listeners and event filters.

Every event filter and signal connection the dialog layer creates is
recorded here as a ``Disposable`` so it can be released deterministically:

    ledger = ResourceLedger("dialogs")
    scope = ledger.scope("dialog:settings")
    scope.track_event_filter(header, drag_filter)
    scope.track_connection(button.clicked, on_click)
    ...
    ledger.release_scope("dialog:settings")   # one dialog re-rendered
    ledger.drain()                            # subsystem deactivated

Scopes are child ledgers keyed by name. ``drain`` releases child scopes first
and then the ledger's own entries in reverse registration order.

Releasing a resource whose underlying Qt object is already gone raises
``RuntimeError`` (deleted C++ wrapper) or ``TypeError`` (signal no longer
connected); both mean the resource is released already and are only logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QObject

__all__ = ["Disposable", "ResourceLedger"]

_logger = logging.getLogger(__name__)


@dataclass
class Disposable:
    label: str
    release: Callable[[], None]
    disposed: bool = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        try:
            self.release()
        except (RuntimeError, TypeError) as exc:
            _logger.debug("Resource %s already released: %s", self.label, exc)


class ResourceLedger:
    def __init__(self, name: str = "root") -> None:
        self.name = name
        self._entries: List[Disposable] = []
        self._scopes: Dict[str, "ResourceLedger"] = {}

    # Registration -------------------------------------------------------
    def track(self, release: Callable[[], None], label: str = "") -> Disposable:
        entry = Disposable(label=label or f"{self.name}#{len(self._entries)}", release=release)
        self._entries.append(entry)
        return entry

    def track_event_filter(self, target: QObject, event_filter: QObject) -> Disposable:
        target.installEventFilter(event_filter)

        def _release() -> None:
            target.removeEventFilter(event_filter)
            event_filter.deleteLater()

        return self.track(_release, f"filter:{type(event_filter).__name__}")

    def track_connection(self, signal: Any, slot: Callable[..., Any]) -> Disposable:
        signal.connect(slot)

        def _release() -> None:
            signal.disconnect(slot)

        return self.track(_release, "connection")

    # Scopes -------------------------------------------------------------
    def scope(self, name: str) -> "ResourceLedger":
        child = self._scopes.get(name)
        if child is None:
            child = ResourceLedger(name)
            self._scopes[name] = child
        return child

    def has_scope(self, name: str) -> bool:
        return name in self._scopes

    def release_scope(self, name: str) -> int:
        child = self._scopes.pop(name, None)
        return child.drain() if child is not None else 0

    # Release ------------------------------------------------------------
    def drain(self) -> int:
        """Release everything; returns number of entries disposed."""
        count = 0
        for name in list(self._scopes):
            count += self.release_scope(name)
        entries, self._entries = self._entries, []
        for entry in reversed(entries):
            if not entry.disposed:
                entry.dispose()
                count += 1
        return count

    def active_count(self, scope: Optional[str] = None) -> int:
        if scope is not None:
            child = self._scopes.get(scope)
            return child.active_count() if child is not None else 0
        own = sum(1 for e in self._entries if not e.disposed)
        return own + sum(c.active_count() for c in self._scopes.values())

    def __len__(self) -> int:
        return self.active_count()
