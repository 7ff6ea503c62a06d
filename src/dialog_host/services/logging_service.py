"""Logging capture service.

Dialog failures never reach callers; they surface as log records. This
service keeps the most recent records in a ring buffer so a host panel (or a
test) can inspect them, and announces each record on the event bus as
``DialogEvent.LOG_RECORD_ADDED``.

 - Plain ``logging.Handler`` attached to the root logger (no Qt dependency)
 - Capacity-bound deque
 - Filtering by level name or logger name substring
 - JSON Lines export
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import DialogEvent, EventBus

__all__ = ["LogEntry", "LoggingService"]


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__(level=logging.DEBUG)
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._svc._ingest(record)


class LoggingService:
    def __init__(self, capacity: int = 500, *, event_bus: Optional[EventBus] = None) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=max(1, capacity))
        self._handler = _RingBufferHandler(self)
        self._event_bus = event_bus
        self._attached_to: Optional[logging.Logger] = None

    # Lifecycle ----------------------------------------------------------
    def attach(self, logger_name: str = "") -> None:
        """Attach to ``logger_name`` (root by default)."""
        if self._attached_to is not None:
            return
        target = logging.getLogger(logger_name or None)
        target.addHandler(self._handler)
        if target.getEffectiveLevel() > logging.DEBUG:
            target.setLevel(logging.DEBUG)
        self._attached_to = target

    def detach(self) -> None:
        if self._attached_to is None:
            return
        self._attached_to.removeHandler(self._handler)
        self._attached_to = None

    @property
    def attached(self) -> bool:
        return self._attached_to is not None

    # Ingestion ----------------------------------------------------------
    def _ingest(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        if self._event_bus is not None:
            self._event_bus.publish(
                DialogEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )

    # Query --------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        return [
            e
            for e in self.recent()
            if (not level or e.level == level)
            and (not name_contains or name_contains in e.name)
        ]

    def messages(self, *, level: str | None = None) -> List[str]:
        return [e.message for e in self.filter(level=level)]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str | Path, *, level: str | None = None) -> int:
        """Write filtered entries as JSON Lines; returns the number written."""
        entries = self.filter(level=level)
        with open(path, "w", encoding="utf-8") as fh:
            for e in entries:
                fh.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
