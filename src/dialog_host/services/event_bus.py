"""EventBus for dialog lifecycle notifications.

Lightweight synchronous publish/subscribe used by the dialog service to tell
host code (status panels, plugins reacting to dialogs being opened) about
lifecycle transitions without a direct dependency on the service.

 - Typed event names via ``DialogEvent`` (plain strings are accepted too)
 - One failing handler never breaks the publish cycle; failures are kept on
   ``EventBus.errors``
 - One-shot (``once``) subscriptions and cancellable handles
 - Optional tracing ring buffer of recent events
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol, Tuple

__all__ = [
    "DialogEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
    "TraceEntry",
]


class DialogEvent(str, Enum):
    DIALOGS_READY = "dialogs_ready"
    DIALOG_REGISTERED = "dialog_registered"
    DIALOG_OPENED = "dialog_opened"
    DIALOG_CLOSED = "dialog_closed"
    DIALOG_CLOSE_VETOED = "dialog_close_vetoed"
    DIALOG_DESTROYED = "dialog_destroyed"
    DIALOG_ERROR = "dialog_error"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass
class Event:
    name: str  # DialogEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(frozen=True)
class TraceEntry:
    name: str
    timestamp: float
    summary: str


def _key(name: str | DialogEvent) -> str:
    return name.value if isinstance(name, DialogEvent) else name


class EventBus:
    """Synchronous event dispatcher with optional tracing.

    Handlers are invoked outside the lock (subscriber list copied first) so a
    handler may subscribe, unsubscribe or publish again without deadlock. That
    matters here: a DIALOG_CLOSED handler commonly shows the next dialog.
    """

    DEFAULT_TRACE_CAPACITY = 50

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []
        self._tracing_enabled: bool = False
        self._traces: Deque[Tuple[str, float, str]] = deque(maxlen=self.DEFAULT_TRACE_CAPACITY)

    # Subscriptions ------------------------------------------------------
    def subscribe(
        self, name: str | DialogEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = _key(name)
        sub = Subscription(event=key, handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(key, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket:
                self._subs[sub.event] = [s for s in bucket if s is not sub]
                if not self._subs[sub.event]:
                    self._subs.pop(sub.event, None)
        sub.active = False

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # Publishing ---------------------------------------------------------
    def publish(self, name: str | DialogEvent, payload: Any = None) -> Event:
        key = _key(name)
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
            if self._tracing_enabled:
                text = "-" if payload is None else str(payload)
                summary = text if len(text) <= 40 else text[:37] + "..."
                self._traces.append((evt.name, evt.timestamp, summary))
        spent: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - handler isolation
                with self._lock:
                    self._errors.append((evt, exc))
            else:
                if sub.once:
                    spent.append(sub)
        for sub in spent:
            self.unsubscribe(sub)
        return evt

    # Introspection ------------------------------------------------------
    def subscriber_count(self, name: str | DialogEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    def list_events(self) -> list[str]:
        with self._lock:
            return list(self._subs.keys())

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)

    # Tracing ------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        with self._lock:
            self._tracing_enabled = enabled
            if capacity is not None and capacity != self._traces.maxlen:
                self._traces = deque(self._traces, maxlen=capacity)

    def recent_trace_entries(self) -> list[TraceEntry]:
        with self._lock:
            return [TraceEntry(name=n, timestamp=ts, summary=s) for (n, ts, s) in self._traces]

    @property
    def tracing_enabled(self) -> bool:
        with self._lock:
            return self._tracing_enabled
