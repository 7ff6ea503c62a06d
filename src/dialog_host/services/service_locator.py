"""Where plugins find the dialog layer.

Plugins that want to open dialogs do not import the host application. The
host bootstraps once and installs its services here; plugins then ask for the
dialog service directly:

    from dialog_host.services.service_locator import services
    dialogs = services.dialog_service()
    dialogs.register_dialog("about", title="About").show()

Entries are keyed by name (``EVENT_BUS``, ``LOGGING_SERVICE``,
``DIALOG_SERVICE``); hosts may add their own keys. Tests swap entries with
``override_context``.
"""

from __future__ import annotations

from contextlib import contextmanager
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, Generator, List, Optional, Type, TypeVar

if TYPE_CHECKING:  # pragma: no cover
    from .dialog_service import DialogService
    from .event_bus import EventBus
    from .logging_service import LoggingService

T = TypeVar("T")

__all__ = [
    "ServiceLocator",
    "services",
    "ServiceAlreadyRegisteredError",
    "ServiceNotFoundError",
    "EVENT_BUS",
    "LOGGING_SERVICE",
    "DIALOG_SERVICE",
]

EVENT_BUS = "event_bus"
LOGGING_SERVICE = "logging_service"
DIALOG_SERVICE = "dialog_service"


class ServiceAlreadyRegisteredError(RuntimeError):
    """Raised when registering an existing key without allow_override."""


class ServiceNotFoundError(KeyError):
    """Raised when a requested service key is not present."""


class ServiceLocator:
    def __init__(self) -> None:
        self._lock = RLock()
        self._values: Dict[str, Any] = {}
        self._origins: Dict[str, Optional[str]] = {}

    # Generic entries -----------------------------------------------------
    def register(
        self, key: str, value: Any, *, allow_override: bool = False, origin: str | None = None
    ) -> None:
        with self._lock:
            if key in self._values and not allow_override:
                raise ServiceAlreadyRegisteredError(f"Service '{key}' already registered")
            self._values[key] = value
            self._origins[key] = origin

    def get(self, key: str, expected_type: Optional[Type[T]] = None) -> Any:
        """Return the entry for ``key``, optionally checking its type."""
        with self._lock:
            if key not in self._values:
                raise ServiceNotFoundError(key)
            value = self._values[key]
        if expected_type is not None and not isinstance(value, expected_type):
            raise TypeError(
                f"Service '{key}' expected type {expected_type.__name__} "
                f"but got {type(value).__name__}"
            )
        return value

    def try_get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def origin(self, key: str) -> Optional[str]:
        with self._lock:
            return self._origins.get(key)

    @contextmanager
    def override_context(self, **overrides: Any) -> Generator[None, None, None]:
        """Temporarily replace (or add) entries; the previous set returns on exit."""
        with self._lock:
            saved = (dict(self._values), dict(self._origins))
            for key, value in overrides.items():
                self._values[key] = value
                self._origins[key] = "override"
        try:
            yield
        finally:
            with self._lock:
                self._values, self._origins = saved

    def unregister(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)
            self._origins.pop(key, None)

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._values)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._origins.clear()

    # Dialog layer ----------------------------------------------------------
    def install_dialog_layer(
        self,
        dialog_service: "DialogService",
        event_bus: "EventBus",
        logging_service: Optional["LoggingService"] = None,
        *,
        origin: str = "bootstrap",
    ) -> None:
        """Publish one bootstrapped dialog layer, replacing any earlier one."""
        self.register(EVENT_BUS, event_bus, allow_override=True, origin=origin)
        self.register(DIALOG_SERVICE, dialog_service, allow_override=True, origin=origin)
        if logging_service is not None:
            self.register(LOGGING_SERVICE, logging_service, allow_override=True, origin=origin)
        else:
            self.unregister(LOGGING_SERVICE)

    def dialog_service(self) -> "DialogService":
        from .dialog_service import DialogService  # widget layer, imported lazily

        return self.get(DIALOG_SERVICE, DialogService)

    def event_bus(self) -> "EventBus":
        from .event_bus import EventBus

        return self.get(EVENT_BUS, EventBus)

    def logging_service(self) -> Optional["LoggingService"]:
        return self.try_get(LOGGING_SERVICE)


services = ServiceLocator()
