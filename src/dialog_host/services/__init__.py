"""Service layer exports.

Responsibilities:
 - Dependency/service locator (`services`)
 - EventBus publish/subscribe core with typed dialog events
 - Log capture and the resource ledger used by the dialog layer

``DialogService`` lives in ``dialog_host.services.dialog_service`` and is not
re-exported here because it depends on the widget layer.
"""

from .event_bus import DialogEvent, Event, EventBus  # noqa: F401
from .logging_service import LogEntry, LoggingService  # noqa: F401
from .resource_ledger import Disposable, ResourceLedger  # noqa: F401
from .service_locator import ServiceLocator, services  # noqa: F401

__all__ = [
    "services",
    "ServiceLocator",
    "EventBus",
    "DialogEvent",
    "Event",
    "LoggingService",
    "LogEntry",
    "ResourceLedger",
    "Disposable",
]
