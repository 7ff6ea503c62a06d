"""Dialog host public API.

Curated, intentionally small surface for host applications and plugins:

    from dialog_host import create_dialog_context

    ctx = create_dialog_context(main_window)
    settings = ctx.dialog_service.register_dialog("settings", title="Settings")
    settings.show()

Design Principles:
- Keep exports minimal & stable; deeper modules stay importable by path.
- Avoid side-effect heavy imports (no implicit QApplication creation).
"""

from __future__ import annotations

# Infrastructure
from .services.service_locator import (  # noqa: F401
    ServiceAlreadyRegisteredError,
    ServiceLocator,
    ServiceNotFoundError,
    services,
)
from .services.event_bus import DialogEvent, Event, EventBus  # noqa: F401
from .services.logging_service import LoggingService  # noqa: F401

# Dialog layer
from .dialogs import (  # noqa: F401
    DialogController,
    DialogDescriptor,
    DialogOptions,
    ExternalNode,
    Markup,
)
from .services.dialog_service import DialogService  # noqa: F401
from .app.config_store import DialogConfig, load_config, save_config  # noqa: F401
from .app.bootstrap import DialogContext, create_dialog_context  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "services",
    "ServiceLocator",
    "ServiceAlreadyRegisteredError",
    "ServiceNotFoundError",
    "EventBus",
    "DialogEvent",
    "Event",
    "LoggingService",
    "DialogService",
    "DialogController",
    "DialogDescriptor",
    "DialogOptions",
    "ExternalNode",
    "Markup",
    "DialogConfig",
    "load_config",
    "save_config",
    "DialogContext",
    "create_dialog_context",
]
