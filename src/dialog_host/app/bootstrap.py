"""Bootstrap for the dialog layer.

Responsibilities:
 - Ensuring a QApplication exists (unless the caller already made one)
 - Loading ``DialogConfig`` from disk
 - Creating the event bus, logging capture and dialog service
 - Registering them on the global service locator so plugins can find them
 - Optionally activating the dialog service against a host widget

Returns a single context object with references to everything created.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from PyQt6.QtWidgets import QApplication, QWidget

from dialog_host.services.dialog_service import DialogService
from dialog_host.services.event_bus import EventBus
from dialog_host.services.logging_service import LoggingService
from dialog_host.services.service_locator import ServiceLocator, services

from .config_store import DialogConfig, load_config

__all__ = ["DialogContext", "create_dialog_context", "ensure_qapplication"]

_logger = logging.getLogger(__name__)


@dataclass
class DialogContext:
    """References created during bootstrap.

    Attributes
    ----------
    qt_app: The QApplication in use
    config: Loaded (or default) dialog configuration
    event_bus: Bus receiving dialog lifecycle events
    logging_service: Ring buffer of recent log records (None if capture disabled)
    dialog_service: The dialog service itself
    services: Service locator the above were registered on
    duration_s: Elapsed seconds for bootstrap
    """

    qt_app: Any
    config: DialogConfig
    event_bus: EventBus
    logging_service: Optional[LoggingService]
    dialog_service: DialogService
    services: ServiceLocator
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def shutdown(self) -> None:
        """Deactivate the dialog service and stop capturing logs."""
        self.dialog_service.deactivate()
        if self.logging_service is not None:
            self.logging_service.detach()


def ensure_qapplication() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])  # minimal argv
    return app  # type: ignore[return-value]


def create_dialog_context(
    host: Optional[QWidget] = None,
    *,
    config_dir: str | Path | None = None,
    capture_logs: bool = True,
    register: bool = True,
    locator: Optional[ServiceLocator] = None,
) -> DialogContext:
    """Create and wire the dialog layer services.

    Parameters
    ----------
    host: Widget to attach dialogs to. May also be passed later to
        ``dialog_service.activate``.
    config_dir: Directory holding ``dialog_config.json`` (CWD if None).
    capture_logs: Attach a ``LoggingService`` to the root logger.
    register: Register services on ``locator`` (the global one by default).
        Each bootstrap replaces earlier registrations.
    """
    started = time.perf_counter()
    qt_app = ensure_qapplication()
    config = load_config(config_dir)

    event_bus = EventBus()
    logging_service: Optional[LoggingService] = None
    if capture_logs:
        logging_service = LoggingService(event_bus=event_bus)
        logging_service.attach()
    dialog_service = DialogService(event_bus=event_bus, config=config)

    target = locator if locator is not None else services
    if register:
        target.install_dialog_layer(dialog_service, event_bus, logging_service)

    if host is not None:
        dialog_service.activate(host)

    duration = time.perf_counter() - started
    _logger.debug("Dialog context created in %.3fs", duration)
    return DialogContext(
        qt_app=qt_app,
        config=config,
        event_bus=event_bus,
        logging_service=logging_service,
        dialog_service=dialog_service,
        services=target,
        duration_s=duration,
        metadata={"config": config.to_dict(), "registered": register},
    )
