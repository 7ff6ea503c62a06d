"""Dialog layer: the shared mount point and per-dialog containers.

``DialogLayerManager`` owns exactly one ``DialogLayer`` (the wrapper widget
overlaying the host) per activation and one ``DialogContainer`` per rendered
dialog, appended in creation order.

Readiness
---------
The layer is created once the host signals readiness: immediately when the
host is already visible, otherwise on the host's first ``Show`` event. This
is the only deferred step of the dialog subsystem; ``when_ready`` callbacks
run exactly once, either right away or when the signal fires.

The layer follows the host's size and is only shown while some container is
visible, so it never intercepts input when no dialog is open.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from PyQt6.QtCore import QEvent, QObject, pyqtSignal
from PyQt6.QtWidgets import QWidget

from dialog_host.services.resource_ledger import ResourceLedger

from .dialog_panel import DialogContainer

__all__ = ["DialogLayer", "DialogLayerManager"]

_logger = logging.getLogger(__name__)


class DialogLayer(QWidget):
    """Transparent overlay covering the host; parent of all containers."""

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.setObjectName("dialogLayer")
        self.setGeometry(host.rect())

    def resizeEvent(self, event):  # type: ignore[override]
        for child in self.findChildren(DialogContainer):
            if child.parentWidget() is self:
                child.setGeometry(self.rect())
        super().resizeEvent(event)


class _HostFilter(QObject):
    """Watches the host for its first Show and for resizes."""

    def __init__(self, host: QWidget, manager: "DialogLayerManager"):
        super().__init__(host)
        self._manager = manager

    def eventFilter(self, watched, event):  # type: ignore[override]
        et = event.type()
        if et == QEvent.Type.Show:
            self._manager._on_host_ready()
        elif et == QEvent.Type.Resize:
            self._manager._on_host_resized()
        return False


class DialogLayerManager(QObject):
    ready = pyqtSignal()

    def __init__(self, ledger: ResourceLedger, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._ledger = ledger
        self._host: Optional[QWidget] = None
        self._layer: Optional[DialogLayer] = None
        self._containers: Dict[str, DialogContainer] = {}
        self._waiting: List[Callable[[], None]] = []

    # Activation ---------------------------------------------------------
    @property
    def host(self) -> Optional[QWidget]:
        return self._host

    @property
    def layer(self) -> Optional[DialogLayer]:
        return self._layer

    @property
    def active(self) -> bool:
        return self._host is not None

    @property
    def is_ready(self) -> bool:
        return self._layer is not None

    def activate(self, host: QWidget) -> None:
        if self._host is not None:
            if self._host is host:
                return
            raise RuntimeError("Dialog layer already attached to another host")
        self._host = host
        self._ledger.scope("layer").track_event_filter(host, _HostFilter(host, self))
        if host.isVisible():
            self._on_host_ready()

    def deactivate(self) -> None:
        for dialog_id in list(self._containers):
            self.remove_container(dialog_id)
        self._ledger.release_scope("layer")
        if self._layer is not None:
            self._layer.hide()
            self._layer.deleteLater()
            _logger.info("Dialog layer removed")
        self._layer = None
        self._host = None

    def when_ready(self, callback: Callable[[], None]) -> None:
        if self._layer is not None:
            callback()
        else:
            self._waiting.append(callback)

    def _on_host_ready(self) -> None:
        if self._layer is not None or self._host is None:
            return
        self._layer = DialogLayer(self._host)
        self._layer.hide()
        _logger.info("Dialog layer created")
        waiting, self._waiting = self._waiting, []
        for callback in waiting:
            callback()
        self.ready.emit()

    def _on_host_resized(self) -> None:
        if self._layer is not None and self._host is not None:
            self._layer.setGeometry(self._host.rect())

    # Containers ---------------------------------------------------------
    def container(self, dialog_id: str) -> Optional[DialogContainer]:
        return self._containers.get(dialog_id)

    def container_ids(self) -> List[str]:
        return list(self._containers.keys())

    def ensure_container(self, dialog_id: str) -> DialogContainer:
        if self._layer is None:
            raise RuntimeError("Dialog layer not ready")
        container = self._containers.get(dialog_id)
        if container is None:
            container = DialogContainer(dialog_id, self._layer)
            container.setGeometry(self._layer.rect())
            container.hide()
            self._containers[dialog_id] = container
        return container

    def remove_container(self, dialog_id: str) -> bool:
        container = self._containers.pop(dialog_id, None)
        if container is None:
            return False
        container.clear()
        container.hide()
        container.deleteLater()
        self.sync_visibility()
        return True

    def set_container_visible(self, dialog_id: str, visible: bool) -> None:
        container = self._containers.get(dialog_id)
        if container is not None:
            container.setVisible(visible)
        self.sync_visibility()

    def raise_container(self, dialog_id: str) -> None:
        container = self._containers.get(dialog_id)
        if container is not None:
            container.raise_()

    def stacking_order(self) -> List[str]:
        """Container ids bottom to top."""
        if self._layer is None:
            return []
        return [
            child.dialog_id
            for child in self._layer.children()
            if isinstance(child, DialogContainer) and child.dialog_id in self._containers
            and self._containers[child.dialog_id] is child
        ]

    def sync_visibility(self) -> None:
        if self._layer is None:
            return
        any_visible = any(not c.isHidden() for c in self._containers.values())
        if any_visible:
            self._layer.setGeometry(self._host.rect() if self._host is not None else self._layer.rect())
            self._layer.show()
            self._layer.raise_()
        else:
            self._layer.hide()
