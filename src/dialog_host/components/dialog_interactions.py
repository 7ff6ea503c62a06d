"""Escape, click-outside, close-button and drag behaviour for rendered dialogs.

Every behaviour is attached through the ``ResourceLedger`` under a per-dialog
scope (``dialog:<id>``). Re-rendering a dialog releases its previous scope
before attaching again, so listeners never pile up across show/hide cycles,
and draining the ledger removes every listener at once.

Escape handling uses one filter per dialog on the host's top-level window.
All of them see the same key press; each one only acts when its own dialog is
visible.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PyQt6.QtCore import QEvent, QObject, QPoint, Qt
from PyQt6.QtWidgets import QWidget

from dialog_host.dialogs.models import DialogDescriptor
from dialog_host.services.resource_ledger import ResourceLedger

from .dialog_panel import DialogContainer, DialogPanel, DialogViewport

__all__ = ["DialogInteractions", "scope_name"]

_logger = logging.getLogger(__name__)


def scope_name(dialog_id: str) -> str:
    return f"dialog:{dialog_id}"


class _EscapeFilter(QObject):
    def __init__(self, parent: QObject, on_escape: Callable[[], None]):
        super().__init__(parent)
        self._on_escape = on_escape

    def eventFilter(self, watched, event):  # type: ignore[override]
        if event.type() == QEvent.Type.KeyPress and event.key() == Qt.Key.Key_Escape:
            self._on_escape()
        return False


class _DragFilter(QObject):
    """Tracks a left-button drag started on the panel header."""

    def __init__(self, header: QWidget, panel: DialogPanel, viewport: DialogViewport):
        super().__init__(header)
        self._panel = panel
        self._viewport = viewport
        self._origin: Optional[QPoint] = None

    @property
    def dragging(self) -> bool:
        return self._origin is not None

    def eventFilter(self, watched, event):  # type: ignore[override]
        et = event.type()
        if et == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
            self._origin = event.globalPosition().toPoint() - self._panel.drag_offset
            return True
        if et == QEvent.Type.MouseMove and self._origin is not None:
            self._panel.drag_offset = event.globalPosition().toPoint() - self._origin
            self._viewport.relayout()
            return True
        if et == QEvent.Type.MouseButtonRelease and self._origin is not None:
            self._origin = None
            return True
        return False


class DialogInteractions:
    """Attach/detach interaction behaviour for one dialog at a time."""

    def __init__(
        self,
        ledger: ResourceLedger,
        *,
        request_close: Callable[[str], bool],
        on_escape: Callable[[str], None],
    ) -> None:
        self._ledger = ledger
        self._request_close = request_close
        self._on_escape = on_escape
        self._drag_filters: Dict[str, _DragFilter] = {}

    def attach(
        self, descriptor: DialogDescriptor, container: DialogContainer, key_target: QWidget
    ) -> None:
        dialog_id = descriptor.id
        self.detach(dialog_id)
        viewport = container.viewport
        if viewport is None:
            return
        panel = viewport.panel
        scope = self._ledger.scope(scope_name(dialog_id))

        def _close(*_args) -> None:
            self._request_close(dialog_id)

        if panel.close_button is not None:
            scope.track_connection(panel.close_button.clicked, _close)

        if descriptor.modal and descriptor.close_on_click_modal:
            scope.track_connection(viewport.outside_clicked, _close)

        if descriptor.close_on_press_escape:
            esc = _EscapeFilter(container, lambda: self._on_escape(dialog_id))
            scope.track_event_filter(key_target, esc)

        if descriptor.draggable:
            drag = _DragFilter(panel.header, panel, viewport)
            scope.track_event_filter(panel.header, drag)
            self._drag_filters[dialog_id] = drag

            def _forget_drag() -> None:
                if self._drag_filters.get(dialog_id) is drag:
                    del self._drag_filters[dialog_id]

            scope.track(_forget_drag, "drag-state")

    def detach(self, dialog_id: str) -> int:
        return self._ledger.release_scope(scope_name(dialog_id))

    def is_dragging(self, dialog_id: str) -> bool:
        drag = self._drag_filters.get(dialog_id)
        return drag is not None and drag.dragging

    def listener_count(self, dialog_id: str) -> int:
        return self._ledger.active_count(scope_name(dialog_id))
