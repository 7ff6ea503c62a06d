"""Dialog service: registry, lifecycle state machine and public facade.

Plugins register named dialogs and drive them through the returned
``DialogController``; the service is the only component that changes a
dialog's visibility.

Lifecycle per id::

    Unregistered --register--> Hidden --show--> Visible --close--> Hidden
          ^                                                          |
          +--------------------------destroy-------------------------+

Guarantees:
 - No public method raises. Failures (unknown id, redundant show, hook
   errors) are logged and published as ``DialogEvent.DIALOG_ERROR``.
 - ``before_close`` returning exactly ``False`` vetoes a close; any other
   result, including a raised error, lets it proceed.
 - Containers are created on first render and kept across hide/show; only
   ``destroy_dialog`` (or ``deactivate``) removes them.
 - Every listener attached for a dialog lives in the service's
   ``ResourceLedger``; ``deactivate`` releases all of them together with the
   layer.

Stacking: a dialog shown again after others were opened is raised to the
top when ``DialogConfig.raise_on_show`` is set (default). Otherwise stacking
follows container creation order.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import fields, replace
from typing import Any, Callable, List, Mapping, Optional, Union

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from dialog_host.app.config_store import DialogConfig
from dialog_host.components.dialog_interactions import DialogInteractions
from dialog_host.components.dialog_layer import DialogLayerManager
from dialog_host.components.dialog_panel import DialogContainer, render_dialog
from dialog_host.dialogs.controller import DialogController
from dialog_host.dialogs.errors import (
    AlreadyVisibleError,
    DialogCallbackError,
    DialogError,
    DuplicateRegistrationError,
    InvalidContentError,
    NotVisibleError,
    UnknownDialogError,
)
from dialog_host.dialogs.models import (
    DialogDescriptor,
    DialogOptions,
    ExternalNode,
    as_content,
)
from dialog_host.dialogs.registry import DialogRegistry

from .event_bus import DialogEvent, EventBus
from .resource_ledger import ResourceLedger

__all__ = ["DialogService"]

_logger = logging.getLogger(__name__)

OptionsLike = Union[DialogOptions, Mapping[str, Any], None]

_OPTION_NAMES = {f.name for f in fields(DialogOptions)}


class DialogService:
    def __init__(
        self, *, event_bus: Optional[EventBus] = None, config: Optional[DialogConfig] = None
    ) -> None:
        self._config = config or DialogConfig()
        self._event_bus = event_bus
        self._registry = DialogRegistry()
        self._ledger = ResourceLedger("dialog_service")
        self._layer = DialogLayerManager(self._ledger)
        self._layer.ready.connect(self._on_layer_ready)
        self._interactions = DialogInteractions(
            self._ledger, request_close=self.close_dialog, on_escape=self._on_escape
        )
        self._closing: set[str] = set()
        self._confirm_seq = itertools.count(1)

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------
    @property
    def config(self) -> DialogConfig:
        return self._config

    @property
    def layer(self) -> DialogLayerManager:
        return self._layer

    @property
    def ledger(self) -> ResourceLedger:
        return self._ledger

    @property
    def interactions(self) -> DialogInteractions:
        return self._interactions

    def activate(self, host: QWidget) -> None:
        """Attach to ``host``; the layer is created once the host is shown."""
        self._layer.activate(host)

    def when_ready(self, callback: Callable[[], None]) -> None:
        self._layer.when_ready(callback)

    def deactivate(self) -> None:
        """Close every dialog, release all listeners and remove the layer.

        Registrations survive; dialogs render again after the next
        ``activate``. Dialogs whose ``before_close`` vetoes are hidden anyway.
        """
        _logger.info("Stopping dialog service")
        self.close_all_dialogs()
        for descriptor in self._registry:
            if descriptor.visible:
                _logger.warning("Dialog %s vetoed close during shutdown, hiding it", descriptor.id)
                descriptor.visible = False
        for dialog_id in self._layer.container_ids():
            self._interactions.detach(dialog_id)
        self._layer.deactivate()
        released = self._ledger.drain()
        _logger.debug("Released %d dialog listeners", released)

    def _on_layer_ready(self) -> None:
        for descriptor in self._registry:
            if descriptor.visible and self._layer.container(descriptor.id) is None:
                self._render(descriptor)
        self._publish(DialogEvent.DIALOGS_READY, {"timestamp": time.time()})

    # ------------------------------------------------------------------
    # Registry operations
    # ------------------------------------------------------------------
    def register_dialog(
        self, dialog_id: str, options: OptionsLike = None, **overrides: Any
    ) -> DialogController:
        if isinstance(options, Mapping):
            options = DialogOptions.from_dict(options)
        elif options is None:
            options = DialogOptions()
        if overrides:
            unknown = set(overrides) - _OPTION_NAMES
            for key in sorted(unknown):
                _logger.warning("Ignoring unknown dialog option: %s", key)
            options = replace(
                options, **{k: v for k, v in overrides.items() if k in _OPTION_NAMES}
            )
        descriptor = self._build_descriptor(dialog_id, options)

        previous = self._registry.try_get(dialog_id)
        if previous is not None:
            self._report(DuplicateRegistrationError(dialog_id))
            # stale container is rebuilt on next render; it must not stay on screen
            previous.visible = False
            self._interactions.detach(dialog_id)
            self._layer.set_container_visible(dialog_id, False)
        self._registry.register(descriptor)
        _logger.info("Registered dialog: %s", dialog_id)
        self._publish(DialogEvent.DIALOG_REGISTERED, self._payload(dialog_id))
        return DialogController(self, dialog_id)

    def _build_descriptor(self, dialog_id: str, options: DialogOptions) -> DialogDescriptor:
        cfg = self._config
        try:
            return DialogDescriptor.from_options(
                dialog_id,
                options,
                default_title=cfg.default_title,
                default_width=cfg.default_width,
                default_top=cfg.default_top,
            )
        except TypeError as exc:
            self._report(InvalidContentError(dialog_id, exc))
            return DialogDescriptor.from_options(
                dialog_id,
                replace(options, content=None, footer=None),
                default_title=cfg.default_title,
                default_width=cfg.default_width,
                default_top=cfg.default_top,
            )

    def get_dialog(self, dialog_id: str) -> Optional[DialogDescriptor]:
        return self._registry.try_get(dialog_id)

    def get_all_dialog_ids(self) -> List[str]:
        return self._registry.ids()

    def container_for(self, dialog_id: str) -> Optional[DialogContainer]:
        return self._layer.container(dialog_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def show_dialog(self, dialog_id: str) -> bool:
        try:
            descriptor = self._registry.get(dialog_id)
            if descriptor.visible:
                raise AlreadyVisibleError(dialog_id)
        except DialogError as exc:
            self._report(exc)
            return False
        # flag first so a re-entrant show from on_open is a no-op
        descriptor.visible = True
        self._run_hook(descriptor, "on_open", descriptor.on_open)
        if not descriptor.visible:
            _logger.info("Dialog %s was closed by its on_open callback", dialog_id)
            return False
        self._render(descriptor)
        _logger.info("Showing dialog: %s", dialog_id)
        self._publish(DialogEvent.DIALOG_OPENED, self._payload(dialog_id))
        return True

    def close_dialog(self, dialog_id: str) -> bool:
        try:
            descriptor = self._registry.get(dialog_id)
            if not descriptor.visible or dialog_id in self._closing:
                raise NotVisibleError(dialog_id)
        except DialogError as exc:
            self._report(exc)
            return False
        self._closing.add(dialog_id)
        try:
            if descriptor.before_close is not None:
                verdict = self._run_hook(descriptor, "before_close", descriptor.before_close)
                if verdict is False:
                    _logger.info("Close of dialog %s vetoed by before_close", dialog_id)
                    self._publish(DialogEvent.DIALOG_CLOSE_VETOED, self._payload(dialog_id))
                    return False
            descriptor.visible = False
            self._layer.set_container_visible(dialog_id, False)
        finally:
            self._closing.discard(dialog_id)
        self._run_hook(descriptor, "on_close", descriptor.on_close)
        _logger.info("Closed dialog: %s", dialog_id)
        self._publish(DialogEvent.DIALOG_CLOSED, self._payload(dialog_id))
        return True

    hide_dialog = close_dialog

    def toggle_dialog(self, dialog_id: str) -> None:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is None:
            self._report(UnknownDialogError(dialog_id))
            return
        if descriptor.visible:
            self.close_dialog(dialog_id)
        else:
            self.show_dialog(dialog_id)

    def is_dialog_visible(self, dialog_id: str) -> bool:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is None:
            self._report(UnknownDialogError(dialog_id))
            return False
        return descriptor.visible

    def destroy_dialog(self, dialog_id: str) -> None:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is None:
            self._report(UnknownDialogError(dialog_id))
            return
        if descriptor.visible:
            self.close_dialog(dialog_id)
        descriptor.visible = False
        self._interactions.detach(dialog_id)
        self._layer.remove_container(dialog_id)
        self._registry.remove(dialog_id)
        _logger.info("Destroyed dialog: %s", dialog_id)
        self._publish(DialogEvent.DIALOG_DESTROYED, self._payload(dialog_id))

    def close_all_dialogs(self) -> None:
        for dialog_id in self._registry.visible_ids():
            self.close_dialog(dialog_id)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    def set_dialog_title(self, dialog_id: str, title: str) -> None:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is None:
            self._report(UnknownDialogError(dialog_id))
            return
        descriptor.title = str(title)
        container = self._layer.container(dialog_id)
        if descriptor.visible and container is not None and container.panel is not None:
            container.panel.set_title(descriptor.title)

    def set_dialog_content(self, dialog_id: str, content: Any) -> None:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is None:
            self._report(UnknownDialogError(dialog_id))
            return
        try:
            value = as_content(content)
        except TypeError as exc:
            self._report(InvalidContentError(dialog_id, exc))
            return
        descriptor.content = value
        container = self._layer.container(dialog_id)
        if descriptor.visible and container is not None and container.viewport is not None:
            container.viewport.panel.set_body(value)
            container.viewport.relayout()

    # ------------------------------------------------------------------
    # Confirm helper
    # ------------------------------------------------------------------
    def confirm(
        self,
        title: str,
        message: str,
        on_result: Callable[[bool], Any],
        *,
        kind: str = "info",
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        dialog_id: Optional[str] = None,
    ) -> DialogController:
        """Show a transient yes/no dialog and report the answer once.

        ``on_result(True)`` when the confirm button is used, ``on_result(False)``
        for the cancel button or any other way of closing (escape, backdrop,
        close button). The dialog destroys itself afterwards.
        """
        dialog_id = dialog_id or f"confirm-{next(self._confirm_seq)}"
        answer: dict[str, bool] = {}

        body = QWidget()
        body_layout = QVBoxLayout(body)
        body_layout.setContentsMargins(0, 0, 0, 0)
        text = QLabel(message, body)
        text.setObjectName("confirmMessage")
        text.setProperty("kind", kind)
        text.setWordWrap(True)
        body_layout.addWidget(text)

        footer = QWidget()
        footer_layout = QHBoxLayout(footer)
        footer_layout.setContentsMargins(0, 0, 0, 0)
        footer_layout.addStretch(1)
        cancel_btn = QPushButton(cancel_text, footer)
        cancel_btn.setObjectName("confirmCancel")
        confirm_btn = QPushButton(confirm_text, footer)
        confirm_btn.setObjectName("confirmAccept")
        confirm_btn.setDefault(True)
        footer_layout.addWidget(cancel_btn)
        footer_layout.addWidget(confirm_btn)

        def _answer(value: bool) -> None:
            answer.setdefault("value", value)
            self.close_dialog(dialog_id)

        def _on_close() -> None:
            value = answer.setdefault("value", False)
            try:
                on_result(value)
            except Exception as exc:  # noqa: BLE001 - caller hook
                self._report(DialogCallbackError(dialog_id, "on_result", exc))
            # deferred: we may be inside a click emitted by a button being removed
            QTimer.singleShot(0, lambda: self._discard(dialog_id))

        cancel_btn.clicked.connect(lambda *_: _answer(False))
        confirm_btn.clicked.connect(lambda *_: _answer(True))

        controller = self.register_dialog(
            dialog_id,
            DialogOptions(
                title=title,
                width="420px",
                content=ExternalNode(body),
                footer=ExternalNode(footer),
                on_close=_on_close,
            ),
        )
        controller.show()
        return controller

    def _discard(self, dialog_id: str) -> None:
        if dialog_id in self._registry:
            self.destroy_dialog(dialog_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _render(self, descriptor: DialogDescriptor) -> None:
        if not self._layer.is_ready:
            _logger.debug("Dialog layer not ready, deferring render of %s", descriptor.id)
            return
        container = self._layer.ensure_container(descriptor.id)
        self._interactions.detach(descriptor.id)
        render_dialog(container, descriptor, backdrop_rgba=self._config.backdrop_rgba)
        host = self._layer.host
        key_target = host.window() if host is not None else container
        self._interactions.attach(descriptor, container, key_target)
        self._layer.set_container_visible(descriptor.id, descriptor.visible)
        if self._config.raise_on_show:
            self._layer.raise_container(descriptor.id)

    def _on_escape(self, dialog_id: str) -> None:
        descriptor = self._registry.try_get(dialog_id)
        if descriptor is not None and descriptor.visible:
            self.close_dialog(dialog_id)

    def _run_hook(
        self, descriptor: DialogDescriptor, name: str, hook: Optional[Callable[[], Any]]
    ) -> Any:
        if hook is None:
            return None
        try:
            return hook()
        except Exception as exc:  # noqa: BLE001 - caller hook
            self._report(DialogCallbackError(descriptor.id, name, exc))
            return None

    def _report(self, exc: DialogError) -> None:
        _logger.log(exc.level, "%s", exc)
        self._publish(
            DialogEvent.DIALOG_ERROR,
            {"dialog_id": exc.dialog_id, "code": exc.code, "message": str(exc)},
        )

    def _publish(self, event: DialogEvent, payload: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event, payload)

    @staticmethod
    def _payload(dialog_id: str) -> dict:
        return {"dialog_id": dialog_id, "timestamp": time.time()}
