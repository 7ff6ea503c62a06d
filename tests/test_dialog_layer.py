"""Dialog layer readiness, singleton wrapper, stacking and deactivation."""

from __future__ import annotations

import pytest
from PyQt6 import sip
from PyQt6.QtWidgets import QWidget

from dialog_host.app.config_store import DialogConfig
from dialog_host.components.dialog_layer import DialogLayer, DialogLayerManager
from dialog_host.services.dialog_service import DialogService
from dialog_host.services.event_bus import DialogEvent, EventBus
from dialog_host.services.resource_ledger import ResourceLedger


def _layers(host):
    return [c for c in host.children() if isinstance(c, DialogLayer) and not sip.isdeleted(c)]


@pytest.fixture
def hidden_host(qtbot):
    w = QWidget()
    w.resize(640, 480)
    qtbot.addWidget(w)
    return w


def test_layer_created_immediately_for_visible_host(host):
    mgr = DialogLayerManager(ResourceLedger())
    mgr.activate(host)
    assert mgr.is_ready
    assert _layers(host) == [mgr.layer]
    # nothing open yet, so the layer does not cover the host
    assert mgr.layer.isHidden()
    mgr.deactivate()


def test_layer_waits_for_host_show(hidden_host):
    mgr = DialogLayerManager(ResourceLedger())
    calls = []
    mgr.activate(hidden_host)
    mgr.when_ready(lambda: calls.append("ready"))
    assert not mgr.is_ready and calls == []
    hidden_host.show()
    assert mgr.is_ready and calls == ["ready"]
    # a second show does not create another layer or re-run callbacks
    hidden_host.hide()
    hidden_host.show()
    assert calls == ["ready"]
    assert len(_layers(hidden_host)) == 1
    mgr.when_ready(lambda: calls.append("late"))
    assert calls == ["ready", "late"]
    mgr.deactivate()


def test_ensure_container_before_ready_raises(hidden_host):
    mgr = DialogLayerManager(ResourceLedger())
    mgr.activate(hidden_host)
    with pytest.raises(RuntimeError):
        mgr.ensure_container("a")


def test_activate_is_idempotent_for_same_host(host):
    mgr = DialogLayerManager(ResourceLedger())
    mgr.activate(host)
    layer = mgr.layer
    mgr.activate(host)
    assert mgr.layer is layer
    other = QWidget()
    with pytest.raises(RuntimeError):
        mgr.activate(other)
    mgr.deactivate()


def test_layer_follows_host_resize(host, qtbot):
    mgr = DialogLayerManager(ResourceLedger())
    mgr.activate(host)
    host.resize(1000, 700)
    qtbot.waitUntil(lambda: mgr.layer.size() == host.size())
    mgr.deactivate()


def test_single_layer_for_many_dialogs(service, host):
    for d in ("a", "b", "c"):
        service.register_dialog(d)
        service.show_dialog(d)
    assert len(_layers(host)) == 1
    layer = service.layer.layer
    assert all(service.container_for(d).parentWidget() is layer for d in ("a", "b", "c"))


def test_layer_visible_only_while_a_dialog_is(service):
    service.register_dialog("a")
    service.show_dialog("a")
    assert service.layer.layer.isVisible()
    service.close_dialog("a")
    assert service.layer.layer.isHidden()


def test_show_before_ready_renders_on_ready(hidden_host, qtbot):
    bus = EventBus()
    ready = []
    bus.subscribe(DialogEvent.DIALOGS_READY, lambda e: ready.append(e))
    svc = DialogService(event_bus=bus)
    svc.activate(hidden_host)
    svc.register_dialog("early", title="Early")
    assert svc.show_dialog("early") is True
    assert svc.container_for("early") is None
    hidden_host.show()
    container = svc.container_for("early")
    assert container is not None and container.isVisible()
    assert container.panel.title_text() == "Early"
    assert len(ready) == 1
    svc.deactivate()


def test_show_without_activation_defers(qtbot, host):
    svc = DialogService()
    svc.register_dialog("a")
    assert svc.show_dialog("a") is True
    assert svc.container_for("a") is None
    svc.activate(host)
    assert svc.container_for("a").isVisible()
    svc.deactivate()


def test_stacking_most_recently_shown_on_top(service):
    for d in ("a", "b"):
        service.register_dialog(d)
    service.show_dialog("a")
    service.show_dialog("b")
    assert service.layer.stacking_order() == ["a", "b"]
    service.close_dialog("a")
    service.show_dialog("a")
    assert service.layer.stacking_order() == ["b", "a"]


def test_stacking_creation_order_when_raise_disabled(host):
    svc = DialogService(config=DialogConfig(raise_on_show=False))
    svc.activate(host)
    for d in ("a", "b"):
        svc.register_dialog(d)
    svc.show_dialog("a")
    svc.show_dialog("b")
    svc.close_dialog("a")
    svc.show_dialog("a")
    assert svc.layer.stacking_order() == ["a", "b"]
    svc.deactivate()


def test_deactivate_removes_everything_but_keeps_registrations(service, host, qtbot):
    service.register_dialog("a")
    service.register_dialog("b", before_close=lambda: False)
    service.show_dialog("a")
    service.show_dialog("b")
    layer = service.layer.layer
    service.deactivate()
    assert not service.is_dialog_visible("a")
    assert not service.is_dialog_visible("b")
    assert service.layer.layer is None
    assert service.layer.container_ids() == []
    assert len(service.ledger) == 0
    assert service.get_all_dialog_ids() == ["a", "b"]
    qtbot.waitUntil(lambda: sip.isdeleted(layer))
    assert _layers(host) == []


def test_reactivate_after_deactivate(service, host):
    service.register_dialog("a")
    service.show_dialog("a")
    service.deactivate()
    service.activate(host)
    assert service.layer.is_ready
    assert service.show_dialog("a") is True
    assert service.container_for("a").isVisible()


def test_deactivate_does_not_fire_on_close_for_vetoed(service):
    closed = []
    service.register_dialog("a", before_close=lambda: False, on_close=lambda: closed.append(1))
    service.show_dialog("a")
    service.deactivate()
    assert closed == []
    assert not service.is_dialog_visible("a")
