from PyQt6.QtWidgets import QApplication

from dialog_host import create_dialog_context
from dialog_host.app.config_store import DialogConfig, save_config
from dialog_host.services.event_bus import DialogEvent
from dialog_host.services.logging_service import LoggingService
from dialog_host.services.service_locator import ServiceLocator, services


def test_context_registers_services(tmp_path, qtbot):
    ctx = create_dialog_context(config_dir=tmp_path)
    try:
        assert isinstance(ctx.qt_app, QApplication)
        assert services.dialog_service() is ctx.dialog_service
        assert services.event_bus() is ctx.event_bus
        assert services.get("logging_service", LoggingService) is ctx.logging_service
        assert ctx.logging_service.attached
    finally:
        ctx.shutdown()
    assert not ctx.logging_service.attached


def test_context_uses_saved_config(tmp_path, qtbot):
    save_config(DialogConfig(default_title="Configured"), tmp_path)
    ctx = create_dialog_context(config_dir=tmp_path, capture_logs=False)
    try:
        ctx.dialog_service.register_dialog("a")
        assert ctx.dialog_service.get_dialog("a").title == "Configured"
        assert ctx.metadata["config"]["default_title"] == "Configured"
        assert ctx.logging_service is None
    finally:
        ctx.shutdown()


def test_context_with_host_and_private_locator(tmp_path, host):
    loc = ServiceLocator()
    ctx = create_dialog_context(host, config_dir=tmp_path, capture_logs=False, locator=loc)
    ready = []
    ctx.event_bus.subscribe(DialogEvent.DIALOG_OPENED, lambda e: ready.append(e.payload))
    try:
        assert ctx.dialog_service.layer.is_ready
        assert loc.get("dialog_service") is ctx.dialog_service
        assert "dialog_service" not in services.list_keys()
        ctx.dialog_service.register_dialog("a").show()
        assert ready[0]["dialog_id"] == "a"
    finally:
        ctx.shutdown()


def test_register_false_leaves_locator_untouched(tmp_path, qtbot):
    ctx = create_dialog_context(config_dir=tmp_path, capture_logs=False, register=False)
    try:
        assert services.try_get("dialog_service") is None
    finally:
        ctx.shutdown()


def test_demo_window_uses_installed_dialog_service(tmp_path, qtbot):
    from dialog_host.__main__ import DEMO_IDS, build_window

    ctx = create_dialog_context(config_dir=tmp_path, capture_logs=False)
    try:
        window = build_window(ctx)
        qtbot.addWidget(window)
        assert all(d in ctx.dialog_service.get_all_dialog_ids() for d in DEMO_IDS)
    finally:
        ctx.shutdown()
