# Shared fixtures for the dialog layer tests.
# Qt runs on the offscreen platform so the suite works without a display.
# The env var must be set before the first QApplication is created.

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PyQt6.QtWidgets import QWidget  # noqa: E402

from dialog_host.app.config_store import DialogConfig  # noqa: E402
from dialog_host.services.dialog_service import DialogService  # noqa: E402
from dialog_host.services.event_bus import EventBus  # noqa: E402
from dialog_host.services.service_locator import services  # noqa: E402


@pytest.fixture
def host(qtbot):
    """Visible 800x600 top-level widget dialogs are layered over."""
    w = QWidget()
    w.resize(800, 600)
    qtbot.addWidget(w)
    w.show()
    return w


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def config():
    return DialogConfig()


@pytest.fixture
def service(host, bus, config):
    svc = DialogService(event_bus=bus, config=config)
    svc.activate(host)
    yield svc
    svc.deactivate()


@pytest.fixture
def events(bus):
    """List of (event name, payload) tuples published on ``bus``."""
    seen = []
    from dialog_host.services.event_bus import DialogEvent

    for name in DialogEvent:
        bus.subscribe(name, lambda e: seen.append((e.name, e.payload)))
    return seen


@pytest.fixture(autouse=True)
def _clean_locator():
    yield
    services.clear()
