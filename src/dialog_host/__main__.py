"""Demo window for the dialog layer: ``python -m dialog_host``."""

from __future__ import annotations

import argparse
import logging
import sys

from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from dialog_host.app.bootstrap import DialogContext, create_dialog_context
from dialog_host.dialogs.models import DialogOptions, ExternalNode
from dialog_host.services.dialog_service import DialogService
from dialog_host.services.event_bus import DialogEvent, Event

_logger = logging.getLogger("dialog_host.demo")

DEMO_IDS = ("demo-simple", "demo-custom", "demo-fullscreen", "demo-draggable")


def _custom_body(status: QLabel) -> QWidget:
    body = QWidget()
    layout = QVBoxLayout(body)
    layout.setContentsMargins(0, 0, 0, 0)
    heading = QLabel("Interactive Content", body)
    heading.setStyleSheet("color: #409eff; font-size: 16px;")
    layout.addWidget(heading)
    layout.addWidget(QLabel("This dialog embeds widgets owned by the caller:", body))
    row = QHBoxLayout()
    click = QPushButton("Click Me!", body)
    entry = QLineEdit(body)
    entry.setPlaceholderText("Type something...")
    echo = QPushButton("Log Input", body)
    row.addWidget(click)
    row.addWidget(entry, 1)
    row.addWidget(echo)
    layout.addLayout(row)

    click.clicked.connect(lambda: status.setText("Button clicked!"))

    def _echo() -> None:
        value = entry.text()
        if value:
            _logger.info("Input value: %s", value)
            status.setText(f"Input value: {value}")
        else:
            status.setText("Please enter some text first")

    echo.clicked.connect(_echo)
    return body


def register_demo_dialogs(service: DialogService, status: QLabel) -> None:
    service.register_dialog(
        "demo-simple",
        title="📝 Simple Dialog",
        width="400px",
        content=(
            "<p>This is a simple dialog with default options.</p>"
            "<p style='color:#909399;font-size:12px'>Features: close button, modal "
            "backdrop, Escape to close, click outside to close</p>"
        ),
    )

    footer = QWidget()
    footer_row = QHBoxLayout(footer)
    footer_row.setContentsMargins(0, 0, 0, 0)
    footer_row.addStretch(1)
    done = QPushButton("Done", footer)
    footer_row.addWidget(done)
    custom = service.register_dialog(
        "demo-custom",
        DialogOptions(
            title="🎨 Custom Dialog",
            width="600px",
            content=ExternalNode(_custom_body(status)),
            footer=ExternalNode(footer),
            on_open=lambda: _logger.info("Custom dialog opened!"),
            on_close=lambda: _logger.info("Custom dialog closed!"),
        ),
    )
    done.clicked.connect(lambda *_: custom.hide())

    service.register_dialog(
        "demo-fullscreen",
        title="🖥️ Fullscreen Dialog",
        fullscreen=True,
        content=(
            "<h3 style='color:#67c23a'>Fullscreen Mode</h3>"
            "<p>This dialog takes up the entire window. Useful for:</p>"
            "<ul><li>Image viewers</li><li>Detailed forms</li>"
            "<li>Rich content displays</li><li>Settings panels</li></ul>"
        ),
    )

    service.register_dialog(
        "demo-draggable",
        title="✋ Draggable Dialog",
        width="40vw",
        top="10vh",
        modal=False,
        draggable=True,
        content="<p>Drag the header to move this dialog. It has no backdrop.</p>",
    )


def build_window(ctx: DialogContext) -> QMainWindow:
    window = QMainWindow()
    window.setWindowTitle("Dialog host demo")
    central = QWidget(window)
    layout = QVBoxLayout(central)
    status = QLabel("Ready", central)
    # same lookup a plugin would do
    service = ctx.services.dialog_service()
    register_demo_dialogs(service, status)

    for dialog_id in DEMO_IDS:
        btn = QPushButton(f"Show {dialog_id.split('-', 1)[1]}", central)
        btn.clicked.connect(lambda _=False, d=dialog_id: service.show_dialog(d))
        layout.addWidget(btn)

    confirm_btn = QPushButton("Ask for confirmation", central)
    confirm_btn.clicked.connect(
        lambda: service.confirm(
            "Confirm action",
            "Do you really want to continue?",
            lambda ok: status.setText("Confirmed" if ok else "Cancelled"),
            kind="warning",
        )
    )
    layout.addWidget(confirm_btn)
    layout.addStretch(1)
    layout.addWidget(status)
    window.setCentralWidget(central)
    window.resize(900, 650)

    def _on_event(evt: Event) -> None:
        payload = evt.payload or {}
        status.setText(f"{evt.name}: {payload.get('dialog_id', '')}")

    for name in (DialogEvent.DIALOG_OPENED, DialogEvent.DIALOG_CLOSED):
        ctx.services.event_bus().subscribe(name, _on_event)
    return window


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dialog-host", description="Dialog layer demo window")
    p.add_argument("--config-dir", default=None, help="Directory holding dialog_config.json")
    p.add_argument("--log-level", default="INFO", help="Logging level (default INFO)")
    p.add_argument("--open", dest="open_id", choices=DEMO_IDS, help="Dialog to show at startup")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx = create_dialog_context(config_dir=args.config_dir, capture_logs=False)
    window = build_window(ctx)
    ctx.dialog_service.activate(window)
    if args.open_id:
        ctx.dialog_service.show_dialog(args.open_id)
    window.show()
    try:
        return ctx.qt_app.exec()
    finally:
        ctx.shutdown()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
