"""Dialog rendering widgets.

Builds the visual subtree for one registered dialog inside its container:

    DialogContainer            (one per dialog id, child of the dialog layer)
    ├── DialogBackdrop         (only when the dialog is modal)
    └── DialogViewport         (full-size positioning layer)
        └── DialogPanel
            ├── header         (title label, optional close button)
            ├── body           (markup label or caller widget)
            └── footer         (optional, same markup/widget duality)

``render_dialog`` performs a full, idempotent rebuild of a container. The
``DialogPanel.set_title`` / ``DialogPanel.set_body`` methods are the targeted
patch path used while a dialog is visible.

Caller widgets (``ExternalNode`` content) are never deleted here: clearing a
region detaches them (``setParent(None)``) and only widgets created by this
module (flagged with the ``dialogOwned`` property) are scheduled for deletion.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from PyQt6.QtCore import QPoint, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QMouseEvent, QPainter
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from dialog_host.dialogs.models import (
    DEFAULT_TOP,
    DEFAULT_WIDTH,
    ContentValue,
    DialogDescriptor,
    ExternalNode,
    Markup,
)
from dialog_host.dialogs.sizing import parse_length, resolve_length

__all__ = [
    "DialogBackdrop",
    "DialogPanel",
    "DialogViewport",
    "DialogContainer",
    "render_dialog",
    "fill_region",
    "clear_region",
]

_logger = logging.getLogger(__name__)

SIDE_GUTTER = 30  # panel never wider than viewport minus this
BOTTOM_MARGIN = 50
OWNED_PROPERTY = "dialogOwned"

PANEL_QSS = """
QFrame#dialogPanel { background: #2a2a2a; border-radius: 8px; }
QWidget#dialogHeader { border-bottom: 1px solid #404040; }
QLabel#dialogTitle { color: #e8e8e8; font-size: 18px; font-weight: 600; }
QToolButton#dialogClose { background: transparent; border: none; color: #909399; font-size: 16px; }
QToolButton#dialogClose:hover { color: #e8e8e8; }
QWidget#dialogBody QLabel { color: #e8e8e8; font-size: 14px; }
QWidget#dialogFooter { border-top: 1px solid #404040; }
"""


def _own(widget: QWidget) -> QWidget:
    widget.setProperty(OWNED_PROPERTY, True)
    return widget


def _is_owned(widget: QWidget) -> bool:
    return bool(widget.property(OWNED_PROPERTY))


def clear_region(region: QWidget) -> None:
    """Empty ``region``: delete owned widgets, detach caller widgets."""
    layout = region.layout()
    if layout is None:
        return
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget() if item is not None else None
        if widget is None:
            continue
        if _is_owned(widget):
            widget.hide()
            widget.deleteLater()
        else:
            widget.setParent(None)


def fill_region(region: QWidget, value: Optional[ContentValue]) -> None:
    """Replace the contents of ``region`` with ``value`` (dispatch on variant)."""
    clear_region(region)
    layout = region.layout()
    if isinstance(value, Markup):
        label = QLabel(value.text, region)
        label.setObjectName("dialogMarkup")
        label.setTextFormat(Qt.TextFormat.RichText)
        label.setWordWrap(True)
        label.setOpenExternalLinks(True)
        label.setTextInteractionFlags(Qt.TextInteractionFlag.TextBrowserInteraction)
        layout.addWidget(_own(label))
    elif isinstance(value, ExternalNode):
        layout.addWidget(value.widget)
        value.widget.show()


def region_markup(region: Optional[QWidget]) -> Optional[str]:
    """Markup text currently shown in ``region`` (None if it holds a widget)."""
    if region is None or region.layout() is None:
        return None
    for i in range(region.layout().count()):
        widget = region.layout().itemAt(i).widget()
        if isinstance(widget, QLabel) and _is_owned(widget):
            return widget.text()
    return None


def region_widgets(region: Optional[QWidget]) -> list[QWidget]:
    if region is None or region.layout() is None:
        return []
    out: list[QWidget] = []
    for i in range(region.layout().count()):
        widget = region.layout().itemAt(i).widget()
        if widget is not None:
            out.append(widget)
    return out


class DialogBackdrop(QWidget):
    """Semi-transparent layer painted behind a modal panel."""

    def __init__(self, parent: QWidget, rgba: Tuple[int, int, int, int] = (0, 0, 0, 128)):
        super().__init__(parent)
        self.setObjectName("dialogBackdrop")
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self._rgba = rgba

    def rgba(self) -> Tuple[int, int, int, int]:
        return self._rgba

    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        r, g, b, a = self._rgba
        p.fillRect(self.rect(), QColor(r, g, b, a))
        p.end()


class DialogPanel(QFrame):
    """Header / body / footer frame for one dialog."""

    def __init__(self, descriptor: DialogDescriptor, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("dialogPanel")
        self.setProperty("dialogId", descriptor.id)
        self.setStyleSheet(PANEL_QSS)
        self.drag_offset = QPoint(0, 0)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.setSpacing(0)

        self.header = QWidget(self)
        self.header.setObjectName("dialogHeader")
        self.header.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        hl = QHBoxLayout(self.header)
        hl.setContentsMargins(20, 15, 20, 10)
        hl.setSpacing(8)
        self.title_label = QLabel(descriptor.title, self.header)
        self.title_label.setObjectName("dialogTitle")
        self.title_label.setTextFormat(Qt.TextFormat.PlainText)
        hl.addWidget(self.title_label, 1)
        self.close_button: Optional[QToolButton] = None
        if descriptor.show_close:
            self.close_button = QToolButton(self.header)
            self.close_button.setObjectName("dialogClose")
            self.close_button.setText("✕")
            self.close_button.setToolTip("Close")
            self.close_button.setAccessibleName("Close dialog")
            self.close_button.setCursor(Qt.CursorShape.PointingHandCursor)
            hl.addWidget(self.close_button, 0, Qt.AlignmentFlag.AlignTop)
        if descriptor.draggable:
            self.header.setCursor(Qt.CursorShape.SizeAllCursor)
        outer.addWidget(self.header, 0)

        self.body = QWidget(self)
        self.body.setObjectName("dialogBody")
        bl = QVBoxLayout(self.body)
        bl.setContentsMargins(20, 20, 20, 20)
        fill_region(self.body, descriptor.content)
        outer.addWidget(self.body, 1)

        self.footer: Optional[QWidget] = None
        if descriptor.footer is not None:
            self.footer = QWidget(self)
            self.footer.setObjectName("dialogFooter")
            self.footer.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
            fl = QVBoxLayout(self.footer)
            fl.setContentsMargins(20, 10, 20, 15)
            fill_region(self.footer, descriptor.footer)
            for label in self.footer.findChildren(QLabel, "dialogMarkup"):
                label.setAlignment(Qt.AlignmentFlag.AlignRight)
            outer.addWidget(self.footer, 0)

    # Patch path ---------------------------------------------------------
    def set_title(self, title: str) -> None:
        self.title_label.setText(title)

    def set_body(self, content: ContentValue) -> None:
        fill_region(self.body, content)

    # Introspection ------------------------------------------------------
    def title_text(self) -> str:
        return self.title_label.text()

    def body_markup(self) -> Optional[str]:
        return region_markup(self.body)

    def body_widgets(self) -> list[QWidget]:
        return region_widgets(self.body)

    def footer_markup(self) -> Optional[str]:
        return region_markup(self.footer)

    def footer_widgets(self) -> list[QWidget]:
        return region_widgets(self.footer)

    def detach_external(self) -> None:
        for region in (self.body, self.footer):
            if region is None:
                continue
            for widget in region_widgets(region):
                if not _is_owned(widget):
                    region.layout().removeWidget(widget)
                    widget.setParent(None)


class DialogViewport(QWidget):
    """Full-size layer positioning the panel; reports clicks outside it."""

    outside_clicked = pyqtSignal()

    def __init__(
        self,
        parent: QWidget,
        panel: DialogPanel,
        *,
        width: str = DEFAULT_WIDTH,
        top: str = DEFAULT_TOP,
        fullscreen: bool = False,
    ):
        super().__init__(parent)
        self.setObjectName("dialogViewport")
        self.panel = panel
        self._width_spec = width
        self._top_spec = top
        self._fullscreen = fullscreen
        panel.setParent(self)
        panel.show()

    @property
    def fullscreen(self) -> bool:
        return self._fullscreen

    def panel_width(self) -> int:
        vw, vh = self.width(), self.height()
        width = resolve_length(self._width_spec, reference=vw, viewport_width=vw, viewport_height=vh)
        if width is None:
            width = resolve_length(DEFAULT_WIDTH, reference=vw, viewport_width=vw, viewport_height=vh)
        return min(width or 0, max(0, vw - SIDE_GUTTER))

    def panel_top(self) -> int:
        vw, vh = self.width(), self.height()
        top = resolve_length(self._top_spec, reference=vh, viewport_width=vw, viewport_height=vh)
        if top is None:
            top = resolve_length(DEFAULT_TOP, reference=vh, viewport_width=vw, viewport_height=vh)
        return top or 0

    def relayout(self) -> None:
        panel = self.panel
        off = panel.drag_offset
        if self._fullscreen:
            panel.setGeometry(off.x(), off.y(), self.width(), self.height())
            return
        width = self.panel_width()
        top = self.panel_top()
        natural = panel.heightForWidth(width) if panel.hasHeightForWidth() else -1
        if natural < 0:
            natural = panel.sizeHint().height()
        available = self.height() - top - BOTTOM_MARGIN
        height = natural
        if available > 0:
            height = max(panel.minimumSizeHint().height(), min(natural, available))
        x = (self.width() - width) // 2
        panel.setGeometry(x + off.x(), top + off.y(), width, height)

    def resizeEvent(self, event):  # type: ignore[override]
        self.relayout()
        super().resizeEvent(event)

    def mousePressEvent(self, e: QMouseEvent):  # type: ignore[override]
        if e.button() == Qt.MouseButton.LeftButton and not self.panel.geometry().contains(
            e.position().toPoint()
        ):
            e.accept()
            self.outside_clicked.emit()
            return
        super().mousePressEvent(e)


class DialogContainer(QWidget):
    """Rendered subtree holder for one dialog id."""

    def __init__(self, dialog_id: str, parent: QWidget):
        super().__init__(parent)
        self.setObjectName("dialogContainer")
        self.setProperty("dialogId", dialog_id)
        self.dialog_id = dialog_id
        self.backdrop: Optional[DialogBackdrop] = None
        self.viewport: Optional[DialogViewport] = None
        self.build_count = 0

    @property
    def panel(self) -> Optional[DialogPanel]:
        return self.viewport.panel if self.viewport is not None else None

    def adopt(self, backdrop: Optional[DialogBackdrop], viewport: DialogViewport) -> None:
        self.backdrop = backdrop
        self.viewport = viewport
        self.build_count += 1
        self._fit_children()
        if backdrop is not None:
            backdrop.show()
        viewport.show()
        viewport.raise_()

    def clear(self) -> None:
        """Drop the current subtree; caller widgets are detached, not deleted."""
        if self.viewport is not None:
            self.viewport.panel.detach_external()
        for widget in (self.backdrop, self.viewport):
            if widget is not None:
                widget.hide()
                widget.deleteLater()
        self.backdrop = None
        self.viewport = None

    def _fit_children(self) -> None:
        for widget in (self.backdrop, self.viewport):
            if widget is not None:
                widget.setGeometry(self.rect())

    def resizeEvent(self, event):  # type: ignore[override]
        self._fit_children()
        super().resizeEvent(event)


def render_dialog(
    container: DialogContainer,
    descriptor: DialogDescriptor,
    *,
    backdrop_rgba: Tuple[int, int, int, int] = (0, 0, 0, 128),
) -> DialogPanel:
    """Rebuild ``container`` from ``descriptor`` and return the new panel."""
    if not descriptor.fullscreen:
        for label, value in (("width", descriptor.width), ("top", descriptor.top)):
            if parse_length(value) is None:
                _logger.warning(
                    "Unsupported %s %r for dialog %s, using default", label, value, descriptor.id
                )
    container.clear()
    backdrop = DialogBackdrop(container, backdrop_rgba) if descriptor.modal else None
    panel = DialogPanel(descriptor)
    viewport = DialogViewport(
        container,
        panel,
        width=descriptor.width,
        top=descriptor.top,
        fullscreen=descriptor.fullscreen,
    )
    container.adopt(backdrop, viewport)
    container.setVisible(descriptor.visible)
    return panel
