"""Dialog data model.

Defines the stored descriptor for one registered dialog, the options callers
pass at registration time, and the content variant used for bodies/footers.

Content ownership
-----------------
``ExternalNode`` wraps a widget built and owned by the caller. The dialog
layer only parents it into a rendered body/footer; before a container subtree
is rebuilt or destroyed the widget is detached again so its lifetime stays
with the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Union

from PyQt6.QtWidgets import QWidget

__all__ = [
    "Markup",
    "ExternalNode",
    "ContentValue",
    "as_content",
    "DialogOptions",
    "DialogDescriptor",
    "DEFAULT_TITLE",
    "DEFAULT_WIDTH",
    "DEFAULT_TOP",
]

_logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Custom Dialog"
DEFAULT_WIDTH = "600px"
DEFAULT_TOP = "15vh"


@dataclass(frozen=True)
class Markup:
    """Rich text fragment rendered as-is."""

    kind: ClassVar[str] = "markup"
    text: str = ""


@dataclass(frozen=True, eq=False)
class ExternalNode:
    """Caller-owned widget attached directly into the dialog."""

    kind: ClassVar[str] = "node"
    widget: QWidget


ContentValue = Union[Markup, ExternalNode]


def as_content(value: Any) -> ContentValue:
    """Coerce a caller value into a ``ContentValue``.

    ``str`` becomes ``Markup``, a ``QWidget`` becomes ``ExternalNode`` and
    existing variants pass through. Anything else raises ``TypeError``.
    """
    if isinstance(value, (Markup, ExternalNode)):
        return value
    if value is None:
        return Markup("")
    if isinstance(value, str):
        return Markup(value)
    if isinstance(value, QWidget):
        return ExternalNode(value)
    raise TypeError(f"Unsupported dialog content type: {type(value).__name__}")


Hook = Callable[[], Any]


@dataclass
class DialogOptions:
    """Registration options; ``None`` means "use the default"."""

    title: Optional[str] = None
    width: Optional[str] = None
    content: Any = None
    show_close: Optional[bool] = None
    close_on_click_modal: Optional[bool] = None
    close_on_press_escape: Optional[bool] = None
    fullscreen: Optional[bool] = None
    top: Optional[str] = None
    modal: Optional[bool] = None
    draggable: Optional[bool] = None
    footer: Any = None
    before_close: Optional[Hook] = None
    on_open: Optional[Hook] = None
    on_close: Optional[Hook] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DialogOptions":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                _logger.warning("Ignoring unknown dialog option: %s", key)
                continue
            kwargs[key] = value
        return cls(**kwargs)


@dataclass
class DialogDescriptor:
    """Stored configuration plus runtime visibility for one dialog id."""

    id: str
    title: str = DEFAULT_TITLE
    width: str = DEFAULT_WIDTH
    content: ContentValue = field(default_factory=Markup)
    show_close: bool = True
    close_on_click_modal: bool = True
    close_on_press_escape: bool = True
    fullscreen: bool = False
    top: str = DEFAULT_TOP
    modal: bool = True
    draggable: bool = False
    footer: Optional[ContentValue] = None
    before_close: Optional[Hook] = None
    on_open: Optional[Hook] = None
    on_close: Optional[Hook] = None
    visible: bool = False

    @classmethod
    def from_options(
        cls,
        dialog_id: str,
        options: DialogOptions,
        *,
        default_title: str = DEFAULT_TITLE,
        default_width: str = DEFAULT_WIDTH,
        default_top: str = DEFAULT_TOP,
    ) -> "DialogDescriptor":
        """Merge ``options`` onto field defaults.

        Empty strings for title/width/top fall back to the defaults, matching
        how the host plugins treat blank values.
        """

        def _flag(value: Optional[bool], default: bool) -> bool:
            return default if value is None else bool(value)

        def _length(name: str, value: Any, default: str) -> str:
            # bare numbers are pixel counts
            if value is None or value == "":
                return default
            if isinstance(value, str):
                return value
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return f"{value:g}px"
            _logger.error(
                "Invalid %s %r for dialog %s, using %s", name, value, dialog_id, default
            )
            return default

        footer = options.footer
        return cls(
            id=dialog_id,
            title=default_title if options.title in (None, "") else str(options.title),
            width=_length("width", options.width, default_width),
            content=as_content(options.content),
            show_close=_flag(options.show_close, True),
            close_on_click_modal=_flag(options.close_on_click_modal, True),
            close_on_press_escape=_flag(options.close_on_press_escape, True),
            fullscreen=_flag(options.fullscreen, False),
            top=_length("top", options.top, default_top),
            modal=_flag(options.modal, True),
            draggable=_flag(options.draggable, False),
            footer=None if footer is None or footer == "" else as_content(footer),
            before_close=options.before_close,
            on_open=options.on_open,
            on_close=options.on_close,
        )

