"""Dialog model, registry and controller handle (no Qt widgets built here)."""

from .controller import DialogController  # noqa: F401
from .errors import (  # noqa: F401
    AlreadyVisibleError,
    DialogCallbackError,
    DialogError,
    DuplicateRegistrationError,
    InvalidContentError,
    NotVisibleError,
    UnknownDialogError,
)
from .models import (  # noqa: F401
    ContentValue,
    DialogDescriptor,
    DialogOptions,
    ExternalNode,
    Markup,
    as_content,
)
from .registry import DialogRegistry  # noqa: F401

__all__ = [
    "DialogController",
    "DialogRegistry",
    "DialogDescriptor",
    "DialogOptions",
    "ContentValue",
    "Markup",
    "ExternalNode",
    "as_content",
    "DialogError",
    "UnknownDialogError",
    "AlreadyVisibleError",
    "NotVisibleError",
    "DuplicateRegistrationError",
    "DialogCallbackError",
    "InvalidContentError",
]
