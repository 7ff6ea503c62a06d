"""Dialog error taxonomy.

These exceptions are raised inside the dialog layer and caught at the public
service boundary, where they are logged (and published on the event bus)
instead of reaching the caller. Each class carries the log level used for it.
"""

from __future__ import annotations

import logging

__all__ = [
    "DialogError",
    "UnknownDialogError",
    "AlreadyVisibleError",
    "NotVisibleError",
    "DuplicateRegistrationError",
    "DialogCallbackError",
    "InvalidContentError",
]


class DialogError(Exception):
    """Base class for handled dialog failures."""

    code = "dialog_error"
    level = logging.ERROR

    def __init__(self, dialog_id: str, message: str | None = None) -> None:
        self.dialog_id = dialog_id
        super().__init__(message or f"Dialog {dialog_id} failed")

    def __str__(self) -> str:  # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class UnknownDialogError(DialogError, KeyError):
    code = "unknown_dialog"

    def __init__(self, dialog_id: str) -> None:
        super().__init__(dialog_id, f"Dialog {dialog_id} not found")


class AlreadyVisibleError(DialogError):
    code = "already_visible"
    level = logging.WARNING

    def __init__(self, dialog_id: str) -> None:
        super().__init__(dialog_id, f"Dialog {dialog_id} is already visible")


class NotVisibleError(DialogError):
    code = "not_visible"
    level = logging.DEBUG

    def __init__(self, dialog_id: str) -> None:
        super().__init__(dialog_id, f"Dialog {dialog_id} is not visible")


class DuplicateRegistrationError(DialogError):
    code = "duplicate_registration"
    level = logging.WARNING

    def __init__(self, dialog_id: str) -> None:
        super().__init__(dialog_id, f"Dialog {dialog_id} already exists, overwriting")


class DialogCallbackError(DialogError):
    """A caller-supplied hook raised; wraps the original exception."""

    code = "callback_error"

    def __init__(self, dialog_id: str, hook: str, original: BaseException) -> None:
        self.hook = hook
        self.original = original
        super().__init__(dialog_id, f"Error in {hook} callback for {dialog_id}: {original}")


class InvalidContentError(DialogError):
    """Content or footer value is neither text, a widget nor a content variant."""

    code = "invalid_content"

    def __init__(self, dialog_id: str, detail: object) -> None:
        super().__init__(dialog_id, f"Invalid content for dialog {dialog_id}: {detail}")
