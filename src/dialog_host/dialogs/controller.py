"""Controller handle returned from ``DialogService.register_dialog``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from dialog_host.services.dialog_service import DialogService

__all__ = ["DialogController"]


class DialogController:
    """Lifecycle operations bound to one dialog id.

    The handle holds no state of its own; every call routes through the
    service, so a handle kept after ``destroy()`` simply reports the id as
    unknown.
    """

    def __init__(self, service: "DialogService", dialog_id: str) -> None:
        self._service = service
        self._dialog_id = dialog_id

    @property
    def dialog_id(self) -> str:
        return self._dialog_id

    def show(self) -> bool:
        return self._service.show_dialog(self._dialog_id)

    def hide(self) -> bool:
        return self._service.close_dialog(self._dialog_id)

    def toggle(self) -> None:
        self._service.toggle_dialog(self._dialog_id)

    def set_title(self, title: str) -> None:
        self._service.set_dialog_title(self._dialog_id, title)

    def set_content(self, content: Any) -> None:
        self._service.set_dialog_content(self._dialog_id, content)

    def is_visible(self) -> bool:
        return self._service.is_dialog_visible(self._dialog_id)

    def destroy(self) -> None:
        self._service.destroy_dialog(self._dialog_id)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"DialogController({self._dialog_id!r})"
