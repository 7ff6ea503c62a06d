"""Dialog registry.

Insertion-ordered mapping of dialog id -> ``DialogDescriptor``. Owns
descriptor lifetime only; rendering state lives in the container layer.

Re-registering an id replaces the descriptor in place (the id keeps its
original position in ``ids()``) and reports the overwrite to the caller,
which decides how loudly to complain.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .errors import UnknownDialogError
from .models import DialogDescriptor

__all__ = ["DialogRegistry"]


class DialogRegistry:
    def __init__(self) -> None:
        self._dialogs: Dict[str, DialogDescriptor] = {}

    def register(self, descriptor: DialogDescriptor) -> bool:
        """Store ``descriptor``. Returns True if an existing entry was replaced."""
        replaced = descriptor.id in self._dialogs
        self._dialogs[descriptor.id] = descriptor
        return replaced

    def get(self, dialog_id: str) -> DialogDescriptor:
        try:
            return self._dialogs[dialog_id]
        except KeyError:
            raise UnknownDialogError(dialog_id) from None

    def try_get(self, dialog_id: str) -> Optional[DialogDescriptor]:
        return self._dialogs.get(dialog_id)

    def remove(self, dialog_id: str) -> Optional[DialogDescriptor]:
        return self._dialogs.pop(dialog_id, None)

    def ids(self) -> List[str]:
        return list(self._dialogs.keys())

    def visible_ids(self) -> List[str]:
        return [d.id for d in self._dialogs.values() if d.visible]

    def __contains__(self, dialog_id: object) -> bool:
        return dialog_id in self._dialogs

    def __iter__(self) -> Iterator[DialogDescriptor]:
        return iter(list(self._dialogs.values()))

    def __len__(self) -> int:
        return len(self._dialogs)
