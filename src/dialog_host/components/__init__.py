"""Dialog widgets and their supporting infrastructure.

 - ``dialog_panel``: backdrop, panel, viewport and per-dialog container plus
   the ``render_dialog`` rebuild entry point
 - ``dialog_layer``: the shared overlay and container bookkeeping
 - ``dialog_interactions``: escape, click-outside, close button and drag
"""

from __future__ import annotations

from .dialog_interactions import DialogInteractions, scope_name
from .dialog_layer import DialogLayer, DialogLayerManager
from .dialog_panel import (
    DialogBackdrop,
    DialogContainer,
    DialogPanel,
    DialogViewport,
    render_dialog,
)

__all__ = [
    "DialogBackdrop",
    "DialogContainer",
    "DialogPanel",
    "DialogViewport",
    "render_dialog",
    "DialogLayer",
    "DialogLayerManager",
    "DialogInteractions",
    "scope_name",
]
