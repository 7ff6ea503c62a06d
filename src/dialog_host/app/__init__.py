"""Application layer: configuration persistence and bootstrap.

``create_dialog_context`` is imported from ``dialog_host.app.bootstrap`` (or
the top-level package); it is kept out of this module so the dialog service
can depend on the config store without an import cycle.
"""

from .config_store import (  # noqa: F401
    CONFIG_VERSION,
    DEFAULT_FILENAME,
    DialogConfig,
    load_config,
    save_config,
)

__all__ = [
    "DialogConfig",
    "load_config",
    "save_config",
    "CONFIG_VERSION",
    "DEFAULT_FILENAME",
]
