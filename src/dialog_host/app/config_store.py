"""Dialog layer configuration persistence.

Stores the defaults and behaviour switches of the dialog layer in a small
JSON file so a host can tune them without code changes.

Design principles:
- Plain JSON, no widgets involved, so it can be unit-tested headless.
- Explicit schema with version field to enable future migrations.
- Graceful fallback: corrupt or incompatible files produce defaults instead of raising.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from dialog_host.dialogs.models import DEFAULT_TITLE, DEFAULT_TOP, DEFAULT_WIDTH

__all__ = ["DialogConfig", "load_config", "save_config", "CONFIG_VERSION", "DEFAULT_FILENAME"]

_logger = logging.getLogger(__name__)

CONFIG_VERSION = 1

DEFAULT_FILENAME = "dialog_config.json"


@dataclass(slots=True)
class DialogConfig:
    """Serializable dialog layer configuration.

    Attributes
    ----------
    version: Schema version for migration handling.
    default_title, default_width, default_top: Fallbacks for omitted options.
    backdrop_rgba: Colour painted behind modal dialogs.
    raise_on_show: Re-shown dialogs are raised above every other dialog.
        When False stacking follows container creation order.
    """

    version: int = CONFIG_VERSION
    default_title: str = DEFAULT_TITLE
    default_width: str = DEFAULT_WIDTH
    default_top: str = DEFAULT_TOP
    backdrop_rgba: Tuple[int, int, int, int] = (0, 0, 0, 128)
    raise_on_show: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["backdrop_rgba"] = list(self.backdrop_rgba)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DialogConfig":
        rgba = data.get("backdrop_rgba", (0, 0, 0, 128))
        try:
            r, g, b, a = (max(0, min(255, int(c))) for c in rgba)
        except (TypeError, ValueError):
            r, g, b, a = (0, 0, 0, 128)
        return cls(
            version=int(data.get("version", CONFIG_VERSION)),
            default_title=str(data.get("default_title") or DEFAULT_TITLE),
            default_width=str(data.get("default_width") or DEFAULT_WIDTH),
            default_top=str(data.get("default_top") or DEFAULT_TOP),
            backdrop_rgba=(r, g, b, a),
            raise_on_show=bool(data.get("raise_on_show", True)),
        )


def _resolve_path(base_dir: str | Path | None) -> Path:
    base = Path(base_dir) if base_dir else Path.cwd()
    return base / DEFAULT_FILENAME


def load_config(base_dir: str | Path | None = None) -> DialogConfig:
    """Load dialog config from ``base_dir`` (defaults to CWD)."""
    path = _resolve_path(base_dir)
    if not path.exists():
        return DialogConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        cfg = DialogConfig.from_dict(data)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        _logger.warning("Ignoring unreadable dialog config %s: %s", path, exc)
        return DialogConfig()
    if cfg.version != CONFIG_VERSION:
        _logger.warning("Dialog config version %s unsupported, using defaults", cfg.version)
        return DialogConfig()
    return cfg


def save_config(cfg: DialogConfig, base_dir: str | Path | None = None) -> Path:
    """Persist config atomically; returns the path written."""
    path = _resolve_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(cfg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
    return path
