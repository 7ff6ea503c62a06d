from pathlib import Path
import json

from dialog_host.app.config_store import (
    CONFIG_VERSION,
    DEFAULT_FILENAME,
    DialogConfig,
    load_config,
    save_config,
)


def test_load_returns_defaults_when_missing(tmp_path: Path):
    cfg = load_config(tmp_path)
    assert cfg.version == CONFIG_VERSION
    assert cfg.default_title == "Custom Dialog"
    assert cfg.default_width == "600px"
    assert cfg.default_top == "15vh"
    assert cfg.backdrop_rgba == (0, 0, 0, 128)
    assert cfg.raise_on_show is True


def test_save_and_reload_round_trip(tmp_path: Path):
    cfg = DialogConfig(default_title="Plugin", backdrop_rgba=(10, 20, 30, 200), raise_on_show=False)
    path = save_config(cfg, tmp_path)
    assert path == tmp_path / DEFAULT_FILENAME
    assert not path.with_suffix(".json.tmp").exists()
    reloaded = load_config(tmp_path)
    assert reloaded.default_title == "Plugin"
    assert reloaded.backdrop_rgba == (10, 20, 30, 200)
    assert reloaded.raise_on_show is False


def test_corrupt_file_falls_back(tmp_path: Path):
    (tmp_path / DEFAULT_FILENAME).write_text("{not json", encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg == DialogConfig()


def test_version_mismatch_falls_back(tmp_path: Path):
    data = DialogConfig(default_title="X").to_dict()
    data["version"] = CONFIG_VERSION + 1
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert load_config(tmp_path).default_title == "Custom Dialog"


def test_backdrop_values_clamped_and_validated():
    cfg = DialogConfig.from_dict({"backdrop_rgba": [300, -5, 10, 128]})
    assert cfg.backdrop_rgba == (255, 0, 10, 128)
    bad = DialogConfig.from_dict({"backdrop_rgba": "red"})
    assert bad.backdrop_rgba == (0, 0, 0, 128)


def test_blank_defaults_replaced():
    cfg = DialogConfig.from_dict({"default_title": "", "default_width": None})
    assert cfg.default_title == "Custom Dialog"
    assert cfg.default_width == "600px"


def test_config_defaults_feed_new_dialogs(host):
    from dialog_host.services.dialog_service import DialogService

    svc = DialogService(config=DialogConfig(default_title="Untitled", default_width="320px"))
    svc.register_dialog("a")
    d = svc.get_dialog("a")
    assert d.title == "Untitled" and d.width == "320px"
