from __future__ import annotations

import json
from pathlib import Path

import pytest

from embedding_playground.core.config import (
    CONFIG_VERSION,
    DEFAULT_CONFIG,
    ConfigManager,
    load_config,
    update_config,
)


@pytest.fixture(autouse=True)
def _clear_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EMBEDDING_PLAYGROUND_BACKEND", raising=False)
    monkeypatch.delenv("EMBEDDING_PLAYGROUND_MODEL", raising=False)


def test_defaults_without_config_file(tmp_path: Path) -> None:
    assert load_config(config_dir=tmp_path) == DEFAULT_CONFIG


def test_update_persists_to_disk(tmp_path: Path) -> None:
    update_config({"backend": "transformers", "vector_preview": 4}, config_dir=tmp_path)

    stored = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert stored["backend"] == "transformers"
    assert stored["vector_preview"] == 4
    assert stored["config_version"] == CONFIG_VERSION
    assert ConfigManager(config_dir=tmp_path).get("backend") == "transformers"


def test_environment_overrides_stored_backend(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    update_config({"backend": "transformers"}, config_dir=tmp_path)
    monkeypatch.setenv("EMBEDDING_PLAYGROUND_BACKEND", "hash")
    monkeypatch.setenv("EMBEDDING_PLAYGROUND_MODEL", "local/model")

    manager = ConfigManager(config_dir=tmp_path)

    assert manager.get("backend") == "hash"
    assert manager.as_dict()["model_name"] == "local/model"
    manager.set("vector_preview", 2)
    stored = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert stored["backend"] == "transformers"


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{broken", encoding="utf-8")

    assert ConfigManager(config_dir=tmp_path).as_dict() == DEFAULT_CONFIG

    (tmp_path / "config.json").write_text("[]", encoding="utf-8")

    assert ConfigManager(config_dir=tmp_path).as_dict() == DEFAULT_CONFIG


def test_null_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(
        json.dumps({"config_version": 0, "good_threshold": None, "ok_threshold": 0.4}), encoding="utf-8"
    )

    config = ConfigManager(config_dir=tmp_path).as_dict()

    assert config["good_threshold"] == DEFAULT_CONFIG["good_threshold"]
    assert config["ok_threshold"] == 0.4
    assert config["config_version"] == CONFIG_VERSION


def test_config_dir_can_come_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EMBEDDING_PLAYGROUND_CONFIG_DIR", str(tmp_path / "custom"))

    manager = ConfigManager()
    manager.set("hash_layout", "pooled")

    assert (tmp_path / "custom" / "config.json").exists()
