from __future__ import annotations

import json
from pathlib import Path

import pytest

from fontslice.core.config import ConfigError, ServiceConfig, load_config


def test_defaults_derive_directories_from_data_dir() -> None:
    config = ServiceConfig()

    assert config.data_dir == Path("data")
    assert config.static_root == Path("data/static")
    assert config.fonts_root == Path("data/fonts")
    assert config.cache_cleanup_days == 7
    assert config.port == 3000
    assert config.single_flight is True


def test_environment_values_are_applied(tmp_path: Path) -> None:
    config = load_config(
        environ={
            "FONTSLICE_DATA_DIR": str(tmp_path),
            "FONTSLICE_CACHE_DAYS": "3",
            "FONTSLICE_PORT": "8080",
            "FONTSLICE_STATIC_DIR": str(tmp_path / "public"),
        }
    )

    assert config.fonts_root == tmp_path / "fonts"
    assert config.static_root == tmp_path / "public"
    assert config.cache_cleanup_days == 3
    assert config.port == 8080


def test_file_overrides_environment_and_arguments_override_file(tmp_path: Path) -> None:
    config_file = tmp_path / "fontslice.yml"
    config_file.write_text("port: 4000\nhost: 127.0.0.1\ncache_cleanup_days: 1\n", encoding="utf-8")

    config = load_config(
        config_file,
        environ={"FONTSLICE_PORT": "8080", "FONTSLICE_HOST": "10.0.0.1"},
        port=5000,
        host=None,
    )

    assert config.port == 5000
    assert config.host == "127.0.0.1"
    assert config.cache_cleanup_days == 1


def test_json_configuration_file(tmp_path: Path) -> None:
    config_file = tmp_path / "fontslice.json"
    config_file.write_text(json.dumps({"data_dir": str(tmp_path / "srv")}), encoding="utf-8")

    config = load_config(config_file, environ={})

    assert config.static_root == tmp_path / "srv" / "static"


@pytest.mark.parametrize(
    "content",
    ["port: not-a-number\n", "unknown_key: 1\n", "- a\n- list\n", "cache_cleanup_days: -1\n"],
)
def test_invalid_configuration_raises(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / "fontslice.yml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file, environ={})


def test_missing_configuration_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yml", environ={})


def test_ensure_directories_creates_layout(tmp_path: Path) -> None:
    config = ServiceConfig(data_dir=tmp_path / "data").ensure_directories()

    assert config.static_root.is_dir()
    assert config.fonts_root.is_dir()


def test_derived_directories_follow_data_dir_and_explicit_values(tmp_path: Path) -> None:
    config = ServiceConfig(data_dir=tmp_path, fonts_dir=tmp_path / "custom-fonts")

    assert config.static_dir == tmp_path / "static"
    assert config.fonts_dir == tmp_path / "custom-fonts"
    assert config.model_copy().static_root == tmp_path / "static"


def test_non_path_data_dir_is_a_configuration_error(tmp_path: Path) -> None:
    config_file = tmp_path / "fontslice.yml"
    config_file.write_text("data_dir: [1, 2]\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file, environ={})
