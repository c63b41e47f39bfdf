import os
from pathlib import Path

import pytest

from lazycss.stylesheet.config import StylesheetConfig, ConfigManager


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = StylesheetConfig()

    assert config.source_dir == str(tmp_path)
    assert config.output_dir == config.source_dir
    assert config.output_root == config.output_dir
    assert not (config.compress or config.force or config.debug)
    assert (config.source_ext, config.output_ext) == (".scss", ".css")
    assert config.output_prefix == ""


def test_output_prefix(tmp_path):
    config = StylesheetConfig(source_dir=str(tmp_path / "src"),
                              output_dir=str(tmp_path / "public" / "assets" / "css"),
                              output_root=str(tmp_path / "public"))

    assert config.output_prefix == "/assets/css"


def test_output_dir_must_be_inside_root(tmp_path):
    with pytest.raises(ValueError):
        StylesheetConfig(source_dir=str(tmp_path), output_dir=str(tmp_path / "a"),
                         output_root=str(tmp_path / "b"))


def test_from_dict_section_and_flat(tmp_path):
    flat = StylesheetConfig.from_dict({"source_dir": str(tmp_path), "compress": True})
    nested = StylesheetConfig.from_dict({"lazycss": {"source_dir": str(tmp_path), "compress": True}})

    assert flat == nested
    assert flat.compress


def test_from_dict_rejects_unknown_options():
    with pytest.raises(ValueError, match="dest"):
        StylesheetConfig.from_dict({"dest": "/tmp"})


def test_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("LAZYCSS_SOURCE_DIR", str(tmp_path))
    monkeypatch.setenv("LAZYCSS_FORCE", "yes")
    monkeypatch.setenv("LAZYCSS_COMPRESS", "0")

    config = StylesheetConfig.from_env()

    assert config.source_dir == str(tmp_path)
    assert config.force is True
    assert config.compress is False


def test_from_env_without_variables(monkeypatch):
    for key in list(os.environ):
        if key.startswith("LAZYCSS_"):
            monkeypatch.delenv(key)

    with pytest.raises(ValueError):
        StylesheetConfig.from_env()


def test_file_paths_are_relative_to_the_file(tmp_path):
    path = tmp_path / "conf" / "lazycss.toml"
    path.parent.mkdir()
    path.write_text('[lazycss]\nsource_dir = "../styles"\noutput_dir = "../public"\ndebug = true\n')

    config = StylesheetConfig.from_file(path)

    assert config.source_dir == str(tmp_path / "styles")
    assert config.output_dir == str(tmp_path / "public")
    assert config.debug


def test_invalid_file(tmp_path):
    path = tmp_path / "lazycss.toml"
    path.write_text("[lazycss\n")

    with pytest.raises(ValueError):
        StylesheetConfig.from_file(path)
    with pytest.raises(ValueError):
        StylesheetConfig.from_file(tmp_path / "missing.toml")


def test_save_and_load(tmp_path):
    config = StylesheetConfig(source_dir=str(tmp_path / "src"), compress=True)
    path = ConfigManager.save_config(config, tmp_path / "cfg" / "lazycss.toml")

    assert ConfigManager.load_config(path) == config


def test_load_config_priority(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(ConfigManager, "DEFAULT_FALLBACK_CONFIG_PATH", tmp_path / "none.toml")
    monkeypatch.setenv("LAZYCSS_SOURCE_DIR", str(tmp_path / "from-env"))

    assert ConfigManager.load_config().source_dir == str(tmp_path / "from-env")

    Path("lazycss.toml").write_text('[lazycss]\nsource_dir = "from-file"\n')
    assert ConfigManager.load_config().source_dir == str(tmp_path / "from-file")
