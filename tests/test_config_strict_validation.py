from __future__ import annotations

from pathlib import Path

import pytest

from preproc.config import ConfigError, PreprocessorConfig, load_config


def _write_config(sketch_dir: Path, toml_content: str) -> None:
    (sketch_dir / "sketch.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == PreprocessorConfig()
    assert config.package_name == "processing.test"
    assert config.entry_method == "setup"
    assert config.imports[0] == "processing.core.*"


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "package_name = ")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "toml_content",
    [
        'package_name = "org.example-sketches"',
        'package_name = "org..example"',
        'entry_method = "set up"',
        "indent = -1",
    ],
)
def test_invalid_values_rejected(tmp_path: Path, toml_content: str) -> None:
    _write_config(tmp_path, toml_content)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
package_name = "org.example.sketches"
entry_method = "settings"
indent = 4
extra_imports = ["java.util.Map"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.package_name == "org.example.sketches"
    assert config.entry_method == "settings"
    assert config.indent == 4
    assert config.imports[-1] == "java.util.Map"
