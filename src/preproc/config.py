from __future__ import annotations

import re
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "sketch.toml"

_JAVA_NAME_RE = re.compile(r"[A-Za-z_$][\w$]*")

CORE_IMPORTS = (
    "processing.core.*",
    "processing.data.*",
    "processing.event.*",
    "processing.opengl.*",
)

DEFAULT_IMPORTS = (
    "java.util.HashMap",
    "java.util.ArrayList",
    "java.io.File",
    "java.io.BufferedReader",
    "java.io.PrintWriter",
    "java.io.InputStream",
    "java.io.OutputStream",
    "java.io.IOException",
)


class PreprocessorConfig(BaseModel):
    """Settings for turning a sketch into a Java compilation unit."""

    model_config = ConfigDict(extra="forbid")

    package_name: str = Field(
        default="processing.test",
        description="Java package of the generated sketch class",
    )
    entry_method: str = Field(
        default="setup",
        description="Method whose body may hold size() and smooth()",
    )
    indent: int = Field(
        default=2,
        ge=0,
        description="Spaces per indentation level in generated code",
    )
    core_imports: list[str] = Field(default_factory=lambda: list(CORE_IMPORTS))
    default_imports: list[str] = Field(default_factory=lambda: list(DEFAULT_IMPORTS))
    extra_imports: list[str] = Field(
        default_factory=list,
        description="Imports appended after the core and default imports",
    )

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        if not all(_JAVA_NAME_RE.fullmatch(part) for part in v.split(".")):
            msg = f"Invalid package name '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("entry_method")
    @classmethod
    def validate_entry_method(cls, v: str) -> str:
        if not _JAVA_NAME_RE.fullmatch(v):
            msg = f"Invalid entry method name '{v}'"
            raise ValueError(msg)
        return v

    @property
    def imports(self) -> list[str]:
        return [*self.core_imports, *self.default_imports, *self.extra_imports]


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> PreprocessorConfig:
    """Load configuration from sketch.toml in the sketch folder if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return PreprocessorConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return PreprocessorConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


__all__ = ["CONFIG_FILENAME", "ConfigError", "PreprocessorConfig", "load_config"]
