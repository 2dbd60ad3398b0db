"""Shared utilities for sketch-preproc"""

from __future__ import annotations

import re
from pathlib import Path

_CLASS_NAME_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_INVALID_CHAR_RE = re.compile(r"[^A-Za-z0-9_]")


def is_valid_class_name(name: str) -> bool:
    return _CLASS_NAME_RE.fullmatch(name) is not None


def sketch_class_name(file_path: str | Path) -> str:
    """Convert a sketch file path to a usable Java class name.

    Args:
        file_path: Sketch path (e.g., "sketches/my-sketch.pde" or Path object)

    Returns:
        Class name (e.g., "my_sketch")

    Examples:
        >>> sketch_class_name("sketches/Bounce.pde")
        'Bounce'
        >>> sketch_class_name("my sketch.pde")
        'my_sketch'
        >>> sketch_class_name(Path("2024_demo.pde"))
        '_2024_demo'
    """
    stem = Path(file_path).stem
    name = _INVALID_CHAR_RE.sub("_", stem)

    # Java class names cannot start with a digit.
    if not name or name[0].isdigit():
        name = f"_{name}"

    return name
