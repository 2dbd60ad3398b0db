"""Parsing utilities for sketch sources"""

from parse.treesitter_sketch import (
    SketchMode,
    SketchTree,
    find_imports,
    node_depth,
    node_text,
    parse_sketch,
)

__all__ = [
    "SketchMode",
    "SketchTree",
    "find_imports",
    "node_depth",
    "node_text",
    "parse_sketch",
]
