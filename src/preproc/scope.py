"""Scope classification of size()/smooth() call-sites.

A call may only be lifted when it runs exactly once at startup: as a bare
top-level statement of a static sketch, or as a direct statement of the entry
method of an active or java sketch. The check climbs a fixed chain of
tree-sitter Java node kinds instead of doing scope analysis:

    method_invocation
      expression_statement
        program                                    global (static sketch)
        block
          method_declaration "setup"
            program                                entry method (active sketch)
            class_body
              class_declaration
                program                            entry method (class sketch)

Anything nested deeper (conditionals, loops, lambdas, inner classes, argument
lists) falls off the chain and is classified invalid.
"""

from __future__ import annotations

from tree_sitter import Node

from parse.treesitter_sketch import (
    SketchMode,
    SketchTree,
    node_depth,
    node_text,
    sketch_class_body,
)
from preproc.models import ScopeClassification

DEFAULT_ENTRY_METHOD = "setup"

# Ancestor counts of a method_invocation for each accepted shape.
_GLOBAL_DEPTH = 2
_TOP_LEVEL_METHOD_DEPTH = 4
_CLASS_METHOD_DEPTH = 6


class ScopeValidator:
    """Classifies call-site nodes of one parsed sketch."""

    def __init__(
        self, sketch: SketchTree, entry_method: str = DEFAULT_ENTRY_METHOD
    ) -> None:
        self.sketch = sketch
        self.entry_method = entry_method
        body = sketch_class_body(sketch)
        self._sketch_class_span = (
            None if body is None else (body.start_byte, body.end_byte)
        )

    def classify(self, node: Node) -> ScopeClassification:
        depth = node_depth(node)
        if depth < _GLOBAL_DEPTH:
            return ScopeClassification.INVALID

        statement = node.parent
        if statement is None or statement.type != "expression_statement":
            return ScopeClassification.INVALID

        container = statement.parent
        if container is None:
            return ScopeClassification.INVALID

        if container.type == "program":
            if depth == _GLOBAL_DEPTH and self.sketch.mode is SketchMode.STATIC:
                return ScopeClassification.GLOBAL
            return ScopeClassification.INVALID

        if self.sketch.mode is SketchMode.STATIC or depth < _TOP_LEVEL_METHOD_DEPTH:
            return ScopeClassification.INVALID

        if container.type != "block":
            return ScopeClassification.INVALID
        method = container.parent
        if method is None or method.type != "method_declaration":
            return ScopeClassification.INVALID
        if node_text(method.child_by_field_name("name")) != self.entry_method:
            return ScopeClassification.INVALID

        if self._is_sketch_member(method, depth):
            return ScopeClassification.ENTRY_METHOD
        return ScopeClassification.INVALID

    def _is_sketch_member(self, method: Node, depth: int) -> bool:
        owner = method.parent
        if owner is None:
            return False

        if owner.type == "program":
            return (
                depth == _TOP_LEVEL_METHOD_DEPTH
                and self.sketch.mode is SketchMode.ACTIVE
                and not self.sketch.wrapped
            )

        if owner.type != "class_body" or depth != _CLASS_METHOD_DEPTH:
            return False
        # Helper classes next to the sketch class are not the sketch.
        return (owner.start_byte, owner.end_byte) == self._sketch_class_span


def classify_scope(
    sketch: SketchTree, node: Node, entry_method: str = DEFAULT_ENTRY_METHOD
) -> ScopeClassification:
    return ScopeValidator(sketch, entry_method).classify(node)


__all__ = [
    "DEFAULT_ENTRY_METHOD",
    "ScopeValidator",
    "classify_scope",
]
