"""Single-pass walk that finds and classifies size()/smooth() call-sites."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tree_sitter import Node

from parse.treesitter_sketch import SketchTree, node_text
from preproc.models import (
    CallKind,
    CallSite,
    FailureKind,
    MetadataBuilder,
    RewriteEdit,
    ScopeClassification,
    SketchMetadata,
    ValidationResult,
)
from preproc.params import validate_size_arguments, validate_smooth_arguments
from preproc.rewriter import check_disjoint, comment_out
from preproc.scope import DEFAULT_ENTRY_METHOD, ScopeValidator

logger = logging.getLogger(__name__)

_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

_VALIDATORS = {
    CallKind.SIZE: validate_size_arguments,
    CallKind.SMOOTH: validate_smooth_arguments,
}


@dataclass(frozen=True)
class VisitedCall:
    call_site: CallSite
    scope: ScopeClassification
    result: ValidationResult


@dataclass(frozen=True)
class VisitOutcome:
    metadata: SketchMetadata
    edits: tuple[RewriteEdit, ...] = field(default_factory=tuple)
    calls: tuple[VisitedCall, ...] = field(default_factory=tuple)


def _call_kind(node: Node) -> CallKind | None:
    if node.type != "method_invocation":
        return None
    if node.child_by_field_name("object") is not None:
        return None
    name = node_text(node.child_by_field_name("name"))
    try:
        kind = CallKind(name)
    except ValueError:
        return None
    # smooth() without a level is an ordinary call, not the setting.
    if kind is CallKind.SMOOTH and len(_argument_texts(node)) != 1:
        return None
    return kind


def _argument_texts(node: Node) -> tuple[str, ...]:
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return ()
    return tuple(
        node_text(child)
        for child in arguments.named_children
        if child.type not in _COMMENT_TYPES
    )


class SketchCallVisitor:
    """Walks a sketch tree once and resolves every size()/smooth() call.

    Each call is recorded as seen. Calls in a permitted scope have their
    arguments validated. Once the walk is over, the valid call that decided
    the outcome of its kind is commented out.
    """

    def __init__(
        self, sketch: SketchTree, entry_method: str = DEFAULT_ENTRY_METHOD
    ) -> None:
        self.sketch = sketch
        self.scope_validator = ScopeValidator(sketch, entry_method)
        self._visited = False

    def visit(self) -> VisitOutcome:
        if self._visited:
            msg = "a sketch tree can only be visited once"
            raise RuntimeError(msg)
        self._visited = True

        builder = MetadataBuilder()
        calls: list[VisitedCall] = []

        for node in self._walk():
            kind = _call_kind(node)
            if kind is None:
                continue
            visited = self._visit_call(node, kind)
            calls.append(visited)
            builder.record(visited.call_site, visited.result)

        metadata = builder.freeze()
        # Only the call that decided each outcome is removed from the body.
        deciding = builder.deciding_calls()
        check_disjoint((site.start, site.end) for site in deciding)
        edits: list[RewriteEdit] = []
        for site in deciding:
            edits.extend(comment_out(site))
        return VisitOutcome(
            metadata=metadata,
            edits=tuple(edits),
            calls=tuple(calls),
        )

    def _walk(self):
        """Yield nodes in pre-order, following source order."""
        stack = [self.sketch.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def _visit_call(self, node: Node, kind: CallKind) -> VisitedCall:
        start, end = self.sketch.original_span(node)
        call_site = CallSite(
            kind=kind,
            argument_texts=_argument_texts(node),
            start=start,
            end=end,
            line=node.start_point[0] + 1,
        )

        scope = self.scope_validator.classify(node)
        if scope is ScopeClassification.INVALID:
            result = ValidationResult(valid=False, failure=FailureKind.SCOPE)
        else:
            result = _VALIDATORS[kind](call_site.argument_texts)

        logger.debug(
            "%s() at line %d: scope=%s valid=%s",
            kind.value,
            call_site.line,
            scope.value,
            result.valid,
        )
        return VisitedCall(call_site=call_site, scope=scope, result=result)


def visit_sketch(
    sketch: SketchTree, entry_method: str = DEFAULT_ENTRY_METHOD
) -> VisitOutcome:
    return SketchCallVisitor(sketch, entry_method).visit()


__all__ = ["SketchCallVisitor", "VisitOutcome", "VisitedCall", "visit_sketch"]
