"""Sketch to Java compilation unit, including the size/smooth pass.

The sketch body is copied through with insert-only edits: valid size() and
smooth() calls are commented out, and in static and active sketches the import
statements are commented out and repeated in the generated header. Generated
code is wrapped around the body so that body line N maps to output line
``N + line_offset``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tree_sitter import Node

from parse.treesitter_sketch import (
    SketchMode,
    SketchTree,
    node_text,
    parse_sketch,
    sketch_class_body,
    top_level_method_names,
)
from preproc.accessors import (
    WarningSink,
    emit_accessors,
    log_warning,
    render_accessors,
)
from preproc.config import PreprocessorConfig
from preproc.models import Accessor, RewriteEdit, SketchMetadata, SketchWarning
from preproc.rewriter import insert_after, insert_before, render
from preproc.visitor import VisitedCall, visit_sketch
from utils import is_valid_class_name

PREPROCESSOR_COMMENT = "/* autogenerated by sketch-preproc */"

_MOVED_IMPORT_OPEN = "/* moved to header: "
_MOVED_IMPORT_CLOSE = " */"


class PreprocessError(Exception):
    """Raised when a sketch cannot be turned into a compilation unit."""


@dataclass(frozen=True)
class PreprocessResult:
    code: str
    mode: SketchMode
    line_offset: int
    metadata: SketchMetadata
    edits: tuple[RewriteEdit, ...] = field(default_factory=tuple)
    accessors: tuple[Accessor, ...] = field(default_factory=tuple)
    warnings: tuple[SketchWarning, ...] = field(default_factory=tuple)
    calls: tuple[VisitedCall, ...] = field(default_factory=tuple)


class SketchPreprocessor:
    """Generates the Java source of one sketch."""

    def __init__(
        self,
        sketch_name: str,
        package_name: str | None = None,
        config: PreprocessorConfig | None = None,
        report: WarningSink = log_warning,
    ) -> None:
        if not is_valid_class_name(sketch_name):
            msg = f"'{sketch_name}' is not a valid sketch name"
            raise PreprocessError(msg)

        self.sketch_name = sketch_name
        self.config = config or PreprocessorConfig()
        self.package_name = package_name or self.config.package_name
        self.report = report

    @property
    def indent1(self) -> str:
        return " " * self.config.indent

    @property
    def indent2(self) -> str:
        return self.indent1 * 2

    def write(self, source: str) -> PreprocessResult:
        source_bytes = source.encode("utf8")
        sketch = parse_sketch(source_bytes)
        outcome = visit_sketch(sketch, self.config.entry_method)

        warnings: list[SketchWarning] = []

        def collect(warning: SketchWarning) -> None:
            warnings.append(warning)
            self.report(warning)

        accessors = emit_accessors(outcome.metadata, collect)
        found_main = "main" in top_level_method_names(sketch)

        edits = list(outcome.edits)
        if sketch.mode is not SketchMode.JAVA:
            for span in sketch.imports:
                edits.append(insert_before(span.start, _MOVED_IMPORT_OPEN))
                edits.append(insert_after(span.end, _MOVED_IMPORT_CLOSE))

        header = self._header(sketch)
        footer = ""
        if sketch.mode is SketchMode.JAVA:
            edits.extend(self._class_member_edits(sketch, accessors, found_main))
        else:
            footer = self._footer(sketch.mode, accessors, found_main)

        body = render(source_bytes, edits)
        return PreprocessResult(
            code="\n".join(header) + "\n" + body + footer,
            mode=sketch.mode,
            line_offset=len(header),
            metadata=outcome.metadata,
            edits=tuple(edits),
            accessors=tuple(accessors),
            warnings=tuple(warnings),
            calls=outcome.calls,
        )

    def _header(self, sketch: SketchTree) -> list[str]:
        lines = [PREPROCESSOR_COMMENT, f"package {self.package_name};", ""]
        lines.extend(f"import {name};" for name in self.config.imports)
        if sketch.mode is not SketchMode.JAVA:
            lines.extend(span.text for span in sketch.imports)
        lines.append("")

        if sketch.mode is not SketchMode.JAVA:
            lines.append(f"public class {self.sketch_name} extends PApplet {{")
        if sketch.mode is SketchMode.STATIC:
            lines.append(f"{self.indent1}public void setup() {{")
        return lines

    def _footer(
        self, mode: SketchMode, accessors: list[Accessor], found_main: bool
    ) -> str:
        parts = ["\n"]
        if mode is SketchMode.STATIC:
            parts.append(f"{self.indent2}noLoop();\n")
            parts.append(f"{self.indent1}}}\n")
        parts.append(
            self._extra_declarations(accessors, found_main, self.sketch_name)
        )
        parts.append("}\n")
        return "".join(parts)

    def _extra_declarations(
        self, accessors: list[Accessor], found_main: bool, class_name: str
    ) -> str:
        text = render_accessors(accessors, self.indent1)
        if not found_main:
            text += "\n" + self._main(class_name)
        return text

    def _main(self, class_name: str) -> str:
        i1, i2, i3 = self.indent1, self.indent2, self.indent1 * 3
        return (
            f"{i1}static public void main(String[] passedArgs) {{\n"
            f'{i2}String[] appletArgs = new String[] {{ "{class_name}" }};\n'
            f"{i2}if (passedArgs != null) {{\n"
            f"{i3}PApplet.main(concat(appletArgs, passedArgs));\n"
            f"{i2}}} else {{\n"
            f"{i3}PApplet.main(appletArgs);\n"
            f"{i2}}}\n"
            f"{i1}}}\n"
        )

    def _class_member_edits(
        self, sketch: SketchTree, accessors: list[Accessor], found_main: bool
    ) -> list[RewriteEdit]:
        body = sketch_class_body(sketch)
        closing = _closing_brace(body)
        if body is None or closing is None or body.parent is None:
            return []

        name_node = body.parent.child_by_field_name("name")
        class_name = node_text(name_node, self.sketch_name)
        text = self._extra_declarations(accessors, found_main, class_name)
        if not text:
            return []
        start, _ = sketch.original_span(closing)
        return [insert_before(start, text)]


def _closing_brace(body: Node | None) -> Node | None:
    if body is None or not body.children:
        return None
    last = body.children[-1]
    return last if last.type == "}" else None


def preprocess(
    source: str,
    sketch_name: str,
    package_name: str | None = None,
    config: PreprocessorConfig | None = None,
    report: WarningSink = log_warning,
) -> PreprocessResult:
    return SketchPreprocessor(sketch_name, package_name, config, report).write(source)


__all__ = [
    "PREPROCESSOR_COMMENT",
    "PreprocessError",
    "PreprocessResult",
    "SketchPreprocessor",
    "preprocess",
]
