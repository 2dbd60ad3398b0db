"""Tree-sitter based parsing of sketch sources.

Sketches are written in a Java-shaped dialect, so the Java grammar is used.
Three authoring styles are recognised:

- static: bare top-level statements, later wrapped into a startup method
- active: top-level method declarations, the enclosing class is implicit
- java: an explicit top-level class extending ``PApplet``, possibly next to
  helper classes

Grammar versions that reject top-level method declarations are handled by
re-parsing the sketch inside a one-line synthetic class header, so byte
offsets and line numbers of the original source stay recoverable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_java import language as get_java_language

_PARSER: Parser | None = None

WRAPPER_CLASS_NAME = "PdeSketchWrapper"
_WRAPPER_PREFIX = f"class {WRAPPER_CLASS_NAME} {{ ".encode("utf8")
_WRAPPER_SUFFIX = b"\n}\n"

_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})
_PREAMBLE_TYPES = frozenset({"import_declaration", "package_declaration"})


class SketchMode(str, Enum):
    """Authoring style of a sketch."""

    STATIC = "static"
    ACTIVE = "active"
    JAVA = "java"


@dataclass(frozen=True)
class ImportSpan:
    """An import statement found in the original source."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class SketchTree:
    """Parsed sketch plus the mapping back to the original source bytes.

    ``offset`` is the number of bytes prepended to the original source before
    parsing (non-zero only for a wrapped active-mode sketch).
    """

    tree: Tree
    source: bytes
    mode: SketchMode
    offset: int = 0
    imports: tuple[ImportSpan, ...] = field(default_factory=tuple)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def wrapped(self) -> bool:
        return self.offset > 0

    def original_span(self, node: Node) -> tuple[int, int]:
        """Byte span of ``node`` in the original (unwrapped) source."""
        return node.start_byte - self.offset, node.end_byte - self.offset


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Java language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_java_language())
        _PARSER = Parser(lang)

    return _PARSER


def node_text(node: Node | None, default: str = "") -> str:
    if node is None or node.text is None:
        return default
    return node.text.decode("utf8", errors="ignore")


def node_depth(node: Node) -> int:
    """Number of ancestors between ``node`` and the tree root."""
    depth = 0
    current = node.parent
    while current is not None:
        depth += 1
        current = current.parent
    return depth


def find_imports(root: Node) -> tuple[ImportSpan, ...]:
    """Import declarations at the top level of a raw (unwrapped) parse.

    Declarations that error recovery folded into a top-level ``ERROR`` node
    are included; imports inside comments or strings are never nodes.
    """
    spans: list[ImportSpan] = []
    for child in root.named_children:
        candidates = child.named_children if child.type == "ERROR" else [child]
        spans.extend(
            ImportSpan(
                start=node.start_byte,
                end=node.end_byte,
                text=node_text(node),
            )
            for node in candidates
            if node.type == "import_declaration"
        )
    return tuple(spans)


def _blank_imports(source: bytes, imports: tuple[ImportSpan, ...]) -> bytes:
    """Replace import statements with spaces, keeping every byte offset."""
    buffer = bytearray(source)
    for span in imports:
        buffer[span.start : span.end] = b" " * (span.end - span.start)
    return bytes(buffer)


def _body_children(root: Node) -> list[Node]:
    return [
        child
        for child in root.named_children
        if child.type not in _COMMENT_TYPES and child.type not in _PREAMBLE_TYPES
    ]


def _is_papplet_class(node: Node) -> bool:
    superclass = node.child_by_field_name("superclass")
    if superclass is None:
        return False
    type_name = node_text(superclass).split()[-1]
    return type_name.rsplit(".", 1)[-1] == "PApplet"


def _find_papplet_class(root: Node) -> Node | None:
    for child in _body_children(root):
        if child.type == "class_declaration" and _is_papplet_class(child):
            return child
    return None


def _detect_mode(root: Node) -> SketchMode:
    children = _body_children(root)
    if _find_papplet_class(root) is not None:
        return SketchMode.JAVA
    if any(child.type == "method_declaration" for child in children):
        return SketchMode.ACTIVE
    return SketchMode.STATIC


def parse_sketch(source: str | bytes) -> SketchTree:
    """Parse a sketch and detect its authoring style.

    The returned tree never fails to build: syntax errors that cannot be
    resolved by the active-mode wrapper leave a best-effort static tree.
    """
    source_bytes = source.encode("utf8") if isinstance(source, str) else source
    parser = _get_parser()

    tree = parser.parse(source_bytes)
    imports = find_imports(tree.root_node)
    if not tree.root_node.has_error:
        return SketchTree(
            tree=tree,
            source=source_bytes,
            mode=_detect_mode(tree.root_node),
            imports=imports,
        )

    wrapped_source = (
        _WRAPPER_PREFIX + _blank_imports(source_bytes, imports) + _WRAPPER_SUFFIX
    )
    wrapped_tree = parser.parse(wrapped_source)
    if not wrapped_tree.root_node.has_error:
        return SketchTree(
            tree=wrapped_tree,
            source=wrapped_source,
            mode=SketchMode.ACTIVE,
            offset=len(_WRAPPER_PREFIX),
            imports=imports,
        )

    return SketchTree(
        tree=tree,
        source=source_bytes,
        mode=_detect_mode(tree.root_node),
        imports=imports,
    )


def sketch_class_body(sketch: SketchTree) -> Node | None:
    """Return the class body holding the sketch's members, if any.

    That is the synthetic wrapper in wrapped active mode, the explicit class in
    java mode, and ``None`` otherwise.
    """
    if sketch.mode is SketchMode.STATIC:
        return None
    if sketch.mode is SketchMode.ACTIVE and not sketch.wrapped:
        return None
    if sketch.mode is SketchMode.JAVA:
        class_node = _find_papplet_class(sketch.root)
    else:
        class_node = next(
            (c for c in _body_children(sketch.root) if c.type == "class_declaration"),
            None,
        )
    if class_node is None:
        return None
    return class_node.child_by_field_name("body")


def top_level_method_names(sketch: SketchTree) -> list[str]:
    """Names of the methods declared directly on the sketch."""
    body = sketch_class_body(sketch)
    container = body if body is not None else sketch.root
    return [
        node_text(child.child_by_field_name("name"))
        for child in container.named_children
        if child.type == "method_declaration"
    ]


__all__ = [
    "ImportSpan",
    "SketchMode",
    "SketchTree",
    "WRAPPER_CLASS_NAME",
    "find_imports",
    "node_depth",
    "node_text",
    "parse_sketch",
    "sketch_class_body",
    "top_level_method_names",
]
