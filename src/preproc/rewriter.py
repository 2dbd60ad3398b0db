"""Non-destructive rewriting of the original sketch source.

Edits are insertions anchored at byte offsets of the untouched source. They
never move each other's anchors and are applied in a single rendering step.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from preproc.models import CallSite, EditKind, RewriteEdit

COMMENT_OPEN = "/* commented out by preprocessor: "
# The no-op keeps the following ';' a valid statement for the debugger.
COMMENT_CLOSE = ' */ print("")'


def insert_before(position: int, text: str) -> RewriteEdit:
    return RewriteEdit(position=position, inserted_text=text, kind=EditKind.BEFORE)


def insert_after(position: int, text: str) -> RewriteEdit:
    return RewriteEdit(position=position, inserted_text=text, kind=EditKind.AFTER)


def comment_out(call_site: CallSite) -> tuple[RewriteEdit, RewriteEdit]:
    """Edits that turn a call into a comment followed by an inert call."""
    return (
        insert_before(call_site.start, COMMENT_OPEN),
        insert_after(call_site.end, COMMENT_CLOSE),
    )


def check_disjoint(spans: Iterable[tuple[int, int]]) -> None:
    """Raise ``ValueError`` if any two ``(start, end)`` spans overlap."""
    ordered = sorted(spans)
    for (_, previous_end), (start, end) in zip(ordered, ordered[1:]):
        if start < previous_end:
            msg = f"overlapping rewrite spans ending at {previous_end} and {end}"
            raise ValueError(msg)


def _ordered(edits: Sequence[RewriteEdit]) -> list[RewriteEdit]:
    # At a shared offset the text closing an earlier span goes first.
    indexed = list(enumerate(edits))
    indexed.sort(
        key=lambda item: (
            item[1].position,
            0 if item[1].kind is EditKind.AFTER else 1,
            item[0],
        )
    )
    return [edit for _, edit in indexed]


def render(source: str | bytes, edits: Sequence[RewriteEdit]) -> str:
    """Apply ``edits`` to the original ``source`` and return the new text."""
    source_bytes = source.encode("utf8") if isinstance(source, str) else source

    chunks: list[bytes] = []
    cursor = 0
    for edit in _ordered(edits):
        if edit.position < 0 or edit.position > len(source_bytes):
            msg = f"edit position {edit.position} outside source"
            raise ValueError(msg)
        chunks.append(source_bytes[cursor : edit.position])
        chunks.append(edit.inserted_text.encode("utf8"))
        cursor = edit.position
    chunks.append(source_bytes[cursor:])
    return b"".join(chunks).decode("utf8")


__all__ = [
    "COMMENT_CLOSE",
    "COMMENT_OPEN",
    "check_disjoint",
    "comment_out",
    "insert_after",
    "insert_before",
    "render",
]
