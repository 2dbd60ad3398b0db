from __future__ import annotations

import pytest

from preproc.models import CallKind, CallSite, EditKind
from preproc.rewriter import (
    COMMENT_CLOSE,
    COMMENT_OPEN,
    check_disjoint,
    comment_out,
    insert_after,
    insert_before,
    render,
)


def _call_site(source: str, text: str) -> CallSite:
    start = source.index(text)
    return CallSite(
        kind=CallKind.SIZE,
        argument_texts=("640", "480"),
        start=start,
        end=start + len(text),
        line=1,
    )


def test_comment_out_wraps_call_and_keeps_terminator() -> None:
    source = "size(640, 480);\nbackground(0);\n"
    edits = comment_out(_call_site(source, "size(640, 480)"))

    assert [edit.kind for edit in edits] == [EditKind.BEFORE, EditKind.AFTER]
    assert render(source, edits) == (
        f"{COMMENT_OPEN}size(640, 480){COMMENT_CLOSE};\nbackground(0);\n"
    )


def test_render_keeps_line_count() -> None:
    source = "a();\n  size(640, 480);\nb();\n"
    rendered = render(source, comment_out(_call_site(source, "size(640, 480)")))

    assert rendered.count("\n") == source.count("\n")


def test_render_without_edits_is_identity() -> None:
    source = "size(w, h);\n"

    assert render(source, []) == source


def test_edits_are_anchored_to_original_offsets() -> None:
    source = "abcdef"
    edits = [insert_before(4, "<2>"), insert_before(1, "<1>")]

    assert render(source, edits) == "a<1>bcd<2>ef"


def test_after_edit_precedes_before_edit_at_same_offset() -> None:
    edits = [insert_before(1, "["), insert_after(1, "]")]

    assert render("ab", edits) == "a][b"


def test_same_kind_edits_keep_insertion_order() -> None:
    edits = [insert_before(0, "x"), insert_before(0, "y")]

    assert render("a", edits) == "xya"


def test_render_rejects_out_of_range_position() -> None:
    with pytest.raises(ValueError):
        render("abc", [insert_after(10, "!")])


def test_render_uses_byte_offsets() -> None:
    source = "// é\nsize(1, 2);\n"
    start = len("// é\n".encode("utf8"))
    edits = [insert_before(start, "<"), insert_after(start + len("size(1, 2)"), ">")]

    assert render(source, edits) == "// é\n<size(1, 2)>;\n"


def test_check_disjoint_accepts_separate_spans() -> None:
    check_disjoint([(10, 20), (0, 5), (20, 30)])


def test_check_disjoint_rejects_overlap() -> None:
    with pytest.raises(ValueError):
        check_disjoint([(0, 10), (5, 15)])
