from __future__ import annotations

import logging

import pytest

from preproc.accessors import (
    SIZE_WARNING,
    SMOOTH_WARNING,
    emit_accessors,
    log_warning,
    render_accessors,
)
from preproc.models import Accessor, FailureKind, SketchMetadata, SketchWarning


def _emit(metadata: SketchMetadata) -> tuple[list[Accessor], list[SketchWarning]]:
    warnings: list[SketchWarning] = []
    accessors = emit_accessors(metadata, warnings.append)
    return accessors, warnings


def test_unused_calls_emit_nothing() -> None:
    accessors, warnings = _emit(SketchMetadata())

    assert accessors == []
    assert warnings == []


def test_valid_size_emits_width_and_height() -> None:
    metadata = SketchMetadata(
        width="640", height="480", size_seen=True, size_valid=True
    )

    accessors, warnings = _emit(metadata)

    assert [(a.name, a.return_type, a.body) for a in accessors] == [
        ("sketchWidth", "int", "640"),
        ("sketchHeight", "int", "480"),
    ]
    assert warnings == []


def test_accessor_order_is_size_then_quality() -> None:
    metadata = SketchMetadata(
        width="640",
        height="480",
        renderer="P3D",
        quality="4",
        size_seen=True,
        size_valid=True,
        smooth_seen=True,
        smooth_valid=True,
    )

    accessors, _ = _emit(metadata)

    assert [a.name for a in accessors] == [
        "sketchWidth",
        "sketchHeight",
        "sketchRenderer",
        "sketchQuality",
    ]
    assert accessors[2].return_type == "String"


def test_invalid_size_parameters_warn_once() -> None:
    metadata = SketchMetadata(
        size_seen=True, size_valid=False, size_failure=FailureKind.PARAMETERS
    )

    accessors, warnings = _emit(metadata)

    assert accessors == []
    assert warnings == [SIZE_WARNING]
    assert warnings[0].message == "Could not parse the size() command."
    assert warnings[0].hint == (
        "More about the size() command can be found in the size() reference."
    )


def test_invalid_smooth_parameters_warn() -> None:
    metadata = SketchMetadata(
        width="640",
        height="480",
        size_seen=True,
        size_valid=True,
        smooth_seen=True,
        smooth_valid=False,
        smooth_failure=FailureKind.PARAMETERS,
    )

    accessors, warnings = _emit(metadata)

    assert [a.name for a in accessors] == ["sketchWidth", "sketchHeight"]
    assert warnings == [SMOOTH_WARNING]


@pytest.mark.parametrize("kind", ["size", "smooth"])
def test_out_of_scope_failures_are_silent(kind: str) -> None:
    metadata = SketchMetadata.model_validate(
        {
            f"{kind}_seen": True,
            f"{kind}_valid": False,
            f"{kind}_failure": FailureKind.SCOPE,
        }
    )

    accessors, warnings = _emit(metadata)

    assert accessors == []
    assert warnings == []


def test_accessor_render() -> None:
    accessor = Accessor(name="sketchWidth", return_type="int", body="640")

    assert accessor.render("    ") == "    public int sketchWidth() { return 640; }"


def test_render_accessors_separates_with_blank_lines() -> None:
    accessors = [
        Accessor(name="sketchWidth", return_type="int", body="640"),
        Accessor(name="sketchQuality", return_type="int", body="2"),
    ]

    assert render_accessors(accessors) == (
        "\n  public int sketchWidth() { return 640; }\n"
        "\n  public int sketchQuality() { return 2; }\n"
    )


def test_default_sink_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="preproc.accessors"):
        log_warning(SIZE_WARNING)

    assert "Could not parse the size() command." in caplog.text
