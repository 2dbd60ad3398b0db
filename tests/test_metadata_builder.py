from __future__ import annotations

import pytest
from pydantic import ValidationError

from preproc.models import (
    CallKind,
    CallSite,
    FailureKind,
    MetadataBuilder,
    ValidationResult,
)


def _site(kind: CallKind, start: int = 0) -> CallSite:
    return CallSite(kind=kind, start=start, end=start + 10, line=1)


def _out_of_scope() -> ValidationResult:
    return ValidationResult(valid=False, failure=FailureKind.SCOPE)


def test_empty_builder_reports_nothing_seen() -> None:
    metadata = MetadataBuilder().freeze()

    assert not metadata.size_seen
    assert not metadata.smooth_seen
    assert metadata.width is None
    assert metadata.size_failure is None


def test_valid_size_is_captured() -> None:
    builder = MetadataBuilder()
    builder.record(
        _site(CallKind.SIZE),
        ValidationResult(valid=True, parameters={"width": "640", "height": "480"}),
    )
    metadata = builder.freeze()

    assert metadata.size_seen
    assert metadata.size_valid
    assert (metadata.width, metadata.height, metadata.renderer) == ("640", "480", None)
    assert not metadata.smooth_seen


def test_out_of_scope_call_is_seen_but_silent_failure() -> None:
    builder = MetadataBuilder()
    builder.record(_site(CallKind.SMOOTH), _out_of_scope())
    metadata = builder.freeze()

    assert metadata.smooth_seen
    assert not metadata.smooth_valid
    assert metadata.smooth_failure is FailureKind.SCOPE


def test_out_of_scope_call_keeps_earlier_in_scope_outcome() -> None:
    builder = MetadataBuilder()
    builder.record(
        _site(CallKind.SMOOTH),
        ValidationResult(valid=True, parameters={"quality": "8"}),
    )
    builder.record(_site(CallKind.SMOOTH, start=50), _out_of_scope())
    metadata = builder.freeze()

    assert metadata.smooth_valid
    assert metadata.quality == "8"
    assert metadata.smooth_failure is None


def test_last_in_scope_call_wins() -> None:
    builder = MetadataBuilder()
    builder.record(
        _site(CallKind.SIZE),
        ValidationResult(valid=True, parameters={"width": "640", "height": "480"}),
    )
    builder.record(
        _site(CallKind.SIZE, start=50),
        ValidationResult(
            valid=False,
            parameters={"width": "100"},
            failure=FailureKind.PARAMETERS,
        ),
    )
    metadata = builder.freeze()

    assert not metadata.size_valid
    assert metadata.width == "100"
    assert metadata.height is None
    assert metadata.size_failure is FailureKind.PARAMETERS


def test_record_after_freeze_is_rejected() -> None:
    builder = MetadataBuilder()
    builder.freeze()

    with pytest.raises(RuntimeError):
        builder.record(_site(CallKind.SIZE), _out_of_scope())


def test_frozen_metadata_is_immutable() -> None:
    metadata = MetadataBuilder().freeze()

    with pytest.raises(ValidationError):
        metadata.width = "640"  # type: ignore[misc]


def test_deciding_calls_follow_the_final_outcome() -> None:
    builder = MetadataBuilder()
    valid_size = _site(CallKind.SIZE)
    builder.record(
        valid_size,
        ValidationResult(valid=True, parameters={"width": "640", "height": "480"}),
    )
    builder.record(
        _site(CallKind.SIZE, start=50),
        ValidationResult(valid=False, failure=FailureKind.PARAMETERS),
    )
    valid_smooth = _site(CallKind.SMOOTH, start=20)
    builder.record(
        valid_smooth, ValidationResult(valid=True, parameters={"quality": "4"})
    )
    builder.record(_site(CallKind.SMOOTH, start=80), _out_of_scope())
    builder.freeze()

    assert builder.deciding_calls() == [valid_smooth]


def test_deciding_calls_require_frozen_metadata() -> None:
    with pytest.raises(RuntimeError):
        MetadataBuilder().deciding_calls()
