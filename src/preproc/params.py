"""Literal checks for size() and smooth() arguments.

Arguments are never evaluated. A value is accepted only when its text is a
plain decimal integer literal or one of a few known constants.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from preproc.models import FailureKind, ValidationResult

DISPLAY_WIDTH = "displayWidth"
DISPLAY_HEIGHT = "displayHeight"

RENDERERS = frozenset({"P2D", "P3D", "OPENGL", "JAVA2D"})

_INTEGER_LITERAL_RE = re.compile(r"[0-9]+")


def is_integer_literal(text: str) -> bool:
    """Return True for a non-negative decimal integer literal."""
    return _INTEGER_LITERAL_RE.fullmatch(text.strip()) is not None


def _dimension(text: str, constant: str) -> str | None:
    value = text.strip()
    if is_integer_literal(value) or value == constant:
        return value
    return None


def _result(parameters: dict[str, str | None], valid: bool) -> ValidationResult:
    return ValidationResult(
        valid=valid,
        parameters={
            name: value for name, value in parameters.items() if value is not None
        },
        failure=None if valid else FailureKind.PARAMETERS,
    )


def validate_size_arguments(argument_texts: Sequence[str]) -> ValidationResult:
    """Check ``size(width, height[, renderer])`` arguments.

    Any failing field is dropped and invalidates the whole call. Arguments
    past the renderer do not affect validity.
    """
    if len(argument_texts) < 2:
        width = None
        if argument_texts:
            width = _dimension(argument_texts[0], DISPLAY_WIDTH)
        return _result({"width": width}, valid=False)

    parameters: dict[str, str | None] = {
        "width": _dimension(argument_texts[0], DISPLAY_WIDTH),
        "height": _dimension(argument_texts[1], DISPLAY_HEIGHT),
    }
    valid = parameters["width"] is not None and parameters["height"] is not None

    if len(argument_texts) > 2:
        renderer = argument_texts[2].strip()
        if renderer in RENDERERS:
            parameters["renderer"] = renderer
        else:
            valid = False

    return _result(parameters, valid)


def validate_smooth_arguments(argument_texts: Sequence[str]) -> ValidationResult:
    """Check ``smooth(level)``: the level must be an integer literal."""
    if not argument_texts or not is_integer_literal(argument_texts[0]):
        return _result({}, valid=False)
    return _result({"quality": argument_texts[0].strip()}, valid=True)


__all__ = [
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "RENDERERS",
    "is_integer_literal",
    "validate_size_arguments",
    "validate_smooth_arguments",
]
