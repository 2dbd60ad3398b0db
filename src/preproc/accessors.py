"""Accessor generation from the captured sketch settings."""

from __future__ import annotations

import logging
from collections.abc import Callable

from preproc.models import Accessor, FailureKind, SketchMetadata, SketchWarning

logger = logging.getLogger(__name__)

WarningSink = Callable[[SketchWarning], None]

# (metadata field, accessor name, return type)
_SIZE_ACCESSORS = (
    ("width", "sketchWidth", "int"),
    ("height", "sketchHeight", "int"),
    ("renderer", "sketchRenderer", "String"),
)
_SMOOTH_ACCESSORS = (("quality", "sketchQuality", "int"),)

SIZE_WARNING = SketchWarning(
    message="Could not parse the size() command.",
    hint="More about the size() command can be found in the size() reference.",
)

SMOOTH_WARNING = SketchWarning(
    message="Could not find smooth level",
    hint=(
        "The smooth level of this sketch could not automatically be determined "
        "from your code. Use only a numeric value (not variables) for the "
        "smooth() command. See the smooth() reference for an explanation."
    ),
)


def log_warning(warning: SketchWarning) -> None:
    """Default warning sink."""
    if warning.hint:
        logger.warning("%s %s", warning.message, warning.hint)
    else:
        logger.warning("%s", warning.message)


def emit_accessors(
    metadata: SketchMetadata, report: WarningSink = log_warning
) -> list[Accessor]:
    """Build accessor declarations for the captured size and smooth settings.

    Problems with the arguments of an in-scope call are reported through
    ``report``. Calls outside the permitted scopes and unused calls produce
    neither accessors nor warnings.

    Returns:
        Accessors in declaration order: width, height, renderer, quality.
    """
    accessors: list[Accessor] = []

    if metadata.size_seen:
        if metadata.size_valid:
            accessors.extend(_accessors_for(metadata, _SIZE_ACCESSORS))
        elif metadata.size_failure is FailureKind.PARAMETERS:
            report(SIZE_WARNING)

    if metadata.smooth_seen:
        if metadata.smooth_valid:
            accessors.extend(_accessors_for(metadata, _SMOOTH_ACCESSORS))
        elif metadata.smooth_failure is FailureKind.PARAMETERS:
            report(SMOOTH_WARNING)

    return accessors


def _accessors_for(
    metadata: SketchMetadata, table: tuple[tuple[str, str, str], ...]
) -> list[Accessor]:
    accessors: list[Accessor] = []
    for field_name, method_name, return_type in table:
        value = getattr(metadata, field_name)
        if value is not None:
            accessors.append(
                Accessor(name=method_name, return_type=return_type, body=value)
            )
    return accessors


def render_accessors(accessors: list[Accessor], indent: str = "  ") -> str:
    """Declarations text, each preceded by a blank line."""
    return "".join(f"\n{accessor.render(indent)}\n" for accessor in accessors)


__all__ = [
    "SIZE_WARNING",
    "SMOOTH_WARNING",
    "WarningSink",
    "emit_accessors",
    "log_warning",
    "render_accessors",
]
