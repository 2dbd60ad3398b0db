"""Records exchanged by the size/smooth preprocessing pass."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CallKind(str, Enum):
    """Built-in calls the pass lifts out of the sketch body."""

    SIZE = "size"
    SMOOTH = "smooth"


class ScopeClassification(str, Enum):
    """Lexical position of a call-site."""

    GLOBAL = "global"
    ENTRY_METHOD = "entry_method"
    INVALID = "invalid"


class FailureKind(str, Enum):
    """Why a call could not be lifted.

    SCOPE failures are silent; PARAMETERS failures are reported to the user.
    """

    SCOPE = "scope"
    PARAMETERS = "parameters"


class EditKind(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class CallSite(BaseModel):
    """A size() or smooth() invocation found in the sketch.

    ``start`` and ``end`` are byte offsets into the original source.
    """

    model_config = ConfigDict(frozen=True)

    kind: CallKind
    argument_texts: tuple[str, ...] = Field(default_factory=tuple)
    start: int
    end: int
    line: int


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    parameters: dict[str, str] = Field(default_factory=dict)
    failure: FailureKind | None = None


class RewriteEdit(BaseModel):
    """Text inserted at a byte offset of the original source."""

    model_config = ConfigDict(frozen=True)

    position: int
    inserted_text: str
    kind: EditKind


class SketchWarning(BaseModel):
    message: str
    hint: str | None = None


class Accessor(BaseModel):
    """A generated read-only method exposing a captured sketch setting."""

    model_config = ConfigDict(frozen=True)

    name: str
    return_type: str
    body: str

    def render(self, indent: str = "  ") -> str:
        signature = f"public {self.return_type} {self.name}()"
        return f"{indent}{signature} {{ return {self.body}; }}"


class SketchMetadata(BaseModel):
    """Settings captured from size() and smooth(), frozen after traversal."""

    model_config = ConfigDict(frozen=True)

    width: str | None = None
    height: str | None = None
    renderer: str | None = None
    quality: str | None = None
    size_seen: bool = False
    size_valid: bool = False
    smooth_seen: bool = False
    smooth_valid: bool = False
    size_failure: FailureKind | None = None
    smooth_failure: FailureKind | None = None


_SIZE_FIELDS = ("width", "height", "renderer")
_SMOOTH_FIELDS = ("quality",)


class MetadataBuilder:
    """Single owner of the metadata while the tree is being walked.

    The last call found in a permitted scope decides the outcome for its kind.
    Calls outside those scopes only mark the kind as seen.
    """

    def __init__(self) -> None:
        self._values: dict[str, object] = {}
        self._deciding: dict[CallKind, tuple[CallSite, ValidationResult]] = {}
        self._frozen: SketchMetadata | None = None

    def record(self, call_site: CallSite, result: ValidationResult) -> None:
        if self._frozen is not None:
            msg = "metadata is already frozen"
            raise RuntimeError(msg)

        kind = call_site.kind
        prefix = kind.value
        fields = _SIZE_FIELDS if kind is CallKind.SIZE else _SMOOTH_FIELDS
        self._values[f"{prefix}_seen"] = True

        if result.failure is FailureKind.SCOPE:
            if kind not in self._deciding:
                self._values[f"{prefix}_failure"] = FailureKind.SCOPE
            return

        self._deciding[kind] = (call_site, result)
        for name in fields:
            self._values[name] = result.parameters.get(name)
        self._values[f"{prefix}_valid"] = result.valid
        self._values[f"{prefix}_failure"] = result.failure

    def freeze(self) -> SketchMetadata:
        if self._frozen is None:
            self._frozen = SketchMetadata.model_validate(self._values)
        return self._frozen

    def deciding_calls(self) -> list[CallSite]:
        """Valid call-sites whose outcome ended up in the frozen metadata."""
        if self._frozen is None:
            msg = "metadata is not frozen yet"
            raise RuntimeError(msg)
        return sorted(
            (site for site, result in self._deciding.values() if result.valid),
            key=lambda site: site.start,
        )


__all__ = [
    "Accessor",
    "CallKind",
    "CallSite",
    "EditKind",
    "FailureKind",
    "MetadataBuilder",
    "RewriteEdit",
    "ScopeClassification",
    "SketchMetadata",
    "SketchWarning",
    "ValidationResult",
]
