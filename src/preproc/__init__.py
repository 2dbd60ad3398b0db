"""Size/smooth preprocessing of sketches."""

from preproc.accessors import emit_accessors
from preproc.models import (
    Accessor,
    CallKind,
    CallSite,
    FailureKind,
    RewriteEdit,
    ScopeClassification,
    SketchMetadata,
    SketchWarning,
)
from preproc.scope import ScopeValidator
from preproc.transpiler import PreprocessError, PreprocessResult, preprocess
from preproc.visitor import visit_sketch

__all__ = [
    "Accessor",
    "CallKind",
    "CallSite",
    "FailureKind",
    "PreprocessError",
    "PreprocessResult",
    "RewriteEdit",
    "ScopeClassification",
    "ScopeValidator",
    "SketchMetadata",
    "SketchWarning",
    "emit_accessors",
    "preprocess",
    "visit_sketch",
]
