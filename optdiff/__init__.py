"""Reconstruct per-function optimisation passes from LLVM pass dumps."""

from .errors import (
    FunctionNotFoundError,
    MissingDumpFlagError,
    MissingFunctionError,
    PassDumpError,
    PassMismatchError,
    PatternError,
    PipelineInvariantError,
    SelectionError,
)
from .filters import FilterOptions, apply_ir_filters
from .headers import DEFAULT_CLASSIFIER, DumpHeader, HeaderClassifier, PassHeader
from .model import (
    FULL_MODULE_KEY,
    LOOP_KEY,
    Pass,
    PassTable,
    PerFunctionDumpSegment,
    RawDumpSegment,
    SplitDumpSegment,
)
from .pipeline import PassDumpParser, PipelineOptions, PipelineResult, process
from .selection import find_function, list_functions, matches_pattern, select_passes

__all__ = [
    "DEFAULT_CLASSIFIER",
    "DumpHeader",
    "FULL_MODULE_KEY",
    "FilterOptions",
    "FunctionNotFoundError",
    "HeaderClassifier",
    "LOOP_KEY",
    "MissingDumpFlagError",
    "MissingFunctionError",
    "Pass",
    "PassDumpError",
    "PassDumpParser",
    "PassHeader",
    "PassMismatchError",
    "PassTable",
    "PatternError",
    "PerFunctionDumpSegment",
    "PipelineInvariantError",
    "PipelineOptions",
    "PipelineResult",
    "RawDumpSegment",
    "SelectionError",
    "SplitDumpSegment",
    "apply_ir_filters",
    "find_function",
    "list_functions",
    "matches_pattern",
    "process",
    "select_passes",
]
