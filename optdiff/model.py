"""Data containers shared by the pass dump pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


LOOP_KEY = "<loop>"
FULL_MODULE_KEY = "<Full Module>"


@dataclass
class RawDumpSegment:
    """Body text between two consecutive headers of the transcript."""

    header: str
    affected_function: Optional[str] = None
    is_machine_level: bool = False
    body: str = ""


FunctionBodies = Dict[str, List[str]]


@dataclass
class SplitDumpSegment:
    """A raw segment whose body has been cut into per-function line lists."""

    header: str
    is_machine_level: bool = False
    functions: FunctionBodies = field(default_factory=dict)


@dataclass(frozen=True)
class PerFunctionDumpSegment:
    """One function's slice of a dump, in transcript order."""

    header: str
    is_machine_level: bool
    body: str
    affected_function: Optional[str] = None


@dataclass
class Pass:
    """Before/after snapshot of a single pass applied to one function."""

    name: str
    is_machine_level: bool = False
    before: str = ""
    after: str = ""
    ir_changed: bool = True

    def describe(self) -> str:
        level = "machine" if self.is_machine_level else "ir"
        state = "changed" if self.ir_changed else "unchanged"
        return f"{self.name} [{level}, {state}]"


PassTable = Dict[str, List[Pass]]
RoutedDumps = Dict[str, List[PerFunctionDumpSegment]]


# ---------------------------------------------------------------------------
# Segmenter running state


@dataclass(frozen=True)
class Idle:
    """No function body is currently being collected."""


@dataclass
class OpenFunction:
    name: str
    lines: List[str]
    is_machine_level: bool = False


FunctionState = Union[Idle, OpenFunction]

IDLE = Idle()


@dataclass
class OpenSegment:
    """Raw segment still accumulating body lines."""

    header: str
    affected_function: Optional[str]
    is_machine_level: bool
    lines: List[str] = field(default_factory=list)
    last_was_blank: bool = True

    def close(self) -> RawDumpSegment:
        return RawDumpSegment(
            header=self.header,
            affected_function=self.affected_function,
            is_machine_level=self.is_machine_level,
            body="".join(f"{line}\n" for line in self.lines),
        )


SegmentState = Union[Idle, OpenSegment]
