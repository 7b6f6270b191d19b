"""Recognisers for the section headers and signatures found in pass dumps.

Two header flavours appear in a transcript::

    *** IR Dump Before InstCombinePass on foo ***
    ; *** IR Dump After LoopRotatePass *** (loop: %for.body)
    # *** IR Dump After Machine Common Subexpression Elimination ***:

The first two are IR-level headers, optionally carrying a ``(function: F)``
or ``(loop: L)`` annotation and a trailing ``;`` comment.  The third is a
machine-level header.  Everything in this module is stateless; the shared
:data:`DEFAULT_CLASSIFIER` may be used by any number of stages.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional


BEFORE_PREFIX = "IR Dump Before "
AFTER_PREFIX = "IR Dump After "
INVALIDATED_SUFFIX = " (invalidated)"
LOOP_PREHEADER_MARKER = "; Preheader:"


class HeaderKind(enum.Enum):
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class DumpHeader:
    """Decoded form of a header line."""

    name: str
    affected_function: Optional[str] = None
    is_machine_level: bool = False


@dataclass(frozen=True)
class PassHeader:
    """``IR Dump Before/After <pass>`` split into its kind and pass name."""

    kind: HeaderKind
    pass_name: str

    @property
    def is_before(self) -> bool:
        return self.kind is HeaderKind.BEFORE

    @property
    def is_after(self) -> bool:
        return self.kind is HeaderKind.AFTER


class HeaderClassifier:
    """Compiled patterns for every line shape the segmenters care about."""

    def __init__(self) -> None:
        self.ir_dump_header: re.Pattern[str] = re.compile(
            r"^;?\s?\*{3} (?P<name>.+?) \*{3}"
            r"(?:\s+\((?:function|loop): (?P<target>[^)]+)\))?"
            r"(?:\s*;.*)?$"
        )
        self.machine_code_dump_header: re.Pattern[str] = re.compile(
            r"^# \*{3} (?P<name>.+) \*{3}:$"
        )
        self.function_define: re.Pattern[str] = re.compile(
            r'^define [^@]*@(?P<name>"[^"]*"|[^(\s]+)\('
        )
        self.machine_function_begin: re.Pattern[str] = re.compile(
            r"^# Machine code for function (?P<name>[^:]+):"
        )
        self.function_end: re.Pattern[str] = re.compile(r"^}$")
        self.machine_function_end: re.Pattern[str] = re.compile(
            r"^# End machine code for function (?P<name>.+)\.$"
        )

    def classify(self, line: str) -> Optional[DumpHeader]:
        """Return the decoded header for ``line`` or ``None``."""

        match = self.machine_code_dump_header.match(line)
        if match is not None:
            return DumpHeader(name=match.group("name"), is_machine_level=True)
        match = self.ir_dump_header.match(line)
        if match is not None:
            target = match.group("target")
            return DumpHeader(
                name=match.group("name"),
                affected_function=target.strip() if target else None,
            )
        return None

    def is_header(self, line: str) -> bool:
        return self.classify(line) is not None

    def match_function_define(self, line: str) -> Optional[str]:
        match = self.function_define.match(line)
        return match.group("name") if match else None

    def match_machine_function_begin(self, line: str) -> Optional[str]:
        match = self.machine_function_begin.match(line)
        return match.group("name") if match else None

    def is_function_end(self, line: str) -> bool:
        return self.function_end.match(line.strip()) is not None

    def is_machine_function_end(self, line: str) -> bool:
        return self.machine_function_end.match(line.strip()) is not None

    @staticmethod
    def is_loop_preheader(line: str) -> bool:
        return line.startswith(LOOP_PREHEADER_MARKER)


DEFAULT_CLASSIFIER = HeaderClassifier()


def decode_pass_header(header_name: str) -> Optional[PassHeader]:
    """Split a header name into ``Before``/``After`` and the pass name."""

    if header_name.startswith(BEFORE_PREFIX):
        return PassHeader(HeaderKind.BEFORE, header_name[len(BEFORE_PREFIX) :])
    if header_name.startswith(AFTER_PREFIX):
        return PassHeader(HeaderKind.AFTER, header_name[len(AFTER_PREFIX) :])
    return None


def strip_invalidated(pass_name: str) -> str:
    if pass_name.endswith(INVALIDATED_SUFFIX):
        return pass_name[: -len(INVALIDATED_SUFFIX)]
    return pass_name
