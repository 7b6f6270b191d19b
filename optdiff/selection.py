"""Helpers used by front ends to pick functions and passes out of a table."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Sequence, Tuple

from .errors import FunctionNotFoundError, MissingDumpFlagError, PatternError
from .model import Pass, PassTable


IR_DEFINE_MARKER = "define "
MACHINE_FUNCTION_MARKER = "# Machine code for function "


def _compile(pattern: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternError(pattern, str(exc)) from exc


def matches_pattern(text: str, pattern: str, use_regex: bool = False) -> bool:
    """Case-insensitive substring test, or a regex search with ``use_regex``."""

    if use_regex:
        return _compile(pattern).search(text) is not None
    return pattern.lower() in text.lower()


def check_dump_flags(dump: str) -> None:
    if "IR Dump Before" not in dump:
        raise MissingDumpFlagError("Did you forget to add `-mllvm -print-before-all`?")
    if "IR Dump After" not in dump:
        raise MissingDumpFlagError("Did you forget to add `-mllvm -print-after-all`?")


def list_functions(dump: str) -> List[str]:
    """Return every function name printed anywhere in ``dump``, sorted."""

    names = set()
    start = dump.find(IR_DEFINE_MARKER)
    while start >= 0:
        at = dump.find("@", start)
        paren = dump.find("(", at) if at >= 0 else -1
        newline = dump.find("\n", start)
        if at >= 0 and paren >= 0 and (newline < 0 or paren < newline):
            names.add(dump[at + 1 : paren])
        start = dump.find(IR_DEFINE_MARKER, start + len(IR_DEFINE_MARKER))

    start = dump.find(MACHINE_FUNCTION_MARKER)
    while start >= 0:
        name_start = start + len(MACHINE_FUNCTION_MARKER)
        colon = dump.find(":", name_start)
        if colon >= 0:
            names.add(dump[name_start:colon])
        start = dump.find(MACHINE_FUNCTION_MARKER, name_start)
    return sorted(names)


def find_function(
    table: PassTable, pattern: str, use_regex: bool = False
) -> Tuple[str, List[Pass]]:
    """Return the first function whose name equals (or matches) ``pattern``."""

    if use_regex:
        regex = _compile(pattern)
        for name, passes in table.items():
            if regex.search(name):
                return name, passes
    elif pattern in table:
        return pattern, table[pattern]
    raise FunctionNotFoundError(pattern, use_regex)


def select_passes(
    passes: Sequence[Pass],
    pass_pattern: Optional[str] = None,
    use_regex: bool = False,
    skip_unchanged: bool = False,
) -> Iterator[Tuple[int, Pass]]:
    """Yield ``(position, pass)`` pairs; ``position`` counts from 1."""

    for position, pass_ in enumerate(passes, start=1):
        if pass_pattern is not None and not matches_pattern(pass_.name, pass_pattern, use_regex):
            continue
        if skip_unchanged and pass_.before == pass_.after:
            continue
        yield position, pass_
