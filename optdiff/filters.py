"""Strip boilerplate, debug info and metadata noise from IR dumps."""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from typing import List


logger = logging.getLogger(__name__)


# Whole lines, removed together with their terminator.
BOILERPLATE_LINE_FILTERS = (
    r"; ModuleID = '.+'",
    r"(?:source_filename|target datalayout|target triple) = [\"'].+[\"']",
    r"; Function Attrs: .+",
    r"declare .+",
    r"attributes #\d+ = \{ .+ \}",
)

DEBUG_LINE_FILTERS = (
    r"\s+(?:tail\s)?call void @llvm\.dbg.+",
    r"[ \t]+DBG_.+",
    r"!\d+ = (?:distinct )?!DI[A-Za-z]+\([^)]+?\).*",
    r"!\d+ = (?:distinct )?!\{.*\}.*",
    r"![.A-Z_a-z-]+ = (?:distinct )?!\{.*\}.*",
)

# Suffixes removed from the middle or end of a line.
ATTRIBUTE_INLINE_FILTERS = (r",? #\d+(?: \{)?$",)

DEBUG_INLINE_FILTERS = (
    r",? !dbg !\d+",
    r",? debug-location !\d+",
)

METADATA_INLINE_FILTERS = (r",?(?: ![\d.A-Za-z]+){2}",)


@dataclass(frozen=True)
class FilterOptions:
    filter_debug_info: bool = True
    filter_ir_metadata: bool = True


@functools.lru_cache(maxsize=None)
def build_filter_pattern(options: FilterOptions) -> re.Pattern[str]:
    """Compile every enabled filter into a single alternation."""

    line_filters: List[str] = list(BOILERPLATE_LINE_FILTERS)
    inline_filters: List[str] = list(ATTRIBUTE_INLINE_FILTERS)
    if options.filter_debug_info:
        line_filters.extend(DEBUG_LINE_FILTERS)
        inline_filters.extend(DEBUG_INLINE_FILTERS)
    if options.filter_ir_metadata:
        inline_filters.extend(METADATA_INLINE_FILTERS)

    line_re = "|".join(f"(?:{item})" for item in line_filters)
    inline_re = "|".join(f"(?:{item})" for item in inline_filters)
    combined = rf"(?:^(?:{line_re})(?:\r\n|\n|\r|\Z))|(?:{inline_re})"
    return re.compile(combined, re.MULTILINE)


def apply_ir_filters(text: str, options: FilterOptions = FilterOptions()) -> str:
    """Return ``text`` with every filter in ``options`` applied.

    Removing one suffix can expose another (``call @f() #1, !dbg !7`` loses
    the debug location first, which leaves ``#1`` at the end of the line), so
    the substitution runs until nothing else matches.  Filtering the result
    again is therefore a no-op.
    """

    pattern = build_filter_pattern(options)
    rounds = 0
    while True:
        text, count = pattern.subn("", text)
        if count == 0:
            break
        rounds += 1
    logger.debug("applied IR filters in %d round(s) with %s", rounds, options)
    return text
