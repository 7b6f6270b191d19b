"""Pair ``Before``/``After`` dumps of each function into :class:`Pass` records."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

from .errors import PassMismatchError, PipelineInvariantError
from .headers import PassHeader, decode_pass_header, strip_invalidated
from .model import Pass, PassTable, PerFunctionDumpSegment


logger = logging.getLogger(__name__)


def match_pass_dumps(routed: Mapping[str, Sequence[PerFunctionDumpSegment]]) -> PassTable:
    """Run :func:`match_function_passes` for every function stream."""

    table: PassTable = {}
    for function_name, segments in routed.items():
        table[function_name] = match_function_passes(segments)
    return table


def match_function_passes(segments: Sequence[PerFunctionDumpSegment]) -> List[Pass]:
    """Build the ordered pass list of a single function.

    An ``After`` dump not preceded by its ``Before`` gives a pass with an
    empty ``before``; a ``Before`` dump not followed by an ``After`` gives a
    pass with an empty ``after``.
    """

    passes: List[Pass] = []
    index = 0
    while index < len(segments):
        current = segments[index]
        following = segments[index + 1] if index + 1 < len(segments) else None
        current_header = _decode(current)

        if current_header.is_after:
            pass_ = Pass(name=current_header.pass_name, after=current.body)
            index += 1
        else:
            following_header = _decode(following) if following is not None else None
            if following_header is not None and following_header.is_after:
                _check_pair(current, current_header, following, following_header)
                pass_ = Pass(
                    name=current_header.pass_name,
                    before=current.body,
                    after=following.body,
                )
                index += 2
            else:
                pass_ = Pass(name=current_header.pass_name, before=current.body)
                index += 1
        pass_.is_machine_level = current.is_machine_level

        _stitch_instruction_selection(passes[-1] if passes else None, pass_)
        pass_.ir_changed = pass_.before != pass_.after
        passes.append(pass_)

    return passes


def _decode(segment: PerFunctionDumpSegment) -> PassHeader:
    decoded = decode_pass_header(segment.header)
    if decoded is None:
        raise PipelineInvariantError(f"Unexpected pass header {segment.header!r}")
    return decoded


def _check_pair(
    before: PerFunctionDumpSegment,
    before_header: PassHeader,
    after: PerFunctionDumpSegment,
    after_header: PassHeader,
) -> None:
    if before_header.pass_name != strip_invalidated(after_header.pass_name):
        raise PassMismatchError(before_header.pass_name, after_header.pass_name)
    if before.is_machine_level != after.is_machine_level:
        raise PipelineInvariantError(
            f"pass {before_header.pass_name!r} mixes IR and machine-level dumps"
        )


def _stitch_instruction_selection(previous: Optional[Pass], current: Pass) -> None:
    # The first machine pass diffs against the last IR state rather than the
    # already lowered machine code.  The reverse direction is left alone.
    if previous is None:
        return
    if not previous.is_machine_level and current.is_machine_level and current.before != current.after:
        logger.debug("stitching %r onto the IR state after %r", current.name, previous.name)
        current.before = previous.after
