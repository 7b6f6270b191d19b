"""Cut a filtered transcript into header segments and per-function bodies."""

from __future__ import annotations

import logging
from typing import List

from .headers import DEFAULT_CLASSIFIER, HeaderClassifier
from .model import (
    IDLE,
    LOOP_KEY,
    FunctionState,
    Idle,
    OpenFunction,
    OpenSegment,
    RawDumpSegment,
    SegmentState,
    SplitDumpSegment,
)
from .text_utils import is_blank, iter_lines


logger = logging.getLogger(__name__)


def split_raw_segments(
    text: str,
    classifier: HeaderClassifier = DEFAULT_CLASSIFIER,
    *,
    stop_at_machine_code: bool = False,
) -> List[RawDumpSegment]:
    """Split ``text`` into one :class:`RawDumpSegment` per header.

    Lines before the first header are ignored; callers are expected to have
    removed that prefix already.  Runs of blank lines collapse to a single
    blank line and blank lines directly after a header are dropped.  With
    ``stop_at_machine_code`` the scan ends at the first machine-level header.
    """

    segments: List[RawDumpSegment] = []
    state: SegmentState = IDLE

    for line in iter_lines(text):
        header = classifier.classify(line)
        if header is not None:
            inside_machine = isinstance(state, OpenSegment) and state.is_machine_level
            if stop_at_machine_code and header.is_machine_level and not inside_machine:
                logger.debug("stopping at first machine-level header %r", header.name)
                break
            if isinstance(state, OpenSegment):
                segments.append(state.close())
            state = OpenSegment(
                header=header.name,
                affected_function=header.affected_function,
                is_machine_level=header.is_machine_level,
            )
            continue

        if isinstance(state, Idle):
            continue
        if is_blank(line):
            if not state.last_was_blank:
                state.lines.append(line)
            state.last_was_blank = True
        else:
            state.lines.append(line)
            state.last_was_blank = False

    if isinstance(state, OpenSegment):
        segments.append(state.close())

    logger.debug("split transcript into %d raw segment(s)", len(segments))
    return segments


def split_functions(
    segment: RawDumpSegment, classifier: HeaderClassifier = DEFAULT_CLASSIFIER
) -> SplitDumpSegment:
    """Collect the body of every function printed inside ``segment``.

    IR functions run from their ``define`` line to a lone ``}``; machine
    functions run between the ``# Machine code for function`` and ``# End
    machine code for function`` markers.  A loop preheader seen outside any
    function opens a ``<loop>`` pseudo function which the router later
    attributes to the preceding real function.  Everything else outside a
    function is dropped.
    """

    split = SplitDumpSegment(header=segment.header, is_machine_level=segment.is_machine_level)
    state: FunctionState = IDLE

    for line in iter_lines(segment.body):
        name = classifier.match_function_define(line)
        machine = False
        if name is None:
            name = classifier.match_machine_function_begin(line)
            machine = name is not None

        if name is not None:
            _store_function(split, state)
            state = OpenFunction(name=name, lines=[line], is_machine_level=machine)
        elif isinstance(state, Idle):
            if classifier.is_loop_preheader(line):
                state = OpenFunction(name=LOOP_KEY, lines=[line])
        else:
            state.lines.append(line)
            if state.is_machine_level:
                finished = classifier.is_machine_function_end(line)
            else:
                finished = classifier.is_function_end(line)
            if finished:
                _store_function(split, state)
                state = IDLE

    _store_function(split, state)
    return split


def _store_function(split: SplitDumpSegment, state: FunctionState) -> None:
    if isinstance(state, Idle):
        return
    if state.name in split.functions:
        logger.debug(
            "function %s printed twice under %r; keeping the later body",
            state.name,
            split.header,
        )
    split.functions[state.name] = state.lines
