"""Regroup dump segments into one ordered stream per function.

Two strategies exist.  :class:`PerFunctionRouter` cuts every segment into
function bodies and files each body under its function.
:class:`FullModuleRouter` handles dumps taken with module scope: a segment
annotated with ``(function: F)`` belongs to ``F`` only, everything else is
a module-wide pass and is copied into every stream.
"""

from __future__ import annotations

import abc
import logging
from typing import Iterable, Optional, Sequence

from .errors import MissingFunctionError
from .headers import DEFAULT_CLASSIFIER, HeaderClassifier
from .model import (
    FULL_MODULE_KEY,
    LOOP_KEY,
    PerFunctionDumpSegment,
    RawDumpSegment,
    RoutedDumps,
    SplitDumpSegment,
)
from .segmenter import split_functions


logger = logging.getLogger(__name__)


class DumpRouter(abc.ABC):
    """Turn raw segments into per-function segment lists."""

    def __init__(self, classifier: HeaderClassifier = DEFAULT_CLASSIFIER) -> None:
        self.classifier = classifier

    @abc.abstractmethod
    def route(self, segments: Sequence[RawDumpSegment]) -> RoutedDumps:
        raise NotImplementedError

    @staticmethod
    def _resolve_label(
        header: str, label: str, previous_function: Optional[str]
    ) -> str:
        if previous_function is None:
            raise MissingFunctionError(header, label)
        return previous_function


class PerFunctionRouter(DumpRouter):
    def route(self, segments: Sequence[RawDumpSegment]) -> RoutedDumps:
        split = [split_functions(segment, self.classifier) for segment in segments]
        return self.route_split(split)

    def route_split(self, segments: Iterable[SplitDumpSegment]) -> RoutedDumps:
        routed: RoutedDumps = {}
        previous_function: Optional[str] = None

        for segment in segments:
            for function_name, lines in segment.functions.items():
                if function_name == LOOP_KEY:
                    name = self._resolve_label(segment.header, LOOP_KEY, previous_function)
                else:
                    name = function_name
                routed.setdefault(name, []).append(
                    PerFunctionDumpSegment(
                        header=segment.header,
                        is_machine_level=segment.is_machine_level,
                        body="\n".join(lines),
                    )
                )
                if function_name != LOOP_KEY:
                    previous_function = name

        logger.debug("routed dumps for %d function(s)", len(routed))
        return routed


class FullModuleRouter(DumpRouter):
    def route(self, segments: Sequence[RawDumpSegment]) -> RoutedDumps:
        routed: RoutedDumps = {FULL_MODULE_KEY: []}
        for segment in segments:
            target = segment.affected_function
            if target is not None and not _is_value_label(target):
                routed.setdefault(target, [])

        previous_function: Optional[str] = None
        for segment in segments:
            target = segment.affected_function
            if target is None:
                for stream in routed.values():
                    stream.append(
                        PerFunctionDumpSegment(
                            header=segment.header,
                            is_machine_level=segment.is_machine_level,
                            body=segment.body,
                        )
                    )
                previous_function = None
                continue

            if _is_value_label(target):
                name = self._resolve_label(segment.header, target, previous_function)
            else:
                name = target
            routed[name].append(
                PerFunctionDumpSegment(
                    header=f"{segment.header} ({name})",
                    is_machine_level=segment.is_machine_level,
                    body=segment.body,
                    affected_function=name,
                )
            )
            previous_function = name

        logger.debug("routed full-module dumps for %d function(s)", len(routed) - 1)
        return routed


def _is_value_label(name: str) -> bool:
    # Loop annotations name a basic block label such as ``%for.body``.
    return name.startswith("%")


def make_router(
    full_module: bool, classifier: HeaderClassifier = DEFAULT_CLASSIFIER
) -> DumpRouter:
    if full_module:
        return FullModuleRouter(classifier)
    return PerFunctionRouter(classifier)
