"""High level entry points for turning a pass dump into per-function passes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, List

from .filters import FilterOptions, apply_ir_filters
from .headers import DEFAULT_CLASSIFIER, HeaderClassifier
from .matcher import match_pass_dumps
from .model import PassTable
from .router import make_router
from .segmenter import split_raw_segments
from .text_utils import split_prefix


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineOptions:
    """Knobs controlling how a transcript is parsed.

    ``full_module`` selects module-scope routing, ``stop_at_machine_code``
    drops everything from the first machine-level dump onwards.
    """

    apply_filters: bool = True
    filter_debug_info: bool = True
    filter_ir_metadata: bool = True
    full_module: bool = False
    stop_at_machine_code: bool = False

    @property
    def filter_options(self) -> FilterOptions:
        return FilterOptions(
            filter_debug_info=self.filter_debug_info,
            filter_ir_metadata=self.filter_ir_metadata,
        )


@dataclass
class PipelineResult:
    """Untouched transcript prefix plus the reconstructed pass table."""

    prefix: str
    passes: PassTable

    def functions(self) -> List[str]:
        return list(self.passes)


class PassDumpParser:
    """Compose filtering, segmentation, routing and matching."""

    def __init__(
        self,
        options: PipelineOptions = PipelineOptions(),
        classifier: HeaderClassifier = DEFAULT_CLASSIFIER,
    ) -> None:
        self.options = options
        self.classifier = classifier
        self.router = make_router(options.full_module, classifier)

    def process(self, dump: str) -> PipelineResult:
        prefix, body = split_prefix(dump, self.classifier.is_header)
        if self.options.apply_filters:
            body = apply_ir_filters(body, self.options.filter_options)

        raw_segments = split_raw_segments(
            body,
            self.classifier,
            stop_at_machine_code=self.options.stop_at_machine_code,
        )
        routed = self.router.route(raw_segments)
        passes = match_pass_dumps(routed)
        logger.debug(
            "reconstructed %d pass(es) across %d function(s)",
            sum(len(items) for items in passes.values()),
            len(passes),
        )
        return PipelineResult(prefix=prefix, passes=passes)


def process(dump: str, apply_filters: bool = True, **overrides: Any) -> PipelineResult:
    """Parse ``dump`` with the default options.

    Debug info and metadata filtering are on and per-function routing is
    used unless ``overrides`` says otherwise.
    """

    options = replace(PipelineOptions(apply_filters=apply_filters), **overrides)
    return PassDumpParser(options).process(dump)
