"""Exception hierarchy for pass dump parsing and pass selection."""

from __future__ import annotations


class PassDumpError(ValueError):
    """Base class for reportable problems found while parsing a dump."""


class PassMismatchError(PassDumpError):
    """A ``Before X`` dump is immediately followed by an unrelated ``After Y``.

    This almost always means that several compiler instances wrote into the
    same dump file.
    """

    def __init__(self, before_name: str, after_name: str) -> None:
        self.before_name = before_name
        self.after_name = after_name
        super().__init__(
            "Consecutive pass headers in dump file do not match:\n"
            f"First:  '{before_name}'\n"
            f"Second: '{after_name}'\n\n"
            "Each pass dump is compared with its immediate next dump in the file.\n"
            "This error typically occurs when multiple compiler instances write to "
            "the same dump file.\n"
            "Please run a single compiler instance at a time."
        )


class MissingFunctionError(PassDumpError):
    """A loop-level dump appeared before any function it could belong to."""

    def __init__(self, header: str, label: str) -> None:
        self.header = header
        self.label = label
        super().__init__(
            f"dump '{header}' refers to {label} but no function has been seen yet"
        )


class PipelineInvariantError(RuntimeError):
    """An earlier stage produced output the pass matcher cannot interpret."""


class SelectionError(ValueError):
    """Base class for errors raised while picking functions or passes."""


class FunctionNotFoundError(SelectionError):
    def __init__(self, pattern: str, use_regex: bool = False) -> None:
        self.pattern = pattern
        if use_regex:
            message = f"No function matching regex '{pattern}' was found in the input"
        else:
            message = f"Function '{pattern}' was not found in the input"
        super().__init__(
            message + ", use option `--list/-l` to find out all available functions"
        )


class PatternError(SelectionError):
    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid regex pattern: {pattern} ({reason})")


class MissingDumpFlagError(SelectionError):
    """The transcript lacks the before or after dumps entirely."""
