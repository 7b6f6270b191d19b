"""Command-line summary of the passes found in an LLVM pass dump."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import PassDumpError, SelectionError
from .model import Pass
from .pipeline import PassDumpParser, PipelineOptions
from .selection import check_dump_flags, find_function, list_functions, select_passes


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Path to the pass dump file. Reads from stdin when omitted",
    )
    parser.add_argument(
        "-s",
        "--skip-unchanged",
        action="store_true",
        help="Hide passes that don't modify the IR",
    )
    parser.add_argument("-f", "--function", help="Only show passes for this function")
    parser.add_argument(
        "-P", "--pass", dest="pass_pattern", help="Only show passes whose name contains this"
    )
    parser.add_argument(
        "-E",
        "--extended-regex",
        action="store_true",
        help="Treat -f and -P as regular expressions",
    )
    parser.add_argument(
        "-l", "--list", action="store_true", help="List the functions found in the dump"
    )
    parser.add_argument(
        "--passthrough",
        action="store_true",
        help="Echo the text preceding the first dump header to stderr",
    )
    parser.add_argument("--no-filters", action="store_true", help="Keep the IR text untouched")
    parser.add_argument("--keep-debug-info", action="store_true")
    parser.add_argument("--keep-metadata", action="store_true")
    parser.add_argument(
        "--full-module",
        action="store_true",
        help="Treat dumps as module-scope (-print-module-scope)",
    )
    parser.add_argument(
        "--stop-at-machine-code",
        action="store_true",
        help="Ignore everything from the first machine-level dump onwards",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def read_input(path: Optional[Path]) -> str:
    if path is None:
        return sys.stdin.read()
    try:
        return path.read_text("utf-8")
    except OSError as exc:
        raise SystemExit(f"Failed to read from file: {path} ({exc})") from exc


def options_from_args(args: argparse.Namespace) -> PipelineOptions:
    return PipelineOptions(
        apply_filters=not args.no_filters,
        filter_debug_info=not args.keep_debug_info,
        filter_ir_metadata=not args.keep_metadata,
        full_module=args.full_module,
        stop_at_machine_code=args.stop_at_machine_code,
    )


def format_pass(position: int, function_name: str, pass_: Pass) -> str:
    markers: List[str] = []
    if pass_.is_machine_level:
        markers.append("machine")
    markers.append("changed" if pass_.ir_changed else "unchanged")
    return f"({position}·{function_name}) {pass_.name} [{', '.join(markers)}]"


def print_function(
    function_name: str, passes: Sequence[Pass], args: argparse.Namespace
) -> None:
    for position, pass_ in select_passes(
        passes,
        pass_pattern=args.pass_pattern,
        use_regex=args.extended_regex,
        skip_unchanged=args.skip_unchanged,
    ):
        print(format_pass(position, function_name, pass_))


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    dump = read_input(args.input)
    try:
        check_dump_flags(dump)
        if args.list:
            for name in list_functions(dump):
                print(name)
            return

        result = PassDumpParser(options_from_args(args)).process(dump)
        if args.passthrough:
            sys.stderr.write(result.prefix)

        if args.function is not None:
            name, passes = find_function(result.passes, args.function, args.extended_regex)
            print_function(name, passes, args)
        else:
            for name in sorted(result.passes):
                print_function(name, result.passes[name], args)
    except (PassDumpError, SelectionError) as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
