"""Small helpers for walking dump transcripts line by line."""

from __future__ import annotations

from typing import Callable, Iterator, Tuple


def iter_lines(text: str) -> Iterator[str]:
    """Yield the lines of ``text`` without their terminators.

    Only ``\\n`` separates lines; a trailing ``\\r`` is dropped.  IR string
    constants may legitimately contain form feeds and other characters that
    :meth:`str.splitlines` would treat as separators.
    """

    if not text:
        return
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    for piece in pieces:
        if piece.endswith("\r"):
            piece = piece[:-1]
        yield piece


def is_blank(line: str) -> bool:
    return not line.strip()


def split_prefix(text: str, is_header: Callable[[str], bool]) -> Tuple[str, str]:
    """Split ``text`` right before the first line accepted by ``is_header``.

    When no header is present the whole text is returned as the prefix.
    """

    offset = 0
    length = len(text)
    while offset < length:
        newline = text.find("\n", offset)
        end = length if newline < 0 else newline
        line = text[offset:end]
        if line.endswith("\r"):
            line = line[:-1]
        if is_header(line):
            return text[:offset], text[offset:]
        offset = end + 1
    return text, ""
