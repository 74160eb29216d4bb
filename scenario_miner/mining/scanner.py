"""Lexical scanning of test-file source: delimiters, strings and comments."""

import re
from collections.abc import Iterator, Mapping
from typing import Literal, TypeAlias

DELIMITER_PAIRS: Mapping[str, str] = {"{": "}", "(": ")", "[": "]"}
QUOTE_CHARS = frozenset("'\"`")

Region: TypeAlias = Literal["code", "string", "comment"]

_NOT_NEWLINE = re.compile(r"[^\n]")


def iter_regions(text: str, start: int = 0) -> Iterator[tuple[Region, int, int]]:
    """Split ``text`` from ``start`` into code, string and comment spans.

    Spans are half-open ``(start, end)`` offsets in source order. Inside a
    quote a backslash escapes the following character. An unterminated
    string or comment runs to the end of the text.
    """
    length = len(text)
    index = code_start = start

    while index < length:
        char = text[index]
        kind: Region
        if char in QUOTE_CHARS:
            kind, end = "string", _string_end(text, index)
        elif text.startswith("//", index):
            newline = text.find("\n", index)
            kind, end = "comment", length if newline == -1 else newline
        elif text.startswith("/*", index):
            close = text.find("*/", index + 2)
            kind, end = "comment", length if close == -1 else close + 2
        else:
            index += 1
            continue

        if code_start < index:
            yield "code", code_start, index
        yield kind, index, end
        index = code_start = end

    if code_start < length:
        yield "code", code_start, length


def _string_end(text: str, open_index: int) -> int:
    quote = text[open_index]
    index = open_index + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        index += 1
    return len(text)


def mask_comments(text: str) -> str:
    """Blank out comments, keeping every offset and line break in place."""
    return "".join(
        _NOT_NEWLINE.sub(" ", text[start:end]) if kind == "comment" else text[start:end]
        for kind, start, end in iter_regions(text)
    )


def find_matching_close(text: str, open_index: int) -> int | None:
    """Return the index of the delimiter closing the block opened at ``open_index``.

    Delimiters inside quoted strings and comments are ignored.

    Args:
        text: Source text to scan
        open_index: Index of an opening ``{``, ``(`` or ``[``

    Returns:
        Index of the matching closing delimiter, or None when the block is
        never closed or ``open_index`` does not point at an opening delimiter

    """
    if not 0 <= open_index < len(text):
        return None

    opener = text[open_index]
    closer = DELIMITER_PAIRS.get(opener)
    if closer is None:
        return None

    depth = 0
    for kind, start, end in iter_regions(text, open_index):
        if kind != "code":
            continue
        for index in range(start, end):
            char = text[index]
            if char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return index

    return None
