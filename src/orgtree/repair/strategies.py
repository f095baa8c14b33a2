"""Text transforms used by the repair pipeline.

Each transform takes a candidate string and returns a new one; none of
them parse JSON.  They are applied cumulatively, in this order:

  1. direct               (identity)
  2. extract_boundaries   (drop prose around the payload)
  3. strip_comments       (// and /* */ outside strings)
  4. remove_trailing_commas
  5. normalize_quotes     (lossy: every ' becomes ")
  6. balance_brackets     (close truncated strings, arrays and objects)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

_QUOTES = "\"'"
_OPENERS = "{["
_CLOSERS = "}]"
_CLOSER_FOR = {"{": "}", "[": "]"}

_TRAILING_CLOSER = re.compile(r"\s*[}\]]")
_BARE_KEY = re.compile(r"([{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)")
_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_LITERALS = frozenset({"true", "false", "null"})
_PARTIAL_UNICODE = re.compile(r"\\u[0-9a-fA-F]{0,3}$")
_TOKEN_END = frozenset(",:{}[]\"") | frozenset(" \t\r\n")


@dataclass(frozen=True)
class RepairStrategy:
    """One transformation step of the repair pipeline."""

    name: str
    transform: Callable[[str], str]
    lossy: bool = False


def direct(text: str) -> str:
    return text


def extract_boundaries(text: str) -> str:
    """Slice from the first ``[``/``{`` to the last ``]``/``}``.

    When nothing closes after the opener (a truncated payload) the slice
    runs to the end of the text so balance repair still sees the tail.
    """
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = max(text.rfind("}"), text.rfind("]"))
    if end < start:
        return text[start:]
    return text[start : end + 1]


def strip_comments(text: str) -> str:
    """Remove ``//`` line comments and ``/* */`` block comments.

    Both quote styles are treated as string delimiters, so URLs inside
    string values survive.  The newline ending a line comment is kept.
    """
    out: list[str] = []
    quote = ""
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = ""
            i += 1
            continue
        if ch in _QUOTES:
            quote = ch
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def remove_trailing_commas(text: str) -> str:
    """Delete commas followed (ignoring whitespace) by ``}`` or ``]``."""
    out: list[str] = []
    quote = ""
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
        elif ch in _QUOTES:
            quote = ch
        elif ch == "," and _TRAILING_CLOSER.match(text, i + 1):
            continue
        out.append(ch)
    return "".join(out)


def _split_strings(text: str) -> list[tuple[bool, str]]:
    """Split text into (inside_double_quoted_string, chunk) segments."""
    segments: list[tuple[bool, str]] = []
    buf_start = 0
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                segments.append((True, text[buf_start : i + 1]))
                buf_start = i + 1
                in_string = False
        elif ch == '"':
            if i > buf_start:
                segments.append((False, text[buf_start:i]))
            buf_start = i
            in_string = True
    if buf_start < len(text):
        segments.append((in_string, text[buf_start:]))
    return segments


def normalize_quotes(text: str) -> str:
    """Turn single quotes into double quotes and quote bare object keys.

    The quote swap is a plain textual substitution: an apostrophe inside
    a double-quoted string is rewritten too.  Results that depend on this
    step are reported as lossy.
    """
    swapped = text.replace("'", '"')
    return "".join(
        chunk if inside else _BARE_KEY.sub(r'\1"\2"\3', chunk)
        for inside, chunk in _split_strings(swapped)
    )


def _is_complete_literal(token: str) -> bool:
    return token in _LITERALS or _NUMBER.fullmatch(token) is not None


def _close_open_string(fragment: str) -> str:
    """Terminate a string literal cut off at the end of ``fragment``."""
    match = _PARTIAL_UNICODE.search(fragment)
    if match:
        slashes = len(fragment[: match.start()]) - len(
            fragment[: match.start()].rstrip("\\")
        )
        if slashes % 2 == 0:
            fragment = fragment[: match.start()]
    trailing = len(fragment) - len(fragment.rstrip("\\"))
    if trailing % 2 == 1:
        fragment = fragment[:-1]
    return fragment + '"'


def balance_brackets(text: str) -> str:
    """Close a truncated payload so it becomes syntactically complete.

    A single linear scan tracks the open ``{``/``[`` stack outside string
    literals and remembers the last offset where the document could be
    closed (after an opener or a complete value).  Incomplete trailing
    syntax past that offset (a dangling comma, a key with no value, a
    partial literal) is dropped.  A string value cut off mid-way is
    closed instead.  Missing closers are appended innermost first.
    """
    stack: list[str] = []
    # per open container: "key" | "colon" | "value" | "comma"
    modes: list[str] = []
    safe_len = 0
    safe_depth = 0
    open_value_string = -1
    n = len(text)
    i = 0

    def value_done(end: int) -> None:
        nonlocal safe_len, safe_depth
        if modes:
            modes[-1] = "comma"
        safe_len, safe_depth = end, len(stack)

    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in _OPENERS:
            stack.append(ch)
            modes.append("key" if ch == "{" else "value")
            i += 1
            safe_len, safe_depth = i, len(stack)
        elif ch in _CLOSERS:
            if stack:
                stack.pop()
                modes.pop()
            i += 1
            value_done(i)
        elif ch == '"':
            is_key = bool(stack) and stack[-1] == "{" and modes[-1] == "key"
            j = i + 1
            escaped = False
            while j < n:
                c = text[j]
                if escaped:
                    escaped = False
                elif c == "\\":
                    escaped = True
                elif c == '"':
                    break
                j += 1
            if j >= n:
                if not is_key:
                    open_value_string = i
                break
            i = j + 1
            if is_key:
                modes[-1] = "colon"
            else:
                value_done(i)
        elif ch == ":":
            if modes:
                modes[-1] = "value"
            i += 1
        elif ch == ",":
            if modes:
                modes[-1] = "key" if stack[-1] == "{" else "value"
            i += 1
        else:
            j = i
            while j < n and text[j] not in _TOKEN_END:
                j += 1
            if j < n or _is_complete_literal(text[i:j]):
                value_done(j)
            i = j

    if open_value_string != -1:
        body = _close_open_string(text[open_value_string:])
        head = text[:open_value_string] + body
        depth = len(stack)
    else:
        head = text[:safe_len].rstrip()
        depth = safe_depth

    closers = "".join(_CLOSER_FOR[c] for c in reversed(stack[:depth]))
    return remove_trailing_commas(head + closers)


DEFAULT_STRATEGIES: tuple[RepairStrategy, ...] = (
    RepairStrategy("direct", direct),
    RepairStrategy("extract_boundaries", extract_boundaries),
    RepairStrategy("strip_comments", strip_comments),
    RepairStrategy("remove_trailing_commas", remove_trailing_commas),
    RepairStrategy("normalize_quotes", normalize_quotes, lossy=True),
    RepairStrategy("balance_brackets", balance_brackets),
)
