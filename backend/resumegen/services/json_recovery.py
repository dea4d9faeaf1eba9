"""
JSON Recovery — pull a JSON object out of free-form model output.

Responsibilities:
  • Strip markdown fences and chatty prefixes ("Here is ...")
  • Cut out the first balanced {...} object (string-aware)
  • Parse it, escalating through an ordered tuple of pure repair functions:
      1. as-is
      2. syntax repair: comments, trailing / double commas, raw newlines and
         stray quotes inside strings
      3. aggressive: control characters, smart quotes, single-quoted keys,
         then syntax repair, parsed leniently
  • On total failure, report the first parse error
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Iterator

from resumegen.errors import NoJSONFound, UnrecoverableJSON
from resumegen.utils.text_cleanup import normalize_quotes, strip_control_chars

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json|javascript)?\s*", re.IGNORECASE)
_PREFIX = re.compile(r"^(?:here is|here's|this is|the json is):?\s*", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_DOUBLE_COMMA = re.compile(r",(\s*,)+")
_SINGLE_QUOTED_KEY = re.compile(r"([{,]\s*)'([^'\\\n]+?)'(\s*:)")

# Characters that may legally follow a string's closing quote
_AFTER_STRING = ",}]:"
_NEXT_CHAR = re.compile(r"\s*(\S?)")


# ── Public API ───────────────────────────────────────────────────────────────


def recover(raw_text: str) -> dict[str, Any]:
    """Best-effort parse of the model's answer into a JSON object."""
    text = strip_wrappers(raw_text)
    first_error: json.JSONDecodeError | None = None

    for candidate in _candidates(text):
        for repair, strict in REPAIRERS:
            try:
                parsed = json.loads(repair(candidate), strict=strict)
            except json.JSONDecodeError as e:
                first_error = first_error or e
                continue
            if isinstance(parsed, dict):
                if repair is not _as_is:
                    logger.info(f"Parsed AI JSON after {repair.__name__}")
                return parsed

    logger.error(f"Failed to parse AI JSON ({len(text)} chars): {text[:1000]}")
    detail = first_error.msg if first_error else "not a JSON object"
    raise UnrecoverableJSON(f"AI returned invalid JSON: {detail}. Please try again.")


def strip_wrappers(raw_text: str) -> str:
    text = _FENCE.sub("", raw_text or "")
    text = text.replace("```", "")
    return _PREFIX.sub("", text.strip()).strip()


def extract_object(text: str) -> str:
    """The first balanced {...} span; falls back to first '{' .. last '}' when it never balances."""
    start = text.find("{")
    if start == -1:
        logger.error("No JSON object found in response")
        raise NoJSONFound("AI did not return valid JSON format. Please try again.")

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    end = text.rfind("}")
    if end <= start:
        logger.error("No JSON object found in response")
        raise NoJSONFound("AI did not return valid JSON format. Please try again.")
    return text[start:end + 1]


# ── Repairs ──────────────────────────────────────────────────────────────────


def _as_is(text: str) -> str:
    return text


def repair_syntax(text: str) -> str:
    text = strip_comments(text)
    text = _DOUBLE_COMMA.sub(",", text)
    text = _TRAILING_COMMA.sub(r"\1", text)
    return escape_string_contents(text)


def repair_aggressive(text: str) -> str:
    text = normalize_quotes(strip_control_chars(text))
    text = _SINGLE_QUOTED_KEY.sub(r'\1"\2"\3', text)
    return repair_syntax(text)


REPAIRERS: tuple[tuple[Callable[[str], str], bool], ...] = (
    (_as_is, True),
    (repair_syntax, True),
    (repair_aggressive, False),
)


def strip_comments(text: str) -> str:
    """Remove // line and /* block */ comments outside of strings."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = n if close == -1 else close + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def escape_string_contents(text: str) -> str:
    """
    Escape raw newlines / tabs inside strings, and quotes that cannot be a
    string's closing quote (the next non-space character is not one of , } ] :
    and the text has not ended).
    """
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if not in_string:
            if ch == '"':
                in_string = True
            out.append(ch)
            i += 1
            continue

        if ch == "\\" and i + 1 < n:
            out.append(text[i:i + 2])
            i += 2
            continue
        if ch == '"':
            if _closes_string(text, i + 1):
                in_string = False
                out.append(ch)
            else:
                out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def _closes_string(text: str, pos: int) -> bool:
    nxt = _NEXT_CHAR.match(text, pos).group(1)
    return not nxt or nxt in _AFTER_STRING


def _candidates(text: str) -> Iterator[str]:
    """The balanced object first, then the first-'{'-to-last-'}' span if it differs."""
    balanced = extract_object(text)
    yield balanced
    start, end = text.find("{"), text.rfind("}")
    widest = text[start:end + 1]
    if widest != balanced:
        yield widest
