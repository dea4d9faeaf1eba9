"""
Text cleanup utilities for model output and generated filenames.
"""

from __future__ import annotations

import re

_QUOTE_REPLACEMENTS = {
    "’": "'",   # right single quote
    "‘": "'",   # left single quote
    "“": '"',   # left double quote
    "”": '"',   # right double quote
    " ": " ",   # non-breaking space
    "​": "",    # zero-width space
    "﻿": "",    # BOM
}

# Keeps \t \n \r
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def normalize_quotes(text: str) -> str:
    """Replace typographic quotes and invisible spaces with their ASCII forms."""
    for old, new in _QUOTE_REPLACEMENTS.items():
        text = text.replace(old, new)
    return text


def strip_control_chars(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def sanitize_segment(text: str) -> str:
    """Filename segment: whitespace runs → "_", then drop anything outside [A-Za-z0-9_-]."""
    text = re.sub(r"\s+", "_", text)
    return re.sub(r"[^A-Za-z0-9_-]", "", text)
