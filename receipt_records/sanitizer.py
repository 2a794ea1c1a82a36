"""
Repair the generative model's answer into strict JSON text.

The model is asked for JSON but answers with "JSON-like" prose: a code
fence or a sentence around the object, single quotes, trailing commas,
line breaks. Each repair below is a pure text-to-text step; `sanitize`
applies them in order. This is a best-effort cleanup, not a parser.
"""

import re
from typing import Callable, Tuple

EMPTY_OBJECT = "{}"


# 1. OBJECT SPAN
# Everything before the first "{" and after the last "}" is prose.
def extract_object_span(text: str) -> str:
    """Return the text from the first '{' to the last '}' inclusive, or '{}'."""
    start = text.find('{')
    end = text.rfind('}')
    if start == -1 or end == -1 or end < start:
        return EMPTY_OBJECT
    return text[start:end + 1]


# 2. SINGLE-QUOTED KEYS
# Handles: {'invoice_number': ...}
SINGLE_QUOTED_KEY_PATTERN = re.compile(r"'([^']+)'(?=:)")

def quote_keys(text: str) -> str:
    """Convert single-quoted keys to double-quoted keys."""
    return SINGLE_QUOTED_KEY_PATTERN.sub(r'"\1"', text)


# 3. SINGLE-QUOTED VALUES
# Must run after quote_keys.
SINGLE_QUOTED_VALUE_PATTERN = re.compile(r"'([^']+)'")

def quote_values(text: str) -> str:
    """Convert any remaining single-quoted strings to double-quoted strings."""
    return SINGLE_QUOTED_VALUE_PATTERN.sub(r'"\1"', text)


# 4. TRAILING COMMAS
# Handles: {"a": 1,} and [1, 2, ]
TRAILING_COMMA_OBJECT_PATTERN = re.compile(r',\s*}')
TRAILING_COMMA_ARRAY_PATTERN = re.compile(r',\s*]')

def strip_trailing_commas(text: str) -> str:
    """Remove commas placed directly before a closing brace or bracket."""
    text = TRAILING_COMMA_OBJECT_PATTERN.sub('}', text)
    return TRAILING_COMMA_ARRAY_PATTERN.sub(']', text)


# 5. LINE BREAKS
LINE_BREAK_PATTERN = re.compile(r'\r\n|\n|\r')

def strip_line_breaks(text: str) -> str:
    """Remove CRLF, LF and CR so the object sits on a single line."""
    return LINE_BREAK_PATTERN.sub('', text)


SANITIZE_STEPS: Tuple[Callable[[str], str], ...] = (
    extract_object_span,
    quote_keys,
    quote_values,
    strip_trailing_commas,
    strip_line_breaks,
    str.strip,
)


def sanitize(raw: str) -> str:
    """
    Turn a raw model answer into JSON text.

    Args:
        raw: Text returned by the generative service.

    Returns:
        The repaired object text, or '{}' when no object span exists.
    """
    if not isinstance(raw, str):
        return EMPTY_OBJECT

    text = raw
    for step in SANITIZE_STEPS:
        text = step(text)
        if text == EMPTY_OBJECT:
            break
    return text
