"""Normalize object-shaped source literals into JSON and parse them."""

import json
import re
from typing import Any

from quarry.exceptions import SchemaParseError
from quarry.extractors.text import skip_comment, skip_string

_KEY_TOKEN = re.compile(r"[A-Za-z_$][\w$]*|\d+")
_SIMPLE_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _to_json_string(body: str, quote: str) -> str:
    """Re-quote a string literal body with double quotes."""
    body = body.replace("\\'", "'").replace("\\`", "`")
    if quote != '"':
        body = re.sub(r'(?<!\\)"', '\\"', body)
    for raw, escaped in _SIMPLE_ESCAPES.items():
        body = body.replace(raw, escaped)
    return f'"{body}"'


def _next_significant(text: str, start: int) -> int:
    """Index of the next character at or after start that is not whitespace or comment."""
    i = start
    while i < len(text):
        if text[i].isspace():
            i += 1
            continue
        end = skip_comment(text, i)
        if end is None:
            return i
        i = end
    return i


def normalize_literal(text: str) -> str:
    """Rewrite a JS/TS object literal into canonical JSON text.

    Unquoted keys (identifiers or digit runs) are quoted, single-quoted and
    template strings become double-quoted, trailing commas and comments are
    dropped. Anything that is not plain data (references, calls, spreads) is
    left as-is and will fail to parse.
    """
    out: list[str] = []
    last = ""  # last significant character emitted
    i = 0
    while i < len(text):
        ch = text[i]

        if ch in "\"'`":
            end = skip_string(text, i)
            closed = end - 1 if text[end - 1] == ch and end - 1 > i else end
            out.append(_to_json_string(text[i + 1 : closed], ch))
            last = '"'
            i = end
            continue

        end = skip_comment(text, i)
        if end is not None:
            i = end
            continue

        if ch == ",":
            following = _next_significant(text, i + 1)
            if following < len(text) and text[following] in "}]":
                i = following
                continue

        match = _KEY_TOKEN.match(text, i)
        if match:
            word = match.group()
            i = match.end()
            following = _next_significant(text, i)
            is_key = last in ("{", ",") and following < len(text) and text[following] == ":"
            out.append(json.dumps(word) if is_key else word)
            last = word[-1]
            continue

        out.append(ch)
        if not ch.isspace():
            last = ch
        i += 1

    return "".join(out)


def parse_literal(text: str) -> Any:
    """Parse an object-shaped source literal into a structural value.

    Raises:
        SchemaParseError: If the normalized text is not valid JSON.
    """
    try:
        return json.loads(normalize_literal(text))
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"Literal is not plain data: {e}") from e
