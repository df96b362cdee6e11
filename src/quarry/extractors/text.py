"""Text helpers shared by the extractors.

These work on raw source text with just enough awareness of strings and
comments to find block boundaries. They do not tokenize.
"""

import re

_QUOTES = "\"'`"
_STRING_OR_COMMENT = re.compile(r"[\"'`]|//|/\*")
_NON_NEWLINE = re.compile(r"[^\n]")


def skip_string(content: str, start: int) -> int:
    """Return the index just past the string literal opening at start.

    Single- and double-quoted strings end at an unescaped newline if they are
    never closed. Template strings may span lines.
    """
    quote = content[start]
    i = start + 1
    while i < len(content):
        ch = content[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return i + 1
        i += 1
    return len(content)


def skip_comment(content: str, start: int) -> int | None:
    """Return the index just past a comment opening at start, or None if none does."""
    if content.startswith("//", start):
        newline = content.find("\n", start)
        return len(content) if newline == -1 else newline
    if content.startswith("/*", start):
        close = content.find("*/", start + 2)
        return len(content) if close == -1 else close + 2
    return None


def find_block_end(content: str, start: int) -> int | None:
    """Find the end of the brace-delimited block opening at start.

    Returns:
        Index just past the matching closing brace, or None if the block is
        never closed.
    """
    depth = 0
    i = start
    while i < len(content):
        ch = content[i]
        if ch in _QUOTES:
            i = skip_string(content, i)
            continue
        end = skip_comment(content, i)
        if end is not None:
            i = end
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def mask_comments(content: str) -> str:
    """Blank out comments, keeping offsets and line breaks.

    Pattern matches on the masked text ignore commented-out code, and their
    positions still index into the original content.
    """
    out: list[str] = []
    i = 0
    while True:
        match = _STRING_OR_COMMENT.search(content, i)
        if match is None:
            out.append(content[i:])
            break
        start = match.start()
        out.append(content[i:start])
        if content[start] in _QUOTES:
            end = skip_string(content, start)
            out.append(content[start:end])
        else:
            end = skip_comment(content, start)
            out.append(_NON_NEWLINE.sub(" ", content[start:end]))
        i = end
    return "".join(out)


def leading_doc_comment(content: str, index: int) -> str | None:
    """First line of the ``/** ... */`` comment immediately before index, if any."""
    end = index
    while end > 0 and content[end - 1].isspace():
        end -= 1
    if not content.endswith("*/", 0, end):
        return None

    # Comments don't nest: the nearest opener starts the comment ending here
    start = content.rfind("/*", 0, end - 2)
    if start == -1 or not content.startswith("/**", start):
        return None

    body = content[start + 3 : end - 2]
    for line in body.splitlines():
        text = line.strip().lstrip("*").strip()
        if text:
            return text
    return None
