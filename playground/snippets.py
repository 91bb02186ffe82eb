"""Find the "Load in playground" snippets embedded in lesson markdown."""

from __future__ import annotations

import re

PLAYGROUND_FENCE = "playground"

_FENCE_OPEN = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$")


def _is_closing(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(line) - len(line.lstrip(" ")) <= 3
        and len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


def extract_playground_snippets(markdown: str) -> list[str]:
    """
    Return the bodies of ```playground fenced blocks, in document order.

    Only the first word of the info string counts, so "playground demo" is a
    playground block while "js playground" is not. An unterminated block runs
    to the end of the document.
    """
    snippets: list[str] = []
    lines = markdown.splitlines()
    index = 0
    while index < len(lines):
        match = _FENCE_OPEN.match(lines[index])
        index += 1
        if match is None:
            continue
        fence = match.group("fence")
        info = match.group("info").strip()
        if fence[0] == "`" and "`" in info:
            continue

        body: list[str] = []
        while index < len(lines) and not _is_closing(lines[index], fence):
            body.append(lines[index])
            index += 1
        index += 1

        words = info.split()
        if words and words[0] == PLAYGROUND_FENCE:
            snippets.append("\n".join(body) + "\n" if body else "")
    return snippets
