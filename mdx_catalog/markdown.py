"""
Inspection helpers for Markdown article bodies.

The body is never rendered here. These helpers only find the structure the
linter and the index need:
- fenced code blocks (``` and ~~~) with their language hints
- ATX headings outside of code
- prose word counts and reading time estimates
"""

from __future__ import annotations

import math
import re

from .types import CodeBlock, Heading


# Opening fence: up to 3 spaces, 3+ backticks or tildes, optional info string
FENCE_OPEN_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")
# Closing fence: same marker family, nothing but whitespace after it
FENCE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
WORD_RE = re.compile(r"\w+(?:['’-]\w+)*")


def _scan(body: str, first_line: int = 1) -> tuple[list[CodeBlock], list[tuple[int, str]]]:
    """Split a body into fenced code blocks and the remaining prose lines.

    Returns:
        A tuple of (code blocks, [(line number, text)] for lines outside code)
    """
    blocks: list[CodeBlock] = []
    prose: list[tuple[int, str]] = []

    open_fence: str | None = None
    language: str | None = None
    start = 0
    code_lines: list[str] = []

    for offset, line in enumerate(body.splitlines()):
        line_no = first_line + offset
        if open_fence is None:
            match = FENCE_OPEN_RE.match(line)
            if match and not (match.group(2)[0] == "`" and "`" in match.group(3)):
                open_fence = match.group(2)
                info = match.group(3).strip()
                language = info.split()[0] if info else None
                start = line_no
                code_lines = []
                continue
            prose.append((line_no, line))
            continue

        close = FENCE_CLOSE_RE.match(line)
        if close and close.group(1)[0] == open_fence[0] and len(close.group(1)) >= len(open_fence):
            blocks.append(
                CodeBlock(
                    language=language,
                    code="\n".join(code_lines),
                    start_line=start,
                    end_line=line_no,
                    fence=open_fence,
                )
            )
            open_fence = None
            continue
        code_lines.append(line)

    if open_fence is not None:
        blocks.append(
            CodeBlock(
                language=language,
                code="\n".join(code_lines),
                start_line=start,
                end_line=None,
                fence=open_fence,
            )
        )

    return blocks, prose


def find_code_blocks(body: str, first_line: int = 1) -> list[CodeBlock]:
    """Find fenced code blocks in a Markdown body.

    Args:
        body: Markdown text
        first_line: Source line number of the first body line

    Returns:
        Code blocks in document order. A fence still open at the end of the
        body is returned with ``end_line=None``.
    """
    blocks, _ = _scan(body, first_line)
    return blocks


def find_headings(body: str, first_line: int = 1) -> list[Heading]:
    """Find ATX headings, ignoring anything inside fenced code."""
    _, prose = _scan(body, first_line)
    headings = []
    for line_no, line in prose:
        match = HEADING_RE.match(line)
        if match:
            headings.append(Heading(level=len(match.group(1)), text=match.group(2).strip(), line=line_no))
    return headings


def strip_code(body: str) -> str:
    """Return the body with fenced code blocks removed."""
    _, prose = _scan(body)
    return "\n".join(line for _, line in prose)


def word_count(body: str) -> int:
    return len(WORD_RE.findall(strip_code(body)))


def reading_time(body: str, words_per_minute: int = 200) -> int:
    """Estimated reading time in whole minutes, at least 1 for a non-empty body."""
    if not body.strip():
        return 0
    words = word_count(body)
    return max(1, math.ceil(words / max(1, words_per_minute)))
