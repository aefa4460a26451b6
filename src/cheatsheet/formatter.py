"""CLI output formatting helpers.

- One blank line between semantic segments.
- Explicit empty-state feedback.
- No colors or text decorations.
"""

from __future__ import annotations

from collections.abc import Iterable

from .constants import STDOUT_NO_MATCHES
from .models import Document, SearchHit, Section


def print_segment(
    lines: Iterable[str],
    *,
    leading_blank: bool = False,
    trailing_blank: bool = False,
) -> None:
    """Print a semantic output segment with configurable blank-line boundaries."""
    if leading_blank:
        print()
    for line in lines:
        print(line)
    if trailing_blank:
        print()


def format_topic(section: Section) -> str:
    count = len(section.entries)
    noun = "question" if count == 1 else "questions"
    return f"{section.title} ({count} {noun})"


def format_topic_list(document: Document) -> list[str]:
    return [format_topic(s) for s in document.sections]


def format_search_hit(hit: SearchHit) -> str:
    return f"{hit.section} > {hit.entry.question} [{hit.field}]"


def format_search_results(hits: list[SearchHit]) -> list[str]:
    if not hits:
        return [STDOUT_NO_MATCHES]
    return [format_search_hit(h) for h in hits]
