"""Content store: loading, topic lookup and search over a parsed cheat sheet."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from .constants import DEFAULT_SOURCE
from .errors import MalformedDocumentError, SourceReadError
from .logging import log_event, summarize_text
from .models import Document, Entry, SearchHit, Section
from .parser import parse_document
from .path_mapping import map_path


def load(text: str) -> Document:
    """Parse Markdown text into a Document. Pure and idempotent."""
    return parse_document(text)


def load_path(path: Path) -> Document:
    """Read a UTF-8 Markdown file and parse it."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, str(exc)) from exc
    document = load(text)
    log_event(
        "document_loaded",
        path=path,
        sections=len(document.sections),
        entries=document.entry_count(),
    )
    return document


def load_json(text: str) -> Document:
    """Rebuild a Document from the JSON renderer's output."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocumentError(exc.lineno, exc.msg) from exc
    try:
        return Document.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "document"
        raise MalformedDocumentError(None, f"{location}: {first['msg']}") from exc


def bundled_document_path() -> Path:
    """Return the path of the React interview cheat sheet shipped with the package."""
    return map_path(DEFAULT_SOURCE)


def find_by_topic(document: Document, name: str) -> Section | None:
    """Find a section by title, case-insensitively.

    An exact title match wins over a prefix match; among prefix matches the
    first section in document order is returned. None means no such topic.
    """
    needle = name.strip().casefold()
    found: Section | None = None
    if needle:
        found = next(
            (s for s in document.sections if s.title.casefold() == needle),
            None,
        )
        if found is None:
            found = next(
                (s for s in document.sections if s.title.casefold().startswith(needle)),
                None,
            )
    log_event(
        "topic_lookup",
        topic=name,
        result=found.title if found is not None else None,
    )
    return found


def search(document: Document, term: str) -> list[SearchHit]:
    """Return entries containing term (case-insensitive), in document order."""
    needle = term.strip().casefold()
    if not needle:
        return []

    hits: list[SearchHit] = []
    for section in document.sections:
        for entry in section.entries:
            field = _first_matching_field(entry, needle)
            if field is not None:
                hits.append(SearchHit(section=section.title, entry=entry, field=field))
    log_event("search_run", term=summarize_text(term), hits=len(hits))
    return hits


def _first_matching_field(entry: Entry, needle: str) -> str | None:
    if needle in entry.question.casefold():
        return "question"
    if needle in entry.answer.casefold():
        return "answer"
    if entry.code is not None and needle in entry.code.text.casefold():
        return "code"
    if entry.table is not None:
        cells = list(entry.table.columns)
        for row in entry.table.rows:
            cells.extend(row)
        if any(needle in cell.casefold() for cell in cells):
            return "table"
    return None
