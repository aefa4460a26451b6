"""Markdown cheat-sheet parser.

Document structure:
    # Title                 optional, once, before any section
    ## Section title        starts a section
    ### Question            starts an entry in the current section
    answer paragraphs       answer text of the current entry
    ```lang ... ```         the entry's code sample (the first one)
    | a | b | + |---|---|   the entry's comparison table (the first one)

Level 4+ headings inside an entry are kept as answer text, as are any
fences or tables after the first of each. Thematic breaks and single-line
HTML comments are ignored. Anything else out of place is a
MalformedDocumentError naming the 1-based line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NoReturn

from .constants import (
    HEADING_QUESTION,
    HEADING_SECTION,
    HEADING_TITLE,
    TABLE_CELL_SEPARATOR,
    THEMATIC_BREAKS,
)
from .errors import MalformedDocumentError
from .models import CodeSample, Document, Entry, Section, Table

# A closing run of #s is only stripped when preceded by whitespace ("C#" stays).
_HEADING_RE = re.compile(r"^(?P<marks>#{1,6})(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE_OPEN_RE = re.compile(r"^(?P<indent> {0,3})(?P<marker>`{3,}|~{3,})[ \t]*(?P<info>.*?)[ \t]*$")
_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(?P<marker>`{3,}|~{3,})[ \t]*$")
_COMMENT_RE = re.compile(r"^<!--.*-->$")
_TABLE_SPLIT_RE = re.compile(r"(?<!\\)\|")
_TABLE_RULE_CELL_RE = re.compile(r"^:?-+:?$")


@dataclass
class _EntryDraft:
    question: str
    line: int
    answer_lines: list[str] = field(default_factory=list)
    code: CodeSample | None = None
    table: Table | None = None

    def build(self) -> Entry:
        answer = _join_paragraphs(self.answer_lines)
        if not answer and self.code is None and self.table is None:
            raise MalformedDocumentError(
                self.line, f"question '{self.question}' has no answer"
            )
        return Entry(question=self.question, answer=answer, code=self.code, table=self.table)


@dataclass
class _SectionDraft:
    title: str
    line: int
    entries: list[Entry] = field(default_factory=list)

    def build(self) -> Section:
        return Section(title=self.title, entries=tuple(self.entries))


def parse_document(text: str) -> Document:
    """Parse cheat-sheet Markdown into a Document."""
    return _Parser(text.removeprefix("\ufeff").splitlines()).parse()


class _Parser:
    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self._title: str | None = None
        self._sections: list[Section] = []
        self._section: _SectionDraft | None = None
        self._entry: _EntryDraft | None = None

    def parse(self) -> Document:
        i = 0
        while i < len(self._lines):
            i = self._consume(i)
        self._close_section()
        if not self._sections:
            raise MalformedDocumentError(
                max(len(self._lines), 1), "document has no section headings"
            )
        return Document(title=self._title, sections=tuple(self._sections))

    def _consume(self, i: int) -> int:
        """Handle the block starting at index i; return the next index."""
        line = self._lines[i]
        lineno = i + 1
        stripped = line.strip()

        fence = _FENCE_OPEN_RE.match(line)
        if fence:
            return self._consume_fence(i, fence)

        heading = _HEADING_RE.match(line)
        if heading:
            self._consume_heading(lineno, len(heading["marks"]), (heading["text"] or "").strip(), line)
            return i + 1

        if not stripped:
            if self._entry is not None:
                self._entry.answer_lines.append("")
            return i + 1

        if stripped in THEMATIC_BREAKS or _COMMENT_RE.match(stripped):
            return i + 1

        if self._entry is None:
            self._reject_stray_text(lineno)

        # Only the first table is structured; later ones stay in the answer.
        if stripped.startswith(TABLE_CELL_SEPARATOR) and self._entry.table is None:
            return self._consume_table(i)

        self._entry.answer_lines.append(line.rstrip())
        return i + 1

    def _consume_heading(self, lineno: int, level: int, text: str, raw: str) -> None:
        if level > HEADING_QUESTION:
            if self._entry is None:
                self._reject_stray_text(lineno)
            self._entry.answer_lines.append(raw.rstrip())
            return

        if not text:
            raise MalformedDocumentError(lineno, "heading has no text")

        if level == HEADING_TITLE:
            if self._title is not None:
                raise MalformedDocumentError(lineno, "document has more than one title")
            if self._section is not None or self._sections:
                raise MalformedDocumentError(
                    lineno, "document title must come before the first section"
                )
            self._title = text
        elif level == HEADING_SECTION:
            self._close_section()
            self._section = _SectionDraft(title=text, line=lineno)
        else:
            if self._section is None:
                raise MalformedDocumentError(lineno, "question appears before any section")
            self._close_entry()
            self._entry = _EntryDraft(question=text, line=lineno)

    def _consume_fence(self, i: int, fence: re.Match[str]) -> int:
        lineno = i + 1
        if self._entry is None:
            self._reject_stray_text(lineno)

        marker = fence["marker"]
        indent = len(fence["indent"])
        j = i + 1
        while j < len(self._lines):
            closing = _FENCE_CLOSE_RE.match(self._lines[j])
            if (
                closing
                and closing["marker"][0] == marker[0]
                and len(closing["marker"]) >= len(marker)
            ):
                break
            j += 1
        else:
            raise MalformedDocumentError(lineno, "code block is never closed")

        # Later fences stay in the answer as written.
        if self._entry.code is not None:
            self._entry.answer_lines.extend(line.rstrip() for line in self._lines[i : j + 1])
            return j + 1

        info = fence["info"]
        language = info.split()[0] if info else None
        body = [_dedent(line, indent) for line in self._lines[i + 1 : j]]
        self._entry.code = CodeSample(language=language, text="\n".join(body))
        return j + 1

    def _consume_table(self, i: int) -> int:
        header_no = i + 1
        columns = _split_row(self._lines[i])
        if any(not c for c in columns):
            raise MalformedDocumentError(header_no, "table header has an empty column")
        if len(set(columns)) != len(columns):
            raise MalformedDocumentError(header_no, "table header repeats a column")

        if i + 1 >= len(self._lines) or not _is_rule_row(self._lines[i + 1]):
            raise MalformedDocumentError(
                header_no, "table header must be followed by a separator row"
            )
        rule = _split_row(self._lines[i + 1])
        if len(rule) != len(columns):
            raise MalformedDocumentError(
                i + 2, f"separator row has {len(rule)} cells, expected {len(columns)}"
            )

        rows: list[tuple[str, ...]] = []
        j = i + 2
        while j < len(self._lines) and self._lines[j].strip().startswith(TABLE_CELL_SEPARATOR):
            cells = _split_row(self._lines[j])
            if len(cells) != len(columns):
                raise MalformedDocumentError(
                    j + 1, f"table row has {len(cells)} cells, expected {len(columns)}"
                )
            rows.append(tuple(cells))
            j += 1

        self._entry.table = Table(columns=tuple(columns), rows=tuple(rows))
        return j

    def _reject_stray_text(self, lineno: int) -> NoReturn:
        if self._section is None:
            raise MalformedDocumentError(lineno, "content appears before the first section")
        raise MalformedDocumentError(
            lineno, f"text in section '{self._section.title}' appears before its first question"
        )

    def _close_entry(self) -> None:
        if self._entry is None:
            return
        assert self._section is not None
        self._section.entries.append(self._entry.build())
        self._entry = None

    def _close_section(self) -> None:
        self._close_entry()
        if self._section is None:
            return
        self._sections.append(self._section.build())
        self._section = None


def _join_paragraphs(lines: list[str]) -> str:
    """Trim outer blank lines and collapse blank runs to one separator."""
    out: list[str] = []
    for line in lines:
        if not line.strip():
            if out and out[-1] != "":
                out.append("")
            continue
        out.append(line)
    while out and out[-1] == "":
        out.pop()
    return "\n".join(out)


def _dedent(line: str, indent: int) -> str:
    removable = len(line) - len(line.lstrip(" "))
    return line[min(indent, removable):]


def _split_row(line: str) -> list[str]:
    body = line.strip()
    if body.startswith(TABLE_CELL_SEPARATOR):
        body = body[1:]
    if body.endswith(TABLE_CELL_SEPARATOR) and not body.endswith("\\|"):
        body = body[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _TABLE_SPLIT_RE.split(body)]


def _is_rule_row(line: str) -> bool:
    if not line.strip().startswith(TABLE_CELL_SEPARATOR):
        return False
    cells = _split_row(line)
    return bool(cells) and all(_TABLE_RULE_CELL_RE.match(c) for c in cells)
