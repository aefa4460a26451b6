"""Domain models for cheatsheet."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, model_validator

from .constants import FORMAT_ALIASES
from .errors import UnsupportedFormatError


class OutputFormat(StrEnum):
    TEXT = "text"
    HTML = "html"
    JSON = "json"

    @classmethod
    def parse(cls, name: str | OutputFormat) -> OutputFormat:
        """Resolve a format name or alias, case-insensitively."""
        if isinstance(name, OutputFormat):
            return name
        key = str(name).strip().lower()
        key = FORMAT_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormatError(str(name)) from None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CodeSample(_Frozen):
    language: str | None = None
    text: str


class Table(_Frozen):
    """A comparison table. Each row holds its cells in column order.

    Rows may be given as {column: cell} mappings and serialize back to that
    shape, so JSON output keeps one object per row.
    """

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _rows_from_mappings(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        columns, raw_rows = data.get("columns"), data.get("rows")
        if not isinstance(columns, (list, tuple)) or not isinstance(raw_rows, (list, tuple)):
            return data
        rows = []
        for index, row in enumerate(raw_rows):
            if isinstance(row, Mapping):
                if set(row) != set(columns):
                    raise ValueError(f"table row {index + 1} does not match the header columns")
                row = tuple(row[c] for c in columns)
            rows.append(row)
        return {**data, "rows": tuple(rows)}

    @model_validator(mode="after")
    def _rows_match_columns(self) -> Table:
        for index, row in enumerate(self.rows):
            if len(row) != len(self.columns):
                raise ValueError(f"table row {index + 1} does not match the header columns")
        return self

    @field_serializer("rows")
    def _rows_as_mappings(self, rows: tuple[tuple[str, ...], ...]) -> list[dict[str, str]]:
        return [dict(zip(self.columns, row)) for row in rows]

    def records(self) -> list[dict[str, str]]:
        """Return fresh {column: cell} dicts, one per row."""
        return self._rows_as_mappings(self.rows)


class Entry(_Frozen):
    question: str
    answer: str = ""
    code: CodeSample | None = None
    table: Table | None = None


class Section(_Frozen):
    title: str
    entries: tuple[Entry, ...] = ()


class Document(_Frozen):
    title: str | None = None
    sections: tuple[Section, ...] = ()

    def section_titles(self) -> list[str]:
        return [s.title for s in self.sections]

    def entry_count(self) -> int:
        return sum(len(s.entries) for s in self.sections)


class SearchHit(_Frozen):
    section: str
    entry: Entry
    field: str  # first matching field: question, answer, code, or table
