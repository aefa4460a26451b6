"""Render a parsed cheat sheet as plain text, HTML, or JSON.

All renderers are pure: they return the full output as a string, so an
unsupported format or a failing renderer never leaves partial output behind.
"""

from __future__ import annotations

import html
import json
import unicodedata
from pathlib import Path

from .constants import (
    HTML_DEFAULT_TITLE,
    HTML_FALLBACK_ANCHOR,
    JSON_SEPARATORS_COMPACT,
    TEXT_ANSWER_PREFIX,
    TEXT_CODE_INDENT,
    TEXT_COLUMN_GAP,
    TEXT_QUESTION_PREFIX,
    TEXT_SECTION_RULE,
    TEXT_TITLE_RULE,
)
from .errors import SlugError
from .logging import log_event
from .models import CodeSample, Document, Entry, OutputFormat, Section, Table
from .path_mapping import slugify


def render(
    document: Document,
    output_format: OutputFormat | str,
    *,
    indent: int | None = None,
) -> str:
    """Render document in the requested format.

    Raises UnsupportedFormatError for unknown format names before any work
    is done. indent only affects JSON output.
    """
    fmt = OutputFormat.parse(output_format)
    if fmt == OutputFormat.TEXT:
        content = render_text(document)
    elif fmt == OutputFormat.HTML:
        content = render_html(document)
    else:
        content = render_json(document, indent=indent)
    log_event(
        "document_rendered",
        format=fmt.value,
        sections=len(document.sections),
        chars=len(content),
    )
    return content


def render_section(
    section: Section,
    output_format: OutputFormat | str,
    *,
    indent: int | None = None,
) -> str:
    """Render one section as a single-section document."""
    return render(Document(sections=(section,)), output_format, indent=indent)


def write_output(content: str, path: Path) -> bool:
    """Write rendered content to path. Returns False if the file was already identical."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and path.read_text(encoding="utf-8") == content:
        return False
    path.write_text(content, encoding="utf-8")
    log_event("output_written", path=path, chars=len(content))
    return True


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def render_json(document: Document, *, indent: int | None = None) -> str:
    data = document.model_dump(mode="json", exclude_none=True)
    if indent is None:
        return json.dumps(data, ensure_ascii=False, separators=JSON_SEPARATORS_COMPACT)
    return json.dumps(data, ensure_ascii=False, indent=indent) + "\n"


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


def render_text(document: Document) -> str:
    lines: list[str] = []
    if document.title:
        lines += [document.title, TEXT_TITLE_RULE * display_width(document.title), ""]

    for section in document.sections:
        lines += [section.title, TEXT_SECTION_RULE * display_width(section.title), ""]
        for entry in section.entries:
            lines += _text_entry(entry)
            lines.append("")

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"


def _text_entry(entry: Entry) -> list[str]:
    lines = [TEXT_QUESTION_PREFIX + entry.question]
    if entry.answer:
        hanging = " " * len(TEXT_ANSWER_PREFIX)
        for index, answer_line in enumerate(entry.answer.split("\n")):
            prefix = TEXT_ANSWER_PREFIX if index == 0 else hanging
            lines.append((prefix + answer_line).rstrip())
    if entry.code is not None:
        lines.append("")
        lines += _text_code(entry.code)
    if entry.table is not None:
        lines.append("")
        lines += _text_table(entry.table)
    return lines


def _text_code(code: CodeSample) -> list[str]:
    label = f"[{code.language}]" if code.language else "[code]"
    lines = [TEXT_CODE_INDENT + label]
    for code_line in code.text.split("\n"):
        lines.append((TEXT_CODE_INDENT + code_line) if code_line else "")
    return lines


def _text_table(table: Table) -> list[str]:
    widths = [display_width(c) for c in table.columns]
    for row in table.rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], display_width(cell))

    def fmt_row(cells: list[str]) -> str:
        padded = [_pad(cell, width) for cell, width in zip(cells, widths)]
        return (TEXT_CODE_INDENT + TEXT_COLUMN_GAP.join(padded)).rstrip()

    lines = [fmt_row(list(table.columns))]
    lines.append(fmt_row(["-" * w for w in widths]))
    for row in table.rows:
        lines.append(fmt_row(list(row)))
    return lines


def display_width(text: str) -> int:
    """Terminal column width of text; wide and fullwidth characters count as two."""
    width = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return width


def _pad(text: str, width: int) -> str:
    return text + " " * (width - display_width(text))


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


def render_html(document: Document) -> str:
    """Render a standalone HTML page.

    Answer text is not Markdown-rendered: inline markup such as `#### Details`
    or backtick spans comes out as literal, escaped text inside <p>.
    """
    page_title = html.escape(document.title or HTML_DEFAULT_TITLE)
    anchors = _section_anchors(document)

    lines: list[str] = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '  <meta charset="UTF-8">',
        f"  <title>{page_title}</title>",
        "  <style>",
        "    body { font-size: 1rem; max-width: 60em; margin: 0 auto; padding: 1em; }",
        "    pre { background: whitesmoke; padding: 0.75em; overflow-x: auto; }",
        "    table { border-collapse: collapse; }",
        "    th, td { border: 1px solid gray; padding: 0.5em; text-align: left; }",
        "    th { background: black; color: white; font-weight: bold; }",
        "  </style>",
        "</head>",
        "<body>",
        f"  <h1>{page_title}</h1>",
        "  <nav>",
        "    <ul>",
    ]
    for section, anchor in zip(document.sections, anchors):
        lines.append(f'      <li><a href="#{anchor}">{html.escape(section.title)}</a></li>')
    lines += ["    </ul>", "  </nav>"]

    for section, anchor in zip(document.sections, anchors):
        lines += _html_section(section, anchor)

    lines += ["</body>", "</html>", ""]
    return "\n".join(lines)


def _section_anchors(document: Document) -> list[str]:
    """Unique anchor ids, in section order; repeats get -2, -3, ..."""
    seen: dict[str, int] = {}
    anchors: list[str] = []
    for section in document.sections:
        try:
            base = slugify(section.title)
        except SlugError:
            base = HTML_FALLBACK_ANCHOR
        count = seen.get(base, 0) + 1
        seen[base] = count
        anchors.append(base if count == 1 else f"{base}-{count}")
    return anchors


def _html_section(section: Section, anchor: str) -> list[str]:
    lines = [
        f'  <section id="{anchor}">',
        f"    <h2>{html.escape(section.title)}</h2>",
    ]
    for entry in section.entries:
        lines.append(f"    <h3>{html.escape(entry.question)}</h3>")
        for paragraph in entry.answer.split("\n\n") if entry.answer else []:
            lines.append(f"    <p>{html.escape(paragraph)}</p>")
        if entry.code is not None:
            lines.append(_html_code(entry.code))
        if entry.table is not None:
            lines += _html_table(entry.table)
    lines.append("  </section>")
    return lines


def _html_code(code: CodeSample) -> str:
    # Code must stay byte-for-byte, so no indentation inside <pre>.
    css = f' class="language-{html.escape(code.language)}"' if code.language else ""
    return f"    <pre><code{css}>{html.escape(code.text)}</code></pre>"


def _html_table(table: Table) -> list[str]:
    lines = ["    <table>", "      <thead>", "        <tr>"]
    for column in table.columns:
        lines.append(f"          <th>{html.escape(column)}</th>")
    lines += ["        </tr>", "      </thead>", "      <tbody>"]
    for row in table.rows:
        lines.append("        <tr>")
        for cell in row:
            lines.append(f"          <td>{html.escape(cell)}</td>")
        lines.append("        </tr>")
    lines += ["      </tbody>", "    </table>"]
    return lines
