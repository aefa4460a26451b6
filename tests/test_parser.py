"""Tests for the Markdown cheat-sheet parser."""

import pytest

from cheatsheet.errors import MalformedDocumentError
from cheatsheet.models import CodeSample, Document, Table
from cheatsheet.parser import parse_document


def test_parse_sample_structure(sample_document: Document) -> None:
    assert sample_document.title == "Hooks Notes"
    assert [s.title for s in sample_document.sections] == ["Hooks", "Comparisons"]

    hooks = sample_document.sections[0]
    assert [e.question for e in hooks.entries] == ["What is useMemo?", "What is useRef?"]
    assert hooks.entries[0].answer == "Memoizes a computation."
    assert hooks.entries[0].code is None
    assert hooks.entries[0].table is None


def test_parse_keeps_paragraph_breaks_and_code(sample_document: Document) -> None:
    entry = sample_document.sections[0].entries[1]
    assert entry.answer == "Returns a mutable ref object.\n\nIt survives re-renders."
    assert entry.code == CodeSample(language="jsx", text="const input = useRef(null);")


def test_parse_table_only_entry(sample_document: Document) -> None:
    entry = sample_document.sections[1].entries[0]
    assert entry.answer == ""
    assert entry.table == Table(
        columns=("Aspect", "State", "Props"),
        rows=(
            {"Aspect": "Owner", "State": "Component", "Props": "Parent"},
            {"Aspect": "Mutable", "State": "Yes", "Props": "No"},
        ),
    )


def test_parse_is_idempotent(sample_text: str) -> None:
    assert parse_document(sample_text) == parse_document(sample_text)


def test_parse_without_title() -> None:
    doc = parse_document("## Hooks\n\n### What is useMemo?\n\nMemoizes a computation.\n")
    assert doc.title is None
    assert doc.sections[0].entries[0].answer == "Memoizes a computation."


def test_parse_order_matches_headings() -> None:
    text = "\n".join(
        f"## S{s}\n" + "".join(f"### Q{s}.{q}\nA{s}.{q}\n" for q in range(3))
        for s in range(4)
    )
    doc = parse_document(text)
    assert [s.title for s in doc.sections] == ["S0", "S1", "S2", "S3"]
    assert [e.question for e in doc.sections[2].entries] == ["Q2.0", "Q2.1", "Q2.2"]
    assert doc.sections[3].entries[1].answer == "A3.1"


def test_parse_empty_section_is_kept() -> None:
    doc = parse_document("## Empty\n\n## Full\n### Q\nA.\n")
    assert [s.title for s in doc.sections] == ["Empty", "Full"]
    assert doc.sections[0].entries == ()


def test_headings_inside_code_are_not_structure() -> None:
    text = "## Shell\n### How do I comment?\n```bash\n## not a section\n### not a question\n```\n"
    doc = parse_document(text)
    assert len(doc.sections) == 1
    assert len(doc.sections[0].entries) == 1
    assert doc.sections[0].entries[0].code.text == "## not a section\n### not a question"


def test_tilde_fence_keeps_backtick_lines() -> None:
    text = "## Docs\n### Nesting?\n~~~markdown\n```js\nx()\n```\n~~~\n"
    code = parse_document(text).sections[0].entries[0].code
    assert code == CodeSample(language="markdown", text="```js\nx()\n```")


def test_fence_without_language() -> None:
    code = parse_document("## S\n### Q\n```\nplain\n```\n").sections[0].entries[0].code
    assert code.language is None
    assert code.text == "plain"


def test_indented_fence_is_dedented() -> None:
    text = "## S\n### Q\nSee:\n  ```js\n    nested();\n  done();\n  ```\n"
    code = parse_document(text).sections[0].entries[0].code
    assert code.text == "  nested();\ndone();"


def test_code_blank_lines_preserved() -> None:
    text = "## S\n### Q\n```py\na = 1\n\n\nb = 2\n```\n"
    assert parse_document(text).sections[0].entries[0].code.text == "a = 1\n\n\nb = 2"


def test_deeper_headings_stay_in_answer() -> None:
    text = "## S\n### Q\nIntro.\n\n#### Details\nMore.\n"
    assert parse_document(text).sections[0].entries[0].answer == "Intro.\n\n#### Details\nMore."


def test_heading_closing_hashes_and_csharp() -> None:
    doc = parse_document("## C# tips\n### Why? ###\nBecause.\n## Hooks ##\n### Q\nA.\n")
    assert [s.title for s in doc.sections] == ["C# tips", "Hooks"]
    assert doc.sections[0].entries[0].question == "Why?"


def test_hash_without_space_is_text() -> None:
    doc = parse_document("## C\n### Include?\n#include <stdio.h>\n")
    assert doc.sections[0].entries[0].answer == "#include <stdio.h>"


def test_breaks_and_comments_are_ignored() -> None:
    text = "<!-- generated -->\n# T\n---\n## S\n### Q\nA.\n\n---\n\n## S2\n### Q2\nB.\n"
    doc = parse_document(text)
    assert doc.sections[0].entries[0].answer == "A."
    assert [s.title for s in doc.sections] == ["S", "S2"]


def test_crlf_and_bom_input() -> None:
    doc = parse_document("\ufeff## S\r\n### Q\r\nA.\r\n")
    assert doc.sections[0].title == "S"
    assert doc.sections[0].entries[0].answer == "A."


def test_escaped_pipe_in_table_cell() -> None:
    text = "## S\n### Q\n| Op | Meaning |\n|:---|---:|\n| a \\| b | either |\n"
    table = parse_document(text).sections[0].entries[0].table
    assert table.rows == (("a | b", "either"),)


def test_text_after_table_joins_answer() -> None:
    text = "## S\n### Q\nBefore.\n\n| a |\n|---|\n| 1 |\n\nAfter.\n"
    entry = parse_document(text).sections[0].entries[0]
    assert entry.answer == "Before.\n\nAfter."
    assert entry.table.rows == (("1",),)


def test_table_with_header_only() -> None:
    table = parse_document("## S\n### Q\n| a | b |\n|---|---|\n").sections[0].entries[0].table
    assert table.columns == ("a", "b")
    assert table.rows == ()


def test_second_code_block_stays_in_answer() -> None:
    text = "## S\n### Q\nSetup:\n```js\nconst a = 1;\n```\nThen:\n```js\nconst b = 2;\n```\n"
    entry = parse_document(text).sections[0].entries[0]
    assert entry.code == CodeSample(language="js", text="const a = 1;")
    assert entry.answer == "Setup:\nThen:\n```js\nconst b = 2;\n```"


def test_second_table_stays_in_answer() -> None:
    text = "## S\n### Q\n| a |\n|---|\n| 1 |\n\n| b |\n|---|\n| 2 |\n"
    entry = parse_document(text).sections[0].entries[0]
    assert entry.table == Table(columns=("a",), rows=(("1",),))
    assert entry.answer == "| b |\n|---|\n| 2 |"


@pytest.mark.parametrize(
    ("text", "line", "reason"),
    [
        ("", 1, "no section headings"),
        ("Intro text\n## A\n### Q\nA.\n", 1, "before the first section"),
        ("### Q\nA.\n", 1, "question appears before any section"),
        ("## A\nintro\n### Q\nA.\n", 2, "before its first question"),
        ("## A\n### Q\n", 2, "has no answer"),
        ("## A\n### Q\n```js\ncode\n", 3, "never closed"),
        ("## A\n### Q\nx\n| a | b |\n|---|---|\n| 1 |\n", 6, "table row has 1 cells, expected 2"),
        ("## A\n### Q\n| a | b |\nnot a rule\n", 3, "separator row"),
        ("## A\n### Q\n| a | b |\n|---|\n", 4, "separator row has 1 cells"),
        ("## A\n### Q\n| a | a |\n|---|---|\n", 3, "repeats a column"),
        ("## A\n### Q\n|  | b |\n|---|---|\n", 3, "empty column"),
        ("## A\n### Q\n```\na\n```\n```\nb\n", 6, "never closed"),
        ("## A\n### Q\nx\n# Late title\n", 4, "before the first section"),
        ("# A\n# B\n## S\n### Q\nx\n", 2, "more than one title"),
        ("##\n### Q\nx\n", 1, "heading has no text"),
        ("## S\n###   \nx\n", 2, "heading has no text"),
        ("## S\n```\ncode\n```\n", 2, "before its first question"),
    ],
)
def test_malformed_documents(text: str, line: int, reason: str) -> None:
    with pytest.raises(MalformedDocumentError) as exc_info:
        parse_document(text)
    assert exc_info.value.line == line
    assert reason in exc_info.value.reason
    assert f"line {line}" in str(exc_info.value)
