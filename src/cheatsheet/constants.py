"""Centralized constants for cheatsheet."""

from __future__ import annotations

APP_NAME = "cheatsheet"

# Bundled content, addressed relative to the package root
DEFAULT_SOURCE = "@/data/react-interview.md"

# Markdown structure
HEADING_TITLE = 1
HEADING_SECTION = 2
HEADING_QUESTION = 3
THEMATIC_BREAKS = frozenset({"---", "***", "___"})
TABLE_CELL_SEPARATOR = "|"

# Output formats
FORMAT_ALIASES = {
    "plain-text": "text",
    "plain": "text",
    "txt": "text",
    "htm": "html",
}
JSON_SEPARATORS_COMPACT = (",", ":")

# Plain-text rendering
TEXT_TITLE_RULE = "="
TEXT_SECTION_RULE = "-"
TEXT_QUESTION_PREFIX = "Q: "
TEXT_ANSWER_PREFIX = "A: "
TEXT_CODE_INDENT = "    "
TEXT_COLUMN_GAP = "  "

# HTML rendering
HTML_DEFAULT_TITLE = "Cheat Sheet"
HTML_FALLBACK_ANCHOR = "section"

# CLI
CLI_DESCRIPTION = "cheatsheet - browse and render Markdown Q&A cheat sheets"
CLI_EPILOG = """\
Paths accept absolute paths, ~ (home), or @ (package root).

Examples:
  cheatsheet topics
  cheatsheet show performance
  cheatsheet search useMemo
  cheatsheet render --format html --out ~/react.html
  cheatsheet --source ~/notes/vue.md render --format json --indent 2
"""
CLI_HELP_HINT = "Run 'cheatsheet --help' for usage."
STDERR_ERROR_PREFIX = "ERROR: "
STDOUT_NO_MATCHES = "No matches."
STDOUT_UNCHANGED_PREFIX = "Unchanged: "
STDOUT_WRITTEN_PREFIX = "Written: "
STDERR_TOPIC_NOT_FOUND_PREFIX = "Topic not found: "

# Logging
LOG_EVENT_KEY_ORDER = ("ts", "level", "logger", "event")
