"""Browse and render Markdown Q&A cheat sheets."""

__version__ = "0.1.0"
