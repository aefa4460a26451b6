"""Custom exception types for cheatsheet."""

from __future__ import annotations


class CheatsheetError(Exception):
    """Base class for all cheatsheet errors."""


class MalformedDocumentError(CheatsheetError):
    def __init__(self, line: int | None, reason: str) -> None:
        self.line = line
        self.reason = reason
        if line is None:
            super().__init__(f"Malformed document: {reason}")
        else:
            super().__init__(f"Malformed document at line {line}: {reason}")


class UnsupportedFormatError(CheatsheetError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unsupported output format '{name}'.")


class SourceReadError(CheatsheetError):
    def __init__(self, path: object, detail: str) -> None:
        super().__init__(f"Could not read {path}: {detail}")


class PathMappingError(CheatsheetError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class StartupValidationError(CheatsheetError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class SlugError(CheatsheetError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Cannot make an anchor id from '{text}'.")
