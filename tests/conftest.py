"""Pytest configuration and fixtures for cheatsheet tests."""

import logging
from pathlib import Path

import pytest

from cheatsheet.models import Document
from cheatsheet.store import load

SAMPLE_TEXT = """\
# Hooks Notes

## Hooks

### What is useMemo?

Memoizes a computation.

### What is useRef?

Returns a mutable ref object.

It survives re-renders.

```jsx
const input = useRef(null);
```

## Comparisons

### State vs props

| Aspect | State | Props |
|---|---|---|
| Owner | Component | Parent |
| Mutable | Yes | No |
"""


@pytest.fixture(autouse=True)
def _reset_logging():
    """setup_logging(None) disables logging process-wide; undo it between tests."""
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_document() -> Document:
    return load(SAMPLE_TEXT)


@pytest.fixture
def sample_path(tmp_path: Path) -> Path:
    path = tmp_path / "sheet.md"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path
