"""Path mapping and anchor slug utilities.

User-supplied paths accept ~ (home), @ (package root), absolute paths, and
paths relative to the current directory.
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import Path

from .errors import PathMappingError, SlugError

_WINDOWS_DRIVE_RELATIVE_RE = re.compile(r"^[A-Za-z]:[^/\\]")

# Slugs keep Unicode letters, digits and _; everything else becomes -.
_SLUG_DROP_RE = re.compile(r"[^\w]+", flags=re.UNICODE)
_SLUG_COLLAPSE_RE = re.compile(r"-+")


def app_root() -> Path:
    """Return the absolute package directory that @ maps to."""
    return Path(__file__).resolve().parent


def map_path(
    raw: str,
    *,
    app_root_abs: Path | None = None,
    base_dir: Path | None = None,
) -> Path:
    """Map a user-provided path string to an absolute resolved Path.

    Resolution rules (applied in order):
    1. Normalize NFD → NFC.
    2. Reject empty input and NUL chars.
    3. Reject Windows rooted-not-qualified forms (\\name, C:name).
    4. ~ expands to the home directory, @ to app_root_abs.
    5. Relative paths are joined onto base_dir (default: current directory).
    6. Dot segments are resolved via Path.resolve(strict=False).
    """
    root = app_root_abs if app_root_abs is not None else app_root()
    if not root.is_absolute():
        raise PathMappingError("app_root_abs must be an absolute path.")

    normalized = unicodedata.normalize("NFC", raw).strip()
    if not normalized:
        raise PathMappingError("Path is empty.")
    if "\0" in normalized:
        raise PathMappingError("Path contains NUL (\\0) character.")
    if _is_windows_rooted_not_fully_qualified(normalized):
        raise PathMappingError(
            "Unsupported Windows rooted-not-qualified path form "
            "(e.g. \\name or C:name)."
        )

    if normalized.startswith("~"):
        mapped = Path(re.sub(r"[\\/]+", "/", normalized)).expanduser()
    elif normalized.startswith("@"):
        segments = [s for s in re.split(r"[\\/]+", normalized[1:]) if s]
        mapped = root.joinpath(*segments)
    else:
        mapped = Path(re.sub(r"[\\/]+", "/", normalized))

    if not mapped.is_absolute():
        mapped = (base_dir if base_dir is not None else Path.cwd()) / mapped

    return mapped.resolve()


def slugify(text: str) -> str:
    """Turn a heading into an HTML anchor id.

    Lowercases, replaces runs of non-word characters with -, and strips
    leading/trailing -. Raises SlugError when nothing is left.
    """
    slug = _SLUG_DROP_RE.sub("-", unicodedata.normalize("NFC", text).lower())
    slug = _SLUG_COLLAPSE_RE.sub("-", slug).strip("-_")
    if not slug:
        raise SlugError(text)
    return slug


def _is_windows_rooted_not_fully_qualified(path_text: str) -> bool:
    # \name (not \\unc)
    if path_text.startswith("\\") and not path_text.startswith("\\\\"):
        return True
    # C:name (drive-relative, not C:\name or C:/name)
    return _WINDOWS_DRIVE_RELATIVE_RE.match(path_text) is not None
