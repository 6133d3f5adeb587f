import os
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from vite_mini.core.scanner import scan_imports
from vite_mini.models import VIRTUAL_MODULE_PREFIX, ImportSpecifierOccurrence, SpecifierKind

_URL_PATTERN = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*://|data:|blob:)")


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    replacement: bytes


def classify_specifier(occurrence: ImportSpecifierOccurrence) -> SpecifierKind:
    if occurrence.is_dynamic:
        return SpecifierKind.DYNAMIC
    text = occurrence.text
    if text.startswith("/") or _URL_PATTERN.match(text):
        return SpecifierKind.ABSOLUTE
    if text.startswith("."):
        return SpecifierKind.RELATIVE
    return SpecifierKind.BARE


def to_root_url(path: Path, root: Path) -> str:
    """Express a filesystem path as a URL path rooted at ``root``."""
    relative = os.path.relpath(os.path.normpath(path), os.path.normpath(root))
    return "/" + relative.replace(os.sep, "/")


def apply_edits(source: bytes, edits: Sequence[Edit]) -> bytes:
    """Build new source by copying untouched spans and substituting edited ones.

    Edits address the original ``source``; they must be sorted and non-overlapping.
    """
    parts: list[bytes] = []
    cursor = 0
    for edit in edits:
        if edit.start < cursor or edit.end < edit.start or edit.end > len(source):
            raise ValueError(f"Edit [{edit.start}, {edit.end}) overlaps or falls outside the source")
        parts.append(source[cursor : edit.start])
        parts.append(edit.replacement)
        cursor = edit.end
    parts.append(source[cursor:])
    return b"".join(parts)


def _rewrite_specifier(occurrence: ImportSpecifierOccurrence, importer_dir: Path, root: Path) -> str | None:
    kind = classify_specifier(occurrence)
    if kind is SpecifierKind.RELATIVE:
        return to_root_url(importer_dir / occurrence.text, root)
    if kind is SpecifierKind.BARE:
        return VIRTUAL_MODULE_PREFIX + occurrence.text
    return None


def rewrite_imports(
    source: str,
    occurrences: Sequence[ImportSpecifierOccurrence],
    importer_dir: Path,
    root: Path,
) -> str:
    edits: list[Edit] = []
    for occurrence in occurrences:
        replacement = _rewrite_specifier(occurrence, importer_dir, root)
        if replacement is None or replacement == occurrence.text:
            continue
        edits.append(Edit(occurrence.start, occurrence.end, replacement.encode("utf-8")))

    if not edits:
        return source
    return apply_edits(source.encode("utf-8"), edits).decode("utf-8")


def resolve_imports(source: str, importer_dir: Path, root: Path) -> str:
    """Rewrite the import specifiers of a module so a browser can load them."""
    occurrences = scan_imports(source)
    if not occurrences:
        return source
    return rewrite_imports(source, occurrences, importer_dir, root)
