"""Legacy web pattern scanner.

Regex based, line oriented. Good enough to count occurrences for the
dashboard; it is not a parser and will happily match inside comments.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .errors import ScanError

logger = logging.getLogger(__name__)

LANGUAGE_BY_SUFFIX = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".css": "css",
    ".html": "html",
    ".htm": "html",
}

DEFAULT_EXCLUDE_DIRS = frozenset(["node_modules", ".git", "dist", "build"])
DEFAULT_MAX_FILE_BYTES = 1024 * 1024

_SCRIPT = ("javascript", "typescript")

# (pattern id, regex, languages, suggestion)
LEGACY_PATTERNS = [
    ("var", re.compile(r"\bvar\s+[A-Za-z_$]"), _SCRIPT,
     "Use let or const instead of var"),
    ("XMLHttpRequest", re.compile(r"\bXMLHttpRequest\b"), _SCRIPT,
     "Use fetch() instead of XMLHttpRequest"),
    ("function", re.compile(r"(?<![\w$.])function\s*\("), _SCRIPT,
     "Use an arrow function for anonymous callbacks"),
    ("for-in", re.compile(r"\bfor\s*\(\s*(?:var|let|const)?\s*[A-Za-z_$][\w$]*\s+in\s"), _SCRIPT,
     "Use for...of or Object.keys() instead of for...in"),
    ("float", re.compile(r"\bfloat\s*:\s*(?:left|right)\b", re.IGNORECASE), ("css",),
     "Use Flexbox or Grid instead of float layouts"),
    ("<div>", re.compile(r"<div\b", re.IGNORECASE), ("html",),
     "Use a semantic element (header, nav, main, section, article)"),
    ("<b><i><u>", re.compile(r"<(?:b|i|u)>", re.IGNORECASE), ("html",),
     "Use <strong>, <em> or <mark> instead of presentational tags"),
]


@dataclass
class PatternLocation:
    line: int
    column: int
    suggestion: str


@dataclass
class PatternHit:
    """All occurrences of one legacy pattern in a file."""

    pattern: str
    count: int = 0
    locations: list[PatternLocation] = field(default_factory=list)


@dataclass
class ScanResult:
    """Outcome of scanning one file or text buffer."""

    file_name: str
    language: str
    patterns: list[PatternHit] = field(default_factory=list)

    @property
    def issues_found(self) -> int:
        return sum(hit.count for hit in self.patterns)


def detect_language(path: str | Path) -> str:
    return LANGUAGE_BY_SUFFIX.get(Path(path).suffix.lower(), "unknown")


def scan_text(text: str, language: str, file_name: str = "<text>") -> ScanResult:
    """Count legacy patterns in ``text`` for the given language."""
    hits: dict[str, PatternHit] = {}
    for line_no, line in enumerate(text.splitlines(), 1):
        for pattern_id, regex, languages, suggestion in LEGACY_PATTERNS:
            if language not in languages:
                continue
            for match in regex.finditer(line):
                hit = hits.setdefault(pattern_id, PatternHit(pattern=pattern_id))
                hit.count += 1
                hit.locations.append(PatternLocation(
                    line=line_no,
                    column=match.start() + 1,
                    suggestion=suggestion,
                ))
    return ScanResult(file_name=file_name, language=language, patterns=list(hits.values()))


def scan_file(path: str | Path, max_bytes: int = DEFAULT_MAX_FILE_BYTES) -> ScanResult:
    """Read and scan one source file.

    Raises:
        ScanError: If the file cannot be read or is larger than ``max_bytes``.
    """
    path = Path(path)
    language = detect_language(path)
    try:
        size = path.stat().st_size
        if size > max_bytes:
            raise ScanError(f"{path} is too large to scan ({size} bytes)")
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ScanError(f"Cannot read {path}: {e}") from e

    result = scan_text(text, language, file_name=str(path))
    logger.debug(f"Scanned {path}: {result.issues_found} legacy patterns")
    return result


def iter_source_files(root: str | Path, exclude_dirs: frozenset[str] = DEFAULT_EXCLUDE_DIRS) -> Iterator[Path]:
    """Yield supported source files under ``root`` (or ``root`` itself), sorted."""
    root = Path(root)
    if root.is_file():
        if root.suffix.lower() in LANGUAGE_BY_SUFFIX:
            yield root
        return

    for path in sorted(root.rglob("*")):
        if any(part in exclude_dirs for part in path.relative_to(root).parts):
            continue
        if path.is_file() and path.suffix.lower() in LANGUAGE_BY_SUFFIX:
            yield path
