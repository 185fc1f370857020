from __future__ import annotations

from pathlib import Path
from typing import Optional

# The first entry is the default selection.
SUPPORTED_LANGUAGES = [
    "JavaScript",
    "TypeScript",
    "Python",
    "Java",
    "C#",
    "C++",
    "C",
    "Go",
    "Rust",
    "Ruby",
    "PHP",
    "Swift",
    "Kotlin",
    "SQL",
    "HTML",
    "CSS",
    "Shell",
]

LANGUAGE_BY_EXTENSION = {
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".cs": "C#",
    ".cpp": "C++",
    ".cc": "C++",
    ".hpp": "C++",
    ".c": "C",
    ".h": "C",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".sql": "SQL",
    ".html": "HTML",
    ".css": "CSS",
    ".sh": "Shell",
}

BINARY_EXTS = {".png", ".jpg", ".jpeg", ".gif", ".pdf", ".zip", ".exe", ".dmg", ".bin"}


def detect_language(filename: str) -> Optional[str]:
    """Language to pre-select for an uploaded file, or None to leave the selection alone."""
    language = LANGUAGE_BY_EXTENSION.get(Path(filename).suffix.lower())
    if language in SUPPORTED_LANGUAGES:
        return language
    return None


def is_probably_text(filename: str) -> bool:
    return Path(filename).suffix.lower() not in BINARY_EXTS


def decode_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1", errors="replace")


def read_text_file(path: Path) -> str:
    return decode_bytes(path.read_bytes())
