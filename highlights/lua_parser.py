"""highlights/lua_parser.py — Extract book metadata and highlights from KOReader sidecar files."""

import logging
import re
from pathlib import Path

from highlights.base import iter_entry_blocks, parse_int
from models import AnnotationEntry, BookRecord

logger = logging.getLogger(__name__)

# One ["key"] = "value" pair; both sides stay on a single line, value ends at the first quote.
FIELD_PATTERN = re.compile(r'\["(.*?)"\]\s*=\s*"(.*?)"')
PAGENO_PATTERN = re.compile(r'\["pageno"\]\s*=\s*(\d+)', re.ASCII)

TITLE_PATTERN = re.compile(r'\["title"\]\s*=\s*"([^"]+)"')
AUTHORS_PATTERN = re.compile(r'\["authors"\]\s*=\s*"(.*?)"', re.DOTALL)
# The lookahead stops at the first "}" so only keys of the named table itself are seen.
STATS_PAGES_PATTERN = re.compile(r'\["stats"\]\s*=\s*\{[^}]*?"pages"\]\s*=\s*(\d+)', re.ASCII)
SUMMARY_STATUS_PATTERN = re.compile(r'\["summary"\]\s*=\s*\{[^}]*?"status"\]\s*=\s*"([^"]+)"')


def _parse_entry(block: str) -> AnnotationEntry:
    """Turn one entry block body into an AnnotationEntry."""
    fields = {key: value for key, value in FIELD_PATTERN.findall(block)}

    page_match = PAGENO_PATTERN.search(block)
    if page_match:
        page_number = int(page_match.group(1))
    else:
        page_number = parse_int(fields.get("pageno"))

    return AnnotationEntry(
        chapter=fields.get("chapter"),
        page_number=page_number,
        datetime=fields.get("datetime"),
        text=fields.get("text"),
        fields=fields,
    )


def _search_group(pattern: re.Pattern, content: str) -> str | None:
    m = pattern.search(content)
    return m.group(1) if m else None


def _extract_metadata(content: str) -> tuple[str | None, str | None, int, str]:
    """Read title, authors, page count and reading status from anywhere in the document."""
    title = _search_group(TITLE_PATTERN, content)
    authors = _search_group(AUTHORS_PATTERN, content)
    pages = parse_int(_search_group(STATS_PAGES_PATTERN, content)) or 0
    status = _search_group(SUMMARY_STATUS_PATTERN, content) or "unknown"

    return (
        title.strip() if title is not None else None,
        authors.strip() if authors is not None else None,
        pages,
        status,
    )


def parse_lua(content: str) -> BookRecord:
    """
    Build a BookRecord from the text of a KOReader metadata.*.lua file.

    Never raises on odd input: missing pieces fall back to defaults, and a
    missing title or author leaves the record with is_valid == False.
    """
    entries = [_parse_entry(block) for block in iter_entry_blocks(content)]
    title, authors_raw, page_count, status = _extract_metadata(content)

    logger.debug(
        "Extracted %d entries (title=%r, pages=%d, status=%s)",
        len(entries), title, page_count, status,
    )
    return BookRecord(
        title=title,
        authors_raw=authors_raw,
        page_count=page_count,
        status=status,
        entries=entries,
    )


def parse_lua_file(file_path: Path) -> BookRecord:
    """Read a sidecar file as UTF-8 and extract it."""
    file_path = Path(file_path)
    return parse_lua(file_path.read_text(encoding="utf-8"))
