"""markdown_writer.py — Render a BookRecord as an Obsidian-style Markdown note."""

import re
from datetime import datetime

from models import AnnotationEntry, BookRecord

UNKNOWN_TIME = "unknown time"

# Tried in order after ISO 8601, which covers KOReader's "YYYY-MM-DD HH:MM:SS".
# Every date layout is combined with every time layout, including none.
DATE_LAYOUTS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%a %b %d %Y",      # JavaScript Date.toString()
    "%a, %d %b %Y",     # RFC 2822 / Date.toUTCString()
)
TIME_LAYOUTS = (" %H:%M:%S %z", " %H:%M:%S", " %H:%M", "")
FALLBACK_DATETIME_FORMATS = tuple(d + t for d in DATE_LAYOUTS for t in TIME_LAYOUTS)

# "GMT+0100 (Central European Standard Time)" -> "+0100"; bare "GMT"/"UTC" -> "+0000"
ZONE_NAME = re.compile(r"\s*\([^)]*\)$")
GMT_PREFIX = re.compile(r"\b(?:GMT|UTC)(?=[+-]\d{4}$)")
GMT_SUFFIX = re.compile(r"\s(?:GMT|UTC)$")


def smart_split_authors(raw: str) -> list[str]:
    """
    Split a comma-separated author string without breaking "Last, First" names.

    A comma is treated as a separator only when the text collected so far and
    the next fragment both contain more than one word. Otherwise the fragments
    are kept together, so two one-word names in a row ("Plato, Aristotle")
    come back as a single author.
    """
    parts = [p.strip() for p in raw.split(",")]
    authors = []
    buffer = ""

    for i, part in enumerate(parts):
        buffer = f"{buffer}, {part}" if buffer else part

        words_left = len(buffer.split())
        words_right = len(parts[i + 1].split()) if i + 1 < len(parts) else 0

        if words_left > 1 and words_right > 1:
            authors.append(buffer)
            buffer = ""

    if buffer:
        authors.append(buffer)
    return authors


def percent(page: int | None, total: int | None) -> str:
    """Format page/total as '12.34%', or '' when either side is missing or zero."""
    if not page or not total:
        return ""
    return f"{page / total * 100:.2f}%"


def _parse_datetime(value: str) -> datetime | None:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    value = ZONE_NAME.sub("", value)
    value = GMT_PREFIX.sub("", value)
    value = GMT_SUFFIX.sub(" +0000", value)
    for fmt in FALLBACK_DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def format_datetime(value: str | None) -> str:
    """Format a timestamp as '[[YYYY-MM-DD]] (HH:MM)' in local time, or 'unknown time'."""
    if not value:
        return UNKNOWN_TIME
    dt = _parse_datetime(value)
    if dt is None:
        return UNKNOWN_TIME
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return f"[[{dt:%Y-%m-%d}]] ({dt:%H:%M})"


def _entry_heading(entry: AnnotationEntry, page_count: int) -> str:
    page = entry.page_number or "?"
    return f"### Page: {page} ({percent(entry.page_number, page_count)}) @ {format_datetime(entry.datetime)}"


def to_markdown(record: BookRecord) -> str:
    """
    Render front matter followed by one section per highlight, in extraction order.

    Only call this for records where record.is_valid is True.
    """
    authors = smart_split_authors(record.authors_raw)

    lines = ["---", f"title: {record.title}"]
    if len(authors) > 1:
        lines.append("author:")
        lines += [f"  - {a}" for a in authors]
    else:
        lines.append(f"author: {authors[0] if authors else 'Unknown'}")
    lines += [
        f"pages: {record.page_count}",
        f"status: {record.status}",
        "---",
    ]

    for entry in record.entries:
        if not entry.text:
            continue
        if entry.chapter:
            lines += ["", f"## {entry.chapter}"]
        lines += ["", _entry_heading(entry, record.page_count), entry.text]

    return "\n".join(lines)
