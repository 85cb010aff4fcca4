"""models.py — Shared data types for koreader2md."""

from dataclasses import dataclass, field


@dataclass
class AnnotationEntry:
    chapter: str | None = None
    page_number: int | None = None
    datetime: str | None = None     # As stored by KOReader, e.g. "2024-03-02 21:14:07"
    text: str | None = None
    fields: dict[str, str] = field(default_factory=dict)   # Every quoted key/value in the block


@dataclass
class BookRecord:
    title: str | None
    authors_raw: str | None         # Unsplit, e.g. "Smith, Jane"
    page_count: int = 0
    status: str = "unknown"         # "reading", "complete", "abandoned", ...
    entries: list[AnnotationEntry] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """A record can only be rendered when both title and authors were found."""
        return bool(self.title) and bool(self.authors_raw)
