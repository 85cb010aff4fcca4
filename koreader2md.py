#!/usr/bin/env python3
"""
koreader2md — Convert KOReader highlight sidecars (metadata.*.lua) to Markdown notes.

Every .lua file found under the input directory (recursively) becomes one
"<Book Title>.md" in the output directory, with front matter for Obsidian and
one section per highlight.

Quick start:
  1. Add KOREADER_INPUT_DIR and KOREADER_OUTPUT_DIR to .env (or pass the flags)
  2. python koreader2md.py --dry-run
  3. python koreader2md.py
"""

import argparse
import logging
import os
import re
import sys
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from highlights import parse_lua, parse_lua_file
from markdown_writer import to_markdown
from models import BookRecord

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:"*?<>|]+')
OUTPUT_EXTENSION = ".md"


class FileOutcome(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ConversionResult:
    record: BookRecord
    markdown: str | None    # None when the record lacks a title or author

    @property
    def skipped(self) -> bool:
        return self.markdown is None


def render_record(record: BookRecord) -> ConversionResult:
    if not record.is_valid:
        return ConversionResult(record=record, markdown=None)
    return ConversionResult(record=record, markdown=to_markdown(record))


def convert_text(raw_text: str) -> ConversionResult:
    """Extract and render one sidecar's text. Invalid records come back skipped, not raised."""
    return render_record(parse_lua(raw_text))


def safe_filename(title: str) -> str:
    """'Dune: Messiah?' -> 'Dune_ Messiah_.md'"""
    return UNSAFE_FILENAME_CHARS.sub("_", title) + OUTPUT_EXTENSION


def find_lua_files(root: Path) -> list[Path]:
    return sorted(p for p in Path(root).rglob("*.lua") if p.is_file())


def convert_file(file_path: Path, output_dir: Path, dry_run: bool = False) -> FileOutcome:
    """Convert a single file. Errors are logged and reported as FAILED, never raised."""
    try:
        result = render_record(parse_lua_file(file_path))
        if result.skipped:
            logger.warning("Skipping file (missing title/author): %s", file_path)
            return FileOutcome.SKIPPED

        filename = safe_filename(result.record.title)
        if dry_run:
            logger.info("Would save: %s (%d entries)", filename, len(result.record.entries))
            return FileOutcome.SAVED

        dest = Path(output_dir) / filename
        dest.write_text(result.markdown, encoding="utf-8")
        logger.info("Saved: %s", filename)
        return FileOutcome.SAVED

    except (OSError, ValueError) as e:
        # ValueError covers UnicodeDecodeError
        logger.error("Error processing %s: %s", file_path, e)
        return FileOutcome.FAILED


def print_banner(input_dir: Path, output_dir: Path) -> None:
    print("KOReader highlights -> Markdown")
    print(f"Input dir:  {input_dir.resolve()}")
    print(f"Output dir: {output_dir.resolve()}")
    print("-" * 70)


def print_summary(counts: Counter, dry_run: bool = False) -> None:
    print("-" * 70)
    verb = "Would save" if dry_run else "Saved"
    print(
        f"  {verb}: {counts[FileOutcome.SAVED]}  |  "
        f"Skipped: {counts[FileOutcome.SKIPPED]}  |  "
        f"Failed: {counts[FileOutcome.FAILED]}"
    )
    print()


def run(input_dir: Path, output_dir: Path, dry_run: bool = False) -> int:
    """Convert every sidecar under input_dir. Returns a process exit status."""
    input_dir, output_dir = Path(input_dir), Path(output_dir)
    print_banner(input_dir, output_dir)

    if not input_dir.exists():
        logger.error("Input directory does not exist: %s", input_dir)
        return 1

    if not output_dir.exists() and not dry_run:
        print(f"Creating output directory: {output_dir}")
        output_dir.mkdir(parents=True, exist_ok=True)

    lua_files = find_lua_files(input_dir)
    if not lua_files:
        logger.warning("No .lua files found in %s (including subfolders).", input_dir)
        return 0

    print(f"Found {len(lua_files)} .lua files")
    counts = Counter()
    for lua_file in tqdm(lua_files, desc="Converting", unit="file"):
        logger.debug("Converting: %s", lua_file)
        counts[convert_file(lua_file, output_dir, dry_run=dry_run)] += 1

    print_summary(counts, dry_run=dry_run)
    if dry_run:
        print("Dry run complete. No files written.")
    else:
        print("All done.")
    return 0


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert KOReader highlight sidecars (*.lua) to Markdown notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List what would be written, touch nothing:
  python koreader2md.py --input-dir ~/Sync/koreader --output-dir ~/Vault/Books --dry-run

  # Directories from .env (KOREADER_INPUT_DIR / KOREADER_OUTPUT_DIR):
  python koreader2md.py
        """,
    )
    parser.add_argument(
        "--input-dir", type=Path, default=os.getenv("KOREADER_INPUT_DIR") or None, metavar="DIR",
        help="Folder searched recursively for .lua sidecars (env: KOREADER_INPUT_DIR)",
    )
    parser.add_argument(
        "--output-dir", type=Path, default=os.getenv("KOREADER_OUTPUT_DIR") or None, metavar="DIR",
        help="Folder the Markdown notes are written to (env: KOREADER_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Parse every file and report, without writing anything",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    if args.input_dir is None:
        parser.error("an input directory is required (--input-dir or KOREADER_INPUT_DIR)")
    if args.output_dir is None:
        parser.error("an output directory is required (--output-dir or KOREADER_OUTPUT_DIR)")
    args.input_dir = Path(args.input_dir).expanduser()
    args.output_dir = Path(args.output_dir).expanduser()
    return args


def main():
    load_dotenv()
    args = parse_args()
    setup_logging(args.verbose)
    sys.exit(run(args.input_dir, args.output_dir, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
