"""Report characters used by the site that the subset font does not cover.

``characters.txt`` lists every glyph baked into the site's subset M+ font. Any
character found in the site's text files but missing from that list means the
font needs rebuilding.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".js", ".json", ".txt", ".html", ".css", ".md"}
SKIPPED_DIRS = {"node_modules", "data"}
KNOWN_CHARS_FILE = Path("characters.txt")


def iter_text_files(root: str | Path, exclude: Path | None = None) -> Iterator[Path]:
    """Yield text files under ``root``, skipping hidden, vendored and data dirs."""
    excluded = exclude.resolve() if exclude is not None else None
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in SKIPPED_DIRS
        )
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            path = Path(dirpath, name)
            if path.suffix not in TEXT_SUFFIXES:
                continue
            if excluded is not None and path.resolve() == excluded:
                continue
            yield path


def read_chars(path: str | Path) -> set[str]:
    return set(Path(path).read_text(encoding="utf-8"))


def find_new_chars(root: str | Path, known_chars_file: str | Path = KNOWN_CHARS_FILE) -> list[str]:
    known_chars_file = Path(known_chars_file)
    known = read_chars(known_chars_file)
    found: set[str] = set()
    for path in iter_text_files(root, exclude=known_chars_file):
        try:
            found |= read_chars(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot inspect %s: %s", path, e)
    return sorted(found - known)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("root", nargs="?", default="public", help="Directory to scan.")
    parser.add_argument(
        "--known",
        type=Path,
        default=KNOWN_CHARS_FILE,
        help="File listing the characters already in the font.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    try:
        new_chars = find_new_chars(args.root, args.known)
    except (OSError, UnicodeDecodeError) as e:
        print(f"✗ {args.known} cannot be read: {e}", file=sys.stderr)
        return 1

    for char in new_chars:
        print(f"'{char}'")
    print(f"\nFound {len(new_chars)} new chars.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
