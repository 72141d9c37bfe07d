"""Rewrite single entries of a bag checksum manifest.

A manifest holds one `<digest> <filename>` line per file. Updating an entry
drops every line that references the file and appends a fresh one, leaving
all other lines as they were and in the same order.

Which lines reference the file is decided by searching the whole line text
for a regular expression, by default the filename itself, unescaped. This
matches how existing bags have been updated, but a filename that occurs
inside another entry's line (`bag-info.txt` inside `old-bag-info.txt`, say)
will drop that entry too. Such collateral matches are logged as warnings.
"""

import logging
import re

from pathlib import Path
from typing import NamedTuple, Optional, Pattern, Union

from baginject.errors import BagIOError
from baginject.utils import atomic_write

LOGGER = logging.getLogger(__name__)

ENCODING = "utf-8"


class ManifestEntry(NamedTuple):
    digest: str
    filename: str


def format_entry(digest: str, filename: str) -> str:
    return f"{digest} {filename}\n"


def parse_line(line: str) -> Optional[ManifestEntry]:
    """Split a manifest line on its first run of whitespace, as bagit does."""
    parts = line.strip().split(None, 1)
    if len(parts) != 2:
        return None
    return ManifestEntry(parts[0].lower(), parts[1])


def read_manifest(manifest_path: Path) -> list[ManifestEntry]:
    """Parse the entries of a manifest, skipping blank or malformed lines."""
    try:
        with open(manifest_path, "r", encoding=ENCODING) as fp:
            return [entry for entry in map(parse_line, fp) if entry]
    except OSError as e:
        raise BagIOError(f"Could not read manifest '{manifest_path}': {e}") from e


def update_entry(
    manifest_path: Path,
    filename: str,
    digest: str,
    pattern: Optional[Union[str, Pattern]] = None,
):
    """Replace the entries for `filename` in `manifest_path` with `<digest> <filename>`.

    The manifest must already exist. The rewritten manifest is written to a
    temporary file next to it and renamed into place.
    """
    manifest_path = Path(manifest_path)
    if pattern is None:
        pattern = filename
    try:
        matcher = re.compile(pattern) if isinstance(pattern, str) else pattern
    except re.error as e:
        raise BagIOError(f"Cannot match manifest lines with '{pattern}', not a valid regular expression: {e}") from e

    if not manifest_path.is_file():
        raise BagIOError(f"Manifest '{manifest_path}' does not exist")

    try:
        with open(manifest_path, "rb") as fp:
            raw_lines = fp.read().splitlines(keepends=True)
    except OSError as e:
        raise BagIOError(f"Could not read manifest '{manifest_path}': {e}") from e

    # kept lines are written back exactly as read, line endings included
    kept = []
    for raw_line in raw_lines:
        try:
            line = raw_line.decode(ENCODING).rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise BagIOError(f"Manifest '{manifest_path}' is not {ENCODING}: {e}") from e
        if not matcher.search(line):
            kept.append(raw_line)
            continue
        entry = parse_line(line)
        if entry is None or entry.filename != filename:
            LOGGER.warning(
                "Dropping manifest line %r from '%s': it matches '%s' but is not an entry for '%s'",
                line, manifest_path.name, matcher.pattern, filename,
            )

    if kept and not kept[-1].endswith((b"\n", b"\r")):
        kept[-1] += b"\n"
    content = b"".join(kept) + format_entry(digest, filename).encode(ENCODING)
    try:
        with atomic_write(manifest_path) as fp:
            fp.write(content)
    except OSError as e:
        raise BagIOError(f"Could not write manifest '{manifest_path}': {e}") from e

    LOGGER.debug("Updated '%s' entry in '%s' to %s", filename, manifest_path.name, digest)
