"""Flat index of the files inside a bag."""

import logging
import os

from pathlib import Path

from baginject.errors import BagIOError

LOGGER = logging.getLogger(__name__)


def _raise_walk_error(error: OSError):
    raise error


def build_index(bag_root: Path) -> list[Path]:
    """List every non-directory path under `bag_root`, sorted.

    Sorting makes pattern lookups independent of the order the filesystem
    hands entries back in.
    """
    bag_root = Path(os.path.abspath(bag_root))
    if not bag_root.is_dir():
        raise BagIOError(f"'{bag_root}' is not a directory")

    files = []
    try:
        for dirpath, _dirnames, filenames in os.walk(bag_root, onerror=_raise_walk_error):
            files.extend(Path(dirpath) / name for name in filenames)
    except OSError as e:
        raise BagIOError(f"Could not index '{bag_root}': {e}") from e

    files.sort()
    LOGGER.debug("Indexed %d files under '%s'", len(files), bag_root)
    return files
