"""Copy and merge external metadata into a bag's tag files."""

import logging
import shutil

from pathlib import Path
from typing import Iterable

from baginject.errors import BagIOError
from baginject.utils import atomic_write, get_hostname, parent_path

LOGGER = logging.getLogger(__name__)


def copy_in(source: Path, bag_root: Path) -> Path:
    """Copy `source` verbatim to the root of the bag, keeping its name.

    An existing file at the destination is overwritten.
    """
    destination = Path(bag_root) / Path(source).name
    if destination.exists() and Path(source).resolve() == destination.resolve():
        LOGGER.debug("'%s' is already at the bag root", source)
        return destination
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        raise BagIOError(f"Could not copy '{source}' to '{destination}': {e}") from e
    LOGGER.debug("Copied '%s' to '%s'", source, destination)
    return destination


def format_field(key: str, value) -> str:
    return f"{key}: {value}\n"


def append_merge(tag_file: Path, content: bytes, fields: Iterable[tuple[str, str]] = ()):
    """Append `content` and then one `key: value` line per field to `tag_file`.

    Nothing already in the tag file is parsed or changed. The appended file
    replaces the original in a single rename.
    """
    tag_file = Path(tag_file)
    block = content + "".join(format_field(k, v) for k, v in fields).encode("utf-8")
    try:
        with atomic_write(tag_file, copy_existing=True) as fp:
            fp.write(block)
    except OSError as e:
        raise BagIOError(f"Could not append to '{tag_file}': {e}") from e
    LOGGER.debug("Appended %d bytes to '%s'", len(block), tag_file)


def derived_fields(vendor: str, bag_path: Path) -> list[tuple[str, str]]:
    """The host and location fields recorded alongside merged transfer-info."""
    return [
        (f"{vendor}-hostname", get_hostname()),
        (f"{vendor}-pathname", str(parent_path(bag_path))),
    ]
