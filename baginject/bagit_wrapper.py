"""Module for working with existing BagIt archives."""

import hashlib
import logging
import shutil

from pathlib import Path

import bagit

from baginject.errors import BagIOError, ValidationError
from baginject.utils import remove_if_exists

LOGGER = logging.getLogger(__name__)

HASH_BLOCK_SIZE = 512 * 1024


def is_bag(bag_directory: Path) -> bool:
    """Check if directory is a BagIt archive."""
    return (Path(bag_directory) / "bagit.txt").is_file()


def clone_bag(source: Path, destination: Path) -> Path:
    """Copy the bag at `source` to `destination`, replacing whatever is there."""
    source = Path(source)
    destination = Path(destination)
    try:
        if remove_if_exists(destination):
            LOGGER.info("Removed previous working copy '%s'", destination)
        shutil.copytree(source, destination, symlinks=False)
    except OSError as e:
        raise BagIOError(f"Could not copy bag '{source}' to '{destination}': {e}") from e
    return destination


def validate_bag(bag_directory: Path):
    """Fully validate the bag, checking every manifest digest."""
    try:
        bag = bagit.Bag(str(bag_directory))
        bag.validate(fast=False)
    except bagit.BagValidationError as e:
        details = "; ".join(str(d) for d in e.details)
        raise ValidationError(f"Bag '{bag_directory}' is invalid: {e.message} {details}".strip()) from e
    except bagit.BagError as e:
        raise ValidationError(f"Bag '{bag_directory}' could not be opened: {e}") from e
    LOGGER.debug("Bag '%s' is valid", bag_directory)


def generate_checksum(path: Path, algorithm: str = "sha256") -> str:
    """Hex digest of a file's bytes."""
    hasher = hashlib.new(algorithm)
    try:
        with open(path, "rb") as fp:
            while True:
                block = fp.read(HASH_BLOCK_SIZE)
                if not block:
                    break
                hasher.update(block)
    except OSError as e:
        raise BagIOError(f"Could not read '{path}' for checksum: {e}") from e
    return hasher.hexdigest()
