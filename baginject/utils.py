"""Helpers too generic to be in other modules."""
import os
import shutil
import socket
import tempfile

from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator


def get_hostname() -> str:
    return socket.gethostname()


def parent_path(path: Path) -> Path:
    """Absolute directory containing `path`."""
    return Path(os.path.abspath(path)).parent


def remove_if_exists(path: Path) -> bool:
    """Delete a directory tree or file at `path`, returning whether anything was removed."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


@contextmanager
def atomic_write(destination: Path, copy_existing: bool = False) -> Iterator[BinaryIO]:
    """Write to a sibling temporary file, then rename it over `destination`.

    With `copy_existing` the temporary file starts as a byte copy of the
    current destination and is opened for appending. The destination keeps
    its permission bits. If the body raises, the destination is untouched.
    """
    destination = Path(destination)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}-", dir=destination.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        if copy_existing and destination.exists():
            shutil.copyfile(destination, tmp_path)
        with open(tmp_path, "ab" if copy_existing else "wb") as fp:
            yield fp
            fp.flush()
            os.fsync(fp.fileno())
        if destination.exists():
            shutil.copymode(destination, tmp_path)
        else:
            # mkstemp files are only accessible by the creating user
            os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
