import hashlib
import os
import socket

from pathlib import Path

import bagit
import pytest

TEST_HOSTNAME = "test-host"


def sha256(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def write_files(root: Path, files: dict):
    for relpath, content in files.items():
        path = root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)


@pytest.fixture
def make_test_bag(tmp_path):
    """Build a sha256 bag under tmp_path from a {relative path: content} mapping."""
    def _make(files: dict, name: str = "bag", bag_info: dict = None) -> Path:
        bag_dir = tmp_path / "source" / name
        bag_dir.mkdir(parents=True)
        write_files(bag_dir, files)
        bagit.make_bag(str(bag_dir), bag_info=bag_info or {"Source-Organization": "X"}, checksums=["sha256"])
        return bag_dir
    return _make


@pytest.fixture
def fixed_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: TEST_HOSTNAME)
    return TEST_HOSTNAME


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "work" / "bag-copy"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in list(os.environ):
        if var.startswith("BAGINJECT_"):
            monkeypatch.delenv(var)
