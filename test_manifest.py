import logging

import pytest

from baginject.errors import BagIOError
from baginject.manifest import ManifestEntry, read_manifest, update_entry

DIGEST_A = "a" * 64
DIGEST_B = "b" * 64
DIGEST_NEW = "c" * 64

ORIGINAL_LINES = [
    f"{DIGEST_A} bagit.txt",
    f"{DIGEST_B} bag-info.txt",
    f"{DIGEST_A} manifest-sha256.txt",
]


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "tagmanifest-sha256.txt"
    path.write_text("".join(f"{line}\n" for line in ORIGINAL_LINES))
    return path


def lines_of(path):
    return path.read_text().splitlines()


def test_update_replaces_entry(manifest):
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)

    lines = lines_of(manifest)
    assert [line for line in lines if "bag-info.txt" in line] == [f"{DIGEST_NEW} bag-info.txt"]
    assert lines[-1] == f"{DIGEST_NEW} bag-info.txt"


def test_update_preserves_other_lines_in_order(manifest):
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)

    assert lines_of(manifest)[:-1] == [ORIGINAL_LINES[0], ORIGINAL_LINES[2]]


def test_update_adds_new_entry(manifest):
    update_entry(manifest, "aspace_wo.tsv", DIGEST_NEW)

    assert lines_of(manifest) == ORIGINAL_LINES + [f"{DIGEST_NEW} aspace_wo.tsv"]


def test_update_twice_is_idempotent(manifest):
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)
    first = manifest.read_bytes()
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)

    assert manifest.read_bytes() == first
    assert sum("bag-info.txt" in line for line in lines_of(manifest)) == 1


def test_update_keeps_file_mode(manifest):
    manifest.chmod(0o640)
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)
    assert manifest.stat().st_mode & 0o777 == 0o640


def test_update_leaves_no_temporary_files(manifest):
    update_entry(manifest, "bag-info.txt", DIGEST_NEW)
    assert [p.name for p in manifest.parent.iterdir()] == [manifest.name]


def test_update_missing_manifest(tmp_path):
    missing = tmp_path / "tagmanifest-sha256.txt"
    with pytest.raises(BagIOError, match="does not exist"):
        update_entry(missing, "bag-info.txt", DIGEST_NEW)
    assert not missing.exists()


def test_update_drops_collateral_matches_with_warning(manifest, caplog):
    with open(manifest, "a") as fp:
        fp.write(f"{DIGEST_A} old-bag-info.txt\n")

    with caplog.at_level(logging.WARNING, logger="baginject.manifest"):
        update_entry(manifest, "bag-info.txt", DIGEST_NEW)

    assert "old-bag-info.txt" not in manifest.read_text()
    assert any("old-bag-info.txt" in record.getMessage() for record in caplog.records)


def test_update_with_explicit_pattern(manifest):
    with open(manifest, "a") as fp:
        fp.write(f"{DIGEST_A} old-bag-info.txt\n")

    update_entry(manifest, "bag-info.txt", DIGEST_NEW, pattern=r" bag-info\.txt$")

    assert lines_of(manifest) == [
        ORIGINAL_LINES[0],
        ORIGINAL_LINES[2],
        f"{DIGEST_A} old-bag-info.txt",
        f"{DIGEST_NEW} bag-info.txt",
    ]


def test_read_manifest_handles_bagit_spacing(tmp_path):
    path = tmp_path / "manifest-sha256.txt"
    path.write_text(f"{DIGEST_A}  data/one file.txt\n\n{DIGEST_B} data/two.txt\n")

    assert read_manifest(path) == [
        ManifestEntry(DIGEST_A, "data/one file.txt"),
        ManifestEntry(DIGEST_B, "data/two.txt"),
    ]


def test_update_keeps_crlf_lines_byte_identical(tmp_path):
    path = tmp_path / "tagmanifest-sha256.txt"
    path.write_bytes(f"{DIGEST_A} bagit.txt\r\n{DIGEST_B} bag-info.txt\r\n{DIGEST_A} manifest-sha256.txt\r\n".encode())

    update_entry(path, "bag-info.txt", DIGEST_NEW)

    assert path.read_bytes() == (
        f"{DIGEST_A} bagit.txt\r\n{DIGEST_A} manifest-sha256.txt\r\n{DIGEST_NEW} bag-info.txt\n".encode()
    )


def test_update_manifest_without_trailing_newline(tmp_path):
    path = tmp_path / "tagmanifest-sha256.txt"
    path.write_bytes(f"{DIGEST_A} bagit.txt".encode())

    update_entry(path, "aspace_wo.tsv", DIGEST_NEW)

    assert lines_of(path) == [f"{DIGEST_A} bagit.txt", f"{DIGEST_NEW} aspace_wo.tsv"]


def test_update_with_filename_that_is_not_a_regex(manifest):
    original = manifest.read_bytes()

    with pytest.raises(BagIOError, match="not a valid regular expression"):
        update_entry(manifest, "wo[1.tsv", DIGEST_NEW)

    assert manifest.read_bytes() == original
    # an escaped pattern handles the same filename
    update_entry(manifest, "wo[1.tsv", DIGEST_NEW, pattern=r"wo\[1\.tsv$")
    assert lines_of(manifest)[-1] == f"{DIGEST_NEW} wo[1.tsv"
