"""Inject work-order and transfer-info metadata into a copy of a BagIt archive.

Every tag file touched here is listed in the tag manifest, so each mutation is
followed by rewriting that file's manifest entry. Steps run in a fixed order
because later digests cover bytes written by earlier steps.

For more information on the bagit standard, see: https://en.wikipedia.org/wiki/BagIt
"""

import logging

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from baginject.bag_index import build_index
from baginject.bagit_wrapper import clone_bag, generate_checksum, is_bag, validate_bag
from baginject.config import InjectConfig
from baginject.errors import BagInjectError, BagIOError, Step, ValidationError
from baginject.locate import compile_pattern, extract_uuid, find_by_pattern
from baginject.manifest import update_entry
from baginject.tags import append_merge, copy_in, derived_fields

LOGGER = logging.getLogger(__name__)

BAG_INFO = "bag-info.txt"


@dataclass
class RunResult:
    bag_path: Path
    work_order_path: Path
    work_order_digest: str
    bag_info_digest: str
    bag_uuid: Optional[str] = None


class BagInjectRun:
    """State for a single pass over one bag."""

    def __init__(self, input_path: Path, config: Optional[InjectConfig] = None):
        self.input_path = Path(input_path)
        self.config = config or InjectConfig()
        self.bag_path = Path(self.config.work_dir).absolute()
        self.work_order_matcher = compile_pattern(self.config.work_order_pattern)
        self.transfer_info_matcher = compile_pattern(self.config.transfer_info_pattern)
        self.index: list[Path] = []

    @property
    def tagmanifest_path(self) -> Path:
        return self.bag_path / self.config.tagmanifest_name

    @property
    def bag_info_path(self) -> Path:
        return self.bag_path / BAG_INFO

    @contextmanager
    def step(self, step: Step):
        """Label errors raised inside the block with `step`."""
        LOGGER.info("Step %s", step.value)
        try:
            yield
        except BagInjectError as e:
            if e.step is None:
                e.step = step
            raise
        except OSError as e:
            raise BagIOError(str(e), step=step) from e

    def clone(self):
        source = self.input_path.resolve(strict=True)
        if not source.is_dir():
            raise BagIOError(f"Location provided is not a directory: '{source}'")
        if not is_bag(source):
            raise ValidationError(f"Location provided is not a bag, no bagit.txt in '{source}'")
        target = self.bag_path.resolve()
        if target == source or source.is_relative_to(target) or target.is_relative_to(source):
            raise BagIOError(f"Working location '{target}' overlaps the input bag '{source}'")
        LOGGER.info("Copying bag '%s' to '%s'", source, self.bag_path)
        clone_bag(source, self.bag_path)

    def inject_work_order(self, work_order: Path) -> tuple[Path, str]:
        with self.step(Step.INJECT_WORK_ORDER):
            injected = copy_in(work_order, self.bag_path)

        with self.step(Step.UPDATE_WORK_ORDER_ENTRY):
            digest = generate_checksum(injected, self.config.algorithm)
            update_entry(self.tagmanifest_path, injected.name, digest)
        LOGGER.info("Injected work order '%s' (%s %s)", injected.name, self.config.algorithm, digest)
        return injected, digest

    def merge_transfer_info(self, transfer_info: Path) -> str:
        with self.step(Step.MERGE_TRANSFER_INFO):
            content = transfer_info.read_bytes()
            append_merge(
                self.bag_info_path,
                content,
                derived_fields(self.config.vendor, self.bag_path),
            )

        with self.step(Step.UPDATE_BAG_INFO_ENTRY):
            digest = generate_checksum(self.bag_info_path, self.config.algorithm)
            update_entry(self.tagmanifest_path, BAG_INFO, digest)
        LOGGER.info("Merged '%s' into %s (%s %s)", transfer_info.name, BAG_INFO, self.config.algorithm, digest)
        return digest

    def run(self) -> RunResult:
        with self.step(Step.CLONE):
            self.clone()

        with self.step(Step.VALIDATE_PRE):
            validate_bag(self.bag_path)

        with self.step(Step.INDEX):
            self.index = build_index(self.bag_path)

        with self.step(Step.LOCATE_WORK_ORDER):
            work_order = find_by_pattern(self.index, self.work_order_matcher, strict=self.config.strict_match)
        LOGGER.info("Found work order '%s'", work_order)

        injected, work_order_digest = self.inject_work_order(work_order)

        with self.step(Step.LOCATE_TRANSFER_INFO):
            transfer_info = find_by_pattern(self.index, self.transfer_info_matcher, strict=self.config.strict_match)
        LOGGER.info("Found transfer-info '%s'", transfer_info)

        bag_info_digest = self.merge_transfer_info(transfer_info)

        with self.step(Step.VALIDATE_POST):
            validate_bag(self.bag_path)

        bag_uuid = extract_uuid(self.input_path.name)
        LOGGER.info("Bag '%s'%s is valid after injection", self.bag_path, f" ({bag_uuid})" if bag_uuid else "")
        return RunResult(
            bag_path=self.bag_path,
            work_order_path=injected,
            work_order_digest=work_order_digest,
            bag_info_digest=bag_info_digest,
            bag_uuid=bag_uuid,
        )


def run(input_path: Path, config: Optional[InjectConfig] = None) -> RunResult:
    """Copy the bag at `input_path` to the working location and inject its metadata.

    Raises a `BagInjectError` subclass naming the failed step on any failure.
    Nothing is rolled back: the working copy is left as it was when the step failed.
    """
    return BagInjectRun(input_path, config).run()
