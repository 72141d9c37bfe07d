"""Errors raised while injecting metadata into a bag."""

from enum import Enum
from pathlib import Path
from typing import Optional, Sequence


class Step(Enum):
    """Pipeline states, in the order they run."""

    CLONE = "clone"
    VALIDATE_PRE = "validate-pre"
    INDEX = "index"
    LOCATE_WORK_ORDER = "locate-work-order"
    INJECT_WORK_ORDER = "inject-work-order"
    UPDATE_WORK_ORDER_ENTRY = "update-work-order-entry"
    LOCATE_TRANSFER_INFO = "locate-transfer-info"
    MERGE_TRANSFER_INFO = "merge-transfer-info"
    UPDATE_BAG_INFO_ENTRY = "update-bag-info-entry"
    VALIDATE_POST = "validate-post"


class BagInjectError(Exception):
    """Base class for every failure of a run.

    `step` is filled in by the orchestrator when the error passes through it,
    so callers can tell which state of the pipeline failed.
    """

    def __init__(self, message: str, step: Optional[Step] = None):
        super().__init__(message)
        self.message = message
        self.step = step

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        if self.step is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} during {self.step.value}: {self.message}"


class BagIOError(BagInjectError):
    """Reading, writing, copying or walking the bag failed."""


class NotFoundError(BagInjectError):
    """No file in the bag matched a pattern."""


class AmbiguousMatchError(NotFoundError):
    """More than one file matched a pattern while strict matching was on."""

    def __init__(self, message: str, matches: Sequence[Path], step: Optional[Step] = None):
        super().__init__(message, step=step)
        self.matches = list(matches)


class ValidationError(BagInjectError):
    """The bag failed bagit validation."""
