"""Find files inside a bag by naming convention."""

import logging
import re

from pathlib import Path
from typing import Optional, Pattern, Sequence, Union

from baginject.errors import AmbiguousMatchError, NotFoundError

LOGGER = logging.getLogger(__name__)

UUID_PATTERN = r"\b[0-9a-f]{8}\b-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-\b[0-9a-f]{12}\b"
WORK_ORDER_PATTERN = r"aspace_wo.tsv$"
TRANSFER_INFO_PATTERN = r"transfer-info.txt"


def compile_pattern(pattern: Union[str, Pattern]) -> Pattern:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def extract_uuid(text: str) -> Optional[str]:
    """Return the first UUID-shaped token in `text`, if any."""
    match = re.search(UUID_PATTERN, text)
    return match.group(0) if match else None


def find_by_pattern(
    index: Sequence[Path],
    pattern: Union[str, Pattern],
    strict: bool = False,
) -> Path:
    """Return the first path in `index` whose full path matches `pattern`.

    With `strict` a second match is an error instead of being ignored.
    """
    matcher = compile_pattern(pattern)
    matches = [path for path in index if matcher.search(str(path))]

    if not matches:
        raise NotFoundError(f"Could not locate file pattern '{matcher.pattern}' in bag")
    if len(matches) > 1:
        if strict:
            raise AmbiguousMatchError(
                f"File pattern '{matcher.pattern}' matched {len(matches)} files in bag",
                matches,
            )
        LOGGER.debug("Pattern '%s' matched %d files, using '%s'", matcher.pattern, len(matches), matches[0])
    return matches[0]
