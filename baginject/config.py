"""Run configuration, read from environment variables."""

import logging
import os

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from baginject.locate import TRANSFER_INFO_PATTERN, WORK_ORDER_PATTERN

LOGGER = logging.getLogger(__name__)

DIGEST_ALGORITHM = "sha256"
DEFAULT_VENDOR = "nyu-dl"
DEFAULT_WORK_DIR_NAME = "bag-copy"

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class InjectConfig:
    work_dir: Path = field(default_factory=lambda: Path.cwd() / DEFAULT_WORK_DIR_NAME)
    vendor: str = DEFAULT_VENDOR
    work_order_pattern: str = WORK_ORDER_PATTERN
    transfer_info_pattern: str = TRANSFER_INFO_PATTERN
    strict_match: bool = False
    algorithm: str = DIGEST_ALGORITHM

    @property
    def tagmanifest_name(self) -> str:
        return f"tagmanifest-{self.algorithm}.txt"

    def override(self, **overrides) -> "InjectConfig":
        """Copy of this config with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> InjectConfig:
    """Build an `InjectConfig` from `BAGINJECT_*` environment variables."""
    if environ is None:
        environ = os.environ

    config = InjectConfig()
    values = {}
    for name, var_name in [
        ("work_dir", "BAGINJECT_WORK_DIR"),
        ("vendor", "BAGINJECT_VENDOR"),
        ("work_order_pattern", "BAGINJECT_WORK_ORDER_PATTERN"),
        ("transfer_info_pattern", "BAGINJECT_TRANSFER_INFO_PATTERN"),
        ("strict_match", "BAGINJECT_STRICT_MATCH"),
    ]:
        from_env = environ.get(var_name)
        if not from_env:
            LOGGER.debug("%s not set, defaulting to %r", var_name, getattr(config, name))
            continue
        if name == "work_dir":
            values[name] = Path(from_env)
        elif name == "strict_match":
            values[name] = from_env.strip().lower() in TRUE_VALUES
        else:
            values[name] = from_env

    return config.override(**values)
