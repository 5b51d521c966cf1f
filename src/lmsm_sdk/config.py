"""
LMSM SDK - Configuration
========================

Assembler configuration. Values can come from:
- Default values (defined here)
- Environment variables
- Command-line flags (applied by the CLI on top of the above)

Environment variables (all optional):
    LMSM_MEMORY_SIZE: Number of words in the memory image (positive integer)
    LMSM_FULL_IMAGE: Write the whole memory image instead of just the
                     program ("1", "true", "yes" to enable)
"""

import logging
import os
from dataclasses import dataclass, replace

from lmsm_sdk.cpu import DEFAULT_MEMORY_SIZE

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        memory_size: Words in the memory image (default: 200)
        full_image: Write all memory words, not just the program (default: False)
    """

    memory_size: int = DEFAULT_MEMORY_SIZE
    full_image: bool = False

    def __post_init__(self) -> None:
        if self.memory_size <= 0:
            raise ValueError(f"memory_size must be positive, got {self.memory_size}")

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Invalid values are ignored (with a warning) and the default kept.

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if memory_size := os.environ.get("LMSM_MEMORY_SIZE"):
            try:
                size = int(memory_size)
            except ValueError:
                size = 0
            if size > 0:
                config.memory_size = size
            else:
                logger.warning("Ignoring invalid LMSM_MEMORY_SIZE=%r", memory_size)

        if full_image := os.environ.get("LMSM_FULL_IMAGE"):
            flag = full_image.strip().lower()
            if flag in _TRUE_VALUES:
                config.full_image = True
            elif flag in _FALSE_VALUES:
                config.full_image = False
            else:
                logger.warning("Ignoring invalid LMSM_FULL_IMAGE=%r", full_image)

        return config

    def with_overrides(self, **overrides) -> "AssemblerConfig":
        """
        Return a copy with the given fields replaced.

        Overrides whose value is None are skipped, so unset CLI options
        leave the configured value alone.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
