"""
identity_agent.platform_id
AUTHOR: carter-vin

Platform identification from the kernel cmdline

Checks the platform flags in order:
1) ignition.platform.id
2) coreos.oem.id (legacy)
"""

from __future__ import annotations

from pathlib import Path

from identity_agent.cmdline import get_value_by_flag

PLATFORM_FLAGS = ("ignition.platform.id", "coreos.oem.id")

# Kernel cmdline tokens are space separated
CMDLINE_DELIMITER = " "


def read_id(cmdline_path: str | Path, flags: tuple[str, ...] = PLATFORM_FLAGS) -> str:
    """
    Read the platform id (e.g. "qemu", "gcp", "aws") from a cmdline file
    """
    return get_value_by_flag(flags, cmdline_path, CMDLINE_DELIMITER)
