"""
identity_agent.os_release
AUTHOR: carter-vin

Installed OS version from an os-release file

os-release is newline separated KEY=VALUE, values optionally quoted.
Version keys are checked in order; OSTREE_VERSION covers ostree based hosts,
VERSION_ID everything else.
"""

from __future__ import annotations

from pathlib import Path

from identity_agent.cmdline import get_value_by_flag

OS_VERSION_KEYS = ("OSTREE_VERSION", "VERSION_ID")

OS_RELEASE_DELIMITER = "\n"


def _unquote(value: str) -> str:
    """
    Drop one pair of matching surrounding quotes
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def read_os_version(os_release_path: str | Path, keys: tuple[str, ...] = OS_VERSION_KEYS) -> str:
    """
    Read the OS version from `os_release_path`

    `VERSION_ID=""` is as good as missing.

    Raises:
    - FlagFileReadError if the file can't be read
    - FlagNotFoundError if no version key has a usable value
    """
    return get_value_by_flag(keys, os_release_path, OS_RELEASE_DELIMITER, normalize=_unquote)
