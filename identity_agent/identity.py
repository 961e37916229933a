"""
identity_agent.identity
AUTHOR: carter-vin

Agent identity: collection level + platform + installed OS version

Design goals:
- Built once at startup, immutable afterwards
- Level is always one of two canonical values
- Construction either fully succeeds or raises (no partial identity)
- Flat string mapping for downstream templating/reporting
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from identity_agent.errors import IdentityConstructionError, IdentityError
from identity_agent.os_release import read_os_version
from identity_agent.platform_id import read_id

# Well-known locations (defaults only; callers can inject their own)
KERNEL_ARGS_FILE = Path("/proc/cmdline")
OS_RELEASE_FILE = Path("/etc/os-release")


class Level(str, Enum):
    """Collection level."""

    MINIMAL = "minimal"
    FULL = "full"


DEFAULT_LEVEL = Level.MINIMAL


def normalize_level(
    requested: str,
    *,
    on_fallback: Optional[Callable[[str], None]] = None,
) -> Level:
    """
    Map a requested level onto a canonical Level

    Rules:
    - "minimal" / "full" (exact) -> same level
    - anything else -> minimal, never an error

    on_fallback receives the rejected request so callers can surface it.
    """
    if isinstance(requested, Level):
        return requested

    for level in Level:
        if requested == level.value:
            return level

    if on_fallback is not None:
        on_fallback(requested)
    return DEFAULT_LEVEL


@dataclass(frozen=True)
class Identity:
    """
    Resolved host identity
    - level: canonical collection level
    - platform: platform/virtualization id (e.g. "qemu", "gcp")
    - current_os_version: installed OS version
    """

    level: Level
    platform: str
    current_os_version: str

    def __post_init__(self) -> None:
        # Plain "minimal"/"full" coerce to Level; anything else raises ValueError
        object.__setattr__(self, "level", Level(self.level))

        if not self.platform:
            raise ValueError("identity.platform is empty")
        if not self.current_os_version:
            raise ValueError("identity.current_os_version is empty")

    def get_data(self) -> dict[str, str]:
        return get_data(self)


FieldProvider = Callable[[Identity], dict[str, str]]

# Per-level extra fields. Both levels currently collect the same data.
LEVEL_FIELD_PROVIDERS: dict[Level, tuple[FieldProvider, ...]] = {
    Level.MINIMAL: (),
    Level.FULL: (),
}


def get_data(identity: Identity) -> dict[str, str]:
    """
    Project an identity into a flat string mapping

    Base keys are always level, platform, current_os_version.
    Level providers may add keys but never override the base ones.
    """
    data = {
        "level": identity.level.value,
        "platform": identity.platform,
        "current_os_version": identity.current_os_version,
    }

    for provider in LEVEL_FIELD_PROVIDERS.get(identity.level, ()):
        for key, value in provider(identity).items():
            data.setdefault(key, value)

    return data


def identity_to_json(identity: Identity) -> str:
    """
    Serialize the identity mapping

    sort_keys + compact separators keep output stable across runs.
    """
    return json.dumps(
        get_data(identity),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def resolve_identity(
    level_request: str,
    *,
    cmdline_path: str | Path = KERNEL_ARGS_FILE,
    os_release_path: str | Path = OS_RELEASE_FILE,
    read_platform: Callable[[str | Path], str] = read_id,
    read_version: Callable[[str | Path], str] = read_os_version,
    on_level_fallback: Optional[Callable[[str], None]] = None,
) -> Identity:
    """
    Build the agent identity

    Sequence:
    1) normalize requested level (unknown -> minimal)
    2) platform id from the kernel cmdline
    3) OS version from os-release

    Failure semantics:
    - lookup failures raise IdentityConstructionError naming the effective
      level, chained from the original error
    """
    level = normalize_level(level_request, on_fallback=on_level_fallback)

    try:
        platform = read_platform(cmdline_path)
        current_os_version = read_version(os_release_path)
    except IdentityError as e:
        raise IdentityConstructionError(level.value) from e

    return Identity(
        level=level,
        platform=platform,
        current_os_version=current_os_version,
    )
