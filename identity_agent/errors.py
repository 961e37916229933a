"""
identity_agent.errors
AUTHOR: carter-vin

Failure surfaces for identity resolution

- FlagFileReadError: file could not be opened or fully read
- FlagNotFoundError: flag absent (or only present with an empty value)
- IdentityConstructionError: a lookup failed while building an identity
- ConfigError: a config fragment could not be used

Every error is raised with `from` so the underlying cause stays attached.
"""

from __future__ import annotations

from pathlib import Path


class IdentityError(Exception):
    """Base class for identity resolution failures."""


class FlagFileReadError(IdentityError):
    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to read file {self.path}: {reason}")


class FlagNotFoundError(IdentityError):
    def __init__(self, flag_name: str, path: str | Path) -> None:
        self.flag_name = flag_name
        self.path = str(path)
        super().__init__(f"couldn't find flag '{flag_name}' in file ({self.path})")


class IdentityConstructionError(IdentityError):
    """
    Wraps a lookup failure with the effective level being built

    The original failure is available on __cause__.
    """

    def __init__(self, level: str) -> None:
        self.level = level
        super().__init__(f"failed to build '{level}' identity")


class ConfigError(IdentityError):
    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"invalid config fragment {self.path}: {reason}")


def describe_error(exc: BaseException) -> str:
    """
    Flatten an exception chain into one line: "outer: cause: root"
    """
    parts: list[str] = []
    current: BaseException | None = exc
    while current is not None:
        parts.append(str(current) or type(current).__name__)
        current = current.__cause__
    return ": ".join(parts)
