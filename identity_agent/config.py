"""
identity_agent.config
AUTHOR: carter-vin

Collection level configuration

Precedence (lowest -> highest):
1) default "minimal"
2) TOML fragments: <dir>/*.toml for each config dir
3) env var IDENTITY_AGENT_LEVEL
4) explicit override (CLI --level)

Fragment shape:

    [collecting]
    level = "full"

Fragments are applied in filename order. A fragment in a later directory
replaces a same-named fragment from an earlier directory, so /etc can mask
/usr/lib.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from identity_agent.errors import ConfigError
from identity_agent.identity import DEFAULT_LEVEL, Level, normalize_level

DEFAULT_CONFIG_DIRS = (
    Path("/usr/lib/host-identity-agent/config.d"),
    Path("/etc/host-identity-agent/config.d"),
)

LEVEL_ENV = "IDENTITY_AGENT_LEVEL"


@dataclass(frozen=True)
class CollectingConfig:
    """
    Effective collecting config
    - level: normalized level
    - requested_level: raw value before normalization
    - sources: fragment files applied, in order
    """

    level: Level
    requested_level: str
    sources: tuple[str, ...] = ()


def collect_fragments(config_dirs: Iterable[Path]) -> list[Path]:
    """
    Merge *.toml fragments across dirs, later dirs masking earlier ones
    """
    by_name: dict[str, Path] = {}
    for config_dir in config_dirs:
        if not config_dir.is_dir():
            continue
        for path in config_dir.glob("*.toml"):
            if path.is_file():
                by_name[path.name] = path

    return [by_name[name] for name in sorted(by_name)]


def _read_fragment(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(path, str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, f"invalid TOML: {e}") from e


def _fragment_level(path: Path, payload: dict[str, Any]) -> Optional[str]:
    collecting = payload.get("collecting")
    if collecting is None:
        return None
    if not isinstance(collecting, dict):
        raise ConfigError(path, "'collecting' must be a table")

    level = collecting.get("level")
    if level is None:
        return None
    if not isinstance(level, str):
        raise ConfigError(path, "'collecting.level' must be a string")
    return level


def load_collecting_config(
    *,
    config_dirs: Iterable[Path] = DEFAULT_CONFIG_DIRS,
    level_override: Optional[str] = None,
    environ: Optional[dict[str, str]] = None,
    on_level_fallback: Optional[Callable[[str], None]] = None,
) -> CollectingConfig:
    """
    Load the collecting config and normalize the level once

    Raises ConfigError on unreadable/malformed fragments.
    """
    if environ is None:
        environ = dict(os.environ)

    requested = DEFAULT_LEVEL.value
    sources: list[str] = []

    for path in collect_fragments(config_dirs):
        level = _fragment_level(path, _read_fragment(path))
        sources.append(str(path))
        if level is not None:
            requested = level

    env_level = environ.get(LEVEL_ENV)
    if env_level:
        requested = env_level

    if level_override is not None:
        requested = level_override

    return CollectingConfig(
        level=normalize_level(requested, on_fallback=on_level_fallback),
        requested_level=requested,
        sources=tuple(sources),
    )
