"""
identity_agent.cmdline
AUTHOR: carter-vin

Kernel cmdline style flag lookup

Just enough parsing to pull one value out of `key=value` tokens:
- no quoting or escaping of separators
- no list values
- repeated flags are not merged; first usable occurrence wins
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

from identity_agent.errors import FlagFileReadError, FlagNotFoundError


def find_flag_value(flag_name: str, content: str, delimiter: str) -> Optional[str]:
    """
    Find the value of `flag_name` in delimiter-separated content

    Rules:
    - tokens without '=' are ignored
    - key match is exact and case-sensitive
    - value is whitespace-trimmed; empty values are skipped, not errors
    - first non-empty value (left to right) is returned

    Returns None when no usable occurrence exists.
    """
    for token in content.split(delimiter):
        key, sep, value = token.partition("=")
        if not sep or key != flag_name:
            continue

        bare_value = value.strip()
        if bare_value:
            return bare_value

    return None


def read_text_file(path: str | Path) -> str:
    """
    Read the whole file as text

    Failure semantics:
    - raises FlagFileReadError on open/read/decode errors
    """
    try:
        with open(path, mode="r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FlagFileReadError(path, str(e)) from e


def get_value_by_flag(
    flag_name: str | Sequence[str],
    file_path: str | Path,
    delimiter: str,
    *,
    normalize: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Get the value of `flag_name` from key-value pairs in `file_path`

    A sequence of flag names is tried in order against one buffered read.
    `normalize` post-processes a found value (e.g. unquoting); if it leaves
    nothing, that flag counts as absent.

    Raises:
    - FlagFileReadError if the file can't be read
    - FlagNotFoundError if no flag has a usable value
    """
    flag_names = (flag_name,) if isinstance(flag_name, str) else tuple(flag_name)
    contents = read_text_file(file_path)

    for name in flag_names:
        value = find_flag_value(name, contents, delimiter)
        if value is not None and normalize is not None:
            value = normalize(value)
        if value:
            return value

    raise FlagNotFoundError(" or ".join(flag_names), file_path)
