"""
L1 Domain — Version parsing and acceptance (pure).

Acceptance compares ``(major, minor)`` only.  Patch is recorded by
the probe but never gated.  No I/O, no subprocess.
"""

from __future__ import annotations

import re

from wxenv.core.models.version import Version

_VERSION_RE = re.compile(r"v?(\d+)\.(\d+)(?:\.(\d+))?")


def parse_version(text: str | None) -> Version | None:
    """Extract the first ``X.Y[.Z]`` from *text*.

    Returns ``None`` when nothing version-like is found.

    >>> parse_version("Python 3.11.9")
    Version(major=3, minor=11, patch=9)
    >>> parse_version("Docker version 27.0.3, build 7d4bcd8")
    Version(major=27, minor=0, patch=3)
    """
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    major, minor, patch = match.groups()
    return Version(int(major), int(minor), int(patch or 0))


def parse_bound(text: str | tuple[int, int] | None) -> tuple[int, int] | None:
    """Parse a ``"3.11"`` style bound into ``(3, 11)``.

    Raises:
        ValueError: If *text* is not ``MAJOR.MINOR``.
    """
    if text is None:
        return None
    if isinstance(text, tuple):
        return (int(text[0]), int(text[1]))
    parts = str(text).strip().lstrip("v").split(".")
    if len(parts) < 2:
        raise ValueError(f"Expected MAJOR.MINOR, got {text!r}")
    return (int(parts[0]), int(parts[1]))


def check_version(
    version: Version,
    minimum: tuple[int, int],
    maximum: tuple[int, int] | None = None,
) -> tuple[bool, str]:
    """Check *version* against an inclusive ``[minimum, maximum]`` bound.

    Returns:
        ``(accepted, reason)``.  *reason* is empty when accepted.
    """
    key = (version.major, version.minor)
    if key < minimum:
        return False, f"{version} is older than {minimum[0]}.{minimum[1]}"
    if maximum is not None and key > maximum:
        return False, f"{version} is newer than {maximum[0]}.{maximum[1]}"
    return True, ""


def minor_range(
    minimum: tuple[int, int],
    maximum: tuple[int, int] | None,
) -> list[tuple[int, int]]:
    """Every ``(major, minor)`` from *minimum* to *maximum*, same major only.

    Without a maximum, only the minimum itself is returned.
    """
    if maximum is None or maximum[0] != minimum[0] or maximum < minimum:
        return [minimum]
    return [(minimum[0], m) for m in range(minimum[1], maximum[1] + 1)]
