"""
Version model — a parsed ``major.minor.patch`` triple.
"""

from __future__ import annotations

from typing import NamedTuple


class Version(NamedTuple):
    """A parsed ``major.minor.patch`` triple."""

    major: int
    minor: int
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def short(self) -> str:
        """``"3.11"`` style label."""
        return f"{self.major}.{self.minor}"
