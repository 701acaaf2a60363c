"""
Requirement model — what the resolver is asked to find.

A ToolRequirement describes one tool (Python, Docker), the names it
may be reachable under, the acceptable version bound, and how to ask
a candidate for its version.  Requirements are immutable; an override
produces a new copy via ``with_override()``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ToolRequirement(BaseModel):
    """A tool to resolve, with its candidate names and version bound."""

    model_config = ConfigDict(frozen=True)

    # ── Identity ─────────────────────────────────────────────────
    tool: str                       # python, docker
    label: str = ""

    # ── Version bound (inclusive, compared on major.minor) ───────
    minimum: tuple[int, int]
    maximum: tuple[int, int] | None = None

    # ── Candidates ───────────────────────────────────────────────
    override: str | None = None
    versioned_name: str | None = None  # e.g. "python{major}.{minor}"
    names: list[str] = Field(default_factory=list)
    launcher: str | None = None        # e.g. "py"
    launcher_arg: str | None = None    # e.g. "-{major}.{minor}"
    known_paths: list[str] = Field(default_factory=list)

    # ── Probe ────────────────────────────────────────────────────
    version_args: list[str] = Field(default_factory=lambda: ["--version"])
    version_pattern: str | None = None  # regex, group(1) = version
    health_checks: list[list[str]] = Field(default_factory=list)

    # ── Persistence ──────────────────────────────────────────────
    persist_file: str | None = None

    @property
    def bound_label(self) -> str:
        """``">= 3.11"`` or ``"3.11–3.13"``."""
        lo = f"{self.minimum[0]}.{self.minimum[1]}"
        if self.maximum is None:
            return f">= {lo}"
        return f"{lo}–{self.maximum[0]}.{self.maximum[1]}"

    @property
    def display_name(self) -> str:
        return self.label or self.tool

    def with_override(self, override: str | None) -> ToolRequirement:
        """Copy of this requirement with an explicit override set."""
        if not override:
            return self
        return self.model_copy(update={"override": override})

    def with_bounds(
        self,
        minimum: tuple[int, int] | None = None,
        maximum: tuple[int, int] | None = None,
    ) -> ToolRequirement:
        """Copy of this requirement with a different version bound."""
        update: dict = {}
        if minimum is not None:
            update["minimum"] = minimum
        if maximum is not None:
            update["maximum"] = maximum
        return self.model_copy(update=update) if update else self
