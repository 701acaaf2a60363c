"""
Resolution models — the results of probing and resolving.

Invocation and ProbeResult are immutable: a fresh probe always
produces a fresh result.  Resolution is the value the orchestrator
returns and later steps (kernel registration, setup reporting) take
as an argument.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from wxenv.core.models.host import PlatformVariant
from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.models.version import Version


class ResolutionState(StrEnum):
    """Per-run resolver state."""

    UNRESOLVED = "unresolved"
    PROBING = "probing"
    INSTALLING = "installing"
    RESOLVED = "resolved"
    FAILED = "failed"


CandidateSource = Literal["override", "name", "launcher", "path"]


class Invocation(BaseModel):
    """How to run a resolved tool: a command plus a fixed argument prefix.

    ``command`` is a bare name when the tool is reachable through the
    normal search path, or a full path otherwise.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    args: tuple[str, ...] = ()
    source: CandidateSource = "name"
    path: str | None = None   # absolute executable path, when known

    @property
    def argv(self) -> list[str]:
        return [self.path or self.command, *self.args]

    @property
    def command_line(self) -> str:
        """Single-line form, e.g. ``python3.11`` or ``py -3.11``."""
        cmd = f'"{self.command}"' if any(c.isspace() for c in self.command) else self.command
        return " ".join([cmd, *self.args])

    def __str__(self) -> str:
        return self.command_line


class ProbeResult(BaseModel):
    """Outcome of probing one candidate."""

    model_config = ConfigDict(frozen=True)

    invocation: Invocation
    version: Version | None = None
    accepted: bool = False
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.invocation.command_line,
            "source": self.invocation.source,
            "path": self.invocation.path,
            "version": str(self.version) if self.version else None,
            "accepted": self.accepted,
            "reason": self.reason,
        }


class Resolution(BaseModel):
    """A successful resolution, threaded to downstream steps."""

    model_config = ConfigDict(frozen=True)

    requirement: ToolRequirement
    probe: ProbeResult
    variant: PlatformVariant
    installed: bool = False           # did an installer run in this resolution?
    persist_path: str | None = None
    persisted_command: str | None = None
    persisted_now: bool = False       # False when an existing file was kept

    @property
    def invocation(self) -> Invocation:
        return self.probe.invocation

    @property
    def version(self) -> Version | None:
        return self.probe.version

    @property
    def command(self) -> str:
        """The command downstream tooling should use.

        A pre-existing persisted command wins over this run's probe.
        """
        return self.persisted_command or self.invocation.command_line

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.requirement.tool,
            "requirement": self.requirement.bound_label,
            "state": ResolutionState.RESOLVED.value,
            "platform": self.variant.value,
            "command": self.command,
            "version": str(self.version) if self.version else None,
            "installed": self.installed,
            "persist_path": self.persist_path,
            "persisted_now": self.persisted_now,
        }
