"""
L5 Orchestration — Top-level resolution flow.

Ties the layers together for one tool:

    classify platform → enumerate → probe each → first accepted wins
                      ↘ (none) → install → enumerate + probe again
    → persist → Resolution

Platform classification happens first so an unsupported host fails
before anything is probed or written.  The installer is trusted for
nothing: its outcome is only ever judged by a fresh re-probe.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wxenv.core.models.host import ContainerBackend, HostInfo, PlatformVariant
from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.models.resolution import ProbeResult, Resolution, ResolutionState
from wxenv.core.persistence.python_cmd import persist_command, read_pinned_command
from wxenv.core.services.env_resolve.data.requirements import (
    docker_requirement,
    python_requirement,
)
from wxenv.core.services.env_resolve.detection.host import classify_platform, detect_host
from wxenv.core.services.env_resolve.detection.probe import PROBE_TIMEOUT, probe
from wxenv.core.services.env_resolve.domain.errors import (
    InstallerIneffective,
    PersistFailure,
    RequirementUnmet,
)
from wxenv.core.services.env_resolve.execution.installer import (
    dispatch_install,
    select_recipe,
)
from wxenv.core.services.env_resolve.resolver.candidates import enumerate_candidates

logger = logging.getLogger(__name__)


def _transition(tool: str, old: ResolutionState, new: ResolutionState) -> ResolutionState:
    logger.debug("%s: %s → %s", tool, old.value, new.value)
    return new


def _describe(result: ProbeResult) -> str:
    if result.reason:
        return f"{result.invocation.command_line} ({result.reason})"
    return result.invocation.command_line


def _first_accepted(
    requirement: ToolRequirement,
    *,
    extra_paths: list[str] | None = None,
    timeout: int = PROBE_TIMEOUT,
) -> tuple[ProbeResult | None, list[str]]:
    """Probe candidates in order, stopping at the first accepted one.

    Returns:
        ``(winner, tried)``.  *tried* describes every rejected candidate.
    """
    tried: list[str] = []
    for invocation in enumerate_candidates(requirement, extra_paths):
        result = probe(invocation, requirement, timeout=timeout)
        if result.accepted:
            logger.info(
                "Found %s %s: %s",
                requirement.display_name, result.version, invocation.command_line,
            )
            return result, tried
        tried.append(_describe(result))
    return None, tried


def resolve_tool(
    requirement: ToolRequirement,
    *,
    install_root: Path | None = None,
    host: HostInfo | None = None,
    backend: ContainerBackend | None = None,
    allow_install: bool = True,
    install_timeout: int | None = None,
    probe_timeout: int = PROBE_TIMEOUT,
) -> Resolution:
    """Resolve *requirement* to a working invocation, installing if needed.

    Args:
        requirement: What to find.
        install_root: Directory holding the persistence file.  Required
            for requirements that persist; ignored otherwise.
        host: Host identity (detected when None).
        backend: Container backend for the installer (docker only).
        allow_install: When False, an unmet requirement fails instead
            of running the installer.
        install_timeout: Per-step installer timeout (seconds).
        probe_timeout: Per-probe timeout (seconds).

    Returns:
        Resolution for the accepted candidate.

    Raises:
        UnsupportedPlatform: Host or backend has no recipe.
        RequirementUnmet: Nothing acceptable and installing not allowed.
        InstallerIneffective: The installer ran but the re-probe failed.
        ExternalToolFailure: An installer step failed.
        PersistFailure: The persistence file could not be written.
    """
    tool = requirement.tool
    state = ResolutionState.UNRESOLVED

    host = host or detect_host()
    variant: PlatformVariant = classify_platform(host)
    if allow_install:
        # Reject a bad backend/platform pair before touching anything
        select_recipe(tool, variant, backend)

    state = _transition(tool, state, ResolutionState.PROBING)
    winner, tried = _first_accepted(requirement, timeout=probe_timeout)
    installed = False

    if winner is None:
        logger.info(
            "No acceptable %s %s found (tried: %s)",
            requirement.display_name, requirement.bound_label,
            ", ".join(tried) or "nothing",
        )
        if not allow_install:
            _transition(tool, state, ResolutionState.FAILED)
            raise RequirementUnmet(requirement.display_name, requirement.bound_label, tried)

        state = _transition(tool, state, ResolutionState.INSTALLING)
        try:
            report = dispatch_install(
                requirement, host, variant, backend=backend, timeout=install_timeout,
            )
        except Exception:
            _transition(tool, state, ResolutionState.FAILED)
            raise
        installed = True

        state = _transition(tool, state, ResolutionState.PROBING)
        winner, tried = _first_accepted(
            requirement, extra_paths=report.path_hints, timeout=probe_timeout,
        )
        if winner is None:
            _transition(tool, state, ResolutionState.FAILED)
            raise InstallerIneffective(
                requirement.display_name, requirement.bound_label, report.recipe, tried,
            )

    _transition(tool, state, ResolutionState.RESOLVED)

    persist_path: Path | None = None
    persisted_command: str | None = None
    persisted_now = False
    if requirement.persist_file and install_root is not None:
        persist_path = Path(install_root) / requirement.persist_file
        try:
            persisted_now, persisted_command = persist_command(
                persist_path, winner.invocation.command_line,
            )
        except OSError as e:
            raise PersistFailure(str(persist_path), e.strerror or str(e)) from e

    return Resolution(
        requirement=requirement,
        probe=winner,
        variant=variant,
        installed=installed,
        persist_path=str(persist_path) if persist_path else None,
        persisted_command=persisted_command or None,
        persisted_now=persisted_now,
    )


def resolve_python(
    install_root: Path,
    *,
    override: str | None = None,
    minimum: tuple[int, int] | None = None,
    maximum: tuple[int, int] | None = None,
    host: HostInfo | None = None,
    allow_install: bool = True,
    install_timeout: int | None = None,
) -> Resolution:
    """Resolve the Python interpreter and pin it in ``.python_cmd``."""
    requirement = python_requirement(minimum, maximum, override)
    return resolve_tool(
        requirement,
        install_root=install_root,
        host=host,
        allow_install=allow_install,
        install_timeout=install_timeout,
    )


def resolve_container_runtime(
    *,
    override: str | None = None,
    minimum: tuple[int, int] | None = None,
    backend: ContainerBackend | None = None,
    host: HostInfo | None = None,
    allow_install: bool = True,
    install_timeout: int | None = None,
) -> Resolution:
    """Resolve a Docker-compatible CLI with Compose v2 and a live daemon."""
    requirement = docker_requirement(minimum, override)
    return resolve_tool(
        requirement,
        host=host,
        backend=backend,
        allow_install=allow_install,
        install_timeout=install_timeout,
    )


def inspect_tool(
    requirement: ToolRequirement,
    *,
    install_root: Path | None = None,
    probe_timeout: int = PROBE_TIMEOUT,
) -> dict[str, Any]:
    """Probe every candidate without installing or writing anything.

    Returns::

        {
            "tool": "python",
            "requirement": ">= 3.11",
            "selected": "python3.11",       # first accepted, or None
            "pinned": "python3.11",         # persisted command, or None
            "candidates": [ProbeResult.to_dict(), ...],
        }
    """
    results = [
        probe(inv, requirement, timeout=probe_timeout)
        for inv in enumerate_candidates(requirement)
    ]
    selected = next((r for r in results if r.accepted), None)

    pinned = None
    if requirement.persist_file and install_root is not None:
        pinned = read_pinned_command(Path(install_root) / requirement.persist_file)

    return {
        "tool": requirement.tool,
        "requirement": requirement.bound_label,
        "selected": selected.invocation.command_line if selected else None,
        "version": str(selected.version) if selected and selected.version else None,
        "pinned": pinned,
        "candidates": [r.to_dict() for r in results],
    }
