"""
L2 Resolver — Candidate enumeration.

Produces the ordered list of invocation forms to probe.  Pure: the
only I/O is checking whether a name exists on the search path or a
well-known file exists.  Nothing is executed, so calling it twice in
the same environment yields the same list.

Priority:
    1. explicit override (only if it exists)
    2. version-specific names      python3.11, python3.12, ...
    3. generic names               python3, python / docker
    4. version-selecting launcher  py -3.11, ...
    5. well-known install paths    ~/.rd/bin/docker, Homebrew opt/, ...
"""

from __future__ import annotations

import logging
import os
import shutil

from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.models.resolution import CandidateSource, Invocation
from wxenv.core.services.env_resolve.domain.version import minor_range

logger = logging.getLogger(__name__)


def _expand(path: str, **fmt: object) -> str:
    return os.path.expandvars(os.path.expanduser(path.format(**fmt)))


def _is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def search_path(extra_paths: list[str] | None = None) -> str:
    """The process PATH with *extra_paths* (expanded) prepended."""
    base = os.environ.get("PATH", "")
    if not extra_paths:
        return base
    extra = [_expand(p) for p in extra_paths]
    return os.pathsep.join(extra + ([base] if base else []))


def _locate(
    name: str,
    extra_search: str | None,
    source: CandidateSource,
    args: tuple[str, ...] = (),
) -> Invocation | None:
    """Find *name* on PATH, then on the extra search path.

    A hit on the normal PATH keeps the bare name; a hit only reachable
    through the extra search path is returned as an absolute path.
    """
    found = shutil.which(name)
    if found:
        return Invocation(command=name, args=args, source=source, path=found)
    if extra_search:
        found = shutil.which(name, path=extra_search)
        if found:
            return Invocation(command=found, args=args, source=source, path=found)
    return None


def enumerate_candidates(
    requirement: ToolRequirement,
    extra_paths: list[str] | None = None,
) -> list[Invocation]:
    """List the invocation forms to probe, in priority order.

    Args:
        requirement: The tool requirement (names, launcher, override).
        extra_paths: Directories not yet on PATH (e.g. reported by an
            installer) to search as a second chance.

    Returns:
        Ordered, de-duplicated invocations.  Two names resolving to the
        same executable (``python3`` → ``python3.11``) are probed once,
        under the higher-priority name.
    """
    extra_search = search_path(extra_paths) if extra_paths else None
    minors = minor_range(requirement.minimum, requirement.maximum)
    found: list[Invocation] = []

    # ── 1. Override ──
    if requirement.override:
        target = os.path.expanduser(requirement.override)
        hit = _locate(target, extra_search, "override")
        if hit is not None:
            # Keep the caller's spelling unless only the extra path found it
            if hit.command == target:
                hit = hit.model_copy(update={"command": requirement.override})
            found.append(hit)
        else:
            logger.info(
                "Override %r not found, falling back to standard candidates",
                requirement.override,
            )

    # ── 2. Version-specific names ──
    if requirement.versioned_name:
        for major, minor in minors:
            name = requirement.versioned_name.format(major=major, minor=minor)
            hit = _locate(name, extra_search, "name")
            if hit is not None:
                found.append(hit)

    # ── 3. Generic names ──
    for name in requirement.names:
        hit = _locate(name, extra_search, "name")
        if hit is not None:
            found.append(hit)

    # ── 4. Launcher ──
    if requirement.launcher and requirement.launcher_arg:
        for major, minor in minors:
            arg = requirement.launcher_arg.format(major=major, minor=minor)
            hit = _locate(requirement.launcher, extra_search, "launcher", (arg,))
            if hit is not None:
                found.append(hit)

    # ── 5. Well-known paths ──
    for template in requirement.known_paths:
        for major, minor in minors:
            path = _expand(template, major=major, minor=minor, nodot=f"{major}{minor}")
            if _is_executable_file(path):
                found.append(Invocation(command=path, source="path", path=path))

    return _dedupe(found)


def _dedupe(invocations: list[Invocation]) -> list[Invocation]:
    seen: set[tuple[str, tuple[str, ...]]] = set()
    result: list[Invocation] = []
    for inv in invocations:
        key = (os.path.realpath(inv.path or inv.command), inv.args)
        if key in seen:
            continue
        seen.add(key)
        result.append(inv)
    return result
