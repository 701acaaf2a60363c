"""
L3 Detection — Version probe.

Read-only probe: runs a candidate's version query, parses
``major.minor.patch`` and checks it against the requirement.

A missing executable, a non-zero exit, a timeout or unparseable
output are all ordinary rejections.  This module never raises for
them, so probes are safe to run speculatively and repeatedly.
"""

from __future__ import annotations

import logging
import re
import subprocess

from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.models.resolution import Invocation, ProbeResult
from wxenv.core.models.version import Version
from wxenv.core.services.env_resolve.domain.version import (
    check_version,
    parse_version,
)

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 30


def _run_query(
    argv: list[str],
    timeout: int,
    env: dict[str, str] | None,
) -> tuple[int | None, str]:
    """Run a probe command.  Returns ``(returncode, output)``.

    ``returncode`` is ``None`` when the command could not run at all.
    """
    try:
        r = subprocess.run(
            argv, capture_output=True, text=True, timeout=timeout, env=env,
        )
    except FileNotFoundError:
        return None, "not found"
    except subprocess.TimeoutExpired:
        return None, f"timed out after {timeout}s"
    except OSError as e:
        return None, str(e)
    # Some tools print their version to stderr (python2 -V, old docker)
    return r.returncode, (r.stdout or "") + (r.stderr or "")


def _extract_version(output: str, pattern: str | None) -> Version | None:
    if pattern:
        match = re.search(pattern, output)
        return parse_version(match.group(1)) if match else None
    return parse_version(output)


def probe(
    invocation: Invocation,
    requirement: ToolRequirement,
    *,
    timeout: int = PROBE_TIMEOUT,
    env: dict[str, str] | None = None,
) -> ProbeResult:
    """Probe one candidate against a requirement.

    Args:
        invocation: The candidate to run.
        requirement: Version bound, version query and health checks.
        timeout: Seconds per probe command.
        env: Environment for the probe (``None`` = inherit).

    Returns:
        A new ProbeResult.  ``accepted`` is True only if the version
        falls inside the bound and every health check exits 0.
    """
    argv = invocation.argv + list(requirement.version_args)
    code, output = _run_query(argv, timeout, env)

    if code is None:
        logger.debug("probe %s: %s", invocation, output)
        return ProbeResult(invocation=invocation, reason=output)
    if code != 0:
        logger.debug("probe %s: exit %d", invocation, code)
        return ProbeResult(invocation=invocation, reason=f"exited {code}")

    version = _extract_version(output, requirement.version_pattern)
    if version is None:
        logger.debug("probe %s: no version in %r", invocation, output[:200])
        return ProbeResult(invocation=invocation, reason="unrecognised version output")

    ok, reason = check_version(version, requirement.minimum, requirement.maximum)
    if not ok:
        logger.debug("probe %s: %s", invocation, reason)
        return ProbeResult(invocation=invocation, version=version, reason=reason)

    for check in requirement.health_checks:
        check_code, check_out = _run_query(invocation.argv + list(check), timeout, env)
        if check_code != 0:
            label = " ".join([invocation.command_line, *check])
            detail = check_out.strip().splitlines()[-1:] if check_out else []
            reason = f"'{label}' failed" + (f": {detail[0]}" if detail else "")
            logger.debug("probe %s: %s", invocation, reason)
            return ProbeResult(invocation=invocation, version=version, reason=reason)

    logger.debug("probe %s: accepted %s", invocation, version)
    return ProbeResult(invocation=invocation, version=version, accepted=True)
