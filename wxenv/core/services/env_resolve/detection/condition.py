"""
L3 Detection — Recipe step conditions.

Evaluates install-step conditions against the host.  Read-only:
uses shutil.which, os.path and side-effect-free status commands.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from wxenv.core.models.host import HostInfo

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _has_systemd() -> bool:
    return Path("/run/systemd/system").is_dir()


def _colima_running() -> bool:
    if not shutil.which("colima"):
        return False
    try:
        r = subprocess.run(
            ["colima", "status"],
            capture_output=True, text=True, timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return r.returncode == 0


def _evaluate_one(condition: str, host: HostInfo) -> bool:
    if condition == "not_root":
        return not _is_root()
    if condition == "is_root":
        return _is_root()
    if condition == "has_systemd":
        return _has_systemd()
    if condition == "arm64":
        return host.is_arm64
    if condition == "not_arm64":
        return not host.is_arm64
    if condition == "colima_stopped":
        return not _colima_running()
    if condition.startswith("missing:"):
        return shutil.which(condition.split(":", 1)[1]) is None
    if condition.startswith("missing_app:"):
        app = condition.split(":", 1)[1]
        return not Path(f"/Applications/{app}.app").is_dir()
    logger.warning("Unknown install-step condition: %s", condition)
    return True


def evaluate_condition(condition: str | None, host: HostInfo) -> bool:
    """Evaluate a step condition.

    Args:
        condition: ``None`` (always run), a single condition such as
            ``"has_systemd"``, ``"missing:brew"``, ``"arm64"``, or several
            joined with ``+`` (all must hold).
        host: Detected host identity.

    Returns:
        True if the step should run.
    """
    if not condition:
        return True
    return all(_evaluate_one(part.strip(), host) for part in condition.split("+"))
