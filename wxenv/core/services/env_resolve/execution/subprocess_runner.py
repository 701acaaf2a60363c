"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for install
operations.  Sudo prefixing, environment overrides and timing are
centralised here.  Probes (detection layer) do not go through this
runner: they are read-only and use their own short timeout.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)

_TAIL = 2000


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _expand_args(cmd: list[str]) -> list[str]:
    return [os.path.expanduser(a) if a.startswith("~") else a for a in cmd]


def run_subprocess(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int | None = None,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
) -> dict[str, Any]:
    """Run an install command to completion.

    Sudo handling: when *needs_sudo* is set and we are not root, the
    command is prefixed with ``sudo``.  sudo prompts on the terminal
    itself, so nothing is piped to stdin and no password is ever
    handled here.  On hosts without ``geteuid`` (Windows) the flag is
    ignored.

    Args:
        cmd: Command list for ``subprocess.run()``.  Leading ``~`` in
            any element is expanded.
        needs_sudo: Whether the command requires root.
        timeout: Seconds before ``TimeoutExpired``; ``None`` waits forever.
        env_overrides: Extra env vars, ``$VAR`` references expanded
            (e.g. ``{"PATH": "/opt/homebrew/bin:$PATH"}``).
        cwd: Working directory for the command.

    Returns:
        ``{"ok": True, "returncode": 0, "stdout": "...", "elapsed_ms": N}``
        on success, ``{"ok": False, "returncode": N|None, "error": "...",
        "stderr": "...", ...}`` on failure.
    """
    cmd = _expand_args(cmd)

    # ── Sudo handling ──
    if needs_sudo and hasattr(os, "geteuid") and not _is_root():
        if shutil.which("sudo"):
            cmd = ["sudo"] + cmd
        else:
            logger.warning("Step needs root but sudo is not available: %s", cmd[0])

    # ── Environment ──
    env = None
    if env_overrides:
        env = os.environ.copy()
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    # ── Execute ──
    logger.debug("Running: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "returncode": None, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        return {"ok": False, "returncode": None, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "returncode": None, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-_TAIL:] if result.stdout else ""
    stderr = result.stderr[-_TAIL:] if result.stderr else ""

    if result.returncode == 0:
        return {
            "ok": True,
            "returncode": 0,
            "stdout": stdout,
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "returncode": result.returncode,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": stderr,
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }
