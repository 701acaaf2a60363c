"""
Jupyter kernel registration for the install root.

Registers the workspace interpreter as a named kernel so notebooks
opened in Jupyter/VS Code run against it.  The interpreter is the
install root's virtualenv when one exists, otherwise the command
pinned in ``.python_cmd`` (or the resolution passed in).
"""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Any

from wxenv.core.models.resolution import Resolution
from wxenv.core.persistence.python_cmd import PYTHON_CMD_FILE, read_python_cmd
from wxenv.core.services.env_resolve.domain.errors import (
    ExternalToolFailure,
    RequirementUnmet,
)
from wxenv.core.services.env_resolve.execution.subprocess_runner import run_subprocess
from wxenv.core.services.venv import VENV_DIR, venv_python

logger = logging.getLogger(__name__)

DEFAULT_KERNEL_NAME = "watsonx-env"
DEFAULT_DISPLAY_NAME = "Python 3.11 (watsonx-env)"


def _split_command(command: str) -> list[str]:
    if os.name == "nt":
        # Windows paths carry backslashes; only strip the quoting
        parts = shlex.split(command, posix=False)
        return [p.strip('"') for p in parts]
    return shlex.split(command)


def kernel_interpreter(
    install_root: Path,
    resolution: Resolution | None = None,
) -> list[str]:
    """Argv prefix for the interpreter the kernel should use.

    Order: ``.venv`` interpreter, then *resolution*'s command, then
    the pinned ``.python_cmd``.

    Raises:
        RequirementUnmet: None of these is available.
    """
    venv = venv_python(install_root)
    if venv is not None:
        return [str(venv)]

    if resolution is not None:
        if resolution.persisted_command in (None, resolution.invocation.command_line):
            return resolution.invocation.argv
        return _split_command(resolution.command)

    pinned = read_python_cmd(install_root)
    if pinned:
        return _split_command(pinned)

    raise RequirementUnmet(
        "Python",
        "for kernel registration",
        [f"{VENV_DIR}/bin/python", PYTHON_CMD_FILE],
    )


def register_kernel(
    install_root: Path,
    *,
    resolution: Resolution | None = None,
    name: str = DEFAULT_KERNEL_NAME,
    display_name: str = DEFAULT_DISPLAY_NAME,
    user: bool = True,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Register the workspace interpreter as a Jupyter kernel.

    Returns:
        ``{"name": ..., "display_name": ..., "interpreter": ...}``

    Raises:
        RequirementUnmet: No interpreter to register.
        ExternalToolFailure: ``ipykernel install`` exited non-zero
            (typically ipykernel is not installed in that interpreter).
    """
    interpreter = kernel_interpreter(install_root, resolution)
    cmd = [*interpreter, "-m", "ipykernel", "install"]
    if user:
        cmd.append("--user")
    cmd += ["--name", name, "--display-name", display_name]

    logger.info("Registering Jupyter kernel %r with %s", name, " ".join(interpreter))
    result = run_subprocess(cmd, timeout=timeout)
    if not result["ok"]:
        raise ExternalToolFailure(
            "Register Jupyter kernel",
            result.get("returncode"),
            result.get("stderr") or result.get("error", ""),
        )

    return {
        "name": name,
        "display_name": display_name,
        "interpreter": " ".join(interpreter),
    }
