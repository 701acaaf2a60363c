"""
Workspace virtualenv bootstrap.

Creates ``<install-root>/.venv`` from the resolved interpreter and
makes sure the packages kernel registration needs (``ipykernel``)
are importable inside it.  An existing ``.venv`` is reused as is;
only missing packages are installed into it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wxenv.core.services.env_resolve.domain.errors import ExternalToolFailure
from wxenv.core.services.env_resolve.execution.subprocess_runner import run_subprocess

logger = logging.getLogger(__name__)

VENV_DIR = ".venv"
KERNEL_PACKAGES: tuple[str, ...] = ("ipykernel",)


def venv_python(install_root: Path) -> Path | None:
    """The virtualenv interpreter under *install_root*, if present."""
    venv = Path(install_root) / VENV_DIR
    for candidate in (venv / "bin" / "python", venv / "Scripts" / "python.exe"):
        if candidate.is_file():
            return candidate
    return None


def _check(result: dict[str, Any], label: str) -> None:
    if not result["ok"]:
        raise ExternalToolFailure(
            label,
            result.get("returncode"),
            result.get("stderr") or result.get("error", ""),
        )


def _missing(python: Path, packages: tuple[str, ...], timeout: int | None) -> list[str]:
    missing = []
    for pkg in packages:
        result = run_subprocess([str(python), "-c", f"import {pkg}"], timeout=timeout)
        if not result["ok"]:
            missing.append(pkg)
    return missing


def ensure_venv(
    install_root: Path,
    interpreter: list[str],
    *,
    packages: tuple[str, ...] = KERNEL_PACKAGES,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Create ``.venv`` with *interpreter* unless present, then add *packages*.

    Args:
        install_root: Directory that holds ``.venv``.
        interpreter: Argv prefix of the base interpreter
            (e.g. ``["py", "-3.11"]``).
        packages: Import names that must be available in the venv.
        timeout: Seconds per step; ``None`` waits forever.

    Returns:
        ``{"path": ..., "python": ..., "created": bool, "installed": [...]}``

    Raises:
        ExternalToolFailure: ``venv`` or ``pip`` exited non-zero, or the
            new venv has no interpreter.
    """
    venv_dir = Path(install_root) / VENV_DIR
    python = venv_python(install_root)
    created = False

    if python is None:
        logger.info("Creating %s with %s", venv_dir, " ".join(interpreter))
        result = run_subprocess([*interpreter, "-m", "venv", str(venv_dir)], timeout=timeout)
        _check(result, "Create virtual environment")
        python = venv_python(install_root)
        if python is None:
            raise ExternalToolFailure(
                "Create virtual environment", None, f"no interpreter under {venv_dir}",
            )
        created = True
        missing = list(packages)
    else:
        missing = _missing(python, packages, timeout)

    if missing:
        logger.info("Installing %s into %s", ", ".join(missing), venv_dir)
        result = run_subprocess(
            [str(python), "-m", "pip", "install", "--upgrade", "pip", *missing],
            timeout=timeout,
        )
        _check(result, f"Install {', '.join(missing)} into {VENV_DIR}")

    return {
        "path": str(venv_dir),
        "python": str(python),
        "created": created,
        "installed": missing,
    }
