"""
Setup use case — resolve Python, the container runtime, then bootstrap
``.venv`` and register it as the Jupyter kernel, for one install root.

The chain stops at the first failure: the exception propagates to the
caller (the CLI maps it to an exit code).  Each later step takes the
earlier Resolution as an argument rather than reading it back from
the environment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wxenv.core.config.loader import load_config
from wxenv.core.models.config import KernelSettings, SetupConfig
from wxenv.core.models.host import ContainerBackend, HostInfo
from wxenv.core.models.resolution import Resolution
from wxenv.core.services.env_resolve.data.requirements import (
    docker_requirement,
    python_requirement,
)
from wxenv.core.services.env_resolve.detection.host import detect_host
from wxenv.core.services.env_resolve.domain.version import parse_bound
from wxenv.core.services.env_resolve.orchestration.orchestrator import (
    inspect_tool,
    resolve_tool,
)
from wxenv.core.services.kernel import kernel_interpreter, register_kernel
from wxenv.core.services.venv import ensure_venv

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Outcome of a full setup run."""

    install_root: Path
    python: Resolution | None = None
    docker: Resolution | None = None
    kernel: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "install_root": str(self.install_root),
            "python": self.python.to_dict() if self.python else None,
            "docker": self.docker.to_dict() if self.docker else None,
            "kernel": self.kernel,
        }


def run_setup(
    install_root: Path,
    *,
    config: SetupConfig | None = None,
    python_override: str | None = None,
    docker_override: str | None = None,
    backend: ContainerBackend | None = None,
    skip_docker: bool = False,
    skip_kernel: bool = False,
    skip_venv: bool = False,
    allow_install: bool = True,
    host: HostInfo | None = None,
) -> SetupResult:
    """Run the whole setup chain for *install_root*.

    Explicit arguments win over *config* (loaded from ``wxenv.yml``
    when not given).

    Raises:
        ResolverError: Any resolution, install or kernel failure.
        ConfigError: Invalid ``wxenv.yml``.
    """
    install_root = Path(install_root)
    config = config or load_config(install_root)
    host = host or detect_host()
    result = SetupResult(install_root=install_root)

    py = config.python
    result.python = resolve_tool(
        python_requirement(
            parse_bound(py.min_version),
            parse_bound(py.max_version),
            python_override or py.override,
        ),
        install_root=install_root,
        host=host,
        allow_install=allow_install,
        install_timeout=config.install_timeout,
    )

    dk = config.docker
    if skip_docker or not dk.enabled:
        logger.info("Skipping container runtime")
    else:
        result.docker = resolve_tool(
            docker_requirement(parse_bound(dk.min_version), docker_override or dk.override),
            host=host,
            backend=backend or dk.backend,
            allow_install=allow_install,
            install_timeout=config.install_timeout,
        )

    kn = config.kernel
    if skip_kernel or not kn.enabled:
        logger.info("Skipping kernel registration")
    else:
        result.kernel = setup_kernel(
            install_root,
            settings=kn,
            resolution=result.python,
            create_venv=kn.venv and not skip_venv,
            timeout=config.install_timeout,
        )

    return result


def setup_kernel(
    install_root: Path,
    *,
    settings: KernelSettings | None = None,
    resolution: Resolution | None = None,
    create_venv: bool = True,
    name: str | None = None,
    display_name: str | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Bootstrap ``.venv`` (unless *create_venv* is off) and register it.

    The base interpreter for a new venv is the one the kernel would
    otherwise use: *resolution*, then ``.python_cmd``.

    Returns:
        The kernel info from ``register_kernel`` plus a ``venv`` key
        (``None`` when no venv was bootstrapped).
    """
    install_root = Path(install_root)
    settings = settings or KernelSettings()

    venv = None
    if create_venv:
        venv = ensure_venv(
            install_root,
            kernel_interpreter(install_root, resolution),
            timeout=timeout,
        )

    info = register_kernel(
        install_root,
        resolution=resolution,
        name=name or settings.name,
        display_name=display_name or settings.display_name,
        user=settings.user,
        timeout=timeout,
    )
    info["venv"] = venv
    return info


def get_status(
    install_root: Path,
    *,
    config: SetupConfig | None = None,
    python_override: str | None = None,
    docker_override: str | None = None,
) -> dict[str, Any]:
    """Probe-only report for *install_root*.  Never installs or writes."""
    install_root = Path(install_root)
    config = config or load_config(install_root)

    py = config.python
    report: dict[str, Any] = {
        "install_root": str(install_root),
        "python": inspect_tool(
            python_requirement(
                parse_bound(py.min_version),
                parse_bound(py.max_version),
                python_override or py.override,
            ),
            install_root=install_root,
        ),
        "docker": None,
    }

    dk = config.docker
    if dk.enabled:
        report["docker"] = inspect_tool(
            docker_requirement(parse_bound(dk.min_version), docker_override or dk.override),
        )
    return report
