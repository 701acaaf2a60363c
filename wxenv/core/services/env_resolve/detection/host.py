"""
L3 Detection — Host identity and platform classification.

``detect_host`` reads the kernel name, Linux distribution (via the
``distro`` package) and WSL markers.  ``classify_platform`` maps the
result onto exactly one supported PlatformVariant, or fails fast.
"""

from __future__ import annotations

import logging
import os
import platform

import distro

from wxenv.core.models.host import HostInfo, PlatformVariant
from wxenv.core.services.env_resolve.domain.errors import UnsupportedPlatform

logger = logging.getLogger(__name__)

_WINDOWS_KERNELS = ("MINGW", "MSYS", "CYGWIN")


def _detect_wsl() -> bool:
    for marker in ("/proc/version", "/proc/sys/kernel/osrelease"):
        try:
            with open(marker, encoding="utf-8") as f:
                text = f.read().lower()
        except OSError:
            continue
        if "microsoft" in text or "wsl" in text:
            return True
    return False


def _is_windows_kernel(system: str) -> bool:
    upper = system.upper()
    return upper.startswith(_WINDOWS_KERNELS) or upper in ("WINDOWS", "WINDOWS_NT")


def detect_host() -> HostInfo:
    """Detect the current host.

    Returns::

        HostInfo(system="Linux", release="6.5.0", machine="x86_64",
                 distro_id="ubuntu", distro_like="debian", wsl=False,
                 windows_env=False)
    """
    system = platform.system()
    info: dict = {
        "system": system,
        "release": platform.release(),
        "machine": platform.machine(),
    }

    if system == "Linux":
        info["distro_id"] = distro.id()
        info["distro_like"] = distro.like()
        info["wsl"] = _detect_wsl()

    info["windows_env"] = (
        _is_windows_kernel(system) or os.environ.get("OS") == "Windows_NT"
    )

    host = HostInfo(**info)
    logger.debug("Detected host: %s", host)
    return host


def classify_platform(host: HostInfo) -> PlatformVariant:
    """Map *host* onto a supported install target.

    Raises:
        UnsupportedPlatform: For any host without install recipes.
            Linux distributions other than Ubuntu are rejected rather
            than guessed at.
    """
    system = host.system
    if system == "Linux":
        if host.distro_id == "ubuntu":
            return PlatformVariant.UBUNTU
        raise UnsupportedPlatform(
            host.description,
            f"unsupported Linux distribution {host.distro_id or 'unknown'!r}; "
            "expected Ubuntu",
        )
    if system == "Darwin":
        return PlatformVariant.MACOS
    if _is_windows_kernel(system) or host.windows_env:
        return PlatformVariant.WINDOWS
    raise UnsupportedPlatform(system or "unknown", "unknown operating system")
