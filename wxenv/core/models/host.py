"""
Host model — the observed identity of the machine we run on.

HostInfo is filled by the detection layer and classified into a
PlatformVariant.  The classification decides which install recipe
applies; probing itself is platform-agnostic.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class PlatformVariant(StrEnum):
    """Supported install targets."""

    UBUNTU = "ubuntu"
    MACOS = "macos"
    WINDOWS = "windows"


class ContainerBackend(StrEnum):
    """Which product provides the Docker-compatible CLI and daemon."""

    ENGINE = "engine"      # native Docker Engine + Compose v2 plugin (Linux)
    COLIMA = "colima"
    RANCHER = "rancher"    # Rancher Desktop (moby engine)
    DESKTOP = "desktop"    # Docker Desktop


class HostInfo(BaseModel):
    """Observed host identity."""

    model_config = ConfigDict(frozen=True)

    system: str                    # uname -s / platform.system()
    release: str = ""
    machine: str = ""
    distro_id: str = ""            # Linux only, e.g. "ubuntu"
    distro_like: str = ""          # Linux only, e.g. "debian"
    wsl: bool = False
    windows_env: bool = False      # MINGW/MSYS/CYGWIN shell or OS=Windows_NT

    @property
    def is_arm64(self) -> bool:
        return self.machine.lower() in ("arm64", "aarch64")

    @property
    def description(self) -> str:
        """Short human label, e.g. ``"Linux (ubuntu, WSL)"``."""
        extras = [x for x in (self.distro_id, "WSL" if self.wsl else "") if x]
        if extras:
            return f"{self.system} ({', '.join(extras)})"
        return self.system
