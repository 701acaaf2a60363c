"""
Domain models — Pydantic types for the environment resolver.

All models are re-exported here for convenient access:

    from wxenv.core.models import ToolRequirement, Resolution, HostInfo
"""

from wxenv.core.models.config import (
    DockerSettings,
    KernelSettings,
    PythonSettings,
    SetupConfig,
)
from wxenv.core.models.host import ContainerBackend, HostInfo, PlatformVariant
from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.models.resolution import (
    Invocation,
    ProbeResult,
    Resolution,
    ResolutionState,
)
from wxenv.core.models.version import Version

__all__ = [
    # host.py
    "ContainerBackend",
    # config.py
    "DockerSettings",
    "HostInfo",
    # resolution.py
    "Invocation",
    "KernelSettings",
    "PlatformVariant",
    "ProbeResult",
    "PythonSettings",
    "Resolution",
    "ResolutionState",
    "SetupConfig",
    # requirement.py
    "ToolRequirement",
    # version.py
    "Version",
]
