"""
L0 Data — Built-in tool requirements.

Pure data plus two small builders that apply caller bounds and
overrides.  Name templates use ``{major}``/``{minor}`` and are
expanded by candidate enumeration for every minor in range.
"""

from __future__ import annotations

from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.persistence.python_cmd import PYTHON_CMD_FILE

# Prints "3.11.9" regardless of interpreter banner quirks.
PYTHON_VERSION_SCRIPT = "import sys; print('%d.%d.%d' % sys.version_info[:3])"

PYTHON_MIN_DEFAULT: tuple[int, int] = (3, 11)

DOCKER_MIN_DEFAULT: tuple[int, int] = (20, 10)


PYTHON_REQUIREMENT = ToolRequirement(
    tool="python",
    label="Python",
    minimum=PYTHON_MIN_DEFAULT,
    versioned_name="python{major}.{minor}",
    names=["python3", "python"],
    launcher="py",
    launcher_arg="-{major}.{minor}",
    known_paths=[
        "/opt/homebrew/opt/python@{major}.{minor}/bin/python{major}.{minor}",
        "/usr/local/opt/python@{major}.{minor}/bin/python{major}.{minor}",
        "$LOCALAPPDATA/Programs/Python/Python{major}{minor}/python.exe",
    ],
    version_args=["-c", PYTHON_VERSION_SCRIPT],
    persist_file=PYTHON_CMD_FILE,
)


DOCKER_REQUIREMENT = ToolRequirement(
    tool="docker",
    label="Docker",
    minimum=DOCKER_MIN_DEFAULT,
    names=["docker"],
    known_paths=[
        "~/.rd/bin/docker",
        "/Applications/Docker.app/Contents/Resources/bin/docker",
        "/opt/homebrew/bin/docker",
        "/usr/local/bin/docker",
        "C:/Program Files/Docker/Docker/resources/bin/docker.exe",
    ],
    version_args=["--version"],
    version_pattern=r"version\s+v?(\d+\.\d+(?:\.\d+)?)",
    health_checks=[
        ["compose", "version"],   # Compose v2 plugin, not legacy docker-compose
        ["info"],                 # daemon reachable
    ],
)


def python_requirement(
    minimum: tuple[int, int] | None = None,
    maximum: tuple[int, int] | None = None,
    override: str | None = None,
) -> ToolRequirement:
    """The Python requirement with caller bounds and override applied."""
    return PYTHON_REQUIREMENT.with_bounds(minimum, maximum).with_override(override)


def docker_requirement(
    minimum: tuple[int, int] | None = None,
    override: str | None = None,
) -> ToolRequirement:
    """The Docker requirement with caller bound and override applied."""
    return DOCKER_REQUIREMENT.with_bounds(minimum).with_override(override)
