"""
SetupConfig — the optional ``wxenv.yml`` in the install root.

Every field has a default, so a missing file is a valid configuration.
CLI flags and environment variables override these values.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from wxenv.core.models.host import ContainerBackend

_BOUND_RE = re.compile(r"^\d+\.\d+$")


def _check_bound(value: str | None) -> str | None:
    if value is None:
        return None
    # YAML reads 3.10 as the float 3.1
    if isinstance(value, float):
        raise ValueError(f"quote version bounds in YAML (got {value!r})")
    value = str(value).strip()
    if not _BOUND_RE.match(value):
        raise ValueError(f"expected MAJOR.MINOR (e.g. '3.11'), got {value!r}")
    return value


def _as_tuple(value: str) -> tuple[int, int]:
    major, minor = value.split(".")
    return int(major), int(minor)


class PythonSettings(BaseModel):
    """Python interpreter requirement."""

    min_version: str = "3.11"
    max_version: str | None = None
    override: str | None = None

    @field_validator("min_version", "max_version", mode="before")
    @classmethod
    def check_bounds(cls, value: str | None) -> str | None:
        return _check_bound(value)

    @model_validator(mode="after")
    def check_range(self) -> PythonSettings:
        if self.max_version is not None and _as_tuple(self.min_version) > _as_tuple(self.max_version):
            raise ValueError(
                f"min_version {self.min_version} is above max_version {self.max_version}"
            )
        return self


class DockerSettings(BaseModel):
    """Container runtime requirement."""

    enabled: bool = True
    min_version: str = "20.10"
    backend: ContainerBackend | None = None   # None = platform default
    override: str | None = None

    @field_validator("min_version", mode="before")
    @classmethod
    def check_bounds(cls, value: str | None) -> str | None:
        return _check_bound(value)


class KernelSettings(BaseModel):
    """Jupyter kernel registration."""

    enabled: bool = True
    name: str = "watsonx-env"
    display_name: str = "Python 3.11 (watsonx-env)"
    user: bool = True
    venv: bool = True   # bootstrap .venv with ipykernel before registering


class SetupConfig(BaseModel):
    """Root of ``wxenv.yml``."""

    python: PythonSettings = Field(default_factory=PythonSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)
    kernel: KernelSettings = Field(default_factory=KernelSettings)
    install_timeout: int | None = None   # seconds per installer step; None = no limit
