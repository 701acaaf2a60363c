"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from tests.env_resolve.fake_system import FakeSystem
from wxenv.core.models.host import HostInfo

_ENV_VARS = (
    "INSTALL_ROOT",
    "PYTHON",
    "WXENV_DOCKER",
    "WXENV_LOG_LEVEL",
    "WXENV_LOG_FILE",
    "WXENV_LOG_FILE_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the caller's shell settings out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_wxenv_logger():
    """Undo handlers and levels set by CLI runs and logging tests."""
    logger = logging.getLogger("wxenv")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """An empty install root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def fake_system(monkeypatch) -> FakeSystem:
    """A simulated host with no executables; tests add what they need."""
    return FakeSystem().install(monkeypatch)


@pytest.fixture
def ubuntu_host() -> HostInfo:
    return HostInfo(system="Linux", release="6.5.0", machine="x86_64",
                    distro_id="ubuntu", distro_like="debian")


@pytest.fixture
def macos_host() -> HostInfo:
    return HostInfo(system="Darwin", release="23.4.0", machine="arm64")


@pytest.fixture
def windows_host() -> HostInfo:
    return HostInfo(system="MINGW64_NT-10.0-22631", machine="x86_64", windows_env=True)
