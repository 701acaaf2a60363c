"""
Tests for configuration — wxenv.yml loading and validation.
"""

import textwrap
from pathlib import Path

import pytest

from wxenv.core.config.loader import ConfigError, load_config
from wxenv.core.models.config import SetupConfig
from wxenv.core.models.host import ContainerBackend


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = load_config(tmp_path)
        assert config == SetupConfig()
        assert config.python.min_version == "3.11"
        assert config.python.max_version is None
        assert config.docker.enabled is True
        assert config.kernel.name == "watsonx-env"
        assert config.install_timeout is None

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text("")
        assert load_config(tmp_path) == SetupConfig()

    def test_full_file(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text(textwrap.dedent("""\
            python:
              min_version: "3.11"
              max_version: "3.13"
              override: /opt/py/bin/python3.11
            docker:
              backend: rancher
              min_version: "24.0"
            kernel:
              enabled: false
            install_timeout: 1800
        """))

        config = load_config(tmp_path)

        assert config.python.max_version == "3.13"
        assert config.python.override == "/opt/py/bin/python3.11"
        assert config.docker.backend == ContainerBackend.RANCHER
        assert config.docker.min_version == "24.0"
        assert config.kernel.enabled is False
        assert config.install_timeout == 1800

    def test_partial_file_keeps_defaults(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text("docker:\n  enabled: false\n")
        config = load_config(tmp_path)
        assert config.docker.enabled is False
        assert config.python.min_version == "3.11"


class TestInvalidConfig:
    def test_invalid_yaml(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text("python: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(tmp_path)

    def test_not_a_mapping(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(tmp_path)

    def test_unquoted_version_rejected(self, tmp_path: Path):
        # 3.10 would silently become 3.1
        (tmp_path / "wxenv.yml").write_text("python:\n  min_version: 3.10\n")
        with pytest.raises(ConfigError, match="quote version bounds"):
            load_config(tmp_path)

    def test_malformed_version(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text('python:\n  min_version: "three"\n')
        with pytest.raises(ConfigError, match="MAJOR.MINOR"):
            load_config(tmp_path)

    def test_unknown_backend(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text("docker:\n  backend: podman\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(tmp_path)

    def test_inverted_python_range(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text('python:\n  min_version: "3.13"\n  max_version: "3.11"\n')
        with pytest.raises(ConfigError, match="min_version 3.13 is above max_version 3.11"):
            load_config(tmp_path)

    def test_equal_bounds_allowed(self, tmp_path: Path):
        (tmp_path / "wxenv.yml").write_text('python:\n  min_version: "3.12"\n  max_version: "3.12"\n')
        assert load_config(tmp_path).python.max_version == "3.12"

    def test_exit_code(self):
        assert ConfigError("x").exit_code == 1
