"""
Tests for CLI commands — exit codes, JSON output, option precedence.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from wxenv.core.services.env_resolve.orchestration import orchestrator
from wxenv.core.use_cases import setup as setup_use_case
from wxenv.main import cli


@pytest.fixture
def on_host(monkeypatch, ubuntu_host):
    """Pin host detection to Ubuntu (tests may re-point it)."""

    def use(host):
        monkeypatch.setattr(orchestrator, "detect_host", lambda: host)
        monkeypatch.setattr(setup_use_case, "detect_host", lambda: host)

    use(ubuntu_host)
    return use


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "watsonx.ai" in result.output

    def test_short_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_option_exit_2(self):
        result = CliRunner().invoke(cli, ["python", "--bogus"])
        assert result.exit_code == 2

    def test_missing_flag_value_exit_2(self):
        result = CliRunner().invoke(cli, ["python", "--python"])
        assert result.exit_code == 2

    def test_bad_version_exit_2(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["python", "-d", str(tmp_path), "--min-version", "three"])
        assert result.exit_code == 2

    def test_bad_backend_exit_2(self):
        result = CliRunner().invoke(cli, ["docker", "--backend", "podman"])
        assert result.exit_code == 2


class TestPythonCommand:
    def test_resolves_and_pins(self, fake_system, on_host, install_root):
        fake_system.add_python("python3.11", "3.11.9")

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root)])

        assert result.exit_code == 0, result.output
        assert "python3.11" in result.output
        assert (install_root / ".python_cmd").read_text() == "python3.11\n"

    def test_json(self, fake_system, on_host, install_root):
        fake_system.add_python("python3.12", "3.12.3")

        result = CliRunner().invoke(cli, [
            "python", "-d", str(install_root), "--max-version", "3.13", "--json",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["command"] == "python3.12"
        assert data["requirement"] == "3.11–3.13"
        assert data["persisted_now"] is True

    def test_install_root_from_env(self, fake_system, on_host, install_root, monkeypatch):
        fake_system.add_python("python3.11", "3.11.9")
        monkeypatch.setenv("INSTALL_ROOT", str(install_root))

        result = CliRunner().invoke(cli, ["python"])

        assert result.exit_code == 0, result.output
        assert (install_root / ".python_cmd").is_file()

    def test_override_from_env(self, fake_system, on_host, install_root, monkeypatch):
        custom = fake_system.add_python("/wxenv-test/env/python", "3.11.1")
        fake_system.add_python("python3.11", "3.11.9")
        monkeypatch.setenv("PYTHON", custom)

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root)])

        assert result.exit_code == 0, result.output
        assert (install_root / ".python_cmd").read_text() == f"{custom}\n"

    def test_flag_beats_env(self, fake_system, on_host, install_root, monkeypatch):
        env = fake_system.add_python("/wxenv-test/env/python", "3.11.1")
        flag = fake_system.add_python("/wxenv-test/flag/python", "3.11.2")
        monkeypatch.setenv("PYTHON", env)

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root), "--python", flag])

        assert result.exit_code == 0, result.output
        assert (install_root / ".python_cmd").read_text() == f"{flag}\n"

    def test_config_bounds(self, fake_system, on_host, install_root):
        fake_system.add_python("python3", "3.14.0")
        (install_root / "wxenv.yml").write_text('python:\n  max_version: "3.13"\n')

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root), "--no-install"])

        assert result.exit_code == 1
        assert "3.11–3.13" in result.output

    def test_unmet_exit_1(self, fake_system, on_host, install_root):
        fake_system.add_python("python3", "3.9.7")

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root), "--no-install"])

        assert result.exit_code == 1
        assert "Could not resolve Python >= 3.11" in result.output
        assert not (install_root / ".python_cmd").exists()

    def test_unsupported_platform_exit_1(self, fake_system, on_host, install_root):
        from wxenv.core.models.host import HostInfo

        on_host(HostInfo(system="Haiku"))
        result = CliRunner().invoke(cli, ["python", "-d", str(install_root)])

        assert result.exit_code == 1
        assert "Unsupported platform" in result.output
        assert not (install_root / ".python_cmd").exists()

    def test_invalid_config_exit_1(self, fake_system, on_host, install_root):
        (install_root / "wxenv.yml").write_text("- not\n- a mapping\n")

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root)])

        assert result.exit_code == 1
        assert "Expected a YAML mapping" in result.output

    def test_json_error(self, fake_system, on_host, install_root):
        result = CliRunner().invoke(cli, [
            "python", "-d", str(install_root), "--no-install", "--json",
        ])
        assert result.exit_code == 1
        assert "Could not resolve" in json.loads(result.output)["error"]

    def test_inverted_range_exit_2(self, fake_system, on_host, install_root):
        fake_system.add_python("python3", "3.12.1")
        fake_system.on_command("apt-get")
        fake_system.on_command("add-apt-repository")

        result = CliRunner().invoke(cli, [
            "python", "-d", str(install_root), "--min-version", "3.13", "--max-version", "3.11",
        ])

        assert result.exit_code == 2
        assert "3.13 is above maximum 3.11" in result.output
        assert fake_system.calls == []
        assert not (install_root / ".python_cmd").exists()

    def test_min_flag_above_config_max_exit_2(self, fake_system, on_host, install_root):
        (install_root / "wxenv.yml").write_text('python:\n  max_version: "3.12"\n')

        result = CliRunner().invoke(cli, ["python", "-d", str(install_root), "--min-version", "3.13"])

        assert result.exit_code == 2
        assert fake_system.calls == []

    def test_unwritable_install_root_exit_1(self, fake_system, on_host, install_root):
        from wxenv.core.persistence import python_cmd

        fake_system.add_python("python3.11", "3.11.9")

        with patch.object(
            python_cmd.tempfile, "mkstemp",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = CliRunner().invoke(cli, ["python", "-d", str(install_root)])

        assert result.exit_code == 1
        assert "Cannot write" in result.output
        assert "Permission denied" in result.output


class TestDockerCommand:
    def test_resolves(self, fake_system, on_host, install_root):
        fake_system.add_docker("24.0.7")

        result = CliRunner().invoke(cli, ["docker", "-d", str(install_root)])

        assert result.exit_code == 0, result.output
        assert "Docker 24.0.7" in result.output

    def test_backend_not_supported_exit_1(self, fake_system, on_host, install_root):
        result = CliRunner().invoke(cli, ["docker", "-d", str(install_root), "--backend", "colima"])

        assert result.exit_code == 1
        assert "colima" in result.output

    def test_interactive_prompt(self, fake_system, on_host, install_root, macos_host, monkeypatch):
        from wxenv.core.services.env_resolve.detection import host as host_mod

        on_host(macos_host)
        monkeypatch.setattr(host_mod, "detect_host", lambda: macos_host)
        fake_system.add_docker("24.0.7")

        result = CliRunner().invoke(
            cli, ["docker", "-d", str(install_root), "--interactive"], input="rancher\n",
        )

        assert result.exit_code == 0, result.output
        assert "Container runtime to install" in result.output


class TestKernelCommand:
    def test_registers(self, fake_system, install_root):
        fake_system.add_python("python3.11", "3.11.9")
        (install_root / ".python_cmd").write_text("python3.11\n")

        result = CliRunner().invoke(cli, ["kernel", "-d", str(install_root), "--name", "nb"])

        assert result.exit_code == 0, result.output
        assert "'nb' registered" in result.output

    def test_nothing_pinned_exit_1(self, fake_system, install_root):
        result = CliRunner().invoke(cli, ["kernel", "-d", str(install_root)])
        assert result.exit_code == 1

    def test_bootstraps_venv(self, fake_system, install_root):
        fake_system.add_python("python3.11", "3.11.9")
        (install_root / ".python_cmd").write_text("python3.11\n")

        result = CliRunner().invoke(cli, ["kernel", "-d", str(install_root), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["venv"]["created"] is True
        assert data["interpreter"] == str(install_root.resolve() / ".venv" / "bin" / "python")

    def test_no_venv_without_ipykernel_exit_1(self, fake_system, install_root):
        fake_system.add_python("python3.11", "3.11.9")
        (install_root / ".python_cmd").write_text("python3.11\n")

        result = CliRunner().invoke(cli, ["kernel", "-d", str(install_root), "--no-venv"])

        assert result.exit_code == 1
        assert "No module named 'ipykernel'" in result.output
        assert not (install_root / ".venv").exists()


class TestSetupCommand:
    def test_json(self, fake_system, on_host, install_root):
        fake_system.add_python("python3.11", "3.11.9")
        fake_system.add_docker("25.0.1")

        result = CliRunner().invoke(cli, ["setup", "-d", str(install_root), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["python"]["command"] == "python3.11"
        assert data["docker"]["version"] == "25.0.1"
        assert data["kernel"]["name"] == "watsonx-env"

    def test_skip_flags(self, fake_system, on_host, install_root):
        fake_system.add_python("python3.11", "3.11.9")

        result = CliRunner().invoke(cli, [
            "setup", "-d", str(install_root), "--skip-docker", "--skip-kernel",
        ])

        assert result.exit_code == 0, result.output
        assert fake_system.ran("docker") == []


class TestStatusCommand:
    def test_probe_only(self, fake_system, install_root):
        fake_system.add_python("python3", "3.9.7")
        fake_system.add_python("python3.11", "3.11.9")
        fake_system.on_command("apt-get")

        result = CliRunner().invoke(cli, ["status", "-d", str(install_root), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["python"]["selected"] == "python3.11"
        assert not (install_root / ".python_cmd").exists()
        assert fake_system.ran("apt-get") == []

    def test_human_output(self, fake_system, install_root):
        fake_system.add_python("python3", "3.9.7")

        result = CliRunner().invoke(cli, ["status", "-d", str(install_root)])

        assert result.exit_code == 0, result.output
        assert "✗ python3" in result.output
        assert "older than 3.11" in result.output
