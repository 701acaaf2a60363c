"""
Simulated host for resolver tests.

Replaces ``shutil.which``, ``subprocess.run`` and the well-known-path
file check with an in-memory model of executables, so that no test
ever runs a real interpreter, Docker or package manager.

Fake executables live under ``/wxenv-test/...``, a directory that
does not exist on the test machine, so ``os.path.realpath`` leaves
them untouched.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from wxenv.core.services.env_resolve.data.requirements import PYTHON_VERSION_SCRIPT
from wxenv.core.services.env_resolve.resolver import candidates as candidates_mod

BIN = "/wxenv-test/bin"
Handler = Callable[[list[str]], tuple[int, str, str]]


_SELECTOR_RE = re.compile(r"^-(\d+)(?:\.(\d+))?$")


def python_handler(
    version: str,
    *,
    ipykernel: bool = False,
    on_venv: Callable[[str, str], None] | None = None,
) -> Handler:
    """An interpreter reporting *version* (e.g. ``"3.11.9"``).

    Also behaves like the ``py`` launcher: a leading ``-X.Y`` selector
    must match *version* or the call fails the way ``py`` does.
    ``ipykernel`` is importable only when *ipykernel* is set or after
    ``-m pip install ... ipykernel``; ``-m venv DIR`` calls *on_venv*.
    """
    state = {"ipykernel": ipykernel}

    def handle(args: list[str]) -> tuple[int, str, str]:
        selector = _SELECTOR_RE.match(args[0]) if args else None
        if selector:
            wanted = ".".join(g for g in selector.groups() if g)
            if not (version == wanted or version.startswith(wanted + ".")):
                return 103, "", f"No suitable Python runtime found for {args[0]}\n"
            args = args[1:]

        if args == ["-c", PYTHON_VERSION_SCRIPT]:
            return 0, f"{version}\n", ""
        if args in (["--version"], ["-V"]):
            return 0, f"Python {version}\n", ""
        if args == ["-c", "import ipykernel"] or args[:2] == ["-m", "ipykernel"]:
            if not state["ipykernel"]:
                return 1, "", "ModuleNotFoundError: No module named 'ipykernel'\n"
            return 0, "Installed kernelspec\n", ""
        if args[:2] == ["-m", "venv"] and on_venv is not None:
            on_venv(args[-1], version)
            return 0, "", ""
        if args[:3] == ["-m", "pip", "install"]:
            if "ipykernel" in args:
                state["ipykernel"] = True
            return 0, "", ""
        return 0, "", ""

    return handle


def docker_handler(version: str, *, compose: bool = True, daemon: bool = True) -> Handler:
    """A Docker CLI; *compose*/*daemon* control the health checks."""

    def handle(args: list[str]) -> tuple[int, str, str]:
        if args == ["--version"]:
            return 0, f"Docker version {version}, build afdd53b\n", ""
        if args == ["compose", "version"]:
            if compose:
                return 0, "Docker Compose version v2.24.6\n", ""
            return 1, "", "docker: 'compose' is not a docker command.\n"
        if args == ["info"]:
            if daemon:
                return 0, "Server Version: " + version + "\n", ""
            return 1, "", "Cannot connect to the Docker daemon at unix:///var/run/docker.sock\n"
        return 0, "", ""

    return handle


def ok_handler(args: list[str]) -> tuple[int, str, str]:
    return 0, "", ""


@dataclass
class FakeSystem:
    """In-memory executables plus a log of every command run."""

    path_dirs: list[str] = field(default_factory=lambda: [BIN])
    programs: dict[str, Handler] = field(default_factory=dict)   # abs path → handler
    commands: dict[str, Handler] = field(default_factory=dict)   # bare name → handler (installers)
    calls: list[list[str]] = field(default_factory=list)

    # ── Building the system ─────────────────────────────────────

    def add(self, name: str, handler: Handler, directory: str = BIN) -> str:
        path = name if name.startswith("/") else f"{directory}/{name}"
        self.programs[path] = handler
        return path

    def add_python(
        self, name: str, version: str, directory: str = BIN, *, ipykernel: bool = False,
    ) -> str:
        handler = python_handler(version, ipykernel=ipykernel, on_venv=self.create_venv)
        return self.add(name, handler, directory)

    def create_venv(self, target: str, version: str) -> str:
        """Put a real (empty) ``bin/python`` under *target* and make it runnable."""
        python = Path(target) / "bin" / "python"
        python.parent.mkdir(parents=True, exist_ok=True)
        python.write_text("")
        self.programs[str(python)] = python_handler(version, on_venv=self.create_venv)
        return str(python)

    def add_docker(self, version: str, directory: str = BIN, **kw: bool) -> str:
        return self.add("docker", docker_handler(version, **kw), directory)

    def on_command(self, name: str, handler: Handler = ok_handler) -> None:
        """Register a non-probed command (apt-get, brew, winget, ...)."""
        self.commands[name] = handler

    # ── Replacements ────────────────────────────────────────────

    def which(self, name: str, mode: int = os.F_OK | os.X_OK, path: str | None = None) -> str | None:
        if "/" in name:
            return name if name in self.programs else None
        dirs = path.split(os.pathsep) if path is not None else self.path_dirs
        for d in dirs:
            candidate = f"{d.rstrip('/')}/{name}"
            if candidate in self.programs:
                return candidate
        if path is None and name in self.commands:
            return f"/usr/bin/{name}"
        return None

    def is_file(self, path: str) -> bool:
        return path in self.programs

    def run(self, argv: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        exe, args = argv[0], argv[1:]

        handler = self.programs.get(exe)
        if handler is None and "/" not in exe:
            env = kwargs.get("env")
            search = env.get("PATH") if isinstance(env, dict) else None
            found = self.which(exe, path=search) or self.which(exe)
            handler = self.programs.get(found) if found else None
            if handler is None:
                handler = self.commands.get(exe)
        if handler is None:
            raise FileNotFoundError(2, "No such file or directory", exe)

        code, out, err = handler(args)
        return subprocess.CompletedProcess(argv, code, out, err)

    # ── Introspection ───────────────────────────────────────────

    def ran(self, name: str) -> list[list[str]]:
        """Every recorded call whose executable is *name* (by basename)."""
        return [c for c in self.calls if os.path.basename(c[0]) == name]

    def install(self, monkeypatch) -> FakeSystem:
        monkeypatch.setattr(shutil, "which", self.which)
        monkeypatch.setattr(subprocess, "run", self.run)
        monkeypatch.setattr(candidates_mod, "_is_executable_file", self.is_file)
        return self
