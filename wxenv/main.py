"""
wxenv — CLI entrypoint.

Usage:
    wxenv --help
    wxenv python -d ./workspace
    wxenv docker --backend rancher
    wxenv setup --json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from wxenv import __version__
from wxenv.core.config.loader import ConfigError, load_config
from wxenv.core.models.config import SetupConfig
from wxenv.core.models.host import ContainerBackend
from wxenv.core.models.resolution import Resolution
from wxenv.core.observability.logging_config import resolve_level, setup_logging
from wxenv.core.services.env_resolve.domain.errors import ResolverError
from wxenv.core.services.env_resolve.domain.version import parse_bound

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


# ── Shared options ──────────────────────────────────────────────


def _bound_callback(
    ctx: click.Context, param: click.Parameter, value: str | None,
) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        return parse_bound(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


install_dir_option = click.option(
    "--install-dir", "-d", "install_dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="INSTALL_ROOT",
    default=None,
    help="Install root (default: $INSTALL_ROOT, then the current directory).",
)
python_option = click.option(
    "--python", "python_override",
    envvar="PYTHON",
    default=None,
    help="Interpreter to try first (default: $PYTHON).",
)
docker_option = click.option(
    "--docker", "docker_override",
    envvar="WXENV_DOCKER",
    default=None,
    help="Docker CLI to try first (default: $WXENV_DOCKER).",
)
backend_option = click.option(
    "--backend",
    type=click.Choice([b.value for b in ContainerBackend]),
    default=None,
    help="Container runtime to install if none is found.",
)
json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.",
)
no_install_option = click.option(
    "--no-install", is_flag=True, help="Fail instead of running an installer.",
)
no_venv_option = click.option(
    "--no-venv", is_flag=True,
    help="Register the interpreter as is, without bootstrapping .venv.",
)


def _root(install_dir: Path | None) -> Path:
    return (install_dir or Path.cwd()).resolve()


def _config(root: Path) -> SetupConfig:
    try:
        return load_config(root)
    except ConfigError as e:
        _fail(e)


def _fail(err: Exception, as_json: bool = False) -> NoReturn:
    """Report a fatal error and exit with its status."""
    if as_json:
        click.echo(json.dumps({"error": str(err)}, indent=2))
    else:
        click.secho(f"❌ {err}", fg="red")
    sys.exit(getattr(err, "exit_code", 1))


def _echo_resolution(res: Resolution) -> None:
    name = res.requirement.display_name
    installed = " (installed)" if res.installed else ""
    click.secho(f"✅ {name} {res.version}{installed}: ", fg="green", nl=False)
    click.echo(res.invocation.command_line)
    if res.persist_path:
        if res.persisted_now:
            click.echo(f"   📌 Pinned in {res.persist_path}")
        else:
            click.echo(f"   📌 Keeping {res.persist_path} ({res.persisted_command})")


def _echo_kernel(info: dict) -> None:
    venv = info.get("venv")
    if venv and venv["created"]:
        click.secho(f"✅ Created {venv['path']}", fg="green")
    if venv and venv["installed"]:
        click.echo(f"   📦 Installed {', '.join(venv['installed'])}")
    click.secho(f"✅ Kernel {info['name']!r} registered", fg="green")


# ── Group ───────────────────────────────────────────────────────


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="wxenv")
@click.option("--verbose", "-v", is_flag=True, help="Show installer progress.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (every probe).")
def cli(verbose: bool, quiet: bool, debug: bool) -> None:
    """wxenv — set up Python, Docker and the Jupyter kernel for a watsonx.ai workspace."""
    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))


# ── python ──────────────────────────────────────────────────────


@cli.command("python")
@install_dir_option
@python_option
@click.option("--min-version", callback=_bound_callback, help="Minimum MAJOR.MINOR.")
@click.option("--max-version", callback=_bound_callback, help="Maximum MAJOR.MINOR.")
@no_install_option
@json_option
def python_cmd(
    install_dir: Path | None,
    python_override: str | None,
    min_version: tuple[int, int] | None,
    max_version: tuple[int, int] | None,
    no_install: bool,
    as_json: bool,
) -> None:
    """Resolve a Python interpreter and pin it in .python_cmd."""
    from wxenv.core.services.env_resolve.orchestration.orchestrator import resolve_python

    root = _root(install_dir)
    config = _config(root)
    py = config.python

    minimum = min_version or parse_bound(py.min_version)
    maximum = max_version or parse_bound(py.max_version)
    if maximum is not None and minimum > maximum:
        raise click.BadParameter(
            f"minimum {minimum[0]}.{minimum[1]} is above maximum {maximum[0]}.{maximum[1]}",
            param_hint="'--min-version' / '--max-version'",
        )

    try:
        res = resolve_python(
            root,
            override=python_override or py.override,
            minimum=minimum,
            maximum=maximum,
            allow_install=not no_install,
            install_timeout=config.install_timeout,
        )
    except ResolverError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(res.to_dict(), indent=2))
        return
    _echo_resolution(res)


# ── docker ──────────────────────────────────────────────────────


def _prompt_backend() -> ContainerBackend | None:
    """Ask which backend to install, among those this platform supports."""
    from wxenv.core.services.env_resolve.data.recipes import supported_backends
    from wxenv.core.services.env_resolve.detection.host import (
        classify_platform,
        detect_host,
    )

    choices = supported_backends(classify_platform(detect_host()))
    if len(choices) <= 1:
        return choices[0] if choices else None
    value = click.prompt(
        "Container runtime to install",
        type=click.Choice([b.value for b in choices]),
        default=choices[0].value,
    )
    return ContainerBackend(value)


@cli.command("docker")
@install_dir_option
@docker_option
@backend_option
@click.option(
    "--interactive", "-i", is_flag=True,
    help="Ask which runtime to install when none is found.",
)
@no_install_option
@json_option
def docker_cmd(
    install_dir: Path | None,
    docker_override: str | None,
    backend: str | None,
    interactive: bool,
    no_install: bool,
    as_json: bool,
) -> None:
    """Resolve a Docker CLI with Compose v2 and a running daemon."""
    from wxenv.core.services.env_resolve.orchestration.orchestrator import (
        resolve_container_runtime,
    )

    config = _config(_root(install_dir))
    dk = config.docker

    try:
        chosen = ContainerBackend(backend) if backend else dk.backend
        if chosen is None and interactive and not no_install:
            chosen = _prompt_backend()
        res = resolve_container_runtime(
            override=docker_override or dk.override,
            minimum=parse_bound(dk.min_version),
            backend=chosen,
            allow_install=not no_install,
            install_timeout=config.install_timeout,
        )
    except ResolverError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(res.to_dict(), indent=2))
        return
    _echo_resolution(res)


# ── kernel ──────────────────────────────────────────────────────


@cli.command("kernel")
@install_dir_option
@click.option("--name", default=None, help="Kernel name (default: watsonx-env).")
@click.option("--display-name", default=None, help="Name shown in Jupyter.")
@no_venv_option
@json_option
def kernel_cmd(
    install_dir: Path | None,
    name: str | None,
    display_name: str | None,
    no_venv: bool,
    as_json: bool,
) -> None:
    """Bootstrap .venv and register it as a Jupyter kernel."""
    from wxenv.core.use_cases.setup import setup_kernel

    root = _root(install_dir)
    config = _config(root)
    kn = config.kernel

    try:
        info = setup_kernel(
            root,
            settings=kn,
            create_venv=kn.venv and not no_venv,
            name=name,
            display_name=display_name,
            timeout=config.install_timeout,
        )
    except ResolverError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return
    _echo_kernel(info)
    click.echo(f"   {info['display_name']}  → {info['interpreter']}")


# ── setup ───────────────────────────────────────────────────────


@cli.command("setup")
@install_dir_option
@python_option
@docker_option
@backend_option
@click.option("--skip-docker", is_flag=True, help="Do not resolve a container runtime.")
@click.option("--skip-kernel", is_flag=True, help="Do not register a Jupyter kernel.")
@no_venv_option
@no_install_option
@json_option
def setup_cmd(
    install_dir: Path | None,
    python_override: str | None,
    docker_override: str | None,
    backend: str | None,
    skip_docker: bool,
    skip_kernel: bool,
    no_venv: bool,
    no_install: bool,
    as_json: bool,
) -> None:
    """Resolve Python and Docker, then register the Jupyter kernel."""
    from wxenv.core.use_cases.setup import run_setup

    root = _root(install_dir)
    config = _config(root)

    try:
        result = run_setup(
            root,
            config=config,
            python_override=python_override,
            docker_override=docker_override,
            backend=ContainerBackend(backend) if backend else None,
            skip_docker=skip_docker,
            skip_kernel=skip_kernel,
            skip_venv=no_venv,
            allow_install=not no_install,
        )
    except ResolverError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n🧰 {root}", fg="cyan", bold=True)
    for res in (result.python, result.docker):
        if res is not None:
            _echo_resolution(res)
    if result.kernel:
        _echo_kernel(result.kernel)
    click.echo()


# ── status ──────────────────────────────────────────────────────


@cli.command("status")
@install_dir_option
@python_option
@docker_option
@json_option
def status_cmd(
    install_dir: Path | None,
    python_override: str | None,
    docker_override: str | None,
    as_json: bool,
) -> None:
    """Show what would be resolved, without installing or writing anything."""
    from wxenv.core.use_cases.setup import get_status

    root = _root(install_dir)
    report = get_status(
        root,
        config=_config(root),
        python_override=python_override,
        docker_override=docker_override,
    )

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    click.secho(f"\n📋 {root}", fg="cyan", bold=True)
    for key in ("python", "docker"):
        tool = report[key]
        if tool is None:
            continue
        click.echo()
        click.secho(f"   {key} {tool['requirement']}", fg="white", bold=True)
        for cand in tool["candidates"]:
            version = cand["version"] or "?"
            if cand["accepted"]:
                click.secho(f"     ✓ {cand['command']} ", fg="green", nl=False)
                click.echo(f"({version})")
            else:
                click.secho(f"     ✗ {cand['command']} ", fg="red", nl=False)
                click.echo(f"({cand['reason']})")
        if not tool["candidates"]:
            click.secho("     ✗ no candidates found", fg="red")
        if tool.get("pinned"):
            click.echo(f"     📌 pinned: {tool['pinned']}")
    click.echo()


if __name__ == "__main__":
    cli()
