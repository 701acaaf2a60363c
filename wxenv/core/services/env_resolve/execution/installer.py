"""
L4 Execution — Installer dispatch.

Selects exactly one platform recipe and runs its steps in order,
blocking, to completion.  The first failing step aborts the dispatch
with ``ExternalToolFailure``; nothing is rolled back or retried.

Dispatch reports what ran and where the tool probably landed, but
never claims the tool is usable.  The orchestrator always re-probes.
"""

from __future__ import annotations

import getpass
import logging
import os
from dataclasses import dataclass, field

from wxenv.core.models.host import ContainerBackend, HostInfo, PlatformVariant
from wxenv.core.models.requirement import ToolRequirement
from wxenv.core.services.env_resolve.data.recipes import (
    DEFAULT_BACKENDS,
    DOCKER_RECIPES,
    PYTHON_RECIPES,
    supported_backends,
)
from wxenv.core.services.env_resolve.detection.condition import evaluate_condition
from wxenv.core.services.env_resolve.domain.errors import (
    ExternalToolFailure,
    UnsupportedPlatform,
)
from wxenv.core.services.env_resolve.execution.subprocess_runner import run_subprocess

logger = logging.getLogger(__name__)


@dataclass
class InstallReport:
    """What an installer dispatch did."""

    tool: str
    variant: PlatformVariant
    recipe: str
    backend: ContainerBackend | None = None
    steps_run: list[str] = field(default_factory=list)
    steps_skipped: list[str] = field(default_factory=list)
    path_hints: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tool": self.tool,
            "variant": self.variant.value,
            "recipe": self.recipe,
            "backend": self.backend.value if self.backend else None,
            "steps_run": list(self.steps_run),
            "steps_skipped": list(self.steps_skipped),
        }


def _invoking_user() -> str:
    # Under sudo, USER is root; SUDO_USER is the human who ran us
    return os.environ.get("SUDO_USER") or getpass.getuser()


def select_recipe(
    tool: str,
    variant: PlatformVariant,
    backend: ContainerBackend | None = None,
) -> tuple[dict, ContainerBackend | None]:
    """Pick the recipe for *tool* on *variant*.

    Returns:
        ``(recipe, backend)``.  *backend* is ``None`` for tools that
        have a single recipe per platform.

    Raises:
        UnsupportedPlatform: No recipe for this combination.
    """
    if tool == "python":
        recipe = PYTHON_RECIPES.get(variant)
        if recipe is None:
            raise UnsupportedPlatform(variant.value, "no Python installer")
        return recipe, None

    if tool == "docker":
        chosen = backend or DEFAULT_BACKENDS.get(variant)
        recipe = DOCKER_RECIPES.get((variant, chosen)) if chosen else None
        if recipe is None:
            options = ", ".join(b.value for b in supported_backends(variant)) or "none"
            raise UnsupportedPlatform(
                variant.value,
                f"container backend {chosen.value if chosen else '?'!r} "
                f"is not available here (supported: {options})",
            )
        return recipe, chosen

    raise UnsupportedPlatform(variant.value, f"no installer for tool {tool!r}")


def _fill(text: str, values: dict[str, str]) -> str:
    for key, value in values.items():
        text = text.replace("{" + key + "}", value)
    return text


def render_recipe(recipe: dict, requirement: ToolRequirement) -> dict:
    """Fill ``{version}``/``{nodot}``/``{user}`` placeholders in a recipe."""
    major, minor = requirement.minimum
    values = {
        "version": f"{major}.{minor}",
        "nodot": f"{major}{minor}",
        "user": _invoking_user(),
    }
    steps = []
    for step in recipe.get("steps", []):
        steps.append({
            **step,
            "label": _fill(step["label"], values),
            "command": [_fill(part, values) for part in step["command"]],
        })
    return {
        "label": recipe.get("label", ""),
        "steps": steps,
        "path_hints": [_fill(p, values) for p in recipe.get("path_hints", [])],
    }


def dispatch_install(
    requirement: ToolRequirement,
    host: HostInfo,
    variant: PlatformVariant,
    *,
    backend: ContainerBackend | None = None,
    timeout: int | None = None,
) -> InstallReport:
    """Run the platform installer for *requirement*.

    Args:
        requirement: The unmet requirement (its minimum selects the
            version to install).
        host: Detected host; used for step conditions.
        variant: Classified platform.
        backend: Container backend (docker only); platform default if None.
        timeout: Per-step timeout in seconds; ``None`` = no limit.

    Returns:
        InstallReport.  Raises rather than returning a failed report.

    Raises:
        UnsupportedPlatform: No recipe for this combination.
        ExternalToolFailure: A step exited non-zero or could not run.
    """
    raw, chosen = select_recipe(requirement.tool, variant, backend)
    recipe = render_recipe(raw, requirement)
    report = InstallReport(
        tool=requirement.tool,
        variant=variant,
        recipe=recipe["label"],
        backend=chosen,
        path_hints=recipe["path_hints"],
    )

    logger.info(
        "Installing %s %s via %s",
        requirement.display_name, requirement.bound_label, recipe["label"],
    )

    path_env = None
    if recipe["path_hints"]:
        hints = [os.path.expanduser(p) for p in recipe["path_hints"]]
        path_env = {"PATH": os.pathsep.join(hints + ["$PATH"])}

    for step in recipe["steps"]:
        label = step["label"]
        if not evaluate_condition(step.get("condition"), host):
            logger.info("  ⊘ %s (skipped: %s)", label, step.get("condition"))
            report.steps_skipped.append(label)
            continue

        logger.info("  → %s", label)
        result = run_subprocess(
            step["command"],
            needs_sudo=step.get("needs_sudo", False),
            timeout=timeout,
            env_overrides=path_env,
        )
        if not result["ok"]:
            logger.error("  ✗ %s: %s", label, result.get("error", ""))
            raise ExternalToolFailure(
                label,
                result.get("returncode"),
                result.get("stderr") or result.get("error", ""),
            )
        report.steps_run.append(label)

    logger.info("Installer %s finished (%d steps)", recipe["label"], len(report.steps_run))
    return report
