"""
L1 Domain — Resolver error taxonomy.

Every fatal outcome of a resolution run is one of these exceptions.
Probes never raise them: an absent or too-old tool is a normal
rejection.  Only the orchestrator and the installer dispatch raise,
and only the CLI layer turns them into exit codes.
"""

from __future__ import annotations


class ResolverError(Exception):
    """Base class for all fatal resolution failures."""

    exit_code: int = 1


class UnsupportedPlatform(ResolverError):
    """The host (or host + backend combination) has no install recipe."""

    def __init__(self, platform: str, detail: str = "") -> None:
        self.platform = platform
        self.detail = detail
        msg = f"Unsupported platform: {platform}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class RequirementUnmet(ResolverError):
    """No candidate satisfied the requirement."""

    def __init__(self, tool: str, bound: str, tried: list[str] | None = None) -> None:
        self.tool = tool
        self.bound = bound
        self.tried = list(tried or [])
        msg = f"Could not resolve {tool} {bound}"
        if self.tried:
            msg += f" (tried: {', '.join(self.tried)})"
        super().__init__(msg)


class InstallerIneffective(RequirementUnmet):
    """The installer completed, but the re-probe still found nothing usable.

    Usually the tool landed outside the current search path, or the
    installer silently no-opped.  Restarting the shell and re-running
    is the normal remediation.
    """

    def __init__(
        self,
        tool: str,
        bound: str,
        variant: str,
        tried: list[str] | None = None,
    ) -> None:
        self.variant = variant
        super().__init__(tool, bound, tried)
        self.args = (
            f"{self.args[0]} after running the {variant} installer; "
            "open a new shell so PATH changes apply, then re-run",
        )


class PersistFailure(ResolverError):
    """The resolved command could not be written to its persistence file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class ExternalToolFailure(ResolverError):
    """An installer step or other external command exited non-zero."""

    def __init__(
        self,
        label: str,
        returncode: int | None,
        stderr: str = "",
    ) -> None:
        self.label = label
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"{label} could not be run"
        else:
            msg = f"{label} failed (exit {returncode})"
        tail = stderr.strip().splitlines()[-1:] if stderr else []
        if tail:
            msg += f": {tail[0]}"
        super().__init__(msg)
