"""
L5 Orchestration — ``__init__.py`` re-exports the resolution entry points.

These are the functions external code (use cases, CLI) calls.
"""

from wxenv.core.services.env_resolve.orchestration.orchestrator import (  # noqa: F401
    inspect_tool,
    resolve_container_runtime,
    resolve_python,
    resolve_tool,
)
