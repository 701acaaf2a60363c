"""
L4 Execution — ``__init__.py`` re-exports installer dispatch.
"""

from wxenv.core.services.env_resolve.execution.installer import (  # noqa: F401
    InstallReport,
    dispatch_install,
    render_recipe,
    select_recipe,
)
from wxenv.core.services.env_resolve.execution.subprocess_runner import (  # noqa: F401
    run_subprocess,
)
