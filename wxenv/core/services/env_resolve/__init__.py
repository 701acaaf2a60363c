"""
Environment resolver — package re-exports.

Resolves a required tool (Python interpreter, Docker-compatible
container runtime) to a working invocation, installing it through
the platform's package manager when nothing acceptable is present::

    from wxenv.core.services.env_resolve import resolve_python

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → domain → resolver → detection →
execution → orchestration).
"""

# ── L0: Data ──
from wxenv.core.services.env_resolve.data.requirements import (  # noqa: F401
    DOCKER_REQUIREMENT,
    PYTHON_REQUIREMENT,
    docker_requirement,
    python_requirement,
)

# ── L1: Domain ──
from wxenv.core.services.env_resolve.domain.errors import (  # noqa: F401
    ExternalToolFailure,
    InstallerIneffective,
    PersistFailure,
    RequirementUnmet,
    ResolverError,
    UnsupportedPlatform,
)
from wxenv.core.services.env_resolve.domain.version import (  # noqa: F401
    check_version,
    parse_bound,
    parse_version,
)

# ── L2: Resolver ──
from wxenv.core.services.env_resolve.resolver.candidates import (  # noqa: F401
    enumerate_candidates,
)

# ── L3: Detection ──
from wxenv.core.services.env_resolve.detection.host import (  # noqa: F401
    classify_platform,
    detect_host,
)
from wxenv.core.services.env_resolve.detection.probe import probe  # noqa: F401

# ── L4: Execution ──
from wxenv.core.services.env_resolve.execution.installer import (  # noqa: F401
    InstallReport,
    dispatch_install,
)

# ── L5: Orchestration ──
from wxenv.core.services.env_resolve.orchestration.orchestrator import (  # noqa: F401
    inspect_tool,
    resolve_container_runtime,
    resolve_python,
    resolve_tool,
)
