"""
L1 Domain — ``__init__.py`` re-exports pure version logic and errors.
"""

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
    minor_range,
    parse_bound,
    parse_version,
)
