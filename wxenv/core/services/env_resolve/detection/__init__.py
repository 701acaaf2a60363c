"""
L3 Detection — ``__init__.py`` re-exports read-only host and tool probes.
"""

from wxenv.core.services.env_resolve.detection.condition import (  # noqa: F401
    evaluate_condition,
)
from wxenv.core.services.env_resolve.detection.host import (  # noqa: F401
    classify_platform,
    detect_host,
)
from wxenv.core.services.env_resolve.detection.probe import (  # noqa: F401
    PROBE_TIMEOUT,
    probe,
)
