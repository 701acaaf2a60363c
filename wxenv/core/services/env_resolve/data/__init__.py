"""
L0 Data — ``__init__.py`` re-exports requirements and recipes.
"""

from wxenv.core.services.env_resolve.data.recipes import (  # noqa: F401
    DEFAULT_BACKENDS,
    DOCKER_RECIPES,
    PYTHON_RECIPES,
    supported_backends,
)
from wxenv.core.services.env_resolve.data.requirements import (  # noqa: F401
    DOCKER_MIN_DEFAULT,
    DOCKER_REQUIREMENT,
    PYTHON_MIN_DEFAULT,
    PYTHON_REQUIREMENT,
    docker_requirement,
    python_requirement,
)
