"""
L2 Resolver — ``__init__.py`` re-exports candidate enumeration.
"""

from wxenv.core.services.env_resolve.resolver.candidates import (  # noqa: F401
    enumerate_candidates,
    search_path,
)
