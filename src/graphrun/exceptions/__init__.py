"""graphrun exception hierarchy.

All exceptions can be imported from this package:
    from graphrun.exceptions import GraphRunError, ConfigError

Engine-specific errors (parsing, execution, expressions) live next to the
engine in ``graphrun.dsl.errors`` and ``graphrun.dsl.expressions.errors``
and all derive from GraphRunError.
"""

from __future__ import annotations

from graphrun.exceptions.base import GraphRunError
from graphrun.exceptions.config import ConfigError

__all__ = [
    "GraphRunError",
    "ConfigError",
]
