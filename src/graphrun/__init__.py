"""graphrun - a deterministic executor for graph-described units of work.

A graph document declares nodes (HTTP calls, delays, terminal nodes) wired
together with conditional edges. The engine interpolates node configuration,
evaluates edge conditions against a mutable run state, and drives the node
queue until the graph ends.
"""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
