"""Graph module providing dependency graph abstractions.

This module contains:
- DependencyGraph: An immutable graph of "reads from" relationships between node ids
- topological_sort: Algorithm for ordering nodes by dependencies
"""

from ._algorithms import topological_sort
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "topological_sort"]
