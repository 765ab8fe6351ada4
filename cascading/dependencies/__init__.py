"""
Cascading Dependency Graph

Provides:
- DependencyDeclaration: a field and its prerequisite fields
- DependencyGraph: selection order, dependents lookup, cycle detection
"""

from .graph import (
    DependencyDeclaration,
    DependencyGraph,
    DependencyNode,
    DeclarationLike,
    normalize_declarations,
)

__all__ = [
    "DependencyDeclaration",
    "DependencyGraph",
    "DependencyNode",
    "DeclarationLike",
    "normalize_declarations",
]
