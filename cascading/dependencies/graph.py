"""
Cascading Dependency Graph

Holds the field dependency declarations and derives from them the
selection order, the direct dependents of each field and the transitive
downstream set used to cascade resets.

Two orderings are supported:
- legacy: stable sort by the number of direct prerequisites. Correct for
  a non-branching chain but not a true topological order when branches
  have different depths.
- topological: Kahn's algorithm, ties broken by declared order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union
import heapq
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cascading.bootstrap.config import ORDERING_LEGACY, ORDERING_TOPOLOGICAL, ORDERINGS
from cascading.errors import (
    ConfigurationValueError,
    CyclicDependencyError,
    DependencyConfigurationError,
    DuplicateFieldError,
    UnknownFieldReferenceError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DECLARATION
# =============================================================================

class DependencyDeclaration(BaseModel):
    """A field and the prerequisite fields that filter its options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(..., min_length=1, description="Declared field name")
    depends_on: Tuple[str, ...] = Field(
        default=(),
        alias="dependsOn",
        description="Prerequisite field names",
    )

    @field_validator("depends_on", mode="before")
    @classmethod
    def _dedupe(cls, value: Any) -> Any:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple, set, frozenset)):
            seen: List[str] = []
            for item in value:
                if item not in seen:
                    seen.append(item)
            return tuple(seen)
        return value


DeclarationLike = Union[DependencyDeclaration, Mapping[str, Any]]


def normalize_declarations(declarations: Iterable[DeclarationLike]) -> List[DependencyDeclaration]:
    """Coerce mappings into DependencyDeclaration, keeping declared order."""
    result = []
    for index, decl in enumerate(declarations):
        if isinstance(decl, DependencyDeclaration):
            result.append(decl)
            continue
        try:
            result.append(DependencyDeclaration.model_validate(decl))
        except ValidationError as e:
            raise DependencyConfigurationError(
                f"Invalid dependency declaration at position {index}: {e}"
            ) from e
    return result


# =============================================================================
# DEPENDENCY NODE
# =============================================================================

@dataclass
class DependencyNode:
    """A declared field in the dependency graph."""
    field_name: str
    declared_index: int

    depends_on: Tuple[str, ...] = ()
    depended_by: Set[str] = field(default_factory=set)


# =============================================================================
# DEPENDENCY GRAPH
# =============================================================================

class DependencyGraph:
    """
    Directed graph of field dependencies.

    Usage:
        graph = DependencyGraph.build([
            {"field": "category", "depends_on": []},
            {"field": "subcategory", "depends_on": ["category"]},
        ])
        graph.sequence            # ["category", "subcategory"]
        graph.get_direct_dependents("category")  # ["subcategory"]
    """

    def __init__(self, ordering: str = ORDERING_LEGACY):
        if ordering not in ORDERINGS:
            raise ConfigurationValueError(
                f"ordering must be one of {ORDERINGS}, got '{ordering}'"
            )
        self._ordering = ordering
        self._nodes: Dict[str, DependencyNode] = {}
        self._declarations: Dict[str, DependencyDeclaration] = {}
        self._sequence: List[str] = []
        self._dependents: Dict[str, List[str]] = {}

    @classmethod
    def build(
        cls,
        declarations: Iterable[DeclarationLike],
        ordering: str = ORDERING_LEGACY,
        validate: bool = True,
    ) -> "DependencyGraph":
        """
        Build a graph from declarations.

        Args:
            declarations: DependencyDeclaration objects or mappings with
                ``field`` and ``depends_on``/``dependsOn``
            ordering: "legacy" or "topological"
            validate: Fail fast on duplicates, unknown references and cycles

        Raises:
            DependencyConfigurationError: On malformed declarations
        """
        graph = cls(ordering)
        for decl in normalize_declarations(declarations):
            graph.add_declaration(decl, validate=validate)
        graph.finalize(validate=validate)
        return graph

    def add_declaration(self, decl: DependencyDeclaration, validate: bool = True) -> DependencyNode:
        """Add a declaration. A duplicate replaces the earlier one unless validating."""
        if decl.field in self._nodes:
            if validate:
                raise DuplicateFieldError(decl.field)
            logger.warning(f"Field '{decl.field}' declared twice, keeping the last declaration")
            index = self._nodes[decl.field].declared_index
        else:
            index = len(self._nodes)

        node = DependencyNode(
            field_name=decl.field,
            declared_index=index,
            depends_on=decl.depends_on,
        )
        self._nodes[decl.field] = node
        self._declarations[decl.field] = decl
        return node

    def finalize(self, validate: bool = True) -> None:
        """Link edges, validate and compute the selection sequence."""
        for node in self._nodes.values():
            node.depended_by.clear()

        for node in self._nodes.values():
            for prerequisite in node.depends_on:
                if prerequisite in self._nodes:
                    self._nodes[prerequisite].depended_by.add(node.field_name)
                elif validate:
                    raise UnknownFieldReferenceError(node.field_name, prerequisite)
                else:
                    logger.warning(
                        f"Field '{node.field_name}' depends on undeclared field '{prerequisite}'"
                    )

        if validate:
            cycles = self._detect_cycles()
            if cycles:
                raise CyclicDependencyError(cycles[0])

        if self._ordering == ORDERING_TOPOLOGICAL:
            self._sequence = self._topological_order()
        else:
            self._sequence = self._legacy_order()

        self._dependents = {
            name: [d for d in self._sequence if name in self._nodes[d].depends_on]
            for name in self._sequence
        }

        logger.debug(
            f"Dependency graph built: {len(self._nodes)} fields, "
            f"ordering={self._ordering}, sequence={self._sequence}"
        )

    def _legacy_order(self) -> List[str]:
        """Stable sort by direct prerequisite count."""
        nodes = sorted(self._nodes.values(), key=lambda n: n.declared_index)
        return [n.field_name for n in sorted(nodes, key=lambda n: len(n.depends_on))]

    def _topological_order(self) -> List[str]:
        """Kahn's algorithm, ready fields taken in declared order."""
        in_degree = {
            name: sum(1 for p in node.depends_on if p in self._nodes)
            for name, node in self._nodes.items()
        }
        ready = [(n.declared_index, n.field_name) for n in self._nodes.values() if in_degree[n.field_name] == 0]
        heapq.heapify(ready)
        order: List[str] = []

        while ready:
            _, name = heapq.heappop(ready)
            order.append(name)
            for dependent in self._nodes[name].depended_by:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, (self._nodes[dependent].declared_index, dependent))

        # Only reachable when cycles were not validated away
        leftover = sorted(
            (n for n in self._nodes.values() if n.field_name not in order),
            key=lambda n: n.declared_index,
        )
        order.extend(n.field_name for n in leftover)
        return order

    def _detect_cycles(self) -> List[List[str]]:
        """Detect cycles using DFS."""
        cycles = []
        visited = set()
        rec_stack = set()

        def dfs(name: str, path: List[str]) -> None:
            visited.add(name)
            rec_stack.add(name)
            path.append(name)

            node = self._nodes[name]
            for dep in sorted(node.depended_by, key=lambda d: self._nodes[d].declared_index):
                if dep not in visited:
                    dfs(dep, path.copy())
                elif dep in rec_stack:
                    cycle_start = path.index(dep)
                    cycles.append(path[cycle_start:] + [dep])

            rec_stack.remove(name)

        for node in sorted(self._nodes.values(), key=lambda n: n.declared_index):
            if node.field_name not in visited:
                dfs(node.field_name, [])

        return cycles

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def ordering(self) -> str:
        return self._ordering

    @property
    def sequence(self) -> List[str]:
        """Declared fields in selection order."""
        return list(self._sequence)

    @property
    def declarations(self) -> List[DependencyDeclaration]:
        """Declarations in selection order."""
        return [self._declarations[name] for name in self._sequence]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def has_field(self, name: str) -> bool:
        return name in self._nodes

    def get_node(self, name: str) -> Optional[DependencyNode]:
        return self._nodes.get(name)

    def get_direct_dependencies(self, name: str) -> Tuple[str, ...]:
        """Prerequisites of a field, in declared order."""
        node = self._nodes.get(name)
        return node.depends_on if node else ()

    def get_direct_dependents(self, name: str) -> List[str]:
        """Fields that list ``name`` as a prerequisite, in selection order."""
        return list(self._dependents.get(name, []))

    def get_all_downstream(self, name: str) -> List[str]:
        """Transitive dependents in selection order."""
        result: Set[str] = set()
        to_process = [name]

        while to_process:
            current = to_process.pop()
            for dependent in self._dependents.get(current, []):
                if dependent not in result:
                    result.add(dependent)
                    to_process.append(dependent)

        result.discard(name)
        return [n for n in self._sequence if n in result]
