"""
Cascade Engine

Tracks the current selection of every declared field, derives option
lists and filtered records from it, and cascades resets to dependent
fields when an ancestor changes.

INVARIANT: The selection state holds exactly one entry per declared
field. Entries are never added or removed, only their values change.

INVARIANT: The derived view is recomputed on every read; nothing about
options or filtered records is cached.

Notification order for select(field, value):
    one (dependent, None, view) per dependent whose value was cleared,
    deepest first, each with a freshly computed view; then
    (field, value, view) for the field itself.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Sequence, Set, Tuple
import logging
import threading

from cascading.bootstrap.config import EngineConfig, REENTRANCY_DEFER
from cascading.dependencies.graph import DeclarationLike, DependencyDeclaration, DependencyGraph
from cascading.errors import (
    ErrorAggregator,
    PrecedenceViolationError,
    ReentrantMutationError,
    SelectionError,
    UnknownFieldError,
    create_observer_error,
)

from .records import FieldValue, Record, distinct_sorted, validate_records, validate_value
from .view import DerivedView

logger = logging.getLogger(__name__)


# Field name reported to observers by reset()
RESET_EVENT = "reset"

# Type alias for observers
Observer = Callable[[str, FieldValue, DerivedView], None]


@dataclass(eq=False)
class Subscription:
    """One observer registration. Compared by identity."""
    observer: Observer
    subscription_id: str

    @property
    def name(self) -> str:
        return getattr(self.observer, "__qualname__", None) or type(self.observer).__name__


class CascadeEngine:
    """
    Reactive state manager for cascading selection fields.

    Usage:
        engine = CascadeEngine(products, [
            {"field": "category", "depends_on": []},
            {"field": "subcategory", "depends_on": ["category"]},
        ])
        unsubscribe = engine.on_change(lambda f, v, view: ...)
        engine.select("category", "Electronics")
        engine.get_options("subcategory")

    select() is permissive by default: a field may be set before its
    prerequisites. can_select() is the advisory guard; EngineConfig.strict
    turns it into a hard check.

    Observers run synchronously inside select()/reset(). They may read
    the engine but may not mutate it; see EngineConfig.reentrancy.
    """

    def __init__(
        self,
        data: Sequence[Record],
        dependencies: Iterable[DeclarationLike],
        config: Optional[EngineConfig] = None,
        error_aggregator: Optional[ErrorAggregator] = None,
    ):
        """
        Args:
            data: Dataset records, kept by reference and never modified
            dependencies: Field declarations
            config: Engine behaviour switches
            error_aggregator: Receives observer failures

        Raises:
            DependencyConfigurationError: On malformed declarations
            RecordValidationError: On non-scalar values at declared fields
        """
        self._config = config or EngineConfig()
        self._graph = DependencyGraph.build(
            dependencies,
            ordering=self._config.ordering,
            validate=self._config.validate_declarations,
        )
        validate_records(data, self._graph.sequence)

        self._data = data
        self._state: Dict[str, FieldValue] = {}
        self._subscriptions: List[Subscription] = []
        self._subscription_counter = 0
        self._errors = error_aggregator

        self._lock = threading.RLock()
        self._notify_depth = 0
        self._deferred: Deque[Tuple[str, Tuple[Any, ...]]] = deque()

        self._initialize_selections()

        logger.info(
            f"CascadeEngine created: {len(self._data)} records, "
            f"{len(self._graph)} fields, sequence={self._graph.sequence}"
        )

    def _initialize_selections(self) -> None:
        for name in self._graph.sequence:
            self._state[name] = None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def data(self) -> Sequence[Record]:
        return self._data

    @property
    def fields(self) -> Tuple[str, ...]:
        return tuple(self._graph.sequence)

    @property
    def dependencies(self) -> Tuple[DependencyDeclaration, ...]:
        return tuple(self._graph.declarations)

    @property
    def observer_count(self) -> int:
        return len(self._subscriptions)

    @property
    def is_notifying(self) -> bool:
        return self._notify_depth > 0

    def get_selection_sequence(self) -> List[str]:
        """Declared fields in selection order."""
        return self._graph.sequence

    def get_dependents(self, field_name: str) -> List[str]:
        """Fields cleared when ``field_name`` changes, in selection order."""
        return self._graph.get_all_downstream(field_name)

    # -------------------------------------------------------------------------
    # Derived view
    # -------------------------------------------------------------------------

    def get_options(self, field_name: str) -> List[Any]:
        """
        Distinct valid values of a field under its prerequisites' selections.

        Unset prerequisites impose no filter. Unknown fields get an
        empty list.
        """
        with self._lock:
            node = self._graph.get_node(field_name)
            if node is None:
                return []

            records: Sequence[Record] = self._data
            for prerequisite in node.depends_on:
                selected = self._state.get(prerequisite)
                if selected is not None:
                    records = [r for r in records if r.get(prerequisite) == selected]

            return distinct_sorted(r.get(field_name) for r in records)

    def get_all_options(self) -> Dict[str, List[Any]]:
        with self._lock:
            return {name: self.get_options(name) for name in self._graph.sequence}

    def get_filtered_data(self) -> List[Record]:
        """Records matching every set selection, in dataset order."""
        with self._lock:
            active = [(name, value) for name, value in self._state.items() if value is not None]
            return [
                record for record in self._data
                if all(record.get(name) == value for name, value in active)
            ]

    def get_current_state(self) -> DerivedView:
        with self._lock:
            return DerivedView(
                current_selections=dict(self._state),
                available_options=self.get_all_options(),
                filtered_data=self.get_filtered_data(),
            )

    def can_select(self, field_name: str) -> bool:
        """True if the field is declared and all its prerequisites are set."""
        with self._lock:
            if not self._graph.has_field(field_name):
                return False
            return not self._missing_prerequisites(field_name)

    def _missing_prerequisites(self, field_name: str) -> List[str]:
        return [
            p for p in self._graph.get_direct_dependencies(field_name)
            if self._state.get(p) is None
        ]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def select(self, field_name: str, value: FieldValue) -> Optional[DerivedView]:
        """
        Set a field and clear everything that depends on it.

        Re-selecting the current value still cascades and still notifies.

        Args:
            field_name: Declared field
            value: Scalar value, or None to clear

        Returns:
            The view after the change, or None if the call was deferred

        Raises:
            UnknownFieldError: field_name is not declared
            SelectionValueError: value is not a scalar
            PrecedenceViolationError: strict mode and prerequisites unset
            ReentrantMutationError: called from an observer with reentrancy="raise"
        """
        with self._lock:
            self._check_selection(field_name, value)

            if self._notify_depth:
                return self._reentrant("select", field_name, value)

            if self._config.strict and value is not None:
                missing = self._missing_prerequisites(field_name)
                if missing:
                    raise PrecedenceViolationError(field_name, missing)

            logger.debug(f"select {field_name}={value!r}")
            self._state[field_name] = value
            self._reset_dependent_fields(field_name, {field_name})

            view = self.get_current_state()
            self._notify(field_name, value, view)
            self._drain_deferred()
            return view

    def reset(self) -> Optional[DerivedView]:
        """
        Clear every field and emit a single "reset" notification.

        Returns:
            The view after the reset, or None if the call was deferred
        """
        with self._lock:
            if self._notify_depth:
                return self._reentrant("reset")

            logger.debug("reset all selections")
            self._initialize_selections()

            view = self.get_current_state()
            self._notify(RESET_EVENT, None, view)
            self._drain_deferred()
            return view

    def _check_selection(self, field_name: str, value: Any) -> None:
        if not self._graph.has_field(field_name):
            raise UnknownFieldError(field_name)
        validate_value(field_name, value)

    def _reset_dependent_fields(self, changed: str, visited: Set[str]) -> None:
        """Depth-first clear of dependents, notifying after each subtree."""
        for dependent in self._graph.get_direct_dependents(changed):
            # A field reached twice is already cleared along with its subtree
            if dependent in visited:
                continue
            visited.add(dependent)

            old_value = self._state[dependent]
            self._state[dependent] = None

            self._reset_dependent_fields(dependent, visited)

            if old_value is not None:
                logger.debug(f"cascade reset {dependent} (was {old_value!r}) after {changed} changed")
                self._notify(dependent, None, self.get_current_state())

    def _reentrant(self, operation: str, *args: Any) -> None:
        if self._config.reentrancy == REENTRANCY_DEFER:
            logger.warning(f"Deferring '{operation}{args}' issued during a change notification")
            self._deferred.append((operation, args))
            return None
        raise ReentrantMutationError(operation)

    def _drain_deferred(self) -> None:
        while self._deferred and not self._notify_depth:
            operation, args = self._deferred.popleft()
            try:
                getattr(self, operation)(*args)
            except SelectionError as e:
                logger.error(f"Deferred {operation}{args} rejected: {e}")

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def on_change(self, observer: Observer) -> Callable[[], bool]:
        """
        Register an observer.

        Registering the same callable twice gives two registrations, each
        removed by its own deregistration function.

        Returns:
            Deregistration function; returns False if already removed
        """
        with self._lock:
            self._subscription_counter += 1
            subscription = Subscription(observer, f"sub_{self._subscription_counter}")
            self._subscriptions.append(subscription)
            logger.debug(f"Registered observer {subscription.subscription_id} ({subscription.name})")

        def unsubscribe() -> bool:
            with self._lock:
                try:
                    self._subscriptions.remove(subscription)
                except ValueError:
                    return False
                logger.debug(f"Removed observer {subscription.subscription_id}")
                return True

        return unsubscribe

    def _notify(self, field_name: str, value: FieldValue, view: DerivedView) -> None:
        """Call every observer; a failing observer is logged and skipped."""
        self._notify_depth += 1
        try:
            for subscription in list(self._subscriptions):
                try:
                    subscription.observer(field_name, value, view)
                except Exception as e:
                    logger.exception(
                        f"Error in change observer {subscription.name} for '{field_name}'"
                    )
                    if self._errors is not None:
                        self._errors.add(create_observer_error(
                            e,
                            source=subscription.name,
                            path=field_name,
                            value=value,
                        ))
        finally:
            self._notify_depth -= 1

    def __repr__(self) -> str:
        return (
            f"CascadeEngine(fields={self._graph.sequence}, "
            f"records={len(self._data)}, observers={len(self._subscriptions)})"
        )
