"""Machine - transition synthesis, state switching and callback dispatch."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from stateus.callbacks import CallbackIndex
from stateus.config import MachineConfig
from stateus.table import resolve_target, transition_names, validate_table
from stateus.types import (
    ANY,
    Callback,
    InvalidStateError,
    InvalidTransitionAttempt,
    SelectorSpec,
    StateDefinition,
    StateName,
    TransitionTable,
    TransitionTarget,
)

logger = logging.getLogger(__name__)

_Operation = Callable[..., Any]
_InvalidListener = Callable[[InvalidTransitionAttempt], None]


class Machine:
    """Finite state machine built from a declarative transition table.

    ``states`` maps each state name to its transitions; a transition targets
    either a state name or a callable ``fn(context, *args, **kwargs)`` whose
    ``str()`` result is the next state. Every transition name in the table is
    callable on the machine (``machine.increment()``) or through
    ``trigger()``. Names not declared by the current state log a diagnostic
    and return ``None`` instead of raising.

    ``context`` is passed as the first argument to computed targets and
    callbacks. It defaults to the machine itself.
    """

    def __init__(
        self,
        states: TransitionTable,
        initial_state: StateName,
        context: Any = None,
        config: MachineConfig | None = None,
    ) -> None:
        self._config = config if config is not None else MachineConfig()
        validate_table(states, initial_state, self._config)

        self._states: Mapping[StateName, StateDefinition] = MappingProxyType(
            {name: MappingProxyType(dict(definition)) for name, definition in states.items()}
        )
        self._context = self if context is None else context
        self._current_state = initial_state
        self._callbacks = CallbackIndex()
        self._invalid_listeners: list[_InvalidListener] = []
        self._names = transition_names(self._states)
        self._operations: dict[str, _Operation] = {}
        self._operations_state = initial_state
        self._synthesize(initial_state)

    @property
    def states(self) -> Mapping[StateName, StateDefinition]:
        return self._states

    @property
    def context(self) -> Any:
        return self._context

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def current_state(self) -> StateName:
        return self._current_state

    # --- Transitions ---

    def trigger(self, name: str, *args: Any, **kwargs: Any) -> Machine | None:
        """Invoke transition *name*. Raises AttributeError if no state declares it."""
        operation = self._operations.get(name)
        if operation is None:
            raise AttributeError(f"{type(self).__name__!r} object has no transition {name!r}")
        return operation(*args, **kwargs)

    def can(self, name: str) -> bool:
        """Check if transition *name* is currently installed as a real transition."""
        return name in self._states[self._operations_state]

    def transitions(self) -> list[str]:
        """List the transition names currently installed as real transitions."""
        return list(self._states[self._operations_state])

    def __getattr__(self, name: str) -> _Operation:
        if name.startswith("_"):
            raise AttributeError(name)
        operations = self.__dict__.get("_operations", {})
        if name in operations:
            return operations[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._names))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={self._current_state!r} states={list(self._states)!r}>"

    def _synthesize(self, state: StateName) -> None:
        operations = {name: self._invalid_operation(name) for name in self._names}
        for name, target in self._states[state].items():
            operations[name] = self._transition_operation(name, target)
        self._operations = operations
        self._operations_state = state

    def _transition_operation(self, name: str, target: TransitionTarget) -> _Operation:
        def transition(*args: Any, **kwargs: Any) -> Machine:
            next_state = resolve_target(target, self._context, args, kwargs)
            return self.switch_state(next_state)

        transition.__name__ = name
        return transition

    def _invalid_operation(self, name: str) -> _Operation:
        def invalid(*args: Any, **kwargs: Any) -> None:
            attempt = InvalidTransitionAttempt(name, self._current_state, args, dict(kwargs))
            logger.log(self._config.diagnostic_level, attempt.message)
            for listener in list(self._invalid_listeners):
                listener(attempt)
            return None

        invalid.__name__ = name
        return invalid

    # --- Switching ---

    def switch_state(self, next_state: StateName) -> Machine:
        """Switch to *next_state*, re-synthesize transitions and run callbacks.

        Callback tiers run in a fixed order: any->any ``(old, new)``,
        old->new ``(old, new)``, old->any ``(new)``, any->new ``(old)``.
        Each callback also receives the context as its first argument.
        """
        if next_state not in self._states:
            raise InvalidStateError(next_state)

        self._synthesize(next_state)
        old_state = self._current_state
        self._current_state = next_state
        logger.debug("Switched %r -> %r", old_state, next_state)

        self._run_callbacks(ANY, ANY, old_state, next_state)
        self._run_callbacks(old_state, next_state, old_state, next_state)
        self._run_callbacks(old_state, ANY, next_state)
        self._run_callbacks(ANY, next_state, old_state)
        return self

    def set_state(self, next_state: StateName) -> Machine:
        """Set the current state without running callbacks.

        Transitions are not re-synthesized either: the operations of the
        previous state stay installed until the next ``switch_state``.
        """
        if next_state not in self._states:
            raise InvalidStateError(next_state)
        logger.debug("Set state %r -> %r (callbacks skipped)", self._current_state, next_state)
        self._current_state = next_state
        return self

    def _run_callbacks(self, from_: Any, to: Any, *args: StateName) -> None:
        for callback in self._callbacks.get(from_, to):
            callback(self._context, *args)

    # --- Registration ---

    def on_transition_from_to(
        self, from_: SelectorSpec, to: SelectorSpec, callback: Callback,
    ) -> None:
        """Register ``callback(context, old, new)`` for switches from *from_* to *to*."""
        self._callbacks.add(from_, to, callback)

    def on_transition_from(self, from_: SelectorSpec, callback: Callback) -> None:
        """Register ``callback(context, new)`` for switches leaving *from_*."""
        self._callbacks.add(from_, ANY, callback)

    def on_transition_to(self, to: SelectorSpec, callback: Callback) -> None:
        """Register ``callback(context, old)`` for switches entering *to*."""
        self._callbacks.add(ANY, to, callback)

    def bind(self, callback: Callback) -> None:
        """Register ``callback(context, old, new)`` for every switch."""
        self._callbacks.add(ANY, ANY, callback)

    on_transition = bind

    def on_invalid_transition(self, listener: _InvalidListener) -> None:
        """Register a listener for transitions invoked from the wrong state."""
        self._invalid_listeners.append(listener)


def create(
    states: TransitionTable,
    initial_state: StateName,
    context: Any = None,
    config: MachineConfig | None = None,
) -> Machine:
    """Build a Machine. Raises ConfigurationError for an unusable table."""
    return Machine(states, initial_state, context, config)
