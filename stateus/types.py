"""Shared type aliases, the ANY wildcard, and the error taxonomy."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Final, Union


class _AnyState:
    """Wildcard selector matching every state in callback registration."""

    _instance: _AnyState | None = None

    def __new__(cls) -> _AnyState:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ANY"

    def __reduce__(self) -> str:
        return "ANY"


ANY: Final = _AnyState()

StateName = str
Selector = Union[StateName, _AnyState]
SelectorSpec = Union[Selector, Iterable[Selector]]

ComputedTarget = Callable[..., Any]
TransitionTarget = Union[StateName, ComputedTarget]
StateDefinition = Mapping[str, TransitionTarget]
TransitionTable = Mapping[StateName, StateDefinition]

Callback = Callable[..., Any]


class StateMachineError(Exception):
    """Base class for state machine errors."""


class ConfigurationError(StateMachineError, ValueError):
    """Raised when a transition table cannot be used to build a machine."""


class InvalidStateError(StateMachineError, KeyError):
    """Raised when switching to a state the table does not declare."""

    def __init__(self, state: object, message: str | None = None) -> None:
        self.state = state
        super().__init__(message or f"No such state ({state!r})")

    def __str__(self) -> str:
        return str(self.args[0])


@dataclass(frozen=True)
class InvalidTransitionAttempt:
    """A transition invoked from a state that does not declare it.

    Not an exception: delivered to ``on_invalid_transition`` listeners and
    logged, while the call itself returns ``None``.
    """

    name: str
    state: StateName
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return f"No such transition ({self.name!r}) for this state ({self.state!r})"
