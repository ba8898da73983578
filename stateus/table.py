"""Transition table validation and target resolution."""
from __future__ import annotations

from typing import Any

from stateus.config import MachineConfig
from stateus.types import ConfigurationError, StateName, TransitionTable, TransitionTarget

RESERVED_NAMES: frozenset[str] = frozenset({
    "bind",
    "can",
    "config",
    "context",
    "current_state",
    "on_invalid_transition",
    "on_transition",
    "on_transition_from",
    "on_transition_from_to",
    "on_transition_to",
    "set_state",
    "states",
    "switch_state",
    "transitions",
    "trigger",
})


def is_reserved(name: str) -> bool:
    """Check if *name* would shadow an engine attribute."""
    return name in RESERVED_NAMES or name.startswith("_")


def validate_table(
    table: TransitionTable,
    initial_state: StateName,
    config: MachineConfig | None = None,
) -> None:
    """Validate a transition table. Raises ConfigurationError on the first problem."""
    if not table:
        raise ConfigurationError("No states defined")
    if initial_state not in table:
        raise ConfigurationError(f"No such initial state ({initial_state!r})")
    for state, definition in table.items():
        for name, target in definition.items():
            if not isinstance(name, str):
                raise ConfigurationError(
                    f"Transition names must be strings, got {name!r} in state {state!r}"
                )
            if is_reserved(name):
                raise ConfigurationError(
                    f"Reserved name. Cannot use {name!r} for a transition name"
                )
            if not isinstance(target, str) and not callable(target):
                raise ConfigurationError(
                    f"Transition {name!r} in state {state!r} must target a state "
                    f"name or a callable, got {type(target).__name__}"
                )
            if (
                config is not None
                and config.validate_targets
                and isinstance(target, str)
                and target not in table
            ):
                raise ConfigurationError(
                    f"Transition {name!r} in state {state!r} targets unknown state {target!r}"
                )


def transition_names(table: TransitionTable) -> list[str]:
    """Every transition name declared anywhere in *table*, in declaration order."""
    seen: dict[str, None] = {}
    for definition in table.values():
        for name in definition:
            seen.setdefault(name, None)
    return list(seen)


def resolve_target(
    target: TransitionTarget,
    context: Any,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> StateName:
    """Return the next-state name for *target*.

    Computed targets are called as ``target(context, *args, **kwargs)`` and
    their result is coerced with ``str()``.
    """
    if callable(target):
        return str(target(context, *args, **kwargs))
    return target
