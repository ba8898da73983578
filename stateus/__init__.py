"""stateus - Declarative finite state machines with transition callbacks."""
from __future__ import annotations

from stateus.callbacks import CallbackIndex, normalize_selectors
from stateus.config import MachineConfig
from stateus.machine import Machine, create
from stateus.table import RESERVED_NAMES, validate_table
from stateus.types import (
    ANY,
    ConfigurationError,
    InvalidStateError,
    InvalidTransitionAttempt,
    StateMachineError,
)

__all__ = [
    "ANY",
    "CallbackIndex",
    "ConfigurationError",
    "InvalidStateError",
    "InvalidTransitionAttempt",
    "Machine",
    "MachineConfig",
    "RESERVED_NAMES",
    "StateMachineError",
    "create",
    "normalize_selectors",
    "validate_table",
]
