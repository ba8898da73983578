"""Machine configuration dataclass."""
from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(frozen=True)
class MachineConfig:
    """Immutable configuration for a state machine.

    Attributes:
        diagnostic_level: Log level used when a transition is invoked from a
            state that does not declare it.
        validate_targets: Also reject literal targets that are not states of
            the table when the machine is built.
    """

    diagnostic_level: int = logging.WARNING
    validate_targets: bool = False
