"""Integration tests embedding a machine in a host object."""
from __future__ import annotations

import pytest
from stateus import Machine, create


def _to_four(ctx):  # type: ignore[no-untyped-def]
    return "four"


COUNTER_STATES = {
    "one": {"increment": "two"},
    "two": {
        "increment": "three",
        "decrement": lambda ctx: "one",
        "go_to_four": _to_four,
    },
    "three": {"increment": "four", "decrement": "two"},
    "four": {"increment": "one", "decrement": "three"},
}


class TestCounterScenario:
    """Four-state counter driven by increment/decrement."""

    @pytest.fixture
    def machine(self) -> Machine:
        return create(COUNTER_STATES, "two")

    def test_increment(self, machine: Machine) -> None:
        assert machine.current_state == "two"
        assert machine.increment().current_state == "three"

    def test_decrement_closure(self, machine: Machine) -> None:
        assert machine.decrement().current_state == "one"

    def test_named_function_target(self, machine: Machine) -> None:
        assert machine.go_to_four().current_state == "four"

    def test_full_cycle(self, machine: Machine) -> None:
        visited = [machine.current_state]
        for _ in range(4):
            visited.append(machine.increment().current_state)
        assert visited == ["two", "three", "four", "one", "two"]

    def test_bound_counter_increases_monotonically(self, machine: Machine) -> None:
        switches = {"count": 0}
        observed = []

        def count(ctx, old, new):  # type: ignore[no-untyped-def]
            switches["count"] += 1

        machine.bind(count)
        for _ in range(5):
            machine.increment()
            observed.append(switches["count"])
        machine.decrement()
        observed.append(switches["count"])

        assert observed == [1, 2, 3, 4, 5, 6]

    def test_invalid_transition_then_recovery(self, machine: Machine) -> None:
        machine.decrement()  # two -> one
        assert machine.go_to_four() is None
        assert machine.decrement() is None
        assert machine.current_state == "one"
        assert machine.increment().current_state == "two"
        assert machine.go_to_four().current_state == "four"


class TrafficLight:
    """Host object whose behaviour depends on the machine's state."""

    def __init__(self) -> None:
        self.log: list[str] = []
        self.cars_waiting = 0
        self.machine = create(
            {
                "green": {"tick": "yellow"},
                "yellow": {"tick": "red"},
                "red": {"tick": TrafficLight._after_red},
                "flashing": {"reset": "red"},
            },
            "red",
            context=self,
        )
        self.machine.bind(TrafficLight._record)
        self.machine.on_transition_to(["red", "flashing"], TrafficLight._stop)
        self.machine.on_transition_from("flashing", TrafficLight._resume)

    def _after_red(self) -> str:
        return "green" if self.cars_waiting else "red"

    def _record(self, old: str, new: str) -> None:
        self.log.append(f"{old}->{new}")

    def _stop(self, old: str) -> None:
        self.log.append("stop")

    def _resume(self, new: str) -> None:
        self.log.append(f"resume:{new}")


class TestHostContext:
    def test_callbacks_receive_host(self) -> None:
        light = TrafficLight()
        light.cars_waiting = 2

        light.machine.tick().tick().tick()

        assert light.machine.current_state == "red"
        assert light.log == [
            "red->green",
            "green->yellow",
            "yellow->red",
            "stop",
        ]

    def test_computed_target_reads_host_state(self) -> None:
        light = TrafficLight()
        light.machine.tick()
        assert light.machine.current_state == "red"
        assert light.log == ["red->red", "stop"]

    def test_direct_switch_and_resume(self) -> None:
        light = TrafficLight()
        light.machine.switch_state("flashing")
        light.machine.reset()
        assert light.log == [
            "red->flashing",
            "stop",
            "flashing->red",
            "resume:red",
            "stop",
        ]
