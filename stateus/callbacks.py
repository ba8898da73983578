"""Transition callback index keyed by (from, to) selectors."""
from __future__ import annotations

from stateus.types import ANY, Callback, Selector, SelectorSpec, _AnyState


def normalize_selectors(spec: SelectorSpec) -> tuple[Selector, ...]:
    """Expand a selector spec to a tuple of selectors.

    A single state name or ``ANY`` becomes a one-element tuple; any other
    iterable is expanded element by element, preserving order.

    >>> normalize_selectors("idle")
    ('idle',)
    >>> normalize_selectors(["idle", ANY])
    ('idle', ANY)
    """
    if isinstance(spec, (str, _AnyState)):
        return (spec,)
    return tuple(spec)


class CallbackIndex:
    """Ordered callback lists for every registered (from, to) selector pair.

    Registration order is invocation order. Nothing is ever removed.
    """

    def __init__(self) -> None:
        self._callbacks: dict[Selector, dict[Selector, list[Callback]]] = {}

    def add(self, from_: SelectorSpec, to: SelectorSpec, callback: Callback) -> None:
        """Register *callback* for every (from, to) combination of the specs."""
        targets = normalize_selectors(to)
        for source in normalize_selectors(from_):
            row = self._callbacks.setdefault(source, {})
            for target in targets:
                row.setdefault(target, []).append(callback)

    def get(self, from_: Selector, to: Selector) -> tuple[Callback, ...]:
        """Snapshot of the callbacks for one selector pair. Empty if none."""
        return tuple(self._callbacks.get(from_, {}).get(to, ()))

    def __len__(self) -> int:
        return sum(len(cbs) for row in self._callbacks.values() for cbs in row.values())
