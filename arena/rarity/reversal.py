"""Undo records and the engine that applies and reverses them.

Every upgrade mutates exactly one stat through :func:`shift`, which
returns a :class:`StatDelta` holding the change that actually landed
after clamping. :func:`revert` subtracts that change and re-clamps, so
the ledger can be inspected and replayed without opaque closures.

Re-clamping on revert means an undo is not exact when another mutation
pushed the same stat into a bound after this delta was recorded.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from arena.rarity.modules import ModuleSet

Number = Union[int, float]


@dataclass(frozen=True)
class StatDelta:
    """One applied stat change: ``module.stat`` moved by ``amount``."""

    module: str
    stat: str
    amount: Number
    low: Optional[float] = None
    high: Optional[float] = None
    integer: bool = False

    def clamp(self, value: Number) -> Number:
        return clamp_value(value, self.low, self.high, self.integer)


def clamp_value(
    value: Number,
    low: Optional[float] = None,
    high: Optional[float] = None,
    integer: bool = False,
) -> Number:
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    if integer:
        return int(round(value))
    return value


def read(modules: ModuleSet, module: str, stat: str) -> Number:
    return getattr(modules.get(module), stat)


def shift(
    modules: ModuleSet,
    module: str,
    stat: str,
    amount: Number,
    *,
    low: Optional[float] = None,
    high: Optional[float] = None,
    integer: bool = False,
    clamp_before: bool = False,
) -> StatDelta:
    """Add ``amount`` to a stat and return the delta that really applied.

    With ``clamp_before`` the starting value is clamped first, so the
    recorded delta is measured from the in-range reading.
    """

    target = modules.get(module)
    before = getattr(target, stat)
    if clamp_before:
        before = clamp_value(before, low, high, integer)
    setattr(target, stat, clamp_value(before + amount, low, high, integer))
    # Read back: the module may clamp on its own as well.
    actual = getattr(target, stat) - before
    if integer:
        actual = int(actual)
    return StatDelta(module, stat, actual, low, high, integer)


def revert(modules: ModuleSet, delta: StatDelta) -> Number:
    """Subtract a recorded delta, re-clamping into its bounds."""

    target = modules.get(delta.module)
    value = delta.clamp(getattr(target, delta.stat) - delta.amount)
    setattr(target, delta.stat, value)
    return getattr(target, delta.stat)


def revert_all(modules: ModuleSet, deltas: Iterable[StatDelta]) -> None:
    """Revert in reverse order of application."""

    for delta in reversed(list(deltas)):
        revert(modules, delta)


__all__ = ["StatDelta", "clamp_value", "read", "revert", "revert_all", "shift"]
