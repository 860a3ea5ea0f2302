# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Stopping conditions and propagation direction.

A stopping condition is one of two closed variants:

- StateStop: stop when a calculated quantity of a subject crosses a
  target value, optionally only in one crossing direction.
- TimeStop: stop after an elapsed duration (seconds or days) or at an
  absolute epoch. The span itself is the stopping point, so no event
  detection is needed.

``plan_stops`` validates a set of conditions once, before any solving,
and resolves the propagation direction.
"""
import math
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Sequence, Union

from orbitprop.domain.calculations import (
    OrbitQuantity,
    check_quantity,
    evaluate_quantity,
)
from orbitprop.domain.errors import ConfigurationError
from orbitprop.domain.time_systems import SECONDS_PER_DAY, AstroTime, TimeScale
from orbitprop.ports.subject import PropagationSubject

# Quantities that wrap at 2π; their crossing test uses the wrapped difference.
ANGULAR_QUANTITIES = frozenset({
    OrbitQuantity.RAAN,
    OrbitQuantity.ARG_PERIAPSIS,
    OrbitQuantity.TRUE_ANOMALY,
})


class CrossingDirection(IntEnum):
    """Which change of the monitored quantity, as the epoch advances, counts."""
    DECREASING = -1
    EITHER = 0
    INCREASING = 1


class PropagationDirection(Enum):
    """Time-integration direction."""
    ADVANCING = "advancing"
    RETREATING = "retreating"
    INFER = "infer"

    @property
    def sign(self) -> float:
        if self is PropagationDirection.INFER:
            raise ValueError("INFER has no sign until it is resolved")
        return 1.0 if self is PropagationDirection.ADVANCING else -1.0


class TimeStopKind(Enum):
    SECONDS = "seconds"
    DAYS = "days"
    EPOCH = "epoch"


def _as_crossing(direction: Any) -> CrossingDirection:
    try:
        return CrossingDirection(direction)
    except ValueError:
        raise ConfigurationError(
            f"Crossing direction must be -1, 0 or +1 (CrossingDirection), got {direction!r}"
        ) from None


def as_propagation_direction(direction: Any) -> PropagationDirection:
    """Coerce an enum member or its string value."""
    try:
        return PropagationDirection(direction)
    except ValueError:
        raise ConfigurationError(
            f"Invalid direction {direction!r}; must be one of "
            f"{', '.join(d.value for d in PropagationDirection)}"
        ) from None


def _check_subject(subject: Any) -> None:
    if not isinstance(subject, PropagationSubject):
        raise ConfigurationError(
            f"{type(subject).__name__} does not implement the PropagationSubject port"
        )


def angle_difference(value: float, target: float) -> float:
    """Difference value - target wrapped into [-π, π)."""
    return (value - target + math.pi) % (2.0 * math.pi) - math.pi


@dataclass(frozen=True, eq=False)
class StateStop:
    """Stop when ``quantity`` of ``subject`` crosses ``target``."""
    subject: Any
    quantity: OrbitQuantity
    target: float
    direction: CrossingDirection = CrossingDirection.EITHER

    def __post_init__(self) -> None:
        _check_subject(self.subject)
        check_quantity(self.quantity)
        if not isinstance(self.target, numbers.Real) or not math.isfinite(self.target):
            raise ConfigurationError(f"Stop target must be a finite number, got {self.target!r}")
        object.__setattr__(self, "target", float(self.target))
        object.__setattr__(self, "direction", _as_crossing(self.direction))

    @property
    def is_angular(self) -> bool:
        return self.quantity in ANGULAR_QUANTITIES

    def residual(self, value: float) -> float:
        """Signed distance of ``value`` from the target."""
        if self.is_angular:
            return angle_difference(value, self.target)
        return value - self.target

    def __repr__(self) -> str:
        return (f"StateStop({getattr(self.subject, 'name', self.subject)!r}, "
                f"{self.quantity.name}, {self.target}, {self.direction.name})")


@dataclass(frozen=True, eq=False)
class TimeStop:
    """Stop after an elapsed duration or at an absolute epoch."""
    subject: Any
    kind: TimeStopKind
    value: Union[float, AstroTime]
    direction: CrossingDirection = CrossingDirection.EITHER

    def __post_init__(self) -> None:
        _check_subject(self.subject)
        if not isinstance(self.kind, TimeStopKind):
            raise ConfigurationError(f"Unknown time-based stop kind {self.kind!r}")
        direction = _as_crossing(self.direction)
        if direction is not CrossingDirection.EITHER:
            raise ConfigurationError(
                f"Time-based stopping conditions require direction=EITHER, got {direction.name}; "
                "the sign of the duration selects the propagation direction"
            )
        if self.kind is TimeStopKind.EPOCH:
            if not isinstance(self.value, AstroTime):
                raise ConfigurationError(f"Epoch stop requires an AstroTime, got {self.value!r}")
        else:
            if not isinstance(self.value, numbers.Real) or not math.isfinite(self.value):
                raise ConfigurationError(f"Duration must be a finite number, got {self.value!r}")
            object.__setattr__(self, "value", float(self.value))
        # Resolved in TDB here; the solver span is recomputed in the
        # integration scale, and TT/TDB cannot disagree on a zero interval.
        self.elapsed_seconds(TimeScale.TDB)

    def elapsed_seconds(self, scale: TimeScale) -> float:
        """Signed elapsed seconds in ``scale`` from the subject's current epoch."""
        if self.kind is TimeStopKind.SECONDS:
            elapsed = self.value
        elif self.kind is TimeStopKind.DAYS:
            elapsed = self.value * SECONDS_PER_DAY
        else:
            elapsed = (self.value.seconds_in(scale)
                       - self.subject.get_epoch().seconds_in(scale))
        if elapsed == 0.0:
            raise ConfigurationError(
                "Duration must be non-zero; use a state-based stop or omit this condition"
            )
        return elapsed

    def __repr__(self) -> str:
        return (f"TimeStop({getattr(self.subject, 'name', self.subject)!r}, "
                f"{self.kind.name}, {self.value!r})")


StopCondition = Union[StateStop, TimeStop]


def make_stop(
    subject: Any,
    quantity: Any = None,
    target: Optional[float] = None,
    *,
    direction: Any = CrossingDirection.EITHER,
    seconds: Optional[float] = None,
    days: Optional[float] = None,
    epoch: Optional[AstroTime] = None,
) -> StopCondition:
    """Construct a stopping condition.

    - ``make_stop(sc, OrbitQuantity.POS_MAG, 7000.0, direction=...)``
    - ``make_stop(sc, seconds=5000.0)`` / ``make_stop(sc, days=-1.5)``
    - ``make_stop(sc, epoch=t)`` or ``make_stop(sc, t)`` with ``t`` an AstroTime
    """
    if isinstance(quantity, AstroTime):
        if epoch is not None:
            raise ConfigurationError("Epoch given both positionally and as epoch=")
        epoch, quantity = quantity, None

    chosen = [name for name, val in (("quantity", quantity), ("seconds", seconds),
                                     ("days", days), ("epoch", epoch)) if val is not None]
    if len(chosen) != 1:
        raise ConfigurationError(
            "Specify exactly one of quantity/target, seconds, days or epoch; "
            f"got {', '.join(chosen) or 'none'}"
        )

    if quantity is not None:
        if target is None:
            raise ConfigurationError(f"A target value is required for {quantity!r}")
        return StateStop(subject, check_quantity(quantity), target, direction)
    if target is not None:
        raise ConfigurationError("target is only meaningful with a calculated quantity")
    if seconds is not None:
        return TimeStop(subject, TimeStopKind.SECONDS, seconds, direction)
    if days is not None:
        return TimeStop(subject, TimeStopKind.DAYS, days, direction)
    return TimeStop(subject, TimeStopKind.EPOCH, epoch, direction)


# --- Convenience constructors ---

def stop_at_periapsis(subject: Any) -> StateStop:
    """r·v crosses zero from below."""
    return StateStop(subject, OrbitQuantity.POS_DOT_VEL, 0.0, CrossingDirection.INCREASING)


def stop_at_apoapsis(subject: Any) -> StateStop:
    """r·v crosses zero from above."""
    return StateStop(subject, OrbitQuantity.POS_DOT_VEL, 0.0, CrossingDirection.DECREASING)


def stop_at_ascending_node(subject: Any) -> StateStop:
    return StateStop(subject, OrbitQuantity.POS_Z, 0.0, CrossingDirection.INCREASING)


def stop_at_descending_node(subject: Any) -> StateStop:
    return StateStop(subject, OrbitQuantity.POS_Z, 0.0, CrossingDirection.DECREASING)


def stop_at_radius(subject: Any, radius_km: float) -> StateStop:
    return StateStop(subject, OrbitQuantity.POS_MAG, radius_km)


def stop_at_seconds(subject: Any, seconds: float) -> TimeStop:
    return TimeStop(subject, TimeStopKind.SECONDS, seconds)


def stop_at_days(subject: Any, days: float) -> TimeStop:
    return TimeStop(subject, TimeStopKind.DAYS, days)


# --- Validation and direction resolution ---

def _direction_of(elapsed_s: float) -> PropagationDirection:
    return PropagationDirection.ADVANCING if elapsed_s > 0 else PropagationDirection.RETREATING


def resolve_direction(
    requested: Any,
    elapsed_s: Optional[float] = None,
) -> PropagationDirection:
    """Resolve INFER and check an explicit direction against a duration.

    Args:
        requested: ADVANCING, RETREATING or INFER.
        elapsed_s: Signed duration of the time-based stop, if there is one.

    Returns:
        ADVANCING or RETREATING.
    """
    requested = as_propagation_direction(requested)
    if elapsed_s is None:
        if requested is PropagationDirection.INFER:
            return PropagationDirection.ADVANCING
        return requested

    inferred = _direction_of(elapsed_s)
    if requested is PropagationDirection.INFER:
        return inferred
    if requested is not inferred:
        raise ConfigurationError(
            f"Duration is {elapsed_s} s ({inferred.value}) but requested direction is "
            f"{requested.value}; flip the sign of the duration or use direction=INFER"
        )
    return requested


@dataclass(frozen=True)
class StopPlan:
    """Validated stopping conditions for one propagation call."""
    state_stops: tuple[StateStop, ...]
    time_stop: Optional[TimeStop]
    direction: PropagationDirection
    elapsed_s: Optional[float]


def plan_stops(
    stops: Sequence[Any],
    subjects: Sequence[Any],
    scale: TimeScale,
    direction: Any = PropagationDirection.ADVANCING,
) -> StopPlan:
    """Validate ``stops`` against ``subjects`` and resolve the direction.

    Raises:
        ConfigurationError: for no conditions, an unknown condition type, a
            condition on a subject that is not propagated, more than one
            time-based condition, or a direction contradiction.
    """
    if not stops:
        raise ConfigurationError("At least one stopping condition is required")

    state_stops: list[StateStop] = []
    time_stops: list[TimeStop] = []
    for stop in stops:
        if isinstance(stop, StateStop):
            state_stops.append(stop)
        elif isinstance(stop, TimeStop):
            time_stops.append(stop)
        else:
            raise ConfigurationError(
                f"{stop!r} is not a stopping condition; build one with make_stop()"
            )
        if not any(stop.subject is s for s in subjects):
            raise ConfigurationError(
                f"{stop!r} refers to a subject that is not being propagated"
            )

    if len(time_stops) > 1:
        kinds = ", ".join(ts.kind.value for ts in time_stops)
        raise ConfigurationError(
            f"Multiple time-based stopping conditions are not allowed; found "
            f"{len(time_stops)} ({kinds})"
        )

    time_stop = time_stops[0] if time_stops else None
    elapsed = time_stop.elapsed_seconds(scale) if time_stop is not None else None
    resolved = resolve_direction(direction, elapsed)

    return StopPlan(
        state_stops=tuple(state_stops),
        time_stop=time_stop,
        direction=resolved,
        elapsed_s=elapsed,
    )


def is_satisfied(stop: StopCondition, tolerance: float = 1e-6) -> bool:
    """Whether the subject currently sits on the stop's target.

    For state-based stops the quantity is re-evaluated on the subject.
    For epoch stops the subject's epoch is compared (TDB seconds). Duration
    stops carry no absolute reference and cannot be checked after the fact.
    """
    if isinstance(stop, StateStop):
        value = evaluate_quantity(stop.subject, stop.quantity)
        return abs(stop.residual(value)) <= tolerance
    if isinstance(stop, TimeStop) and stop.kind is TimeStopKind.EPOCH:
        return abs(stop.subject.get_epoch() - stop.value) <= tolerance
    raise ConfigurationError(
        f"{stop!r} has no absolute reference; only state-based and epoch stops can be checked"
    )
