# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Translate state-based stops into solver event callbacks.

The condition of each callback is the stop's residual, evaluated from the
subject's slice of the combined state; subjects are never touched while
the solver runs. Crossing directions are stated against advancing epoch,
so for retreating integration the up and down actions swap.
"""
import math
from typing import Sequence

import numpy as np

from orbitprop.domain.body_registry import BodyRegistry
from orbitprop.domain.calculations import quantity_from_state
from orbitprop.domain.ode_solver import EventAction, EventCallback
from orbitprop.domain.stop_conditions import (
    CrossingDirection,
    PropagationDirection,
    StateStop,
)


def _actions(direction: CrossingDirection, time_sign: float) -> tuple[EventAction, EventAction]:
    if direction is CrossingDirection.EITHER:
        return EventAction.TERMINATE, EventAction.TERMINATE
    increasing_in_solver = (direction is CrossingDirection.INCREASING) == (time_sign > 0)
    if increasing_in_solver:
        return EventAction.TERMINATE, EventAction.IGNORE
    return EventAction.IGNORE, EventAction.TERMINATE


def build_callback(
    stop: StateStop,
    registry: BodyRegistry,
    direction: PropagationDirection,
) -> EventCallback:
    """Event callback for one state-based stop."""
    block = registry.slice_of(stop.subject)
    mu = stop.subject.center.mu
    quantity = stop.quantity
    residual = stop.residual

    def condition(t: float, y: np.ndarray) -> float:
        return residual(quantity_from_state(quantity, y[block], mu))

    up, down = _actions(stop.direction, direction.sign)
    return EventCallback(
        condition=condition,
        up=up,
        down=down,
        max_jump=math.pi if stop.is_angular else math.inf,
        label=repr(stop),
    )


def build_callback_set(
    stops: Sequence[StateStop],
    registry: BodyRegistry,
    direction: PropagationDirection,
) -> tuple[EventCallback, ...]:
    """One callback per stop, in the order given."""
    return tuple(build_callback(stop, registry, direction) for stop in stops)
