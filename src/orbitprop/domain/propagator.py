# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Propagation driver.

Runs one propagation call through four phases:

1. Validating: subjects, force model and stopping conditions are checked
   and the propagation direction is resolved. Nothing is mutated.
2. Configuring: the body registry, initial combined state, dynamical
   time scale, solver span and event callbacks are built.
3. Integrating: a single solver call.
4. Finalizing: every subject's final state, epoch and history segment
   are computed first, then written back together.

Any error before Finalizing leaves every subject untouched.
"""
import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

import numpy as np

from orbitprop.domain.body_registry import (
    BodyRegistry,
    build_registry,
    make_dynamics,
    pack_state,
)
from orbitprop.domain.celestial_bodies import EARTH, CelestialBody
from orbitprop.domain.errors import (
    ConfigurationError,
    IntegrationError,
    NonConvergenceError,
    PropagationError,
)
from orbitprop.domain.events import build_callback_set
from orbitprop.domain.force_model import ForceModel
from orbitprop.domain.ode_solver import SolverResult, SolverStatus, solve, solver_class
from orbitprop.domain.spacecraft import HistorySegment
from orbitprop.domain.stop_conditions import (
    PropagationDirection,
    StateStop,
    plan_stops,
)
from orbitprop.domain.time_systems import AstroTime, TimeScale

logger = logging.getLogger(__name__)


# --- Configuration ---

@dataclass(frozen=True)
class IntegratorConfig:
    """Solver settings passed through to the Runge-Kutta stepper.

    ``max_duration_s`` bounds the span used when only state-based stops
    are given; reaching it is a non-convergence, not a completion.
    ``max_steps`` caps the accepted solver steps of one call.
    """
    method: str = "DOP853"
    rtol: float = 1e-9
    atol: float = 1e-9
    h_init: Optional[float] = None
    h_max: float = math.inf
    max_duration_s: float = 1e12
    max_steps: int = 100_000

    def __post_init__(self) -> None:
        solver_class(self.method)
        if not (self.rtol > 0 and self.atol > 0):
            raise ConfigurationError(
                f"Tolerances must be positive, got rtol={self.rtol}, atol={self.atol}"
            )
        if self.h_init is not None and not self.h_init > 0:
            raise ConfigurationError(f"h_init must be positive, got {self.h_init}")
        if not self.h_max > 0:
            raise ConfigurationError(f"h_max must be positive, got {self.h_max}")
        if not (self.max_duration_s > 0 and math.isfinite(self.max_duration_s)):
            raise ConfigurationError(
                f"max_duration_s must be positive and finite, got {self.max_duration_s}"
            )
        if (not isinstance(self.max_steps, numbers.Integral) or isinstance(self.max_steps, bool)
                or self.max_steps < 1):
            raise ConfigurationError(f"max_steps must be a positive integer, got {self.max_steps!r}")


DEFAULT_CONFIG = IntegratorConfig()


# --- Result ---

class PropagationStatus(Enum):
    COMPLETED = "completed"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of a propagation call.

    ``times`` are elapsed seconds in ``time_scale`` from the start;
    ``states`` holds the combined state at each sample, one row per time.
    """
    times: np.ndarray
    states: np.ndarray
    status: PropagationStatus
    direction: PropagationDirection
    time_scale: TimeScale
    triggered: tuple[StateStop, ...]
    solution: SolverResult

    @property
    def elapsed_s(self) -> float:
        return float(self.times[-1])

    @property
    def final_state(self) -> np.ndarray:
        return self.states[-1]


def dynamical_time_scale(center: Optional[CelestialBody]) -> TimeScale:
    """TT for Earth-centred dynamics, TDB for every other (or no) centre."""
    if center is not None and center == EARTH:
        return TimeScale.TT
    return TimeScale.TDB


def _as_subjects(subjects: Any) -> tuple[Any, ...]:
    if isinstance(subjects, (list, tuple)):
        return tuple(subjects)
    return (subjects,)


# --- Driver ---

def _finalize(
    registry: BodyRegistry,
    anchors: Sequence[float],
    scale: TimeScale,
    solution: SolverResult,
    metadata: dict[str, Any],
) -> None:
    updates = []
    for subject, block, anchor in zip(registry.subjects, registry.slices, anchors):
        start = subject.get_epoch()
        # Zero elapsed time keeps the start epoch exactly.
        times = tuple(
            start if t == 0.0 else AstroTime.from_seconds(scale, anchor + t)
            for t in solution.t
        )
        segment = HistorySegment(
            times=times,
            states=solution.y[:, block],
            name="propagate",
            metadata=dict(metadata),
        )
        updates.append((subject, solution.y_final[block].copy(), times[-1], segment))

    for subject, state, epoch, segment in updates:
        subject.set_state(state)
        subject.set_epoch(epoch)
        subject.append_segment(segment)


def propagate(
    force_model: ForceModel,
    subjects: Any,
    *stops: Any,
    direction: Any = PropagationDirection.ADVANCING,
    config: Optional[IntegratorConfig] = None,
) -> PropagationResult:
    """Propagate one subject or a sequence of subjects until a stop.

    Args:
        force_model: Forces applied to every subject.
        subjects: A subject, or a list/tuple of subjects integrated jointly.
        *stops: Stopping conditions from ``make_stop``; at most one time-based.
        direction: ADVANCING (default), RETREATING or INFER.
        config: Solver settings; defaults to ``IntegratorConfig()``.

    Returns:
        PropagationResult with the raw solver output. Subjects are updated
        in place and gain one history segment each.

    Raises:
        ConfigurationError: before any integration, for invalid input.
        SingularityError, IntegrationError: on numerical failure.
        NonConvergenceError: if no state-based stop fires within
            ``config.max_duration_s`` or ``config.max_steps``.
        IntegrationError: also when ``config.max_steps`` runs out before
            the span of a time-based stop.
    """
    config = DEFAULT_CONFIG if config is None else config

    # Validating
    if not isinstance(force_model, ForceModel):
        raise ConfigurationError(f"Expected a ForceModel, got {type(force_model).__name__}")
    if not isinstance(config, IntegratorConfig):
        raise ConfigurationError(f"Expected an IntegratorConfig, got {type(config).__name__}")
    registry = build_registry(_as_subjects(subjects))
    scale = dynamical_time_scale(force_model.center)
    plan = plan_stops(stops, registry.subjects, scale, direction)

    # Configuring
    y0 = pack_state(registry)
    anchors = tuple(s.get_epoch().seconds_in(scale) for s in registry.subjects)
    dynamics = make_dynamics(force_model, registry, anchors, scale)
    callbacks = build_callback_set(plan.state_stops, registry, plan.direction)
    if plan.time_stop is not None:
        t_bound = plan.elapsed_s
    else:
        t_bound = plan.direction.sign * config.max_duration_s

    logger.debug(
        "Propagating %d subject(s): direction=%s scale=%s span=[0, %.6g] s callbacks=%d",
        len(registry.subjects), plan.direction.value, scale.name, t_bound, len(callbacks),
    )

    # Integrating
    try:
        solution = solve(
            dynamics, y0, t_bound, callbacks,
            method=config.method,
            rtol=config.rtol,
            atol=config.atol,
            first_step=config.h_init,
            max_step=config.h_max,
            max_steps=int(config.max_steps),
        )
    except PropagationError as exc:
        logger.warning("Propagation aborted, subjects left unchanged: %s", exc)
        raise

    logger.debug(
        "Solver finished: status=%s samples=%d steps=%d nfev=%d",
        solution.status.value, len(solution.t), solution.n_steps, solution.nfev,
    )

    if solution.status is SolverStatus.STEP_LIMIT:
        reached = (f"stopped after {solution.n_steps} steps at elapsed time "
                   f"{solution.t_final:.6g} s ({plan.direction.value})")
        logger.warning("Propagation aborted, subjects left unchanged: %s", reached)
        if plan.time_stop is None:
            raise NonConvergenceError(
                f"No stopping condition triggered within {config.max_steps} steps; {reached}; "
                f"stops: {', '.join(repr(s) for s in plan.state_stops)}"
            )
        raise IntegrationError(
            f"Step limit of {config.max_steps} exhausted before the {plan.elapsed_s} s span; {reached}"
        )

    if solution.status is SolverStatus.REACHED_END and plan.time_stop is None:
        logger.warning("No stopping condition triggered within %.6g s", config.max_duration_s)
        raise NonConvergenceError(
            f"No stopping condition triggered within {config.max_duration_s} s "
            f"({plan.direction.value}); stops: {', '.join(repr(s) for s in plan.state_stops)}"
        )

    if solution.fired is not None:
        status = PropagationStatus.TERMINATED
        triggered: tuple[StateStop, ...] = (plan.state_stops[solution.fired],)
    else:
        status = PropagationStatus.COMPLETED
        triggered = ()

    # Finalizing
    metadata = {
        "direction": plan.direction.value,
        "time_scale": scale.name,
        "status": status.value,
        "forces": force_model.names,
        "elapsed_s": solution.t_final,
    }
    _finalize(registry, anchors, scale, solution, metadata)

    return PropagationResult(
        times=solution.t,
        states=solution.y,
        status=status,
        direction=plan.direction,
        time_scale=scale,
        triggered=triggered,
        solution=solution,
    )


class OrbitPropagator:
    """Force model bundled with integrator settings."""

    def __init__(
        self,
        forces: ForceModel,
        integrator: Optional[IntegratorConfig] = None,
    ) -> None:
        if not isinstance(forces, ForceModel):
            raise ConfigurationError(f"Expected a ForceModel, got {type(forces).__name__}")
        self._forces = forces
        self._integrator = DEFAULT_CONFIG if integrator is None else integrator

    @property
    def forces(self) -> ForceModel:
        return self._forces

    @property
    def integrator(self) -> IntegratorConfig:
        return self._integrator

    @property
    def time_scale(self) -> TimeScale:
        return dynamical_time_scale(self._forces.center)

    def propagate(
        self,
        subjects: Any,
        *stops: Any,
        direction: Any = PropagationDirection.ADVANCING,
    ) -> PropagationResult:
        return propagate(
            self._forces, subjects, *stops,
            direction=direction, config=self._integrator,
        )

    def __repr__(self) -> str:
        return f"OrbitPropagator({self._forces!r}, {self._integrator.method})"
