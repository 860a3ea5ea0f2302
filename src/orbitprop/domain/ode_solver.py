# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Event-aware ODE stepping on scipy's Runge-Kutta integrators.

Steps a ``scipy.integrate`` OdeSolver (DOP853, RK45 or RK23) and watches
a set of event callbacks between accepted steps. Each callback has a
zero-crossing condition g(t, y) and an action per crossing sense, in
integration order: ``up`` for g passing from negative to non-negative,
``down`` for positive to non-positive. Crossings are located on the
step's dense output with ``scipy.optimize.brentq``.

A condition that is exactly zero at the initial time counts as a crossing
at t0 in the sense of its first change, so a stop that already holds at
the start terminates with zero elapsed time.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np
from scipy.integrate import DOP853, RK23, RK45
from scipy.optimize import brentq

from orbitprop.domain.errors import ConfigurationError, IntegrationError

logger = logging.getLogger(__name__)

_METHODS = {"DOP853": DOP853, "RK45": RK45, "RK23": RK23}

_EPS = np.finfo(float).eps


class EventAction(Enum):
    IGNORE = "ignore"
    TERMINATE = "terminate"


class SolverStatus(Enum):
    REACHED_END = "reached_end"
    TERMINATED = "terminated"
    STEP_LIMIT = "step_limit"


@dataclass(frozen=True)
class EventCallback:
    """Zero-crossing condition with one action per crossing sense.

    ``max_jump`` rejects sign changes where g jumps by more than this
    within one step. Wrapped angular residuals jump by ~2π at the wrap
    point, which is not a crossing.
    """
    condition: Callable[[float, np.ndarray], float]
    up: EventAction = EventAction.TERMINATE
    down: EventAction = EventAction.TERMINATE
    max_jump: float = math.inf
    label: str = ""

    def action_for(self, sense: int) -> EventAction:
        return self.up if sense > 0 else self.down


@dataclass(frozen=True)
class SolverResult:
    """Samples and outcome of one ``solve`` call.

    ``t`` has shape (n,), ``y`` has shape (n, dim); the last row is the
    final state. ``fired`` is the index of the callback that terminated
    the run, else None.
    """
    t: np.ndarray
    y: np.ndarray
    status: SolverStatus
    fired: Optional[int] = None
    n_steps: int = 0
    nfev: int = 0
    message: str = field(default="")

    @property
    def t_final(self) -> float:
        return float(self.t[-1])

    @property
    def y_final(self) -> np.ndarray:
        return self.y[-1]


def solver_class(method: str):
    try:
        return _METHODS[method]
    except KeyError:
        raise ConfigurationError(
            f"Unknown integration method {method!r}; choose from {', '.join(_METHODS)}"
        ) from None


def _crossing_sense(g_old: float, g_new: float, from_start: bool) -> int:
    """+1 up, -1 down, 0 none, in integration order."""
    if g_old < 0.0 <= g_new:
        return 1
    if g_old > 0.0 >= g_new:
        return -1
    if from_start and g_old == 0.0 and g_new != 0.0:
        return 1 if g_new > 0.0 else -1
    return 0


def _locate_root(callback: EventCallback, sol, t_old: float, t_new: float,
                 g_old: float, g_new: float) -> float:
    if g_old == 0.0:
        return t_old
    if g_new == 0.0:
        return t_new

    def g(t: float) -> float:
        return float(callback.condition(t, sol(t)))

    # The interpolant can differ from the step endpoints by rounding.
    g_a, g_b = g(t_old), g(t_new)
    if g_a == 0.0:
        return t_old
    if g_b == 0.0 or np.sign(g_a) == np.sign(g_b):
        return t_old if abs(g_a) < abs(g_b) else t_new
    xtol = 4.0 * _EPS * max(1.0, abs(t_old), abs(t_new))
    return brentq(g, t_old, t_new, xtol=xtol, rtol=4.0 * _EPS)


def solve(
    fun: Callable[[float, np.ndarray], np.ndarray],
    y0: np.ndarray,
    t_bound: float,
    callbacks: Sequence[EventCallback] = (),
    *,
    method: str = "DOP853",
    rtol: float = 1e-9,
    atol: float = 1e-9,
    first_step: Optional[float] = None,
    max_step: float = math.inf,
    max_steps: Optional[int] = None,
) -> SolverResult:
    """Integrate dy/dt = fun(t, y) from t = 0 towards ``t_bound``.

    Stops at ``t_bound``, at the earliest crossing whose action is
    TERMINATE, or after ``max_steps`` accepted steps (status STEP_LIMIT),
    whichever comes first in integration order.

    Raises:
        IntegrationError: if the stepper fails (e.g. step size underflow).
    """
    cls = solver_class(method)
    y0 = np.asarray(y0, dtype=float)
    solver = cls(fun, 0.0, y0, t_bound, rtol=rtol, atol=atol,
                 first_step=first_step, max_step=max_step)

    g_prev = [float(cb.condition(0.0, y0)) for cb in callbacks]
    ts = [0.0]
    ys = [y0.copy()]
    n_steps = 0
    # Conditions still sitting at exactly zero since t0.
    from_start = [g == 0.0 for g in g_prev]

    while solver.status == "running":
        message = solver.step()
        if solver.status == "failed":
            logger.warning("Stepper failed at t=%.6f s: %s", solver.t, message)
            raise IntegrationError(
                f"Integration failed at elapsed time {solver.t:.6f} s: {message}"
            )
        n_steps += 1
        t_old, t_new = solver.t_old, solver.t
        y_new = solver.y
        g_new = [float(cb.condition(t_new, y_new)) for cb in callbacks]

        sol = None
        hit_t = None
        hit_index = None
        for i, cb in enumerate(callbacks):
            sense = _crossing_sense(g_prev[i], g_new[i], from_start[i])
            if sense == 0 or cb.action_for(sense) is not EventAction.TERMINATE:
                continue
            if abs(g_new[i] - g_prev[i]) > cb.max_jump:
                continue
            if sol is None:
                sol = solver.dense_output()
            t_root = _locate_root(cb, sol, t_old, t_new, g_prev[i], g_new[i])
            if hit_t is None or (t_root - hit_t) * (t_new - t_old) < 0:
                hit_t, hit_index = t_root, i

        if hit_index is not None:
            y_hit = y0.copy() if hit_t == 0.0 else np.asarray(sol(hit_t), dtype=float)
            ts.append(hit_t)
            ys.append(y_hit)
            logger.debug("Callback %d (%s) terminated at t=%.6f s",
                         hit_index, callbacks[hit_index].label, hit_t)
            return SolverResult(
                t=np.array(ts), y=np.array(ys), status=SolverStatus.TERMINATED,
                fired=hit_index, n_steps=n_steps, nfev=solver.nfev,
                message="A termination event occurred.",
            )

        ts.append(t_new)
        ys.append(y_new.copy())
        g_prev = g_new
        from_start = [z and g == 0.0 for z, g in zip(from_start, g_new)]

        if max_steps is not None and n_steps >= max_steps and solver.status == "running":
            logger.warning("Step limit of %d reached at t=%.6f s", max_steps, t_new)
            return SolverResult(
                t=np.array(ts), y=np.array(ys), status=SolverStatus.STEP_LIMIT,
                n_steps=n_steps, nfev=solver.nfev,
                message=f"Step limit of {max_steps} reached before the end of the interval.",
            )

    return SolverResult(
        t=np.array(ts), y=np.array(ys), status=SolverStatus.REACHED_END,
        n_steps=n_steps, nfev=solver.nfev,
        message="The solver successfully reached the end of the integration interval.",
    )
