# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Body registry and dynamics function.

The registry is an arena built fresh for one propagation call: subject i
owns the contiguous slice [6i, 6i + 6) of the combined state vector.
It is never cached or shared between calls.
"""
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import numpy as np

from orbitprop.domain.errors import ConfigurationError, IntegrationError
from orbitprop.domain.force_model import ForceModel, evaluate
from orbitprop.domain.time_systems import AstroTime, TimeScale
from orbitprop.ports.subject import PropagationSubject

STATE_SIZE = 6


@dataclass(frozen=True)
class BodyRegistry:
    """Subjects in propagation order and their combined-state slices."""
    subjects: tuple[Any, ...]
    slices: tuple[slice, ...]

    @property
    def size(self) -> int:
        return STATE_SIZE * len(self.subjects)

    def index_of(self, subject: Any) -> int:
        """Position of ``subject`` (by identity) in the registry."""
        for i, candidate in enumerate(self.subjects):
            if candidate is subject:
                return i
        raise ConfigurationError(f"{subject!r} is not among the propagated subjects")

    def slice_of(self, subject: Any) -> slice:
        return self.slices[self.index_of(subject)]

    def __contains__(self, subject: Any) -> bool:
        return any(candidate is subject for candidate in self.subjects)


def build_registry(subjects: Sequence[Any]) -> BodyRegistry:
    """Assign each subject a disjoint 6-element slice."""
    subjects = tuple(subjects)
    if not subjects:
        raise ConfigurationError("At least one subject is required for propagation")
    for subject in subjects:
        if not isinstance(subject, PropagationSubject):
            raise ConfigurationError(
                f"{type(subject).__name__} does not implement the PropagationSubject port"
            )
    ids = [id(s) for s in subjects]
    if len(set(ids)) != len(ids):
        raise ConfigurationError("A subject appears more than once in the propagation list")
    slices = tuple(
        slice(STATE_SIZE * i, STATE_SIZE * (i + 1)) for i in range(len(subjects))
    )
    return BodyRegistry(subjects=subjects, slices=slices)


def pack_state(registry: BodyRegistry) -> np.ndarray:
    """Concatenate every subject's current state into one vector."""
    combined = np.zeros(registry.size)
    for subject, block in zip(registry.subjects, registry.slices):
        combined[block] = subject.get_state()
    return combined


def make_dynamics(
    force_model: ForceModel,
    registry: BodyRegistry,
    anchors_s: Sequence[float],
    scale: TimeScale,
) -> Callable[[float, np.ndarray], np.ndarray]:
    """Build the solver right-hand side f(t, y).

    Args:
        force_model: Forces applied to every subject.
        registry: Subject layout of ``y``.
        anchors_s: Each subject's start epoch as seconds since J2000 in ``scale``.
        scale: Dynamical time scale; t is elapsed seconds in this scale.
    """
    anchors = tuple(float(a) for a in anchors_s)

    def dynamics(t: float, y: np.ndarray) -> np.ndarray:
        epochs = [AstroTime.from_seconds(scale, anchor + t) for anchor in anchors]
        dydt = evaluate(force_model, epochs, y, registry)
        if not np.all(np.isfinite(dydt)):
            raise IntegrationError(
                f"Non-finite state derivative at elapsed time {t:.6f} s: {dydt.tolist()}"
            )
        return dydt

    return dynamics
