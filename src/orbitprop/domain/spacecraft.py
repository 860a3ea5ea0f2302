# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Spacecraft subject and its trajectory history.

A Spacecraft carries a mutable Cartesian state, an epoch and a history
of segments. Each propagation appends one segment.
"""
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

import numpy as np

from orbitprop.domain.celestial_bodies import EARTH, CelestialBody
from orbitprop.domain.errors import ConfigurationError
from orbitprop.domain.time_systems import AstroTime


def as_state_vector(state: Sequence[float]) -> np.ndarray:
    """Validate and copy a 6-component position/velocity vector."""
    vec = np.array(state, dtype=np.float64).reshape(-1)
    if vec.shape != (6,):
        raise ConfigurationError(f"state must have 6 components, got {vec.shape[0]}")
    if not np.all(np.isfinite(vec)):
        raise ConfigurationError(f"state must be finite, got {vec.tolist()}")
    return vec


@dataclass(frozen=True, eq=False)
class HistorySegment:
    """Continuous, time-ordered piece of a trajectory."""
    times: tuple[AstroTime, ...]
    states: np.ndarray
    name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        states = np.array(self.states, dtype=np.float64).reshape(-1, 6)
        if len(self.times) != states.shape[0]:
            raise ValueError(
                f"times and states must have equal length, got "
                f"{len(self.times)} and {states.shape[0]}"
            )
        object.__setattr__(self, "times", tuple(self.times))
        object.__setattr__(self, "states", states)

    def __len__(self) -> int:
        return len(self.times)

    def __bool__(self) -> bool:
        return True


class SpacecraftHistory:
    """Ordered collection of history segments."""

    def __init__(self) -> None:
        self._segments: list[HistorySegment] = []

    def append_segment(self, segment: HistorySegment) -> None:
        self._segments.append(segment)

    @property
    def segments(self) -> tuple[HistorySegment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[HistorySegment]:
        return iter(self._segments)

    def all_times(self) -> tuple[AstroTime, ...]:
        """Concatenated sample times of every segment."""
        return tuple(t for seg in self._segments for t in seg.times)

    def all_states(self) -> np.ndarray:
        """Concatenated states of every segment as an (n, 6) array."""
        if not self._segments:
            return np.empty((0, 6))
        return np.vstack([seg.states for seg in self._segments])


@dataclass(eq=False)
class Spacecraft:
    """Propagated point-mass subject.

    Implements the PropagationSubject port. Identity, not value, defines
    which spacecraft a stopping condition refers to.
    """
    state: np.ndarray
    epoch: AstroTime
    name: str = "unnamed"
    mass: float = 1000.0
    center: CelestialBody = EARTH
    history: SpacecraftHistory = field(default_factory=SpacecraftHistory)

    def __post_init__(self) -> None:
        self.state = as_state_vector(self.state)

    @property
    def position(self) -> np.ndarray:
        return self.state[:3].copy()

    @property
    def velocity(self) -> np.ndarray:
        return self.state[3:].copy()

    def get_state(self) -> np.ndarray:
        return self.state.copy()

    def set_state(self, state: Sequence[float]) -> None:
        self.state = as_state_vector(state)

    def get_epoch(self) -> AstroTime:
        return self.epoch

    def set_epoch(self, epoch: AstroTime) -> None:
        self.epoch = epoch

    def append_segment(self, segment: HistorySegment) -> None:
        self.history.append_segment(segment)

    def __repr__(self) -> str:
        return f"Spacecraft(name={self.name!r}, epoch={self.epoch!r})"
