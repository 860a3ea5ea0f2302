# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for propagated subjects.

The propagator reads and writes a subject only through this capability
set. It treats the subject as exclusively owned for the duration of a
call; concurrent calls sharing a subject must be serialized by the caller.
"""
from typing import Any, Protocol, runtime_checkable

import numpy as np

from orbitprop.domain.time_systems import AstroTime


@runtime_checkable
class PropagationSubject(Protocol):
    """Port for a body with a mutable kinematic state and epoch."""

    center: Any
    """CelestialBody the state is referenced to."""

    def get_state(self) -> np.ndarray:
        """Current 6-component position/velocity vector (km, km/s)."""
        ...

    def set_state(self, state: np.ndarray) -> None:
        """Replace the position/velocity vector."""
        ...

    def get_epoch(self) -> AstroTime:
        """Current epoch."""
        ...

    def set_epoch(self, epoch: AstroTime) -> None:
        """Replace the epoch."""
        ...

    def append_segment(self, segment: Any) -> None:
        """Append a trajectory history segment."""
        ...
