# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for body ephemerides.

Point-mass gravity needs the position of each perturbing body relative
to the central body. Adapters supply it from an analytical theory, a
kernel file, or a test fixture.
"""
from typing import Protocol, runtime_checkable

import numpy as np

from orbitprop.domain.celestial_bodies import CelestialBody
from orbitprop.domain.time_systems import AstroTime


@runtime_checkable
class Ephemeris(Protocol):
    """Port for relative body positions."""

    def supports(self, body: CelestialBody) -> bool:
        """Whether positions of ``body`` are available."""
        ...

    def relative_position(
        self,
        origin: CelestialBody,
        target: CelestialBody,
        epoch: AstroTime,
    ) -> np.ndarray:
        """Vector from ``origin`` to ``target`` in km (equatorial J2000 axes)."""
        ...
