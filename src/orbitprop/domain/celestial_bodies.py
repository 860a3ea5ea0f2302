# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Celestial body catalogue.

Gravitational parameters in km³/s², radii in km. NAIF IDs identify
bodies to the ephemeris layer.
"""
import math
from dataclasses import dataclass

from orbitprop.domain.errors import ConfigurationError


@dataclass(frozen=True)
class CelestialBody:
    """Point-mass body with optional J2 zonal coefficient."""
    name: str
    mu: float                  # km³/s²
    equatorial_radius: float   # km
    naif_id: int
    j2: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.mu) or self.mu <= 0:
            raise ConfigurationError(
                f"CelestialBody {self.name!r}: mu must be finite and > 0, got {self.mu}"
            )
        if not math.isfinite(self.equatorial_radius) or self.equatorial_radius <= 0:
            raise ConfigurationError(
                f"CelestialBody {self.name!r}: equatorial_radius must be finite "
                f"and > 0, got {self.equatorial_radius}"
            )


SUN = CelestialBody("Sun", 1.32712440018e11, 696342.0, 10)
MERCURY = CelestialBody("Mercury", 22032.0, 2439.7, 199)
VENUS = CelestialBody("Venus", 324858.592, 6051.8, 299)
EARTH = CelestialBody("Earth", 398600.4418, 6378.137, 399, j2=1.08263e-3)
MOON = CelestialBody("Moon", 4902.8, 1737.4, 301)
MARS = CelestialBody("Mars", 42828.375214, 3396.2, 499, j2=1.96045e-3)
JUPITER = CelestialBody("Jupiter", 126686534.0, 71492.0, 599)
SATURN = CelestialBody("Saturn", 37931187.0, 60268.0, 699)
URANUS = CelestialBody("Uranus", 5793959.0, 25559.0, 799)
NEPTUNE = CelestialBody("Neptune", 6836529.0, 24764.0, 899)
PLUTO = CelestialBody("Pluto", 870.3, 1188.3, 999)
