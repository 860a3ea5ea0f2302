# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the celestial body catalogue."""
import math

import pytest

from orbitprop.domain.celestial_bodies import (
    EARTH,
    MARS,
    MOON,
    SUN,
    CelestialBody,
)
from orbitprop.domain.errors import ConfigurationError


class TestCatalogue:

    def test_earth_constants(self):
        assert EARTH.mu == 398600.4418
        assert EARTH.equatorial_radius == 6378.137
        assert EARTH.naif_id == 399
        assert EARTH.j2 == pytest.approx(1.08263e-3)

    def test_moon_has_no_j2(self):
        assert MOON.j2 == 0.0

    def test_sun_dominates(self):
        assert SUN.mu > 1e5 * EARTH.mu

    def test_value_equality(self):
        assert CelestialBody("Mars", MARS.mu, MARS.equatorial_radius, 499, MARS.j2) == MARS

    def test_frozen(self):
        with pytest.raises(AttributeError):
            EARTH.mu = 1.0  # type: ignore[misc]


class TestValidation:

    @pytest.mark.parametrize("mu", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_mu_raises(self, mu):
        with pytest.raises(ConfigurationError, match="mu"):
            CelestialBody("Bad", mu, 100.0, 1)

    def test_invalid_radius_raises(self):
        with pytest.raises(ConfigurationError, match="equatorial_radius"):
            CelestialBody("Bad", 1.0, 0.0, 1)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            CelestialBody("Bad", -5.0, 100.0, 1)
