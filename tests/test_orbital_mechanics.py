# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for Keplerian/Cartesian conversions."""
import ast
import math

import numpy as np
import pytest

from orbitprop.domain.celestial_bodies import EARTH
from orbitprop.domain.orbital_mechanics import (
    KeplerianElements,
    cartesian_to_keplerian,
    kepler_to_cartesian,
)

MU = EARTH.mu


class TestKeplerToCartesian:

    def test_circular_equatorial_at_zero_anomaly(self):
        pos, vel = kepler_to_cartesian(7000.0, 0.0, 0.0, 0.0, 0.0, 0.0, MU)
        np.testing.assert_allclose(pos, [7000.0, 0.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(vel, [0.0, math.sqrt(MU / 7000.0), 0.0], atol=1e-12)

    def test_periapsis_radius(self):
        pos, _ = kepler_to_cartesian(8000.0, 0.1, 0.4, 0.2, 0.3, 0.0, MU)
        assert np.linalg.norm(pos) == pytest.approx(7200.0, rel=1e-12)

    def test_vis_viva(self):
        a = 9000.0
        pos, vel = kepler_to_cartesian(a, 0.2, 1.0, 0.5, 0.7, 2.1, MU)
        r = np.linalg.norm(pos)
        v = np.linalg.norm(vel)
        assert v * v == pytest.approx(MU * (2.0 / r - 1.0 / a), rel=1e-12)


class TestCartesianToKeplerian:

    def test_roundtrip_general_orbit(self):
        pos, vel = kepler_to_cartesian(8000.0, 0.1, 0.5, 1.0, 2.0, 0.7, MU)
        el = cartesian_to_keplerian(pos, vel, MU)
        assert el.sma == pytest.approx(8000.0, rel=1e-10)
        assert el.ecc == pytest.approx(0.1, abs=1e-10)
        assert el.inc == pytest.approx(0.5, abs=1e-10)
        assert el.raan == pytest.approx(1.0, abs=1e-10)
        assert el.arg_periapsis == pytest.approx(2.0, abs=1e-9)
        assert el.true_anomaly == pytest.approx(0.7, abs=1e-9)

    def test_angles_in_zero_two_pi(self):
        pos, vel = kepler_to_cartesian(8000.0, 0.1, 0.5, 5.5, 4.0, 6.0, MU)
        el = cartesian_to_keplerian(pos, vel, MU)
        for angle in (el.raan, el.arg_periapsis, el.true_anomaly):
            assert 0.0 <= angle < 2.0 * math.pi
        assert el.true_anomaly == pytest.approx(6.0, abs=1e-9)

    def test_circular_inclined_measures_from_node(self):
        pos, vel = kepler_to_cartesian(7000.0, 0.0, 0.9, 0.3, 0.0, 1.2, MU)
        el = cartesian_to_keplerian(pos, vel, MU)
        assert el.arg_periapsis == 0.0
        assert el.true_anomaly == pytest.approx(1.2, abs=1e-9)

    def test_circular_equatorial_measures_from_x_axis(self):
        pos, vel = kepler_to_cartesian(7000.0, 0.0, 0.0, 0.0, 0.0, 0.8, MU)
        el = cartesian_to_keplerian(pos, vel, MU)
        assert el.raan == 0.0
        assert el.true_anomaly == pytest.approx(0.8, abs=1e-9)

    def test_hyperbolic_has_negative_sma(self):
        pos, vel = kepler_to_cartesian(-10000.0, 1.5, 0.2, 0.0, 0.0, 0.3, MU)
        el = cartesian_to_keplerian(pos, vel, MU)
        assert el.sma == pytest.approx(-10000.0, rel=1e-9)
        assert el.ecc == pytest.approx(1.5, rel=1e-9)

    def test_elements_frozen(self):
        el = KeplerianElements(7000.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        with pytest.raises(AttributeError):
            el.sma = 1.0  # type: ignore[misc]


# ── Domain purity ────────────────────────────────────────────────────

class TestOrbitalMechanicsPurity:

    def test_orbital_mechanics_imports_only_stdlib_and_numpy(self):
        import orbitprop.domain.orbital_mechanics as mod

        allowed = {"math", "dataclasses", "numpy"}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    assert alias.name.split(".")[0] in allowed, f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    assert node.module.split(".")[0] in allowed, f"Disallowed import from '{node.module}'"
