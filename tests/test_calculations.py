# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for calculated orbit quantities."""
import math

import numpy as np
import pytest

from orbitprop.domain.calculations import (
    OrbitQuantity,
    check_quantity,
    evaluate_quantity,
    quantity_from_state,
)
from orbitprop.domain.celestial_bodies import EARTH
from orbitprop.domain.errors import ConfigurationError
from orbitprop.domain.orbital_mechanics import kepler_to_cartesian
from orbitprop.domain.spacecraft import Spacecraft
from orbitprop.domain.time_systems import AstroTime

MU = EARTH.mu


# ── Helpers ──────────────────────────────────────────────────────────

def _state(a=8000.0, e=0.1, i=0.5, raan=1.0, argp=2.0, nu=0.7):
    pos, vel = kepler_to_cartesian(a, e, i, raan, argp, nu, MU)
    return np.concatenate([pos, vel])


class TestCartesianQuantities:

    def test_components(self):
        state = np.array([1.0, -2.0, 3.0, 4.0, 5.0, -6.0])
        assert quantity_from_state(OrbitQuantity.POS_X, state, MU) == 1.0
        assert quantity_from_state(OrbitQuantity.POS_Y, state, MU) == -2.0
        assert quantity_from_state(OrbitQuantity.POS_Z, state, MU) == 3.0

    def test_magnitudes_and_radial(self):
        state = np.array([3.0, 4.0, 0.0, 1.0, 0.0, 0.0])
        assert quantity_from_state(OrbitQuantity.POS_MAG, state, MU) == 5.0
        assert quantity_from_state(OrbitQuantity.VEL_MAG, state, MU) == 1.0
        assert quantity_from_state(OrbitQuantity.POS_DOT_VEL, state, MU) == 3.0

    def test_reads_only_first_six_components(self):
        state = np.array([7000.0, 0.0, 0.0, 0.0, 7.5, 0.0])
        assert quantity_from_state(OrbitQuantity.POS_MAG, state[:6], MU) == 7000.0


class TestKeplerianQuantities:

    @pytest.mark.parametrize("quantity, expected", [
        (OrbitQuantity.SMA, 8000.0),
        (OrbitQuantity.ECC, 0.1),
        (OrbitQuantity.INC, 0.5),
        (OrbitQuantity.RAAN, 1.0),
        (OrbitQuantity.ARG_PERIAPSIS, 2.0),
        (OrbitQuantity.TRUE_ANOMALY, 0.7),
    ])
    def test_elements(self, quantity, expected):
        assert quantity_from_state(quantity, _state(), MU) == pytest.approx(expected, abs=1e-8)

    def test_periapsis_has_zero_radial_velocity(self):
        value = quantity_from_state(OrbitQuantity.POS_DOT_VEL, _state(nu=0.0), MU)
        assert abs(value) < 1e-8


class TestEvaluateOnSubject:

    def test_uses_subject_center(self):
        sc = Spacecraft(_state(), AstroTime(tdb_j2000=0.0))
        assert evaluate_quantity(sc, OrbitQuantity.SMA) == pytest.approx(8000.0, rel=1e-10)

    def test_unknown_quantity_raises(self):
        sc = Spacecraft(_state(), AstroTime(tdb_j2000=0.0))
        with pytest.raises(ConfigurationError, match="Unrecognized calculated quantity"):
            evaluate_quantity(sc, "pos_mag")

    def test_check_quantity_passthrough(self):
        assert check_quantity(OrbitQuantity.INC) is OrbitQuantity.INC

    def test_angles_wrap_into_range(self):
        value = quantity_from_state(OrbitQuantity.TRUE_ANOMALY, _state(nu=-0.2), MU)
        assert value == pytest.approx(2.0 * math.pi - 0.2, abs=1e-8)
