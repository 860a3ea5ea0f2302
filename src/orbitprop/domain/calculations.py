# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Calculated orbit quantities.

Scalar quantities of a subject's state that a stopping condition can
monitor. Cartesian quantities are read straight off the state; Keplerian
ones go through ``cartesian_to_keplerian`` about the subject's centre.
"""
from enum import Enum
from typing import Any

import numpy as np

from orbitprop.domain.errors import ConfigurationError
from orbitprop.domain.orbital_mechanics import cartesian_to_keplerian


class OrbitQuantity(Enum):
    """Selector of a calculated orbit quantity."""
    POS_MAG = "pos_mag"
    POS_X = "pos_x"
    POS_Y = "pos_y"
    POS_Z = "pos_z"
    VEL_MAG = "vel_mag"
    POS_DOT_VEL = "pos_dot_vel"
    SMA = "sma"
    ECC = "ecc"
    INC = "inc"
    RAAN = "raan"
    ARG_PERIAPSIS = "arg_periapsis"
    TRUE_ANOMALY = "true_anomaly"


_KEPLERIAN = {
    OrbitQuantity.SMA: "sma",
    OrbitQuantity.ECC: "ecc",
    OrbitQuantity.INC: "inc",
    OrbitQuantity.RAAN: "raan",
    OrbitQuantity.ARG_PERIAPSIS: "arg_periapsis",
    OrbitQuantity.TRUE_ANOMALY: "true_anomaly",
}


def check_quantity(quantity: Any) -> OrbitQuantity:
    """Return ``quantity`` if it is a recognized selector, else raise."""
    if not isinstance(quantity, OrbitQuantity):
        raise ConfigurationError(
            f"Unrecognized calculated quantity {quantity!r}; expected an OrbitQuantity "
            f"member ({', '.join(q.name for q in OrbitQuantity)})"
        )
    return quantity


def quantity_from_state(quantity: OrbitQuantity, state: np.ndarray, mu: float) -> float:
    """Evaluate ``quantity`` for a 6-component state about a body with ``mu``."""
    pos = state[:3]
    vel = state[3:6]
    if quantity is OrbitQuantity.POS_MAG:
        return float(np.linalg.norm(pos))
    if quantity is OrbitQuantity.POS_X:
        return float(pos[0])
    if quantity is OrbitQuantity.POS_Y:
        return float(pos[1])
    if quantity is OrbitQuantity.POS_Z:
        return float(pos[2])
    if quantity is OrbitQuantity.VEL_MAG:
        return float(np.linalg.norm(vel))
    if quantity is OrbitQuantity.POS_DOT_VEL:
        return float(np.dot(pos, vel))
    elements = cartesian_to_keplerian(pos, vel, mu)
    return float(getattr(elements, _KEPLERIAN[check_quantity(quantity)]))


def evaluate_quantity(subject: Any, quantity: OrbitQuantity) -> float:
    """Evaluate ``quantity`` on a subject's current state."""
    check_quantity(quantity)
    return quantity_from_state(quantity, subject.get_state(), subject.center.mu)
