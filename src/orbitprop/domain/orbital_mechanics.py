# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Keplerian element conversions.

Elements ↔ inertial Cartesian state about a body with gravitational
parameter mu (km³/s²). Distances in km, angles in radians.
"""
import math
from dataclasses import dataclass

import numpy as np

# Eccentricity or node-vector ratio below this counts as zero.
_DEGENERACY_TOL = 1e-11
_TWO_PI = 2.0 * math.pi
_Z_AXIS = np.array([0.0, 0.0, 1.0])


@dataclass(frozen=True)
class KeplerianElements:
    """Classical orbital elements (km, radians)."""
    sma: float
    ecc: float
    inc: float
    raan: float
    arg_periapsis: float
    true_anomaly: float


def _rot_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def _rot_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def kepler_to_cartesian(
    a: float,
    e: float,
    inc: float,
    raan: float,
    argp: float,
    nu: float,
    mu: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Inertial position (km) and velocity (km/s) from classical elements.

    Args:
        a: Semi-major axis (km), negative for hyperbolic orbits.
        e: Eccentricity.
        inc: Inclination.
        raan: Right ascension of the ascending node.
        argp: Argument of periapsis.
        nu: True anomaly.
        mu: Gravitational parameter (km³/s²).
    """
    semi_latus = a * (1.0 - e * e)
    radius = semi_latus / (1.0 + e * math.cos(nu))
    speed_scale = math.sqrt(mu / semi_latus)

    # Perifocal frame: x towards periapsis, z along angular momentum.
    r_pf = radius * np.array([math.cos(nu), math.sin(nu), 0.0])
    v_pf = speed_scale * np.array([-math.sin(nu), e + math.cos(nu), 0.0])

    to_inertial = _rot_z(raan) @ _rot_x(inc) @ _rot_z(argp)
    return to_inertial @ r_pf, to_inertial @ v_pf


def _signed_angle(from_vec: np.ndarray, to_vec: np.ndarray, axis: np.ndarray) -> float:
    """Angle from ``from_vec`` to ``to_vec`` measured about unit ``axis``, in [0, 2π)."""
    sin_part = float(np.dot(axis, np.cross(from_vec, to_vec)))
    cos_part = float(np.dot(from_vec, to_vec))
    return math.atan2(sin_part, cos_part) % _TWO_PI


def cartesian_to_keplerian(
    position: np.ndarray,
    velocity: np.ndarray,
    mu: float,
) -> KeplerianElements:
    """
    Classical elements of an inertial state.

    Degenerate geometries: RAAN is zero for equatorial orbits and the
    argument of periapsis is zero for circular ones. The true anomaly of
    a circular orbit is measured from the ascending node, or from the
    x-axis when the orbit is also equatorial.
    """
    r_vec = np.asarray(position, dtype=np.float64)
    v_vec = np.asarray(velocity, dtype=np.float64)
    r = float(np.linalg.norm(r_vec))
    v2 = float(np.dot(v_vec, v_vec))

    h_vec = np.cross(r_vec, v_vec)
    h = float(np.linalg.norm(h_vec))
    h_hat = h_vec / h
    node_vec = np.cross(_Z_AXIS, h_vec)
    e_vec = np.cross(v_vec, h_vec) / mu - r_vec / r
    ecc = float(np.linalg.norm(e_vec))

    energy = 0.5 * v2 - mu / r
    sma = -mu / (2.0 * energy) if energy != 0.0 else math.inf
    inc = math.acos(max(-1.0, min(1.0, float(h_hat[2]))))

    equatorial = float(np.linalg.norm(node_vec)) / h < _DEGENERACY_TOL
    circular = ecc < _DEGENERACY_TOL

    if equatorial:
        raan = 0.0
        # Reference direction is +x, measured in the sense of motion.
        reference = np.array([1.0, 0.0, 0.0])
    else:
        raan = math.atan2(node_vec[1], node_vec[0]) % _TWO_PI
        reference = node_vec

    if circular:
        argp = 0.0
        nu = _signed_angle(reference, r_vec, h_hat)
    else:
        argp = _signed_angle(reference, e_vec, h_hat)
        nu = _signed_angle(e_vec, r_vec, h_hat)

    return KeplerianElements(
        sma=sma,
        ecc=ecc,
        inc=inc,
        raan=raan,
        arg_periapsis=argp,
        true_anomaly=nu,
    )
