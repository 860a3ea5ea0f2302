# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Analytical solar-system ephemeris.

Planet and Earth-Moon barycentre positions from the JPL approximate mean
elements (Standish, valid 1800-2050), and the geocentric Moon from a
simplified Meeus Ch. 47 lunar theory. Accuracy is arcminute-level, which
is sufficient for third-body perturbation modeling.

All positions are in km on equatorial J2000 axes, evaluated in TDB.
"""
import math
from dataclasses import dataclass

import numpy as np

from orbitprop.domain.celestial_bodies import EARTH, MOON, SUN, CelestialBody
from orbitprop.domain.errors import ConfigurationError
from orbitprop.domain.time_systems import AstroTime

AU_KM: float = 149_597_870.7

# Obliquity of ecliptic (J2000, degrees)
_OBLIQUITY_DEG = 23.43928

_EMB_ID = 3


@dataclass(frozen=True)
class MeanElements:
    """Keplerian mean elements and their rates per Julian century."""
    a_au: float
    a_rate: float
    e: float
    e_rate: float
    inc_deg: float
    inc_rate: float
    mean_longitude_deg: float
    mean_longitude_rate: float
    long_perihelion_deg: float
    long_perihelion_rate: float
    long_node_deg: float
    long_node_rate: float


# Standish, "Keplerian Elements for Approximate Positions of the Major
# Planets", Table 1. Keyed by NAIF ID (3 = Earth-Moon barycentre).
_MEAN_ELEMENTS: dict[int, MeanElements] = {
    199: MeanElements(0.38709927, 0.00000037, 0.20563593, 0.00001906,
                      7.00497902, -0.00594749, 252.25032350, 149472.67411175,
                      77.45779628, 0.16047689, 48.33076593, -0.12534081),
    299: MeanElements(0.72333566, 0.00000390, 0.00677672, -0.00004107,
                      3.39467605, -0.00078890, 181.97909950, 58517.81538729,
                      131.60246718, 0.00268329, 76.67984255, -0.27769418),
    _EMB_ID: MeanElements(1.00000261, 0.00000562, 0.01671123, -0.00004392,
                          -0.00001531, -0.01294668, 100.46457166, 35999.37244981,
                          102.93768193, 0.32327364, 0.0, 0.0),
    499: MeanElements(1.52371034, 0.00001847, 0.09339410, 0.00007882,
                      1.84969142, -0.00813131, -4.55343205, 19140.30268499,
                      -23.94362959, 0.44441088, 49.55953891, -0.29257343),
    599: MeanElements(5.20288700, -0.00011607, 0.04838624, -0.00013253,
                      1.30439695, -0.00183714, 34.39644051, 3034.74612775,
                      14.72847983, 0.21252668, 100.47390909, 0.20469106),
    699: MeanElements(9.53667594, -0.00125060, 0.05386179, -0.00050991,
                      2.48599187, 0.00193609, 49.95424423, 1222.49362201,
                      92.59887831, -0.41897216, 113.66242448, -0.28867794),
    799: MeanElements(19.18916464, -0.00196176, 0.04725744, -0.00004397,
                      0.77263783, -0.00242939, 313.23810451, 428.48202785,
                      170.95427630, 0.40805281, 74.01692503, 0.04240589),
    899: MeanElements(30.06992276, 0.00026291, 0.00859048, 0.00005105,
                      1.77004347, 0.00035372, -55.12002969, 218.45945325,
                      44.96476227, -0.32241464, 131.78422574, -0.00508664),
    999: MeanElements(39.48211675, -0.00031596, 0.24882730, 0.00005170,
                      17.14001206, 0.00004818, 238.92903833, 145.20780515,
                      224.06891629, -0.04062942, 110.30393684, -0.01183482),
}


def _ecliptic_to_equatorial(vec: np.ndarray) -> np.ndarray:
    eps = math.radians(_OBLIQUITY_DEG)
    c, s = math.cos(eps), math.sin(eps)
    x, y, z = vec
    return np.array([x, c * y - s * z, s * y + c * z])


def _solve_kepler(mean_anomaly_rad: float, e: float) -> float:
    """Eccentric anomaly by Newton iteration on M = E - e sin E."""
    ecc_anom = mean_anomaly_rad + e * math.sin(mean_anomaly_rad)
    for _ in range(30):
        delta = (ecc_anom - e * math.sin(ecc_anom) - mean_anomaly_rad) / (1.0 - e * math.cos(ecc_anom))
        ecc_anom -= delta
        if abs(delta) < 1e-12:
            break
    return ecc_anom


def heliocentric_mean_position(naif_id: int, t_centuries: float) -> np.ndarray:
    """Heliocentric ecliptic J2000 position (km) from mean elements.

    Args:
        naif_id: Planet NAIF ID, or 3 for the Earth-Moon barycentre.
        t_centuries: Julian centuries of TDB since J2000.0.
    """
    el = _MEAN_ELEMENTS[naif_id]
    a = el.a_au + el.a_rate * t_centuries
    e = el.e + el.e_rate * t_centuries
    inc = math.radians(el.inc_deg + el.inc_rate * t_centuries)
    mean_lon = el.mean_longitude_deg + el.mean_longitude_rate * t_centuries
    long_peri = el.long_perihelion_deg + el.long_perihelion_rate * t_centuries
    node = math.radians(el.long_node_deg + el.long_node_rate * t_centuries)

    argp = math.radians(long_peri) - node
    mean_anom = math.radians((mean_lon - long_peri + 180.0) % 360.0 - 180.0)
    ecc_anom = _solve_kepler(mean_anom, e)

    xp = a * (math.cos(ecc_anom) - e)
    yp = a * math.sqrt(1.0 - e * e) * math.sin(ecc_anom)

    cw, sw = math.cos(argp), math.sin(argp)
    cn, sn = math.cos(node), math.sin(node)
    ci, si = math.cos(inc), math.sin(inc)

    x = (cw * cn - sw * sn * ci) * xp + (-sw * cn - cw * sn * ci) * yp
    y = (cw * sn + sw * cn * ci) * xp + (-sw * sn + cw * cn * ci) * yp
    z = (sw * si) * xp + (cw * si) * yp
    return np.array([x, y, z]) * AU_KM


def moon_position_geocentric(epoch: AstroTime) -> np.ndarray:
    """Analytical lunar ephemeris (Meeus Ch. 47 simplified).

    Geocentric ecliptic coordinates of the Moon converted to equatorial
    axes. Accuracy ~0.5° in position.

    Returns:
        Geocentric equatorial position in km.
    """
    T = epoch.to_julian_centuries_tdb()

    L_prime = (218.3165 + 481267.8813 * T) % 360.0    # mean longitude
    D = (297.8502 + 445267.1115 * T) % 360.0          # mean elongation
    M = (357.5291 + 35999.0503 * T) % 360.0           # Sun mean anomaly
    M_prime = (134.9634 + 477198.8676 * T) % 360.0    # Moon mean anomaly
    F = (93.2721 + 483202.0175 * T) % 360.0           # argument of latitude

    D_r = math.radians(D)
    M_r = math.radians(M)
    Mp_r = math.radians(M_prime)
    F_r = math.radians(F)

    lam = L_prime + (
        6.289 * math.sin(Mp_r)
        - 1.274 * math.sin(2 * D_r - Mp_r)
        + 0.658 * math.sin(2 * D_r)
        - 0.214 * math.sin(2 * Mp_r)
        - 0.186 * math.sin(M_r)
        + 0.114 * math.sin(2 * F_r)
    )

    beta = (
        5.128 * math.sin(F_r)
        + 0.281 * math.sin(Mp_r + F_r)
        - 0.278 * math.sin(Mp_r - F_r)
        - 0.173 * math.sin(2 * D_r - F_r)
    )

    r_km = (
        385001.0
        - 20905.0 * math.cos(Mp_r)
        - 3699.0 * math.cos(2 * D_r - Mp_r)
        - 2956.0 * math.cos(2 * D_r)
        + 570.0 * math.cos(2 * Mp_r)
    )

    lam_r = math.radians(lam)
    beta_r = math.radians(beta)
    ecliptic = r_km * np.array([
        math.cos(beta_r) * math.cos(lam_r),
        math.cos(beta_r) * math.sin(lam_r),
        math.sin(beta_r),
    ])
    return _ecliptic_to_equatorial(ecliptic)


class AnalyticEphemeris:
    """Low-precision ephemeris for the Sun, planets, Pluto and the Moon.

    Implements the Ephemeris port.
    """

    def supports(self, body: CelestialBody) -> bool:
        return body.naif_id in _MEAN_ELEMENTS or body.naif_id in (
            SUN.naif_id, EARTH.naif_id, MOON.naif_id,
        )

    def heliocentric_position(self, body: CelestialBody, epoch: AstroTime) -> np.ndarray:
        """Heliocentric equatorial position of ``body`` in km."""
        if not self.supports(body):
            raise ConfigurationError(
                f"No analytic ephemeris for body {body.name!r} (NAIF {body.naif_id})"
            )
        if body.naif_id == SUN.naif_id:
            return np.zeros(3)

        t = epoch.to_julian_centuries_tdb()
        if body.naif_id in (EARTH.naif_id, MOON.naif_id):
            emb = _ecliptic_to_equatorial(heliocentric_mean_position(_EMB_ID, t))
            moon_geo = moon_position_geocentric(epoch)
            moon_fraction = MOON.mu / (EARTH.mu + MOON.mu)
            earth = emb - moon_fraction * moon_geo
            if body.naif_id == EARTH.naif_id:
                return earth
            return earth + moon_geo

        return _ecliptic_to_equatorial(heliocentric_mean_position(body.naif_id, t))

    def relative_position(
        self,
        origin: CelestialBody,
        target: CelestialBody,
        epoch: AstroTime,
    ) -> np.ndarray:
        if origin.naif_id == EARTH.naif_id and target.naif_id == MOON.naif_id:
            return moon_position_geocentric(epoch)
        if origin.naif_id == MOON.naif_id and target.naif_id == EARTH.naif_id:
            return -moon_position_geocentric(epoch)
        return (self.heliocentric_position(target, epoch)
                - self.heliocentric_position(origin, epoch))


DEFAULT_EPHEMERIS = AnalyticEphemeris()
