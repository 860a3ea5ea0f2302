# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Composable force models.

A ForceModel is an ordered, immutable tuple of force terms whose
accelerations are summed. Gravity-type terms name a central body; the
model derives a single centre from them, which drives the choice of
dynamical time scale during propagation.
"""
from typing import TYPE_CHECKING, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from orbitprop.domain.celestial_bodies import CelestialBody
from orbitprop.domain.ephemeris import DEFAULT_EPHEMERIS
from orbitprop.domain.errors import ConfigurationError, SingularityError
from orbitprop.domain.time_systems import AstroTime
from orbitprop.ports.ephemeris import Ephemeris

if TYPE_CHECKING:
    from orbitprop.domain.body_registry import BodyRegistry


# --- Types ---

@runtime_checkable
class ForceTerm(Protocol):
    """Structural typing port for pluggable force terms."""

    def acceleration(
        self,
        epoch: AstroTime,
        position: np.ndarray,
        velocity: np.ndarray,
    ) -> tuple[float, float, float]: ...


# --- Force terms ---

class PointMassGravity:
    """Central body gravity plus point-mass third-body perturbations.

    a = -μ₀ r/|r|³ + Σ μₖ (dₖ/|dₖ|³ - rₖ/|rₖ|³),  dₖ = rₖ - r

    where rₖ is the perturber position relative to the central body. The
    indirect term rₖ/|rₖ|³ accounts for the acceleration of the central
    body itself and avoids cancellation between two large accelerations.
    """

    def __init__(
        self,
        central_body: CelestialBody,
        perturbers: Sequence[CelestialBody] = (),
        ephemeris: Optional[Ephemeris] = None,
        tolerance: float = 1e-12,
    ) -> None:
        perturbers = tuple(perturbers)
        seen: set[str] = set()
        for body in (central_body, *perturbers):
            if body.name in seen:
                raise ConfigurationError(
                    f"The body {body.name!r} is included in the force model multiple times"
                )
            seen.add(body.name)

        self._ephemeris = ephemeris if ephemeris is not None else DEFAULT_EPHEMERIS
        for body in perturbers:
            if not self._ephemeris.supports(body):
                raise ConfigurationError(
                    f"Ephemeris cannot supply perturbing body {body.name!r}"
                )

        self._central_body = central_body
        self._perturbers = perturbers
        self._tolerance = tolerance

    @property
    def central_body(self) -> CelestialBody:
        return self._central_body

    @property
    def perturbers(self) -> tuple[CelestialBody, ...]:
        return self._perturbers

    def _position_checked(self, position: np.ndarray) -> tuple[np.ndarray, float]:
        r_vec = np.asarray(position, dtype=np.float64)
        r = float(np.linalg.norm(r_vec))
        if r < self._tolerance:
            raise SingularityError(
                f"Point-mass gravity about {self._central_body.name}: position magnitude "
                f"{r:.3e} km is below tolerance {self._tolerance:.1e} km"
            )
        return r_vec, r

    def _perturber_geometry(self, epoch: AstroTime, r_vec: np.ndarray):
        for pert in self._perturbers:
            r_k = np.asarray(
                self._ephemeris.relative_position(self._central_body, pert, epoch),
                dtype=np.float64,
            )
            d_k = r_k - r_vec
            d = float(np.linalg.norm(d_k))
            if d < self._tolerance:
                raise SingularityError(
                    f"Point-mass gravity: separation from perturbing body {pert.name} "
                    f"({d:.3e} km) is below tolerance {self._tolerance:.1e} km"
                )
            yield pert, r_k, d_k, d

    def acceleration(
        self,
        epoch: AstroTime,
        position: np.ndarray,
        velocity: np.ndarray,
    ) -> tuple[float, float, float]:
        r_vec, r = self._position_checked(position)
        acc = -self._central_body.mu * r_vec / r**3

        for pert, r_k, d_k, d in self._perturber_geometry(epoch, r_vec):
            rk = float(np.linalg.norm(r_k))
            acc = acc + pert.mu * (d_k / d**3 - r_k / rk**3)

        return (float(acc[0]), float(acc[1]), float(acc[2]))

    def jacobian(self, epoch: AstroTime, position: np.ndarray) -> np.ndarray:
        """Partial derivative of acceleration with respect to position (3x3)."""
        r_vec, r = self._position_checked(position)
        eye = np.eye(3)
        jac = self._central_body.mu * (3.0 * np.outer(r_vec, r_vec) / r**5 - eye / r**3)
        for pert, _, d_k, d in self._perturber_geometry(epoch, r_vec):
            jac = jac + pert.mu * (3.0 * np.outer(d_k, d_k) / d**5 - eye / d**3)
        return jac

    def partials(
        self,
        epoch: AstroTime,
        position: np.ndarray,
        velocity: np.ndarray,
        blocks: Sequence[str] = ("posvel",),
    ) -> dict[str, np.ndarray]:
        """Requested Jacobian blocks of the state derivative.

        The ``"posvel"`` block is the 6x6 matrix d(ṙ, v̇)/d(r, v). Point-mass
        gravity depends on nothing else, so any other block is an error.
        """
        result: dict[str, np.ndarray] = {}
        for block in blocks:
            if block != "posvel":
                raise ConfigurationError(
                    f"PointMassGravity has no dependency on {block!r}; "
                    "only the 'posvel' block is available"
                )
            full = np.zeros((6, 6))
            full[0:3, 3:6] = np.eye(3)
            full[3:6, 0:3] = self.jacobian(epoch, position)
            result[block] = full
        return result

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._perturbers)
        return f"PointMassGravity({self._central_body.name}; perturbers=({names}))"


class J2Gravity:
    """J2 zonal harmonic perturbation of a body with nonzero ``j2``."""

    def __init__(self, body: CelestialBody, tolerance: float = 1e-12) -> None:
        if body.j2 == 0.0:
            raise ConfigurationError(f"Body {body.name!r} has no J2 coefficient")
        self._body = body
        self._tolerance = tolerance

    @property
    def central_body(self) -> CelestialBody:
        return self._body

    def acceleration(
        self,
        epoch: AstroTime,
        position: np.ndarray,
        velocity: np.ndarray,
    ) -> tuple[float, float, float]:
        pos = np.asarray(position, dtype=np.float64)
        r2 = float(np.dot(pos, pos))
        r = float(np.sqrt(r2))
        if r < self._tolerance:
            raise SingularityError(
                f"J2 gravity about {self._body.name}: position magnitude {r:.3e} km "
                f"is below tolerance {self._tolerance:.1e} km"
            )
        r5 = r2 * r2 * r

        mu = self._body.mu
        re = self._body.equatorial_radius

        coeff = -1.5 * self._body.j2 * mu * re * re / r5
        z = pos[2]
        z2_r2 = z * z / r2

        ax = coeff * pos[0] * (1.0 - 5.0 * z2_r2)
        ay = coeff * pos[1] * (1.0 - 5.0 * z2_r2)
        az = coeff * z * (3.0 - 5.0 * z2_r2)
        return (float(ax), float(ay), float(az))

    def __repr__(self) -> str:
        return f"J2Gravity({self._body.name})"


# --- Force model ---

def _find_center(terms: Sequence[ForceTerm]) -> Optional[CelestialBody]:
    centers: list[CelestialBody] = []
    for term in terms:
        body = getattr(term, "central_body", None)
        if body is not None and body not in centers:
            centers.append(body)
    if not centers:
        return None
    if len(centers) > 1:
        names = ", ".join(b.name for b in centers)
        raise ConfigurationError(
            f"Multiple conflicting central bodies found in ForceModel: {names}"
        )
    return centers[0]


class ForceModel:
    """Immutable ordered collection of force terms."""

    def __init__(self, *terms: ForceTerm) -> None:
        if len(terms) == 1 and isinstance(terms[0], (tuple, list)):
            terms = tuple(terms[0])
        if not terms:
            raise ConfigurationError("ForceModel requires at least one force term")
        for term in terms:
            if not isinstance(term, ForceTerm):
                raise ConfigurationError(
                    f"{type(term).__name__} does not implement acceleration(epoch, position, velocity)"
                )
        self._terms: tuple[ForceTerm, ...] = tuple(terms)
        self._center = _find_center(self._terms)

    @property
    def terms(self) -> tuple[ForceTerm, ...]:
        return self._terms

    @property
    def center(self) -> Optional[CelestialBody]:
        return self._center

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(type(term).__name__ for term in self._terms)

    def acceleration(
        self,
        epoch: AstroTime,
        position: np.ndarray,
        velocity: np.ndarray,
    ) -> np.ndarray:
        """Sum of every term's acceleration."""
        total = np.zeros(3)
        for term in self._terms:
            total += np.asarray(term.acceleration(epoch, position, velocity), dtype=np.float64)
        return total

    def derivative(self, epoch: AstroTime, state: np.ndarray) -> np.ndarray:
        """State derivative [v; a] for one 6-component state."""
        position = state[0:3]
        velocity = state[3:6]
        out = np.empty(6)
        out[0:3] = velocity
        out[3:6] = self.acceleration(epoch, position, velocity)
        return out

    def __repr__(self) -> str:
        return f"ForceModel({', '.join(repr(t) for t in self._terms)})"


def evaluate(
    force_model: ForceModel,
    epochs: Sequence[AstroTime],
    combined_state: np.ndarray,
    registry: "BodyRegistry",
) -> np.ndarray:
    """Combined derivative for every subject slice of ``combined_state``.

    ``epochs[i]`` is the current epoch of the i-th registered subject.
    Each term only sees that subject's own 6-vector; subjects do not
    interact unless a term computes it explicitly.
    """
    derivative = np.empty_like(combined_state, dtype=np.float64)
    for epoch, block in zip(epochs, registry.slices):
        derivative[block] = force_model.derivative(epoch, combined_state[block])
    return derivative
