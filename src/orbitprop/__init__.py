"""
orbitprop

Propagate spacecraft trajectories under composable point-mass and J2
gravity until a stopping condition: a calculated orbit quantity crossing
a target (periapsis, apoapsis, node, radius, any Keplerian element), an
elapsed duration, or an absolute epoch. Several spacecraft can be
integrated jointly, forward or backward in time, with TT/TDB time scales,
an analytic planetary ephemeris and per-spacecraft trajectory history.
"""

from orbitprop.domain.errors import (
    PropagationError,
    ConfigurationError,
    SingularityError,
    IntegrationError,
    NonConvergenceError,
)
from orbitprop.domain.time_systems import (
    SECONDS_PER_DAY,
    TimeScale,
    AstroTime,
)
from orbitprop.domain.celestial_bodies import (
    CelestialBody,
    SUN,
    MERCURY,
    VENUS,
    EARTH,
    MOON,
    MARS,
    JUPITER,
    SATURN,
    URANUS,
    NEPTUNE,
    PLUTO,
)
from orbitprop.domain.ephemeris import (
    AnalyticEphemeris,
    DEFAULT_EPHEMERIS,
)
from orbitprop.domain.orbital_mechanics import (
    KeplerianElements,
    kepler_to_cartesian,
    cartesian_to_keplerian,
)
from orbitprop.domain.spacecraft import (
    HistorySegment,
    SpacecraftHistory,
    Spacecraft,
)
from orbitprop.domain.calculations import (
    OrbitQuantity,
    evaluate_quantity,
)
from orbitprop.domain.force_model import (
    ForceTerm,
    PointMassGravity,
    J2Gravity,
    ForceModel,
)
from orbitprop.domain.stop_conditions import (
    CrossingDirection,
    PropagationDirection,
    TimeStopKind,
    StateStop,
    TimeStop,
    make_stop,
    stop_at_periapsis,
    stop_at_apoapsis,
    stop_at_ascending_node,
    stop_at_descending_node,
    stop_at_radius,
    stop_at_seconds,
    stop_at_days,
    is_satisfied,
)
from orbitprop.domain.propagator import (
    IntegratorConfig,
    PropagationStatus,
    PropagationResult,
    OrbitPropagator,
    dynamical_time_scale,
    propagate,
)

__all__ = [
    "PropagationError",
    "ConfigurationError",
    "SingularityError",
    "IntegrationError",
    "NonConvergenceError",
    "SECONDS_PER_DAY",
    "TimeScale",
    "AstroTime",
    "CelestialBody",
    "SUN",
    "MERCURY",
    "VENUS",
    "EARTH",
    "MOON",
    "MARS",
    "JUPITER",
    "SATURN",
    "URANUS",
    "NEPTUNE",
    "PLUTO",
    "AnalyticEphemeris",
    "DEFAULT_EPHEMERIS",
    "KeplerianElements",
    "kepler_to_cartesian",
    "cartesian_to_keplerian",
    "HistorySegment",
    "SpacecraftHistory",
    "Spacecraft",
    "OrbitQuantity",
    "evaluate_quantity",
    "ForceTerm",
    "PointMassGravity",
    "J2Gravity",
    "ForceModel",
    "CrossingDirection",
    "PropagationDirection",
    "TimeStopKind",
    "StateStop",
    "TimeStop",
    "make_stop",
    "stop_at_periapsis",
    "stop_at_apoapsis",
    "stop_at_ascending_node",
    "stop_at_descending_node",
    "stop_at_radius",
    "stop_at_seconds",
    "stop_at_days",
    "is_satisfied",
    "IntegratorConfig",
    "PropagationStatus",
    "PropagationResult",
    "OrbitPropagator",
    "dynamical_time_scale",
    "propagate",
]
