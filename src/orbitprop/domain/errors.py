# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Propagation error taxonomy.

Configuration errors are raised before the solver runs. Singularity,
integration and non-convergence errors depend on the trajectory and are
raised from inside or right after the solver call. In every case the
subjects being propagated are left untouched.
"""


class PropagationError(Exception):
    """Base class for all propagation failures."""


class ConfigurationError(PropagationError, ValueError):
    """Static misconfiguration detected before integration."""


class SingularityError(PropagationError, ArithmeticError):
    """Force evaluation hit a near-zero separation."""


class IntegrationError(PropagationError, RuntimeError):
    """The ODE solver failed numerically."""


class NonConvergenceError(PropagationError, RuntimeError):
    """No state-based stopping condition fired within the span."""
