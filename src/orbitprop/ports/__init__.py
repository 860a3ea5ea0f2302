# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Port interfaces for collaborators of the propagation core."""

from orbitprop.ports.ephemeris import Ephemeris
from orbitprop.ports.subject import PropagationSubject

__all__ = ["Ephemeris", "PropagationSubject"]
