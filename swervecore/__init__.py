"""
Control logic for a single coaxial swerve module.
Keeps a continuous azimuth reference for the steering motor's position loop and seeds it from an absolute encoder.
"""

__all__ = [
    "u",
    "SwerveError",
    "SensorUnavailableError",
    "ConfigurationError",
    "fold_angle",
    "unwrap_reference",
    "optimize",
]

# fmt: off

# Initialize the unit registry before importing anything that relies on it
from pint import UnitRegistry
u = UnitRegistry()

from .errors import SwerveError, SensorUnavailableError, ConfigurationError
from .abstract.system import fold_angle, unwrap_reference, optimize
