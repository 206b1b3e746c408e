"""
Contains interfaces for the components of a swerve module (motors, sensors, telemetry) and the swerve module itself.
Implementations can be found in the impl module, or the user may define their own.
"""

__all__ = [
    "SendableABCMeta",
    "DriveComponent",
    "AzimuthComponent",
    "AbsoluteEncoder",
    "TelemetrySink",
    "SwerveModule",
]

from abc import ABCMeta
from wpiutil import Sendable


class SendableABCMeta(ABCMeta, type(Sendable)):
    pass


from .motor import DriveComponent, AzimuthComponent
from .sensor import AbsoluteEncoder
from .telemetry import TelemetrySink
from .system import SwerveModule
