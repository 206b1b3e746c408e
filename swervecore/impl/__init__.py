"""
Contains default implementations of components (motors, sensors, telemetry, modules). The user should instantiate
these when creating a swerve module.
"""

__all__ = [
    "NeutralMode",
    "DriveComponentParameters",
    "AzimuthComponentParameters",
    "NEODriveComponent",
    "NEOAzimuthComponent",
    "DummyDriveComponent",
    "DummyAzimuthComponent",
    "CANCoderParameters",
    "AbsoluteCANCoder",
    "AbsoluteDutyCycleEncoder",
    "DummyAbsoluteEncoder",
    "ShuffleboardTelemetry",
    "NullTelemetry",
    "ModuleParameters",
    "CoaxialSwerveModule",
]

from .motor import (
    NeutralMode,
    DriveComponentParameters,
    AzimuthComponentParameters,
    NEODriveComponent,
    NEOAzimuthComponent,
    DummyDriveComponent,
    DummyAzimuthComponent,
)
from .sensor import (
    CANCoderParameters,
    AbsoluteCANCoder,
    AbsoluteDutyCycleEncoder,
    DummyAbsoluteEncoder,
)
from .telemetry import ShuffleboardTelemetry, NullTelemetry
from .system import ModuleParameters, CoaxialSwerveModule
