"""Exceptions raised by swerve module components"""


class SwerveError(Exception):
    """Base class for all errors raised by this package"""


class SensorUnavailableError(SwerveError):
    """
    A sensor could not produce a fresh reading (bus timeout, disconnected device, etc.).

    Callers decide whether to skip the control cycle. The reading is never replaced with a default.
    """

    def __init__(self, sensor: str, reason: str = ""):
        self.sensor = sensor
        self.reason = reason
        message = f"{sensor} is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigurationError(SwerveError, ValueError):
    """A component was constructed with invalid IDs, offsets, or parameters"""
