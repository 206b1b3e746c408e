import math
from abc import abstractmethod

from wpimath.geometry import Rotation2d
from wpiutil import Sendable, SendableBuilder

from . import SendableABCMeta
from ..errors import SensorUnavailableError


class AbsoluteEncoder(Sendable, metaclass=SendableABCMeta):
    @property
    @abstractmethod
    def absolute_position(self) -> Rotation2d:
        """
        Absolute rotation of the wheel, in [-180, 180) degrees

        :raises SensorUnavailableError: The sensor could not produce a fresh reading
        """
        raise NotImplementedError

    def measured_radians(self) -> float:
        """Absolute rotation in radians for dashboards. NaN while the sensor is unavailable."""
        # Polled from the robot loop, so this must not raise
        try:
            return self.absolute_position.radians()
        except SensorUnavailableError:
            return math.nan

    def initSendable(self, builder: SendableBuilder):
        builder.setSmartDashboardType("AbsoluteEncoder")
        builder.addDoubleProperty("Absolute Rotation (rad)", self.measured_radians, lambda _: None)
        builder.addDoubleProperty(
            "Absolute Rotation (deg)", lambda: math.degrees(self.measured_radians()), lambda _: None
        )
