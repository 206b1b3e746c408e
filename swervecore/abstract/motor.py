from abc import abstractmethod
from typing import Protocol


class DriveComponent(Protocol):
    """The component of a swerve module that drives the wheel (forward and backward)"""

    @abstractmethod
    def set_voltage(self, volts: float):
        """
        Power the underlying motor with the specified voltage

        :param volts: Voltage in volts (between -12 and +12 for most FRC motors)
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self):
        """Reset driven distance to zero"""
        raise NotImplementedError

    @property
    @abstractmethod
    def velocity(self) -> float:
        """Drive velocity in m/s"""
        raise NotImplementedError

    @property
    @abstractmethod
    def distance(self) -> float:
        """Driven distance in metres"""
        raise NotImplementedError

    @property
    @abstractmethod
    def voltage(self) -> float:
        """Applied motor voltage in volts, between -12 and +12 for most FRC motors"""
        raise NotImplementedError


class AzimuthComponent(Protocol):
    """
    The component of a swerve module that turns the wheel. Its relative encoder is continuous, so its position keeps
    accumulating past a full turn.
    """

    @abstractmethod
    def follow_reference(self, position: float):
        """
        Drive the closed-loop position controller to a continuous reference

        :param position: Unbounded wheel angle in radians
        """
        raise NotImplementedError

    @abstractmethod
    def seed_position(self, position: float):
        """
        Overwrite the relative encoder's running position

        :param position: Wheel angle in radians
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def position(self) -> float:
        """Continuous wheel angle in radians"""
        raise NotImplementedError

    @property
    @abstractmethod
    def rotational_velocity(self) -> float:
        """Rotational velocity in rad/s"""
        raise NotImplementedError
