import logging
import math
import threading
from abc import abstractmethod

import commands2
from wpimath.geometry import Rotation2d
from wpimath.kinematics import SwerveModuleState, SwerveModulePosition
from wpiutil import Sendable

from . import SendableABCMeta

logger = logging.getLogger(__name__)

TAU = 2 * math.pi


class SwerveModule(Sendable, metaclass=SendableABCMeta):
    name: str

    def __init__(self):
        super().__init__()

        # desire_state and synchronize both depend on the azimuth encoder baseline; never interleave them
        self._command_lock = threading.Lock()

    def desire_state(self, state: SwerveModuleState):
        """
        Command the module to follow a speed and angle. Call once per control loop iteration.

        The speed is not clamped. Callers must keep |speed| <= the module's max speed.

        :param state: SwerveModuleState representing the module's desired speed and angle
        """
        with self._command_lock:
            # Optimization and unwrapping must see the same encoder reading
            current = self.azimuth_position
            state = optimize(state, Rotation2d(fold_angle(current)))

            self.desire_drive_velocity(state.speed)

            reference = unwrap_reference(current, state.angle.radians())
            logger.debug(
                "%s azimuth target %.4f rad -> reference %.4f rad", self.name, state.angle.radians(), reference
            )
            self.desire_azimuth_reference(reference)

    def optimize(self, state: SwerveModuleState) -> SwerveModuleState:
        """
        Find the equivalent state requiring the least rotation from the module's current angle

        :param state: Desired state
        :return: The desired state, or the reversed-speed state rotated by 180 degrees
        """
        return optimize(state, self.azimuth_angle)

    def synchronize(self):
        """
        Seed the azimuth encoder with the absolute encoder's reading, removing any drift between the two

        :raises SensorUnavailableError: The absolute encoder could not be read. The azimuth encoder is left untouched.
        """
        with self._command_lock:
            absolute = self.absolute_angle
            logger.info("Setting %s azimuth to %.3f degrees", self.name, absolute.degrees())
            self.seed_azimuth_position(absolute.radians())

    def synchronize_command(self) -> "_SynchronizeCommand":
        """Construct a command that re-synchronizes the azimuth encoder. It may run while the robot is disabled."""
        return _SynchronizeCommand(self)

    @property
    def azimuth_angle(self) -> Rotation2d:
        """CCW+ wheel angle, folded into [-180, 180) degrees"""
        return Rotation2d(fold_angle(self.azimuth_position))

    @property
    def module_position(self) -> SwerveModulePosition:
        """The swerve module's driven distance (in metres) and facing angle"""
        return SwerveModulePosition(self.drive_distance, self.azimuth_angle)

    @property
    def module_state(self) -> SwerveModuleState:
        """The swerve module's current velocity (in metres/sec) and facing angle"""
        return SwerveModuleState(self.drive_velocity, self.azimuth_angle)

    @abstractmethod
    def desire_drive_velocity(self, velocity: float):
        """
        Drive the wheel

        :param velocity: Desired velocity in m/s
        """
        raise NotImplementedError

    @abstractmethod
    def desire_azimuth_reference(self, reference: float):
        """
        Send a continuous position reference to the azimuth controller

        :param reference: Unbounded wheel angle in radians
        """
        raise NotImplementedError

    @abstractmethod
    def seed_azimuth_position(self, position: float):
        """
        Overwrite the azimuth encoder's running position

        :param position: Wheel angle in radians
        """
        raise NotImplementedError

    @abstractmethod
    def reset_drive_distance(self):
        """Zero the driven distance"""
        raise NotImplementedError

    @property
    @abstractmethod
    def drive_velocity(self) -> float:
        """Drive wheel velocity in m/s"""
        raise NotImplementedError

    @property
    @abstractmethod
    def drive_distance(self) -> float:
        """Driven distance in metres"""
        raise NotImplementedError

    @property
    @abstractmethod
    def drive_voltage(self) -> float:
        """Applied output voltage of the drive motor"""
        raise NotImplementedError

    @property
    @abstractmethod
    def azimuth_position(self) -> float:
        """Continuous CCW+ wheel angle in radians. Not bounded to a single turn."""
        raise NotImplementedError

    @property
    @abstractmethod
    def azimuth_velocity(self) -> float:
        """CCW+ wheel angular velocity in rad/s"""
        raise NotImplementedError

    @property
    @abstractmethod
    def absolute_angle(self) -> Rotation2d:
        """Wheel angle measured by the absolute encoder"""
        raise NotImplementedError


class _SynchronizeCommand(commands2.Command):
    def __init__(self, module: SwerveModule):
        super().__init__()
        self.setName(f"Synchronize {module.name}")

        self._module = module

    def initialize(self):
        self._module.synchronize()

    def isFinished(self) -> bool:
        return True

    def runsWhenDisabled(self) -> bool:
        return True


def fold_angle(angle: float) -> float:
    """
    Fold an angle into [-pi, pi)

    :param angle: Angle in radians
    :return: The equivalent angle in [-pi, pi)
    """
    folded = math.fmod(angle + math.pi, TAU)
    if folded < 0.0:
        folded += TAU
    # Adding TAU to a tiny negative remainder rounds up to TAU
    if folded >= TAU:
        folded -= TAU
    return folded - math.pi


def unwrap_reference(current: float, target: float) -> float:
    """
    Express a bounded target angle in the same turn as a continuous encoder reading, then pick the neighbouring turn
    if it is closer. The result is within pi of the current reading.

    :param current: Continuous encoder reading in radians
    :param target: Desired angle in radians, in [-pi, pi)
    :return: Continuous reference for the position controller in radians
    """
    # fmod keeps the dividend's sign, so negative readings need to be lifted into [0, 2pi)
    current_mod = math.fmod(current, TAU)
    if current_mod < 0.0:
        current_mod += TAU
    if current_mod >= TAU:
        current_mod -= TAU

    reference = target + (current - current_mod)
    if target - current_mod > math.pi:
        reference -= TAU
    elif target - current_mod < -math.pi:
        reference += TAU

    return reference


def optimize(desired_state: SwerveModuleState, current_angle: Rotation2d) -> SwerveModuleState:
    # There are two ways for a swerve module to reach its goal
    # 1) Rotate to its intended rotation and drive at its intended speed
    # 2) Rotate to the mirrored rotation (add 180) and drive at the opposite of its intended speed
    # Optimizing finds the option that requires the smallest rotation by the module

    target_angle = desired_state.angle.radians()
    target_speed = desired_state.speed
    delta = fold_angle(target_angle - current_angle.radians())

    if abs(delta) > math.pi / 2:
        target_speed *= -1
        target_angle += math.pi

    return SwerveModuleState(target_speed, Rotation2d(fold_angle(target_angle)))
