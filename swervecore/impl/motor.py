import copy
from dataclasses import dataclass
from enum import IntEnum

import rev
from pint import Quantity

from .sensor import check_can_id
from .. import conversions, u
from ..abstract.motor import DriveComponent, AzimuthComponent
from ..errors import ConfigurationError, SensorUnavailableError


class NeutralMode(IntEnum):
    COAST = 0
    BRAKE = 1


@dataclass
class DriveComponentParameters:
    wheel_circumference: Quantity
    gear_ratio: float  # Motor rotations per wheel rotation

    continuous_current_limit: int = 80

    neutral_mode: NeutralMode = NeutralMode.BRAKE

    invert_motor: bool = False

    # Period of the encoder position and velocity status frames
    status_period_ms: int = 20

    def validate(self):
        if self.wheel_circumference.m_as(u.m) <= 0:
            raise ConfigurationError(f"wheel_circumference must be positive, got {self.wheel_circumference}")
        if self.gear_ratio <= 0:
            raise ConfigurationError(f"gear_ratio must be positive, got {self.gear_ratio}")
        if self.continuous_current_limit <= 0:
            raise ConfigurationError(f"continuous_current_limit must be positive, got {self.continuous_current_limit}")
        if self.status_period_ms <= 0:
            raise ConfigurationError(f"status_period_ms must be positive, got {self.status_period_ms}")

    def in_standard_units(self):
        data = copy.deepcopy(self)
        data.wheel_circumference = data.wheel_circumference.m_as(u.m)
        return data


@dataclass
class AzimuthComponentParameters:
    gear_ratio: float  # Motor rotations per wheel rotation

    continuous_current_limit: int = 20

    neutral_mode: NeutralMode = NeutralMode.COAST

    # Position PID on the motor controller, in output fraction per radian of error
    kP: float = 1.0
    kI: float = 0.0
    kD: float = 0.1

    min_output: float = -1.0
    max_output: float = 1.0

    invert_motor: bool = False

    status_period_ms: int = 20

    def validate(self):
        if self.gear_ratio <= 0:
            raise ConfigurationError(f"gear_ratio must be positive, got {self.gear_ratio}")
        if self.continuous_current_limit <= 0:
            raise ConfigurationError(f"continuous_current_limit must be positive, got {self.continuous_current_limit}")
        if not -1 <= self.min_output < self.max_output <= 1:
            raise ConfigurationError(f"Invalid output range [{self.min_output}, {self.max_output}]")
        if self.status_period_ms <= 0:
            raise ConfigurationError(f"status_period_ms must be positive, got {self.status_period_ms}")


class NEODriveComponent(DriveComponent):
    def __init__(self, id_: int, parameters: DriveComponentParameters):
        check_can_id(id_, "Drive motor")
        parameters.validate()
        self._params = parameters.in_standard_units()

        self._motor = rev.SparkMax(id_, rev.SparkMax.MotorType.kBrushless)
        self._encoder = self._motor.getEncoder()
        self._config()
        self.reset()

    def _config(self):
        settings = rev.SparkBaseConfig()

        settings.smartCurrentLimit(self._params.continuous_current_limit)

        settings.inverted(self._params.invert_motor)

        # Convert generic neutral mode to REV IdleMode
        settings.setIdleMode(rev.SparkBaseConfig.IdleMode(self._params.neutral_mode))

        # Report distance in metres and velocity in m/s instead of rotations and RPM
        settings.encoder.positionConversionFactor(
            conversions.drive_position_conversion_factor(self._params.wheel_circumference, self._params.gear_ratio)
        )
        settings.encoder.velocityConversionFactor(
            conversions.drive_velocity_conversion_factor(self._params.wheel_circumference, self._params.gear_ratio)
        )

        settings.signals.primaryEncoderPositionPeriodMs(self._params.status_period_ms)
        settings.signals.primaryEncoderVelocityPeriodMs(self._params.status_period_ms)

        self._motor.configure(
            settings,
            rev.SparkMax.ResetMode.kResetSafeParameters,
            rev.SparkMax.PersistMode.kPersistParameters,
        )

    def set_voltage(self, volts: float):
        self._motor.setVoltage(volts)

    def reset(self):
        error = self._encoder.setPosition(0)
        if error != rev.REVLibError.kOk:
            raise SensorUnavailableError(f"Drive encoder {self._motor.getDeviceId()}", str(error))

    @property
    def velocity(self) -> float:
        return self._encoder.getVelocity()

    @property
    def distance(self) -> float:
        return self._encoder.getPosition()

    @property
    def voltage(self) -> float:
        return self._motor.getBusVoltage() * self._motor.getAppliedOutput()


class NEOAzimuthComponent(AzimuthComponent):
    def __init__(self, id_: int, parameters: AzimuthComponentParameters):
        check_can_id(id_, "Azimuth motor")
        parameters.validate()
        self._params = parameters

        self._motor = rev.SparkMax(id_, rev.SparkMax.MotorType.kBrushless)
        self._controller = self._motor.getClosedLoopController()
        self._encoder = self._motor.getEncoder()
        self._config()

    def _config(self):
        settings = rev.SparkBaseConfig()

        settings.closedLoop.pid(self._params.kP, self._params.kI, self._params.kD, rev.ClosedLoopSlot.kSlot0)
        settings.closedLoop.outputRange(self._params.min_output, self._params.max_output, rev.ClosedLoopSlot.kSlot0)

        settings.smartCurrentLimit(self._params.continuous_current_limit)

        settings.inverted(self._params.invert_motor)

        # Convert generic neutral mode to REV IdleMode
        settings.setIdleMode(rev.SparkBaseConfig.IdleMode(self._params.neutral_mode))

        # The position loop runs in wheel radians. The encoder is not wrapped, so positions accumulate across turns.
        settings.encoder.positionConversionFactor(conversions.azimuth_position_conversion_factor(self._params.gear_ratio))
        settings.encoder.velocityConversionFactor(conversions.azimuth_velocity_conversion_factor(self._params.gear_ratio))

        settings.signals.primaryEncoderPositionPeriodMs(self._params.status_period_ms)
        settings.signals.primaryEncoderVelocityPeriodMs(self._params.status_period_ms)

        self._motor.configure(
            settings,
            rev.SparkMax.ResetMode.kResetSafeParameters,
            rev.SparkMax.PersistMode.kPersistParameters,
        )

    def follow_reference(self, position: float):
        self._controller.setReference(position, rev.SparkMax.ControlType.kPosition)

    def seed_position(self, position: float):
        error = self._encoder.setPosition(position)
        if error != rev.REVLibError.kOk:
            raise SensorUnavailableError(f"Azimuth encoder {self._motor.getDeviceId()}", str(error))

    @property
    def position(self) -> float:
        return self._encoder.getPosition()

    @property
    def rotational_velocity(self) -> float:
        return self._encoder.getVelocity()


class DummyDriveComponent(DriveComponent):
    """Drive component that does nothing on a real robot, but functions normally in simulation"""

    def __init__(self, velocity_per_volt: float = 0.0):
        """
        :param velocity_per_volt: Simulated wheel speed in m/s produced by each volt applied
        """
        self.velocity_per_volt = velocity_per_volt
        self._voltage = 0.0
        self._position = 0.0

    def simulation_periodic(self, delta_time: float):
        self._position += self.velocity * delta_time

    def set_voltage(self, volts: float):
        self._voltage = volts

    def reset(self):
        self._position = 0.0

    @property
    def velocity(self) -> float:
        return self._voltage * self.velocity_per_volt

    @property
    def distance(self) -> float:
        return self._position

    @property
    def voltage(self) -> float:
        return self._voltage


class DummyAzimuthComponent(AzimuthComponent):
    """Azimuth component that does nothing on a real robot, but reaches its reference instantly in simulation"""

    def __init__(self, position: float = 0.0):
        self._position = position
        self.reference: float | None = None

    def follow_reference(self, position: float):
        self.reference = position
        self._position = position

    def seed_position(self, position: float):
        self._position = position

    @property
    def position(self) -> float:
        return self._position

    @property
    def rotational_velocity(self) -> float:
        return 0
