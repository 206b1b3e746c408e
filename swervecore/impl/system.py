import copy
import math
from dataclasses import dataclass, field

from pint import Quantity
from wpimath.geometry import Rotation2d
from wpiutil import SendableBuilder

from .telemetry import NullTelemetry
from .. import conversions, u
from ..abstract.motor import DriveComponent, AzimuthComponent
from ..abstract.sensor import AbsoluteEncoder
from ..abstract.system import SwerveModule
from ..abstract.telemetry import TelemetrySink
from ..errors import ConfigurationError


@dataclass
class ModuleParameters:
    # Wheel speed reached when the drive motor is given nominal_voltage
    max_speed: Quantity

    # Voltage that corresponds to max_speed. The battery voltage is not measured.
    nominal_voltage: Quantity = field(default_factory=lambda: 12 * u.V)

    def validate(self):
        max_speed = self.max_speed.m_as(u.m / u.s)
        if not 0 < max_speed < math.inf:
            raise ConfigurationError(f"max_speed must be positive and finite, got {self.max_speed}")
        nominal_voltage = self.nominal_voltage.m_as(u.V)
        if not 0 < nominal_voltage < math.inf:
            raise ConfigurationError(f"nominal_voltage must be positive and finite, got {self.nominal_voltage}")

    def in_standard_units(self):
        data = copy.deepcopy(self)
        data.max_speed = data.max_speed.m_as(u.m / u.s)
        data.nominal_voltage = data.nominal_voltage.m_as(u.V)
        return data


class CoaxialSwerveModule(SwerveModule):
    last_commanded_drive_velocity: float = 0
    last_commanded_azimuth_reference: float = 0

    def __init__(
        self,
        name: str,
        drive: DriveComponent,
        azimuth: AzimuthComponent,
        absolute_encoder: AbsoluteEncoder,
        parameters: ModuleParameters,
        telemetry: TelemetrySink | None = None,
    ):
        """
        Construct a swerve module and synchronize its azimuth encoder to the absolute encoder.

        :param name: Name used for logging and dashboard keys
        :param drive: Motor that spins the wheel
        :param azimuth: Motor that turns the wheel, running closed-loop position control
        :param absolute_encoder: Sensor measuring the wheel angle relative to forward
        :param parameters: Speed and voltage scaling
        :param telemetry: Where dashboard values are published. Nothing is published by default.
        :raises ConfigurationError: A parameter is invalid
        :raises SensorUnavailableError: The absolute encoder could not be read
        """

        super().__init__()

        parameters.validate()
        self._params = parameters.in_standard_units()

        self.name = name
        self._drive = drive
        self._azimuth = azimuth
        self._absolute_encoder = absolute_encoder

        self.synchronize()

        telemetry = telemetry if telemetry is not None else NullTelemetry()
        telemetry.put_data(f"Module {name}", self)
        telemetry.put_data(f"Module {name} Absolute Encoder", absolute_encoder)
        telemetry.add_double(f"Measured Abs rotation {name}", absolute_encoder.measured_radians)

    def desire_drive_velocity(self, velocity: float):
        self.last_commanded_drive_velocity = velocity
        self._drive.set_voltage(
            conversions.speed_to_voltage(velocity, self._params.max_speed, self._params.nominal_voltage)
        )

    def desire_azimuth_reference(self, reference: float):
        self.last_commanded_azimuth_reference = reference
        self._azimuth.follow_reference(reference)

    def seed_azimuth_position(self, position: float):
        self._azimuth.seed_position(position)

    def reset_drive_distance(self):
        self._drive.reset()

    @property
    def drive_velocity(self) -> float:
        return self._drive.velocity

    @property
    def drive_distance(self) -> float:
        return self._drive.distance

    @property
    def drive_voltage(self) -> float:
        return self._drive.voltage

    @property
    def azimuth_position(self) -> float:
        return self._azimuth.position

    @property
    def azimuth_velocity(self) -> float:
        return self._azimuth.rotational_velocity

    @property
    def absolute_angle(self) -> Rotation2d:
        return self._absolute_encoder.absolute_position

    def initSendable(self, builder: SendableBuilder):
        # fmt: off
        builder.setSmartDashboardType("CoaxialSwerveModule")
        builder.addDoubleProperty("Drive Velocity (mps)", lambda: self._drive.velocity, lambda _: None)
        builder.addDoubleProperty("Drive Distance (m)", lambda: self._drive.distance, lambda _: None)
        builder.addDoubleProperty("Drive Voltage", lambda: self._drive.voltage, lambda _: None)
        builder.addDoubleProperty("Azimuth Velocity (radps)", lambda: self._azimuth.rotational_velocity, lambda _: None)
        builder.addDoubleProperty("Azimuth Position (rad)", lambda: self.azimuth_angle.radians(), lambda _: None)
        builder.addDoubleProperty("Azimuth Position (deg)", lambda: self.azimuth_angle.degrees(), lambda _: None)
        builder.addDoubleProperty("Azimuth Encoder (rad)", lambda: self._azimuth.position, lambda _: None)
        builder.addDoubleProperty("Desired Drive Velocity (mps)", lambda: self.last_commanded_drive_velocity, lambda _: None)
        builder.addDoubleProperty("Desired Azimuth Reference (rad)", lambda: self.last_commanded_azimuth_reference, lambda _: None)
        # fmt: on
