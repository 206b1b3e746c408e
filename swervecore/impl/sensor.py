import math
from dataclasses import dataclass, field

import phoenix5
import phoenix5.sensors
import wpilib
from wpimath.geometry import Rotation2d

from .. import conversions
from ..abstract.sensor import AbsoluteEncoder
from ..abstract.system import fold_angle
from ..errors import ConfigurationError, SensorUnavailableError

MAX_CAN_ID = 62


def check_can_id(id_: int | tuple[int, str], device: str):
    # Accept either a device ID or a tuple of device ID and CAN bus name
    number = id_[0] if isinstance(id_, tuple) else id_
    if not isinstance(number, int) or not 0 <= number <= MAX_CAN_ID:
        raise ConfigurationError(f"{device} CAN ID must be an integer in [0, {MAX_CAN_ID}], got {id_!r}")


@dataclass
class CANCoderParameters:
    # Applied by the CANCoder itself so the reported absolute position is already offset
    magnet_offset: Rotation2d = field(default_factory=Rotation2d)

    # True for clockwise-positive when viewed from the LED side
    sensor_direction: bool = True

    update_period_ms: int = 100
    timeout_ms: int = 250

    def validate(self):
        if not math.isfinite(self.magnet_offset.degrees()):
            raise ConfigurationError(f"magnet_offset must be finite, got {self.magnet_offset}")
        if self.update_period_ms <= 0:
            raise ConfigurationError(f"update_period_ms must be positive, got {self.update_period_ms}")
        if self.timeout_ms < 0:
            raise ConfigurationError(f"timeout_ms must not be negative, got {self.timeout_ms}")


class AbsoluteCANCoder(AbsoluteEncoder):
    def __init__(self, id_: int | tuple[int, str], parameters: CANCoderParameters | None = None):
        super().__init__()

        check_can_id(id_, "CANCoder")
        self._params = parameters if parameters is not None else CANCoderParameters()
        self._params.validate()
        self._id = id_

        # Construct the CANCoder from either a tuple of sensor ID and CAN bus ID or just a sensor ID
        try:
            self._encoder = phoenix5.sensors.CANCoder(*id_)
        except TypeError:
            self._encoder = phoenix5.sensors.CANCoder(id_)

        self._config()

    def _config(self):
        config = phoenix5.sensors.CANCoderConfiguration()
        config.absoluteSensorRange = phoenix5.sensors.AbsoluteSensorRange.Signed_PlusMinus180
        config.initializationStrategy = phoenix5.sensors.SensorInitializationStrategy.BootToAbsolutePosition
        config.sensorTimeBase = phoenix5.sensors.SensorTimeBase.PerSecond
        config.magnetOffsetDegrees = self._params.magnet_offset.degrees()
        config.sensorDirection = self._params.sensor_direction

        error = self._encoder.configAllSettings(config, self._params.timeout_ms)
        if error != phoenix5.ErrorCode.OK:
            raise ConfigurationError(f"CANCoder {self._id} rejected its configuration: {error}")

        self._encoder.setStatusFramePeriod(
            phoenix5.sensors.CANCoderStatusFrame.SensorData,
            self._params.update_period_ms,
            self._params.timeout_ms,
        )

    @property
    def absolute_position(self) -> Rotation2d:
        degrees = self._encoder.getAbsolutePosition()

        # The last error refers to the read above. A stale frame must not be passed off as a measurement.
        error = self._encoder.getLastError()
        if error != phoenix5.ErrorCode.OK:
            raise SensorUnavailableError(f"CANCoder {self._id}", str(error))

        return Rotation2d.fromDegrees(degrees)


class AbsoluteDutyCycleEncoder(AbsoluteEncoder):
    def __init__(self, dio_pin: int, offset: Rotation2d | None = None, invert: bool = False):
        """
        Absolute encoder plugged into a roboRIO DIO port

        :param dio_pin: DIO channel of the encoder
        :param offset: Encoder reading when the wheel faces forward
        :param invert: True if the encoder counts clockwise-positive
        """

        super().__init__()

        if not isinstance(dio_pin, int) or dio_pin < 0:
            raise ConfigurationError(f"DIO pin must be a non-negative integer, got {dio_pin!r}")
        self._offset = offset if offset is not None else Rotation2d()
        if not math.isfinite(self._offset.degrees()):
            raise ConfigurationError(f"offset must be finite, got {self._offset}")

        self._dio_pin = dio_pin
        self._invert = invert
        self._encoder = wpilib.DutyCycleEncoder(dio_pin)

    @property
    def absolute_position(self) -> Rotation2d:
        if not self._encoder.isConnected():
            raise SensorUnavailableError(f"Duty cycle encoder {self._dio_pin}", "no signal")

        degrees = conversions.duty_cycle_to_degrees(self._encoder.get())
        if self._invert:
            degrees = -degrees

        radians = math.radians(degrees) - self._offset.radians()
        return Rotation2d(fold_angle(radians))


class DummyAbsoluteEncoder(AbsoluteEncoder):
    """Absolute encoder that reports a settable position. Set available to False to simulate a bus timeout."""

    def __init__(self, position: Rotation2d | None = None):
        super().__init__()

        self.position = position if position is not None else Rotation2d()
        self.available = True

    @property
    def absolute_position(self) -> Rotation2d:
        if not self.available:
            raise SensorUnavailableError("Dummy absolute encoder", "marked unavailable")
        return self.position
