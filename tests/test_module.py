import math
import threading

import commands2
import pytest
from wpimath.geometry import Rotation2d
from wpimath.kinematics import SwerveModuleState

from swervecore import u, ConfigurationError, SensorUnavailableError
from swervecore.impl import (
    CoaxialSwerveModule,
    DummyAbsoluteEncoder,
    DummyAzimuthComponent,
    DummyDriveComponent,
    ModuleParameters,
)


def test_construction_synchronizes(module, azimuth):
    assert azimuth.position == pytest.approx(math.radians(170))
    assert module.module_state.angle.radians() == pytest.approx(math.radians(170))


def test_desire_state_drives_proportional_voltage(module, drive, azimuth):
    module.desire_state(SwerveModuleState(2.25, Rotation2d.fromDegrees(160)))

    assert drive.voltage == pytest.approx(6.0)
    assert azimuth.reference == pytest.approx(math.radians(160))


def test_desire_state_reverses_instead_of_turning_far(module, drive, azimuth):
    module.desire_state(SwerveModuleState(2.25, Rotation2d(0)))

    # 170 degrees away, so the wheel turns 10 degrees and spins backwards
    assert drive.voltage == pytest.approx(-6.0)
    assert azimuth.reference == pytest.approx(math.pi)
    assert module.last_commanded_drive_velocity == pytest.approx(-2.25)


def test_desire_state_crosses_wrap_without_spinning(module, azimuth):
    module.desire_state(SwerveModuleState(1.0, Rotation2d.fromDegrees(-170)))

    assert azimuth.reference == pytest.approx(math.radians(190))
    assert abs(azimuth.reference - math.radians(170)) <= math.pi


def test_desire_state_keeps_accumulated_turns(module, azimuth):
    azimuth.seed_position(4 * math.pi + 0.1)

    module.desire_state(SwerveModuleState(1.0, Rotation2d(0.3)))

    assert azimuth.reference == pytest.approx(4 * math.pi + 0.3)


def test_desire_state_does_not_clamp_speed(module, drive):
    module.desire_state(SwerveModuleState(9.0, Rotation2d.fromDegrees(170)))

    assert drive.voltage == pytest.approx(24.0)


def test_nominal_voltage_is_configurable(drive, azimuth, absolute_encoder):
    module = CoaxialSwerveModule(
        "FR",
        drive,
        azimuth,
        absolute_encoder,
        ModuleParameters(max_speed=4.0 * (u.m / u.s), nominal_voltage=10 * u.V),
    )

    module.desire_state(SwerveModuleState(2.0, Rotation2d.fromDegrees(170)))

    assert drive.voltage == pytest.approx(5.0)


def test_optimize_uses_module_angle(module):
    optimized = module.optimize(SwerveModuleState(1.5, Rotation2d(0)))

    assert optimized.speed == pytest.approx(-1.5)
    assert abs(optimized.angle.radians()) == pytest.approx(math.pi)


def test_synchronize_removes_drift(module, azimuth):
    azimuth.seed_position(10.0)

    module.synchronize()

    assert azimuth.position == pytest.approx(math.radians(170))


def test_synchronize_is_idempotent(module, azimuth):
    module.synchronize()
    first = azimuth.position
    module.synchronize()

    assert azimuth.position == first


def test_state_matches_absolute_after_synchronize(module, absolute_encoder):
    absolute_encoder.position = Rotation2d.fromDegrees(-135)

    module.synchronize()

    assert module.module_state.angle.radians() == pytest.approx(math.radians(-135))
    assert module.module_position.angle.radians() == pytest.approx(math.radians(-135))


def test_unavailable_encoder_leaves_baseline_untouched(module, azimuth, absolute_encoder):
    azimuth.seed_position(10.0)
    absolute_encoder.available = False

    with pytest.raises(SensorUnavailableError):
        module.synchronize()

    assert azimuth.position == 10.0


def test_unavailable_encoder_fails_construction(drive, azimuth):
    encoder = DummyAbsoluteEncoder()
    encoder.available = False

    with pytest.raises(SensorUnavailableError):
        CoaxialSwerveModule("BL", drive, azimuth, encoder, ModuleParameters(max_speed=4.5 * (u.m / u.s)))


def test_readback_folds_continuous_angle(module, azimuth):
    azimuth.seed_position(6 * math.pi + 0.5)

    assert module.azimuth_angle.radians() == pytest.approx(0.5)
    assert module.module_state.angle.radians() == pytest.approx(0.5)


def test_position_and_velocity_readback(module, drive):
    module.desire_state(SwerveModuleState(1.0, Rotation2d.fromDegrees(170)))
    drive.simulation_periodic(0.5)

    assert module.module_state.speed == pytest.approx(1.0)
    assert module.module_position.distance == pytest.approx(0.5)
    assert module.drive_voltage == pytest.approx(12 / 4.5)

    module.reset_drive_distance()

    assert module.module_position.distance == 0


def test_telemetry_is_published(module, telemetry, absolute_encoder):
    assert telemetry.data["Module FL"] is module
    assert telemetry.data["Module FL Absolute Encoder"] is absolute_encoder

    supplier = telemetry.doubles["Measured Abs rotation FL"]
    assert supplier() == pytest.approx(math.radians(170))


def test_synchronize_command(module, azimuth):
    command = module.synchronize_command()
    azimuth.seed_position(-3.0)

    assert isinstance(command, commands2.Command)
    assert command.runsWhenDisabled()

    command.initialize()

    assert command.isFinished()
    assert azimuth.position == pytest.approx(math.radians(170))


@pytest.mark.parametrize(
    "parameters",
    [
        ModuleParameters(max_speed=0 * (u.m / u.s)),
        ModuleParameters(max_speed=-1 * (u.m / u.s)),
        ModuleParameters(max_speed=4.5 * (u.m / u.s), nominal_voltage=0 * u.V),
    ],
)
def test_invalid_parameters_fail_construction(parameters):
    with pytest.raises(ConfigurationError):
        CoaxialSwerveModule("BR", DummyDriveComponent(), DummyAzimuthComponent(), DummyAbsoluteEncoder(), parameters)


def test_module_parameters_accept_any_units():
    params = ModuleParameters(max_speed=10 * (u.ft / u.s)).in_standard_units()

    assert params.max_speed == pytest.approx(3.048)
    assert params.nominal_voltage == pytest.approx(12.0)


def test_telemetry_reports_nan_while_encoder_unavailable(module, telemetry, absolute_encoder):
    absolute_encoder.available = False

    assert math.isnan(telemetry.doubles["Measured Abs rotation FL"]())
    assert math.isnan(absolute_encoder.measured_radians())

    # Commands still see the failure
    with pytest.raises(SensorUnavailableError):
        module.absolute_angle


def test_synchronize_waits_for_command_lock(module, azimuth):
    azimuth.seed_position(10.0)

    module._command_lock.acquire()
    worker = threading.Thread(target=module.synchronize)
    worker.start()
    try:
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert azimuth.position == 10.0
    finally:
        module._command_lock.release()

    worker.join(timeout=5)
    assert not worker.is_alive()
    assert azimuth.position == pytest.approx(math.radians(170))


def test_desire_state_waits_for_command_lock(module, azimuth):
    module._command_lock.acquire()
    worker = threading.Thread(target=module.desire_state, args=(SwerveModuleState(1.0, Rotation2d.fromDegrees(160)),))
    worker.start()
    try:
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert azimuth.reference is None
    finally:
        module._command_lock.release()

    worker.join(timeout=5)
    assert azimuth.reference == pytest.approx(math.radians(160))


class CountingAzimuthComponent(DummyAzimuthComponent):
    def __init__(self, position=0.0):
        super().__init__(position)
        self.reads = 0

    @property
    def position(self) -> float:
        self.reads += 1
        return self._position


def test_desire_state_reads_azimuth_once(drive, absolute_encoder):
    azimuth = CountingAzimuthComponent()
    module = CoaxialSwerveModule(
        "BR", drive, azimuth, absolute_encoder, ModuleParameters(max_speed=4.5 * (u.m / u.s))
    )
    azimuth.reads = 0

    module.desire_state(SwerveModuleState(1.0, Rotation2d(0)))

    assert azimuth.reads == 1


@pytest.mark.parametrize(
    "parameters",
    [
        ModuleParameters(max_speed=math.nan * (u.m / u.s)),
        ModuleParameters(max_speed=math.inf * (u.m / u.s)),
        ModuleParameters(max_speed=4.5 * (u.m / u.s), nominal_voltage=math.nan * u.V),
    ],
)
def test_non_finite_parameters_fail_construction(parameters):
    with pytest.raises(ConfigurationError):
        CoaxialSwerveModule("BR", DummyDriveComponent(), DummyAzimuthComponent(), DummyAbsoluteEncoder(), parameters)
