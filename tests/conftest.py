import math

import pytest
from wpimath.geometry import Rotation2d

from swervecore import u
from swervecore.impl import (
    CoaxialSwerveModule,
    DummyAbsoluteEncoder,
    DummyAzimuthComponent,
    DummyDriveComponent,
    ModuleParameters,
)

MAX_SPEED = 4.5


class RecordingTelemetry:
    def __init__(self):
        self.data = {}
        self.doubles = {}

    def put_data(self, key, data):
        self.data[key] = data

    def add_double(self, key, supplier):
        self.doubles[key] = supplier


@pytest.fixture
def drive():
    # 12 V drives the wheel at max speed
    return DummyDriveComponent(velocity_per_volt=MAX_SPEED / 12)


@pytest.fixture
def azimuth():
    # Start far from the absolute reading to show that construction synchronizes
    return DummyAzimuthComponent(position=7 * math.pi)


@pytest.fixture
def absolute_encoder():
    return DummyAbsoluteEncoder(Rotation2d.fromDegrees(170))


@pytest.fixture
def telemetry():
    return RecordingTelemetry()


@pytest.fixture
def module(drive, azimuth, absolute_encoder, telemetry):
    return CoaxialSwerveModule(
        "FL",
        drive,
        azimuth,
        absolute_encoder,
        ModuleParameters(max_speed=MAX_SPEED * (u.m / u.s)),
        telemetry,
    )
