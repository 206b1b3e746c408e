from typing import Callable

import wpilib
import wpilib.shuffleboard
from wpiutil import Sendable

from ..abstract.telemetry import TelemetrySink


class ShuffleboardTelemetry(TelemetrySink):
    def __init__(self, tab: str = "Debug"):
        """
        Publish to SmartDashboard and a Shuffleboard tab

        :param tab: Shuffleboard tab that numeric channels are added to
        """
        self._tab = tab

    def put_data(self, key: str, data: Sendable):
        wpilib.SmartDashboard.putData(key, data)

    def add_double(self, key: str, supplier: Callable[[], float]):
        wpilib.shuffleboard.Shuffleboard.getTab(self._tab).addDouble(key, supplier)


class NullTelemetry(TelemetrySink):
    """Telemetry sink that discards everything"""

    def put_data(self, key: str, data: Sendable):
        pass

    def add_double(self, key: str, supplier: Callable[[], float]):
        pass
