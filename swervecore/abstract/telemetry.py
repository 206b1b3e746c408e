from abc import abstractmethod
from typing import Callable, Protocol

from wpiutil import Sendable


class TelemetrySink(Protocol):
    """Destination for read-only dashboard values. Passed into a swerve module when it is constructed."""

    @abstractmethod
    def put_data(self, key: str, data: Sendable):
        """
        Publish a Sendable object

        :param key: Dashboard key
        :param data: Object whose properties are published
        """
        raise NotImplementedError

    @abstractmethod
    def add_double(self, key: str, supplier: Callable[[], float]):
        """
        Publish a numeric channel that is polled by the dashboard

        :param key: Dashboard key
        :param supplier: Method returning the current value
        """
        raise NotImplementedError
