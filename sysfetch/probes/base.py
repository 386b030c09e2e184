from abc import ABC, abstractmethod
from typing import Optional

from ..host import detect_platform
from ..models import MetricSample, Platform


class BaseProbe(ABC):
    """
    Abstract Base Class for sysfetch probes.
    """

    def __init__(self, name: str, os_name: Optional[str] = None):
        self.name = name
        # None means "the running host"; tests pin an explicit OS name
        self.os_name = os_name

    def platform(self) -> Platform:
        return detect_platform(self.os_name, probe=self.name)

    @abstractmethod
    async def collect(self) -> MetricSample:
        """
        Reads one resource domain.
        Returns a MetricSample or raises a ProbeError subclass.
        """
        pass
