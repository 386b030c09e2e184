import asyncio
import logging

import psutil

from ..config import settings
from ..errors import MetricReadError
from ..models import MetricSample, Platform
from ..units import bytes_to_gib, usage_line
from .base import BaseProbe

logger = logging.getLogger("sysfetch.probes.disk")


class DiskProbe(BaseProbe):
    """
    Probe for system disk usage.
    Windows reads the system drive, Linux the root filesystem.
    """

    def __init__(self, os_name=None):
        super().__init__("disk", os_name)

    def target_path(self) -> str:
        if self.platform() is Platform.WINDOWS:
            return settings.WINDOWS_DISK_ROOT
        return "/"

    async def collect(self) -> MetricSample:
        path = self.target_path()
        try:
            usage = await asyncio.to_thread(psutil.disk_usage, path)
        except (psutil.Error, OSError) as e:
            raise MetricReadError(f"disk usage of {path}", e, probe=self.name) from e

        logger.debug(f"Disk usage of {path}: {usage.percent}%")
        return format_disk(usage)


def format_disk(usage) -> MetricSample:
    return MetricSample(
        display=usage_line(
            bytes_to_gib(usage.used),
            bytes_to_gib(usage.total),
            bytes_to_gib(usage.free),
        ),
        utilization=round(usage.percent),
    )
