import asyncio

import psutil

from ..errors import MetricReadError
from ..models import MetricSample
from ..units import bytes_to_gib, usage_line
from .base import BaseProbe


class MemoryProbe(BaseProbe):
    """
    Probe for physical and swap memory.
    Swap is not optional: a failed swap read fails the probe.
    """

    def __init__(self, os_name=None):
        super().__init__("memory", os_name)

    async def collect(self) -> MetricSample:
        try:
            virtual = await asyncio.to_thread(psutil.virtual_memory)
        except (psutil.Error, OSError) as e:
            raise MetricReadError("memory usage", e, probe=self.name) from e
        try:
            swap = await asyncio.to_thread(psutil.swap_memory)
        except (psutil.Error, OSError) as e:
            raise MetricReadError("swap memory usage", e, probe=self.name) from e

        return format_memory(virtual, swap)

def format_memory(virtual, swap) -> MetricSample:
    memory_usage = usage_line(
        bytes_to_gib(virtual.used),
        bytes_to_gib(virtual.total),
        bytes_to_gib(virtual.available),
    )
    swap_usage = usage_line(
        bytes_to_gib(swap.used),
        bytes_to_gib(swap.total),
        bytes_to_gib(swap.free),
    )
    return MetricSample(
        display=f"{memory_usage} [{swap_usage} SWAP]",
        utilization=round(virtual.percent),
    )
