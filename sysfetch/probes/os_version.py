import logging
from typing import List, Optional

from ..invoker import ProcessInvoker
from ..models import MetricSample, Platform
from .base import BaseProbe

logger = logging.getLogger("sysfetch.probes.os-version")

_VERSION_COMMANDS = {
    Platform.WINDOWS: ["cmd", "/C", "ver"],
    Platform.LINUX: ["uname", "-rv"],
}


class OSVersionProbe(BaseProbe):
    """
    Probe for the OS version string.
    One external command per platform; output is reported verbatim, trimmed.
    """

    def __init__(self, os_name=None, invoker: Optional[ProcessInvoker] = None):
        super().__init__("os_version", os_name)
        self.invoker = invoker or ProcessInvoker()

    def command(self) -> List[str]:
        return _VERSION_COMMANDS[self.platform()]

    async def collect(self) -> MetricSample:
        command, *args = self.command()
        out = await self.invoker.run(command, args)
        version = out.decode(errors="replace").strip()
        logger.debug(f"OS version: {version}")
        return MetricSample(display=version, utilization=0)
