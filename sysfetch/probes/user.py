import asyncio
import getpass

from ..errors import MetricReadError
from ..models import MetricSample
from .base import BaseProbe


class UserProbe(BaseProbe):
    """Login name of the user running sysfetch."""

    def __init__(self, os_name=None):
        super().__init__("user", os_name)

    async def collect(self) -> MetricSample:
        try:
            name = await asyncio.to_thread(getpass.getuser)
        except (OSError, KeyError) as e:
            raise MetricReadError("current user", e, probe=self.name) from e
        return MetricSample(display=name, utilization=0)
