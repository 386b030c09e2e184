import asyncio
from typing import Dict, List, Sequence, Tuple, Union

import pytest

from sysfetch.models import MetricSample
from sysfetch.probes.base import BaseProbe


class FakeInvoker:
    """Canned ProcessInvoker: maps a command name to bytes or an exception to raise."""

    def __init__(self, responses: Dict[str, Union[bytes, Exception]] = None):
        self.responses = responses or {}
        self.calls: List[Tuple[str, List[str]]] = []

    async def run(self, command: str, args: Sequence[str] = (), **kwargs) -> bytes:
        return self._respond(command, args)

    async def run_bounded(self, command: str, args: Sequence[str] = (), *, duration: float) -> bytes:
        return self._respond(command, args)

    def _respond(self, command, args):
        self.calls.append((command, list(args)))
        if command not in self.responses:
            raise AssertionError(f"unexpected command: {command} {list(args)}")
        response = self.responses[command]
        if isinstance(response, Exception):
            raise response
        return response

    def commands(self) -> List[str]:
        return [command for command, _ in self.calls]


class StaticProbe(BaseProbe):
    """Probe returning a fixed sample (or raising) after an optional delay."""

    def __init__(self, name: str, sample: MetricSample = None, error: Exception = None, delay: float = 0.0):
        super().__init__(name, "linux")
        self.sample = sample or MetricSample(display=f"{name}-reading", utilization=0)
        self.error = error
        self.delay = delay
        self.started = False
        self.cancelled = False

    async def collect(self) -> MetricSample:
        self.started = True
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.sample


@pytest.fixture
def fake_invoker():
    return FakeInvoker()
