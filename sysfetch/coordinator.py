import asyncio
import logging
from typing import Dict, Optional

from .config import settings
from .errors import ProbeError, ProbeTimeout
from .models import MetricSample, ProbeResult, Snapshot
from .probes import (
    BaseProbe,
    CPUProbe,
    DiskProbe,
    GPUProbe,
    MemoryProbe,
    OSVersionProbe,
    UserProbe,
)

logger = logging.getLogger("sysfetch.coordinator")


class SnapshotCoordinator:
    """
    Snapshot Coordinator.
    Responsibility: Run every probe concurrently, decide which failures abort
    the snapshot, and assemble the results into one fixed-order Snapshot.

    Each probe runs in its own task and reports back only through that task's
    ProbeResult; results are then written into named Snapshot fields, so the
    outcome never depends on which probe finishes first.
    """

    def __init__(
        self,
        *,
        user: Optional[BaseProbe] = None,
        os_version: Optional[BaseProbe] = None,
        cpu: Optional[BaseProbe] = None,
        gpu: Optional[BaseProbe] = None,
        disk: Optional[BaseProbe] = None,
        memory: Optional[BaseProbe] = None,
        timeout: Optional[float] = None,
    ):
        # Keys are Snapshot field names
        self.probes: Dict[str, BaseProbe] = {
            "user": user or UserProbe(),
            "os_version": os_version or OSVersionProbe(),
            "cpu": cpu or CPUProbe(),
            "gpu": gpu or GPUProbe(),
            "disk": disk or DiskProbe(),
            "memory": memory or MemoryProbe(),
        }
        self.timeout = timeout if timeout is not None else settings.COLLECT_TIMEOUT_SECONDS

    async def collect_snapshot(self) -> Snapshot:
        """
        Collect one Snapshot.
        Raises the first fatal ProbeError observed; no partial snapshot is ever returned.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        tasks = {
            asyncio.create_task(_run_probe(probe), name=f"sysfetch-probe-{field}"): field
            for field, probe in self.probes.items()
        }
        samples: Dict[str, MetricSample] = {}

        try:
            pending = set(tasks)
            while pending:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    slow = sorted(tasks[t] for t in pending)
                    raise ProbeTimeout("snapshot collection", self.timeout, probe=",".join(slow))

                done, pending = await asyncio.wait(pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    field = tasks[task]
                    samples[field] = self._resolve(field, task.result())
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Let cancelled probes unwind (and kill their subprocesses) before returning
            await asyncio.gather(*tasks, return_exceptions=True)

        return Snapshot(
            user=samples["user"].display,
            os_version=samples["os_version"].display,
            cpu=samples["cpu"],
            gpu=samples["gpu"],
            disk=samples["disk"],
            memory=samples["memory"],
        )

    def _resolve(self, field: str, result: ProbeResult[MetricSample]) -> MetricSample:
        if result.ok:
            return result.value

        error = result.error
        if error.probe is None:
            error.probe = field
        if error.fatal:
            logger.debug(f"Probe {field} failed, aborting snapshot: {error}")
            raise error
        logger.info(f"Probe {field} has no data: {error.message}")
        return MetricSample.empty()


async def _run_probe(probe: BaseProbe) -> ProbeResult[MetricSample]:
    try:
        return ProbeResult.success(await probe.collect())
    except ProbeError as e:
        return ProbeResult.failure(e)


async def collect_snapshot() -> Snapshot:
    """Collect one Snapshot with the default probe set."""
    return await SnapshotCoordinator().collect_snapshot()
