import asyncio
import random

import pytest

from conftest import FakeInvoker, StaticProbe
from sysfetch.coordinator import SnapshotCoordinator
from sysfetch.errors import MetricReadError, NoDeviceDetected, ProbeTimeout, UnsupportedPlatform
from sysfetch.models import MetricSample, Snapshot
from sysfetch.probes.gpu import GPUProbe

FIELDS = ["user", "os_version", "cpu", "gpu", "disk", "memory"]


def static_probes(**overrides):
    probes = {
        "user": StaticProbe("user", MetricSample(display="ada")),
        "os_version": StaticProbe("os_version", MetricSample(display="6.8.0-45-generic")),
        "cpu": StaticProbe("cpu", MetricSample(display="cpu-reading", utilization=12)),
        "gpu": StaticProbe("gpu", MetricSample(display="gpu-reading", utilization=34)),
        "disk": StaticProbe("disk", MetricSample(display="disk-reading", utilization=56)),
        "memory": StaticProbe("memory", MetricSample(display="memory-reading", utilization=78)),
    }
    probes.update(overrides)
    return probes


@pytest.mark.asyncio
async def test_collect_snapshot_assembles_fixed_fields():
    snapshot = await SnapshotCoordinator(**static_probes()).collect_snapshot()

    assert isinstance(snapshot, Snapshot)
    assert list(type(snapshot).model_fields) == FIELDS
    assert snapshot.lines() == [
        "ada",
        "6.8.0-45-generic",
        "cpu-reading",
        "gpu-reading",
        "disk-reading",
        "memory-reading",
    ]
    assert snapshot.utilizations() == [12, 34, 56, 78]


@pytest.mark.asyncio
async def test_probes_run_concurrently():
    probes = {field: StaticProbe(field, delay=0.3) for field in FIELDS}
    loop = asyncio.get_running_loop()

    started = loop.time()
    await SnapshotCoordinator(**probes).collect_snapshot()
    elapsed = loop.time() - started

    # Sequential execution would take 6 * 0.3s
    assert elapsed < 1.2


@pytest.mark.asyncio
async def test_field_order_stable_under_random_completion_order():
    rng = random.Random(7)
    expected = None
    for _ in range(100):
        probes = static_probes()
        for probe in probes.values():
            probe.delay = rng.uniform(0, 0.005)
        snapshot = await SnapshotCoordinator(**probes).collect_snapshot()
        if expected is None:
            expected = snapshot
        assert snapshot == expected


@pytest.mark.asyncio
async def test_no_gpu_downgrades_to_empty_sample():
    probes = static_probes(gpu=StaticProbe("gpu", error=NoDeviceDetected("AMD GPU metrics are not implemented")))
    snapshot = await SnapshotCoordinator(**probes).collect_snapshot()

    assert snapshot.gpu == MetricSample(display="", utilization=0)
    assert snapshot.cpu.display == "cpu-reading"
    assert snapshot.memory.display == "memory-reading"


@pytest.mark.asyncio
async def test_amd_system_still_returns_complete_snapshot():
    invoker = FakeInvoker({
        "lspci": b"03:00.0 VGA compatible controller [0300]: Advanced Micro Devices, Inc. [AMD/ATI] Navi 21 [1002:73bf] (rev c1)\n",
    })
    probes = static_probes(gpu=GPUProbe("linux", invoker))

    snapshot = await SnapshotCoordinator(**probes).collect_snapshot()

    assert snapshot.gpu == MetricSample.empty()
    assert len(snapshot.lines()) == 6
    assert snapshot.disk.utilization == 56


@pytest.mark.asyncio
async def test_fatal_cpu_failure_aborts_and_cancels_siblings():
    slow = {field: StaticProbe(field, delay=5) for field in ["user", "os_version", "gpu", "disk", "memory"]}
    cpu = StaticProbe("cpu", error=MetricReadError("CPU usage", OSError("denied")))

    with pytest.raises(MetricReadError) as excinfo:
        await SnapshotCoordinator(cpu=cpu, **slow).collect_snapshot()

    assert excinfo.value.probe == "cpu"
    assert all(probe.cancelled for probe in slow.values())


@pytest.mark.asyncio
async def test_fatal_failure_discards_completed_results():
    probes = static_probes(disk=StaticProbe("disk", error=UnsupportedPlatform("darwin"), delay=0.05))
    with pytest.raises(UnsupportedPlatform) as excinfo:
        await SnapshotCoordinator(**probes).collect_snapshot()
    assert excinfo.value.probe == "disk"


@pytest.mark.asyncio
async def test_collection_deadline_raises_timeout():
    probes = static_probes(cpu=StaticProbe("cpu", delay=5))
    coordinator = SnapshotCoordinator(timeout=0.2, **probes)

    with pytest.raises(ProbeTimeout) as excinfo:
        await coordinator.collect_snapshot()

    assert excinfo.value.probe == "cpu"
    assert probes["cpu"].cancelled


@pytest.mark.asyncio
async def test_external_cancellation_cancels_probes():
    probes = {field: StaticProbe(field, delay=5) for field in FIELDS}
    task = asyncio.create_task(SnapshotCoordinator(**probes).collect_snapshot())
    await asyncio.sleep(0.05)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert all(probe.cancelled for probe in probes.values())


@pytest.mark.asyncio
async def test_unexpected_exception_propagates():
    probes = static_probes(memory=StaticProbe("memory", error=RuntimeError("bug")))
    with pytest.raises(RuntimeError):
        await SnapshotCoordinator(**probes).collect_snapshot()


@pytest.mark.asyncio
async def test_successive_snapshots_share_structure():
    coordinator = SnapshotCoordinator(**static_probes())
    first = await coordinator.collect_snapshot()
    second = await coordinator.collect_snapshot()

    assert first.model_dump().keys() == second.model_dump().keys()
    assert first.user == second.user
    assert first.os_version == second.os_version
