import logging
import math
import re
from typing import List, Optional

from ..config import settings
from ..errors import NoDeviceDetected, ParseFailure, ProbeTimeout, ProcessFailure
from ..invoker import ProcessInvoker
from ..models import GPUVendor, MetricSample, Platform
from ..units import mib_to_gib
from .base import BaseProbe

logger = logging.getLogger("sysfetch.probes.gpu")

# Checked in this order; the first substring found wins
_VENDOR_ORDER = (GPUVendor.NVIDIA, GPUVendor.AMD, GPUVendor.INTEL)

NVIDIA_SMI = "nvidia-smi"
NVIDIA_QUERY_ARGS = [
    "--query-gpu=name,memory.used,memory.total,utilization.gpu",
    "--format=csv,noheader,nounits",
]

INTEL_GPU_TOP = "intel_gpu_top"
INTEL_CSV_ARGS = ["-c"]
INTEL_UTILIZATION_COLUMN = 8

# "00:02.0 VGA compatible controller [0300]: Intel Corporation UHD Graphics 620 [8086:5917] (rev 07)"
_INTEL_NAME = re.compile(r"(?<=:\s).*(?=\s\()")


def detect_vendor(text: str) -> GPUVendor:
    """Case-insensitive substring match of controller names against known vendors."""
    lowered = text.lower()
    for vendor in _VENDOR_ORDER:
        if vendor.value in lowered:
            return vendor
    return GPUVendor.UNKNOWN


class GPUProbe(BaseProbe):
    """
    GPU Probe.
    Responsibility: Identify the display controller's vendor, then run that
    vendor's diagnostic tool and parse its output.

    Not finding a usable GPU is not an error for the snapshot (NoDeviceDetected
    is non-fatal). Once a vendor with a sub-probe is identified, any failure to
    read its metrics is fatal.

    Known gaps: AMD has no sub-probe on any platform, Intel has none on Windows.
    """

    def __init__(self, os_name=None, invoker: Optional[ProcessInvoker] = None):
        super().__init__("gpu", os_name)
        self.invoker = invoker or ProcessInvoker()

    def detection_command(self, platform: Platform) -> List[str]:
        if platform is Platform.WINDOWS:
            return [
                "powershell",
                "-Command",
                "Get-CimInstance Win32_VideoController | Select-Object -ExpandProperty Name",
            ]
        return ["lspci", "-vnn", "-s", settings.GPU_PCI_SLOT]

    async def detect(self, platform: Platform) -> str:
        command, *args = self.detection_command(platform)
        try:
            out = await self.invoker.run(command, args)
        except (ProcessFailure, ProbeTimeout) as e:
            logger.warning(f"GPU detection failed: {e}")
            raise NoDeviceDetected(f"GPU detection failed: {e.message}", probe=self.name) from e
        return out.decode(errors="replace").strip()

    async def collect(self) -> MetricSample:
        platform = self.platform()
        detection = await self.detect(platform)
        vendor = detect_vendor(detection)
        logger.debug(f"Detected GPU vendor {vendor.name} on {platform.name}")

        if vendor is GPUVendor.NVIDIA:
            return await self._collect_nvidia()
        if vendor is GPUVendor.INTEL:
            if platform is Platform.WINDOWS:
                raise NoDeviceDetected("Intel GPU metrics are not implemented on Windows", probe=self.name)
            return await self._collect_intel(detection)
        if vendor is GPUVendor.AMD:
            raise NoDeviceDetected("AMD GPU metrics are not implemented", probe=self.name)
        raise NoDeviceDetected("no NVIDIA, AMD or Intel display controller found", probe=self.name)

    async def _collect_nvidia(self) -> MetricSample:
        out = await self.invoker.run(NVIDIA_SMI, NVIDIA_QUERY_ARGS)
        return parse_nvidia(out.decode(errors="replace"))

    async def _collect_intel(self, detection: str) -> MetricSample:
        name = parse_intel_name(detection)
        out = await self.invoker.run_bounded(INTEL_GPU_TOP, INTEL_CSV_ARGS, duration=settings.INTEL_SAMPLE_SECONDS)
        load = parse_intel_utilization(out.decode(errors="replace"))
        return MetricSample(display=name, utilization=load)


def parse_nvidia(text: str) -> MetricSample:
    """
    Parse one line of
    ``nvidia-smi --query-gpu=name,memory.used,memory.total,utilization.gpu --format=csv,noheader,nounits``.
    Only the first GPU is reported.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise ParseFailure("nvidia-smi output", text)

    parts = lines[0].strip().split(", ")
    if len(parts) != 4:
        raise ParseFailure(f"nvidia-smi fields (expected 4, got {len(parts)})", lines[0])

    name = parts[0]
    try:
        used = mib_to_gib(float(parts[1]))
        total = mib_to_gib(float(parts[2]))
        load = int(parts[3])
    except ValueError:
        raise ParseFailure("nvidia-smi memory/utilization values", lines[0]) from None
    if not 0 <= load <= 100:
        raise ParseFailure("nvidia-smi utilization", parts[3])

    free = total - used
    return MetricSample(
        display=f"{name} {used:0.2f}GB / {total:0.2f}GB ({free:0.2f}GB Free) [{load}% Utilization]",
        utilization=load,
    )


def parse_intel_name(detection: str) -> str:
    """Device name between ': ' and ' (' in the lspci description."""
    for line in detection.splitlines():
        match = _INTEL_NAME.search(line.strip())
        if match and match.group(0).strip():
            return match.group(0).strip()
    raise ParseFailure("Intel GPU name", detection)


def parse_intel_utilization(text: str) -> int:
    """Utilization column of the first sample row in ``intel_gpu_top -c`` output."""
    lines = text.strip().splitlines()
    if len(lines) < 2:
        raise ParseFailure("intel_gpu_top sample row", text)

    columns = lines[1].split(",")
    if len(columns) <= INTEL_UTILIZATION_COLUMN:
        raise ParseFailure(f"intel_gpu_top column {INTEL_UTILIZATION_COLUMN}", lines[1])
    try:
        value = float(columns[INTEL_UTILIZATION_COLUMN].strip())
        if not math.isfinite(value):
            raise ValueError(value)
    except ValueError:
        raise ParseFailure("Intel GPU load", columns[INTEL_UTILIZATION_COLUMN]) from None
    return max(0, min(100, round(value)))
