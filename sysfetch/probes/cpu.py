import asyncio
import logging
import platform
from pathlib import Path
from typing import Optional, Tuple

import psutil

from ..config import settings
from ..errors import MetricReadError, ParseFailure
from ..models import MetricSample
from .base import BaseProbe

logger = logging.getLogger("sysfetch.probes.cpu")

_CPUINFO = Path("/proc/cpuinfo")

_MODEL_KEYS = ("model name", "Processor", "Hardware", "CPU part")
_ARCHITECTURES = frozenset({
    "x86_64", "amd64", "i386", "i686", "aarch64", "arm64", "armv7l", "armv6l", "ppc64le", "s390x", "riscv64",
})


class CPUProbe(BaseProbe):
    """
    Probe for CPU utilization and identification.

    Utilization is sampled over a fixed window; an instantaneous reading is
    meaningless, so the wait is part of the measurement. Every failure here is
    fatal to the snapshot.
    """

    def __init__(self, os_name=None, sample_seconds: Optional[float] = None, cpuinfo_path: Path = _CPUINFO):
        super().__init__("cpu", os_name)
        self.sample_seconds = sample_seconds if sample_seconds is not None else settings.CPU_SAMPLE_SECONDS
        self.cpuinfo_path = cpuinfo_path

    async def collect(self) -> MetricSample:
        try:
            load = await asyncio.to_thread(psutil.cpu_percent, self.sample_seconds)
        except (psutil.Error, OSError) as e:
            raise MetricReadError("CPU usage", e, probe=self.name) from e

        model, mhz = await asyncio.to_thread(self.identify)
        return format_cpu(model, mhz, load)

    def identify(self) -> Tuple[str, float]:
        """Returns (model name, current clock in MHz)."""
        model, mhz = "", None

        if self.cpuinfo_path.exists():
            try:
                model, mhz = parse_cpuinfo(self.cpuinfo_path.read_text(encoding="utf-8", errors="ignore"))
            except OSError as e:
                raise MetricReadError("CPU info", e, probe=self.name) from e

        if not model:
            model = platform.processor().strip()
        # Linux reports the machine type here, which names no CPU
        if not model or is_architecture(model):
            raise ParseFailure("CPU model name", model, probe=self.name)

        try:
            freq = psutil.cpu_freq()
        except (psutil.Error, OSError, NotImplementedError) as e:
            if mhz is None:
                raise MetricReadError("CPU frequency", e, probe=self.name) from e
            logger.debug(f"cpu_freq unavailable, using /proc/cpuinfo clock: {e}")
            freq = None
        if freq is not None and freq.current:
            mhz = float(freq.current)

        if mhz is None:
            # Some VMs expose no clock at all
            logger.debug("No CPU clock reading available, reporting 0 GHz")
            mhz = 0.0
        return model, mhz


def is_architecture(name: str) -> bool:
    name = name.strip().lower()
    return name in _ARCHITECTURES or name == platform.machine().strip().lower()


def parse_cpuinfo(text: str) -> Tuple[str, Optional[float]]:
    """
    First model and 'cpu MHz' entries of a /proc/cpuinfo dump.
    ARM kernels often omit 'model name' and describe the chip in the
    'Processor', 'Hardware' or 'CPU part' fields instead; the first of those
    present is used.
    """
    found, mhz = {}, None
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key in _MODEL_KEYS and value:
            found.setdefault(key, value)
        elif key == "cpu MHz" and mhz is None:
            try:
                mhz = float(value)
            except ValueError:
                pass
    model = next((found[key] for key in _MODEL_KEYS if key in found), "")
    return model, mhz


def format_cpu(model: str, mhz: float, load: float) -> MetricSample:
    return MetricSample(
        display=f"{model.strip()} @ {mhz / 1000:0.2f} GHz [{load:0.2f}% Utilization]",
        utilization=round(load),
    )
