from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .errors import ProbeError

T = TypeVar("T")


class Platform(str, Enum):
    WINDOWS = "windows"
    LINUX = "linux"


class GPUVendor(str, Enum):
    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL = "intel"
    UNKNOWN = "unknown"


class MetricSample(BaseModel):
    """One resource domain's reading: a display string plus a 0-100 percentage."""
    model_config = ConfigDict(frozen=True)

    display: str
    utilization: int = Field(default=0, ge=0, le=100)

    @classmethod
    def empty(cls) -> "MetricSample":
        return cls(display="", utilization=0)


class Snapshot(BaseModel):
    """
    One complete set of readings.

    Field order is significant: the report emitter renders list items and bars
    positionally. Every field is required, so a partial snapshot cannot exist.
    """
    model_config = ConfigDict(frozen=True)

    user: str
    os_version: str
    cpu: MetricSample
    gpu: MetricSample
    disk: MetricSample
    memory: MetricSample

    def lines(self) -> List[str]:
        """The six display strings, in field order."""
        return [
            self.user,
            self.os_version,
            self.cpu.display,
            self.gpu.display,
            self.disk.display,
            self.memory.display,
        ]

    def utilizations(self) -> List[int]:
        """Resource percentages in bar order: cpu, gpu, disk, memory."""
        return [
            self.cpu.utilization,
            self.gpu.utilization,
            self.disk.utilization,
            self.memory.utilization,
        ]


class ProbeResult(Generic[T]):
    """
    Result-or-failure carrier for a single probe run.
    Exactly one of ``value`` / ``error`` is meaningful.
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[ProbeError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "ProbeResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProbeError) -> "ProbeResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    def __repr__(self) -> str:
        if self.ok:
            return f"ProbeResult.success({self.value!r})"
        return f"ProbeResult.failure({self.error!r})"
