from .coordinator import SnapshotCoordinator, collect_snapshot
from .errors import (
    MetricReadError,
    NoDeviceDetected,
    ParseFailure,
    ProbeError,
    ProbeTimeout,
    ProcessFailure,
    UnsupportedPlatform,
)
from .models import GPUVendor, MetricSample, Platform, ProbeResult, Snapshot

__version__ = "0.1.0"
