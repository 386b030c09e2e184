from .base import BaseProbe
from .cpu import CPUProbe
from .disk import DiskProbe
from .gpu import GPUProbe
from .memory import MemoryProbe
from .os_version import OSVersionProbe
from .user import UserProbe

__all__ = [
    "BaseProbe",
    "CPUProbe",
    "DiskProbe",
    "GPUProbe",
    "MemoryProbe",
    "OSVersionProbe",
    "UserProbe",
]
