import platform
from typing import Optional

from .errors import UnsupportedPlatform
from .models import Platform

_ALIASES = {
    "windows": Platform.WINDOWS,
    "win32": Platform.WINDOWS,
    "linux": Platform.LINUX,
}


def current_os() -> str:
    return platform.system().lower()


def detect_platform(os_name: Optional[str] = None, probe: Optional[str] = None) -> Platform:
    """
    Map an OS name (default: the running host) to a supported Platform.
    Raises UnsupportedPlatform for anything other than Windows or Linux.
    """
    name = (os_name if os_name is not None else current_os()).strip().lower()
    try:
        return _ALIASES[name]
    except KeyError:
        raise UnsupportedPlatform(name or "unknown", probe) from None
