"""
Typed failures raised by sysfetch probes.

Probes never terminate the process. They raise one of the errors below and the
SnapshotCoordinator decides, per error type, whether the whole snapshot is
aborted (``fatal = True``) or the slot is downgraded to an empty sample.
"""
from typing import Optional, Sequence

from .config import settings


class ProbeError(Exception):
    """Base class for every probe failure."""

    fatal = True

    def __init__(self, message: str, probe: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.probe = probe

    def __str__(self) -> str:
        if self.probe:
            return f"[{self.probe}] {self.message}"
        return self.message


class UnsupportedPlatform(ProbeError):
    """The host OS is neither Windows nor Linux. A porting gap, not a bug."""

    def __init__(self, os_name: str, probe: Optional[str] = None):
        super().__init__(
            f"unsupported OS: {os_name}. Please submit a pull request at {settings.CONTRIBUTION_URL}",
            probe,
        )
        self.os_name = os_name


class ProcessFailure(ProbeError):
    """An external command could not start or exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: Optional[int], stderr: str = "", probe: Optional[str] = None):
        cmd = " ".join(command)
        if returncode is None:
            message = f"could not run '{cmd}'"
        else:
            message = f"'{cmd}' exited with status {returncode}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message, probe)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class ParseFailure(ProbeError):
    """Captured output did not match the expected format."""

    def __init__(self, what: str, raw: str = "", probe: Optional[str] = None):
        message = f"could not parse {what}"
        if raw:
            message += f" from {raw!r}"
        super().__init__(message, probe)
        self.what = what
        self.raw = raw


class NoDeviceDetected(ProbeError):
    """No usable GPU (unidentified vendor, or a vendor without a sub-probe)."""

    fatal = False

    def __init__(self, reason: str, probe: Optional[str] = None):
        super().__init__(reason, probe)


class ProbeTimeout(ProbeError):
    """An external command or the whole collection ran past its deadline."""

    def __init__(self, target: str, timeout: float, probe: Optional[str] = None):
        super().__init__(f"'{target}' timed out after {timeout:g}s", probe)
        self.target = target
        self.timeout = timeout


class MetricReadError(ProbeError):
    """A native OS metrics call (psutil, /proc) failed."""

    def __init__(self, what: str, cause: BaseException, probe: Optional[str] = None):
        super().__init__(f"error reading {what}: {cause}", probe)
        self.what = what
        self.cause = cause
