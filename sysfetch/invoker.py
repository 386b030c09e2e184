import asyncio
import logging
from typing import Optional, Sequence

from .config import settings
from .errors import ProbeTimeout, ProcessFailure

logger = logging.getLogger("sysfetch.invoker")


class ProcessInvoker:
    """
    Process Invoker.
    Responsibility: Run one external command, capture its output, enforce the
    timeout, and turn every way a command can go wrong into a typed error.
    Has no knowledge of which OS it runs on.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.COMMAND_TIMEOUT_SECONDS

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        timeout: Optional[float] = None,
        combine_stderr: bool = False,
        stdin: Optional[bytes] = None,
    ) -> bytes:
        """
        Run ``command args...`` to completion and return its stdout
        (stdout and stderr interleaved when ``combine_stderr`` is set).
        """
        argv = [command, *args]
        limit = timeout if timeout is not None else self.timeout
        logger.debug(f"Running {' '.join(argv)} (timeout={limit:g}s)")

        process = await self._spawn(
            argv,
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.STDOUT if combine_stderr else asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(stdin), timeout=limit)
        except asyncio.TimeoutError:
            await _kill(process)
            raise ProbeTimeout(" ".join(argv), limit) from None
        except asyncio.CancelledError:
            await _kill(process)
            raise

        if process.returncode != 0:
            err_text = _decode(stdout if combine_stderr else stderr)
            raise ProcessFailure(argv, process.returncode, err_text)

        return stdout

    async def run_bounded(self, command: str, args: Sequence[str] = (), *, duration: float) -> bytes:
        """
        Let a continuously reporting tool run for ``duration`` seconds, then
        stop it and return everything it wrote to stdout.
        A tool that exits on its own inside the window must exit cleanly.
        """
        argv = [command, *args]
        logger.debug(f"Running {' '.join(argv)} for {duration:g}s")

        process = await self._spawn(argv, stdin=asyncio.subprocess.DEVNULL, stderr=asyncio.subprocess.PIPE)
        output = asyncio.ensure_future(process.communicate())
        stopped = False
        try:
            done, _ = await asyncio.wait({output}, timeout=duration)
            if not done:
                stopped = True
                process.terminate()
                done, _ = await asyncio.wait({output}, timeout=settings.TERMINATE_GRACE_SECONDS)
                if not done:
                    logger.warning(f"{command} ignored terminate, killing it")
                    process.kill()
            stdout, stderr = await output
        except asyncio.CancelledError:
            output.cancel()
            await _kill(process)
            raise

        if not stopped and process.returncode != 0:
            raise ProcessFailure(argv, process.returncode, _decode(stderr))

        return stdout

    async def _spawn(self, argv, *, stdin, stderr) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                stdin=stdin,
                stdout=asyncio.subprocess.PIPE,
                stderr=stderr,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ProcessFailure(argv, None, str(e)) from e


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


def _decode(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    return raw.decode(errors="replace").strip()
