"""Command executors: a real shell runner and a canned-output mock."""

import asyncio
import os
import random
import signal
import time
from typing import Optional, Tuple

from . import logger
from .models import ExecutionResult
from .safety_validator import sanitize_for_display

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_OUTPUT_BYTES = 1024 * 1024
READ_CHUNK_SIZE = 64 * 1024
# Seconds allowed for the pipes to close after the process group is killed
DRAIN_TIMEOUT = 5.0


class OutputOverflow(Exception):
    """Raised while reading when a command writes more than the cap."""


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def _kill(process) -> None:
    """Kill the shell and everything it started."""
    try:
        if hasattr(os, "killpg"):
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass


class ShellExecutor:
    """Runs commands through the host shell with a timeout and output cap."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        shell: Optional[str] = None
    ):
        """
        Initialize ShellExecutor.

        Args:
            timeout: Seconds before the process is killed.
            max_output_bytes: Combined stdout/stderr size that kills the process.
            shell: Shell executable. Defaults to /bin/sh.
        """
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        self.shell = shell

    async def execute(self, command: str) -> ExecutionResult:
        """
        Run a command and collect its output.

        Never raises for command failures: timeouts, overflows and launch
        errors come back as an unsuccessful ExecutionResult. Output is read
        while the command runs, so both limits hold for commands that never
        stop writing.

        Args:
            command: Validated shell command.

        Returns:
            ExecutionResult with output, exit code and elapsed milliseconds.
        """
        logger.info(f"명령어 실행: {sanitize_for_display(command)}")
        start = time.monotonic()

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                executable=self.shell,
                start_new_session=True
            )
        except OSError as e:
            logger.error(f"실행 실패: {e}")
            return ExecutionResult(
                success=False,
                output=f"Execution error: {e}",
                execution_time=_elapsed_ms(start),
                exit_code=-1
            )

        try:
            stdout, stderr = await asyncio.wait_for(self._read_output(process), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._terminate(process)
            logger.error(f"시간 초과: {self.timeout}초")
            return ExecutionResult(
                success=False,
                output=f"Command timed out after {self.timeout:g} seconds",
                execution_time=_elapsed_ms(start),
                exit_code=-1
            )
        except OutputOverflow:
            await self._terminate(process)
            logger.error("출력 크기 초과")
            return ExecutionResult(
                success=False,
                output=f"Output exceeded maximum buffer size of {self.max_output_bytes} bytes",
                execution_time=_elapsed_ms(start),
                exit_code=-1
            )

        execution_time = _elapsed_ms(start)
        out_text = stdout.decode(errors="replace")
        err_text = stderr.decode(errors="replace")

        if process.returncode != 0:
            return ExecutionResult(
                success=False,
                output=err_text or out_text or f"Command failed with exit code {process.returncode}",
                execution_time=execution_time,
                exit_code=process.returncode
            )

        return ExecutionResult(
            success=True,
            output=out_text,
            stderr=err_text,
            execution_time=execution_time,
            exit_code=0
        )

    async def _read_output(self, process) -> Tuple[bytes, bytes]:
        stdout = bytearray()
        stderr = bytearray()

        async def pump(stream, buffer):
            while True:
                chunk = await stream.read(READ_CHUNK_SIZE)
                if not chunk:
                    return
                buffer.extend(chunk)
                if len(stdout) + len(stderr) > self.max_output_bytes:
                    raise OutputOverflow()

        readers = [
            asyncio.ensure_future(pump(process.stdout, stdout)),
            asyncio.ensure_future(pump(process.stderr, stderr)),
        ]
        try:
            await asyncio.gather(*readers)
        finally:
            for reader in readers:
                reader.cancel()
            # A stream accepts one waiting reader; let the cancelled ones finish
            await asyncio.gather(*readers, return_exceptions=True)

        await process.wait()
        return bytes(stdout), bytes(stderr)

    async def _terminate(self, process) -> None:
        """Kill the process group, then discard what is left in the pipes."""
        _kill(process)
        try:
            await asyncio.wait_for(process.communicate(), timeout=DRAIN_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(f"프로세스 정리 지연: pid={process.pid}")


MOCK_OUTPUTS = {
    "ls -la": """total 48
drwxr-xr-x  12 user  staff   384 Jan 24 10:30 .
drwxr-xr-x   5 user  staff   160 Jan 24 09:15 ..
-rw-r--r--   1 user  staff   220 Jan 24 10:30 .gitignore
drwxr-xr-x   8 user  staff   256 Jan 24 10:28 .git
-rw-r--r--   1 user  staff  1234 Jan 24 10:25 README.md
drwxr-xr-x  10 user  staff   320 Jan 24 10:30 src
-rw-r--r--   1 user  staff   567 Jan 24 10:20 pyproject.toml""",
    "pwd": "/home/user/projects/nl-terminal",
    "whoami": "user",
    "date": None,
    "df -h": """Filesystem      Size   Used  Avail Capacity  Mounted on
/dev/disk1s1   466Gi  234Gi  220Gi    52%    /
/dev/disk1s2   466Gi   12Gi  220Gi     6%    /System/Volumes/Data""",
    "free -h": """              total        used        free      shared  buff/cache   available
Mem:           16Gi       8.2Gi       2.1Gi       512Mi       5.7Gi       7.1Gi
Swap:         2.0Gi       256Mi       1.8Gi""",
    "ps aux | head -20": """USER       PID %CPU %MEM    VSZ   RSS TTY      STAT START   TIME COMMAND
root         1  0.0  0.1 169936 13256 ?        Ss   09:00   0:02 /sbin/init
root         2  0.0  0.0      0     0 ?        S    09:00   0:00 [kthreadd]
user      1234  2.5  1.2 456789 98765 pts/0   Sl   09:15   1:23 python server.py
user      2345  0.5  0.8 234567 65432 pts/1   S    09:20   0:45 vim README.md""",
    "git status": """On branch main
Your branch is up to date with 'origin/main'.

Changes not staged for commit:
  (use "git add <file>..." to update what will be committed)
        modified:   nl_terminal/session.py

no changes added to commit""",
    "ping -c 4 google.com": """PING google.com (142.250.185.78): 56 data bytes
64 bytes from 142.250.185.78: icmp_seq=0 ttl=117 time=12.3 ms
64 bytes from 142.250.185.78: icmp_seq=1 ttl=117 time=11.8 ms
64 bytes from 142.250.185.78: icmp_seq=2 ttl=117 time=12.1 ms
64 bytes from 142.250.185.78: icmp_seq=3 ttl=117 time=11.9 ms

--- google.com ping statistics ---
4 packets transmitted, 4 packets received, 0.0% packet loss""",
    "clear": "",
    "uname -a": "Linux nl-terminal 5.15.0-generic #1 SMP x86_64 GNU/Linux",
    "cal": """    January 2025
Su Mo Tu We Th Fr Sa
          1  2  3  4
 5  6  7  8  9 10 11
12 13 14 15 16 17 18
19 20 21 22 23 24 25
26 27 28 29 30 31""",
}


def mock_output_for(command: str) -> str:
    """Return the canned output for a command, or a generic placeholder."""
    for key, output in MOCK_OUTPUTS.items():
        if key.split(" ")[0] in command:
            return output if output is not None else time.ctime()
    return f"Command executed: {command}\n[Output would appear here in a real terminal]"


class MockExecutor:
    """Returns canned outputs instead of touching the host shell."""

    def __init__(self, delay_range: Tuple[float, float] = (0.3, 0.8), seed: Optional[int] = None):
        self.delay_range = delay_range
        self._random = random.Random(seed)

    async def execute(self, command: str) -> ExecutionResult:
        low, high = self.delay_range
        if high > 0:
            await asyncio.sleep(self._random.uniform(low, high))

        output = mock_output_for(command)
        is_error = output.startswith("Error:")
        return ExecutionResult(
            success=not is_error,
            output=output,
            execution_time=self._random.randint(10, 109),
            exit_code=1 if is_error else 0
        )
