"""Command Runner - runs external commands for the host services."""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from ...core.exceptions import CommandFailedError, HostEnvironmentError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    command: list
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs host commands. SRP: subprocess execution ONLY."""

    def __init__(self, timeout_seconds: float = 600.0):
        self._timeout = timeout_seconds

    def command_exists(self, name: str) -> bool:
        """Check whether ``name`` resolves on PATH."""
        return shutil.which(name) is not None

    async def run(
        self,
        command: Sequence[str],
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``command``; raise CommandFailedError on non-zero exit when ``check``."""
        cmd = list(command)
        logger.debug(f"Running: {' '.join(cmd)}")

        process_env = None
        if env:
            process_env = {**os.environ, **env}

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=process_env,
            )
        except FileNotFoundError as e:
            raise HostEnvironmentError(f"Command not found: {cmd[0]}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise HostEnvironmentError(
                f"Command '{' '.join(cmd)}' timed out after {self._timeout:.0f}s"
            )

        result = CommandResult(
            command=cmd,
            returncode=process.returncode,
            stdout=stdout.decode(errors="replace") if stdout else "",
            stderr=stderr.decode(errors="replace") if stderr else "",
        )

        if check and not result.ok:
            raise CommandFailedError(cmd, result.returncode, result.stderr)
        return result
