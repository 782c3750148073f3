"""Sauce Connect tunnel running as a local subprocess."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import SecretStr

from remote_browser_test.models.config import RemoteConfig
from remote_browser_test.tunnel.base import (
    TunnelHandle,
    TunnelLauncher,
    TunnelLaunchError,
)

log = logging.getLogger(__name__)

READY_MARKER = "Sauce Connect is up"


@dataclass(kw_only=True)
class SauceConnectTunnel(TunnelHandle):
    """A running Sauce Connect process."""

    process: asyncio.subprocess.Process = field(repr=False)
    drain_task: asyncio.Task[None] | None = field(default=None, repr=False)

    async def close(self) -> None:
        """Terminate the process and wait for it to exit."""
        if self.process.returncode is None:
            log.info("Stopping Sauce Connect (pid=%s)", self.process.pid)
            self.process.terminate()
        returncode = await self.process.wait()
        if self.drain_task is not None:
            await self.drain_task
        log.info("Sauce Connect exited with code %s", returncode)


@dataclass(frozen=True, kw_only=True)
class SauceConnectLauncher(TunnelLauncher):
    """Launches the `sc` binary and waits until the tunnel is up."""

    user: str
    key: SecretStr
    binary: str = "sc"
    extra_args: Sequence[str] = ()
    verbose: bool = False
    startup_timeout: float | None = None

    @classmethod
    def from_config(
        cls,
        config: RemoteConfig,
        *,
        binary: str = "sc",
        startup_timeout: float | None = None,
    ) -> "SauceConnectLauncher":
        """Create launcher using the run credentials."""
        return cls(
            user=config.user,
            key=config.key,
            binary=binary,
            startup_timeout=startup_timeout,
        )

    async def start(self) -> SauceConnectTunnel:
        """Start Sauce Connect and return once it reports being up."""
        log.info("Starting Sauce Connect (%s)", self.binary)
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary,
                "--user",
                self.user,
                "--api-key",
                self.key.get_secret_value(),
                *self.extra_args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            raise TunnelLaunchError(f"Unable to run {self.binary}: {exc}") from exc

        if process.stdout is None:
            process.kill()
            await process.wait()
            raise TunnelLaunchError(f"Output of {self.binary} is not captured")
        stdout = process.stdout

        try:
            async with asyncio.timeout(self.startup_timeout):
                ready = await self._wait_until_ready(stdout)
        except TimeoutError as exc:
            process.kill()
            await process.wait()
            raise TunnelLaunchError(
                f"Sauce Connect not ready within {self.startup_timeout} seconds"
            ) from exc

        if not ready:
            returncode = await process.wait()
            raise TunnelLaunchError(
                f"Sauce Connect exited before being ready (Exit code {returncode})",
                returncode=returncode,
            )

        log.info("Sauce Connect is ready (pid=%s)", process.pid)
        drain_task = asyncio.create_task(self._drain(stdout))
        return SauceConnectTunnel(process=process, drain_task=drain_task)

    async def _wait_until_ready(self, stdout: asyncio.StreamReader) -> bool:
        """Read output until the ready marker. False if the output ends first."""
        while line := await stdout.readline():
            text = self._log_line(line)
            if READY_MARKER in text:
                return True
        return False

    async def _drain(self, stdout: asyncio.StreamReader) -> None:
        """Keep reading output so the process never blocks on a full pipe."""
        while line := await stdout.readline():
            self._log_line(line)

    def _log_line(self, line: bytes) -> str:
        text = line.decode(errors="replace").rstrip()
        if self.verbose:
            log.info("sc: %s", text)
        else:
            log.debug("sc: %s", text)
        return text
