"""Abstract base classes for tunnels exposing local pages to the remote grid."""

import signal
from abc import ABC, abstractmethod

# Exit status of a tunnel process stopped with SIGTERM
EXPECTED_TERMINATION_CODES = frozenset([128 + signal.SIGTERM, -signal.SIGTERM])


class TunnelLaunchError(Exception):
    """Raised when the tunnel could not be started."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode

    @property
    def expected_termination(self) -> bool:
        """Whether the tunnel stopped because it was asked to terminate."""
        return self.returncode in EXPECTED_TERMINATION_CODES


class TunnelHandle(ABC):
    """A running tunnel."""

    @abstractmethod
    async def close(self) -> None:
        """Stop the tunnel."""


class TunnelLauncher(ABC):
    """Starts a tunnel."""

    @abstractmethod
    async def start(self) -> TunnelHandle:
        """Start the tunnel and return once it is ready.

        Raises:
            TunnelLaunchError: If the tunnel failed to start

        """
