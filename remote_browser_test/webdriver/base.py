"""Abstract base classes for remote browser automation clients."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class AutomationBrowser(ABC):
    """Handle on one remote browser session."""

    @abstractmethod
    async def init(self, desired: Mapping[str, Any]) -> str:
        """Start a remote session.

        Args:
            desired: Session descriptor (name, browserName, platform, version,
                build, tags)

        Returns:
            Remote session ID

        """

    @abstractmethod
    async def get(self, url: str) -> None:
        """Navigate the session to a URL."""

    @abstractmethod
    async def execute(self, script: str, args: Sequence[Any] = ()) -> Any:
        """Execute a script in the page and return its value."""

    @abstractmethod
    async def quit(self) -> None:
        """Terminate the remote session."""

    async def wait_for_value(
        self,
        script: str,
        timeout: float = 600,
        poll_interval: float = 1,
    ) -> Any:
        """Run a script until it returns something other than None.

        Args:
            script: Script to execute in the page
            timeout: Maximum wait time in seconds (default: 10 minutes)
            poll_interval: Seconds between polls (default: 1)

        Returns:
            The first non-None value returned by the script

        Raises:
            TimeoutError: If no value is returned within timeout

        """
        deadline = asyncio.get_event_loop().time() + timeout

        while True:
            if (value := await self.execute(script)) is not None:
                return value

            if asyncio.get_event_loop().time() >= deadline:
                raise TimeoutError(f"Script returned no value within {timeout} seconds")

            await asyncio.sleep(poll_interval)


class AutomationClient(ABC):
    """Factory of browser handles bound to one remote grid."""

    @abstractmethod
    def remote(self, name: str) -> AutomationBrowser:
        """Create a handle for a new session, labelled `name` in logs."""
