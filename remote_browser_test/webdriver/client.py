"""WebDriver hub client over aiohttp."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from remote_browser_test.models.config import RemoteConfig
from remote_browser_test.webdriver.base import AutomationBrowser, AutomationClient
from remote_browser_test.webdriver.models import CommandResponse, NewSessionResponse

log = logging.getLogger(__name__)


class WebDriverError(RuntimeError):
    """Raised when the hub rejects a command."""


def w3c_capabilities(desired: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a legacy descriptor to W3C capabilities with Sauce options."""
    always_match: dict[str, Any] = {"browserName": desired.get("browserName")}
    if desired.get("platform"):
        always_match["platformName"] = desired["platform"]
    if desired.get("version"):
        always_match["browserVersion"] = desired["version"]

    sauce_options = {
        key: desired[key]
        for key in ("name", "build", "tags")
        if desired.get(key) is not None
    }
    if sauce_options:
        always_match["sauce:options"] = sauce_options

    return {"alwaysMatch": always_match}


@dataclass(kw_only=True)
class WebDriverBrowser(AutomationBrowser):
    """One remote session on a WebDriver hub."""

    name: str
    session: aiohttp.ClientSession = field(repr=False)
    session_id: str | None = None

    async def init(self, desired: Mapping[str, Any]) -> str:
        """Create the remote session and return its ID."""
        payload = {
            "desiredCapabilities": dict(desired),
            "capabilities": w3c_capabilities(desired),
        }
        log.info("%s : > POST: session", self.name)

        async with self.session.post("session", json=payload) as response:
            if response.status != 200:
                text = await response.text()
                raise WebDriverError(
                    f"Failed to create session: {response.status} {text}"
                )
            data = await response.json()

        new_session = NewSessionResponse.model_validate(data)
        if new_session.status != 0:
            raise WebDriverError(
                f"Failed to create session: {new_session.error_message}"
            )
        if (session_id := new_session.session_id) is None:
            raise WebDriverError("Session ID not found in response")

        self.session_id = session_id
        log.info("%s : Session started: %s", self.name, session_id)
        return session_id

    async def get(self, url: str) -> None:
        """Load `url` in the session."""
        await self.command("POST", "url", {"url": url})

    async def execute(self, script: str, args: Sequence[Any] = ()) -> Any:
        """Execute a synchronous script in the page."""
        return await self.command(
            "POST", "execute/sync", {"script": script, "args": list(args)}
        )

    async def quit(self) -> None:
        """Delete the session."""
        await self.command("DELETE", "")
        log.info("%s : Session ended: %s", self.name, self.session_id)
        self.session_id = None

    async def command(
        self,
        method: str,
        path: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a command to the current session and return its value."""
        if self.session_id is None:
            raise WebDriverError(f"{self.name}: session not started")

        url = f"session/{self.session_id}"
        if path:
            url = f"{url}/{path}"
        log.info("%s : > %s: %s", self.name, method, url)

        async with self.session.request(method, url, json=payload) as response:
            if response.status != 200:
                text = await response.text()
                raise WebDriverError(
                    f"Command {method} {path or 'session'} failed: "
                    f"{response.status} {text}"
                )
            data = await response.json()

        result = CommandResponse.model_validate(data)
        if result.status != 0:
            raise WebDriverError(
                f"Command {method} {path or 'session'} failed: {result.error_message}"
            )
        return result.value


@dataclass(frozen=True, kw_only=True)
class WebDriverClient(AutomationClient):
    """Creates sessions on a WebDriver hub sharing one HTTP session."""

    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: RemoteConfig
    ) -> AsyncGenerator["WebDriverClient", None]:
        """Create client with managed session lifecycle."""
        auth = aiohttp.BasicAuth(config.user, config.key.get_secret_value())
        async with aiohttp.ClientSession(
            base_url=config.webdriver_base_url,
            auth=auth,
        ) as session:
            yield cls(session=session)

    def remote(self, name: str) -> WebDriverBrowser:
        """Create a handle for a new session."""
        return WebDriverBrowser(name=name, session=self.session)
