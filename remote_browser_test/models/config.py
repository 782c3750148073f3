"""Configuration of a remote browser test run."""

from collections.abc import Sequence

from pydantic import ConfigDict, Field, SecretStr

from remote_browser_test.models.base import Model

DEFAULT_WEBDRIVER_HOST = "ondemand.saucelabs.com"


class BrowserSpec(Model):
    """A browser to launch on the remote grid."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    os: str | None = Field(default=None, description="Platform (e.g., 'Windows 8')")
    name: str = Field(..., description="Browser name (e.g., 'firefox')")
    version: str | None = Field(default=None, description="Browser version")

    @property
    def display_name(self) -> str:
        """Human-readable name, also used as the key of the session outcome."""
        name = self.name
        if self.version:
            name += f" {self.version}"
        if self.os:
            name += f" ({self.os})"
        return name


class RemoteConfig(Model):
    """Configuration for running tests on a remote browser grid."""

    user: str
    key: SecretStr
    name: str
    browsers: Sequence[BrowserSpec]
    url: str | None = None
    tunnel: bool = False
    # None targets Sauce Labs, which also enables job status reporting
    webdriver_url: str | None = None
    webdriver_port: int = 80
    rest_api_url: str = "https://saucelabs.com/rest/v1/"

    @property
    def uses_saucelabs(self) -> bool:
        """Whether sessions run on the Sauce Labs grid."""
        return self.webdriver_url is None

    @property
    def webdriver_base_url(self) -> str:
        """Base URL of the WebDriver hub."""
        host = self.webdriver_url or DEFAULT_WEBDRIVER_HOST
        return f"http://{host}:{self.webdriver_port}/wd/hub/"
