"""Remote browser automation over the WebDriver protocol."""

from remote_browser_test.webdriver.base import AutomationBrowser, AutomationClient
from remote_browser_test.webdriver.client import (
    WebDriverBrowser,
    WebDriverClient,
    WebDriverError,
)

__all__ = [
    "AutomationBrowser",
    "AutomationClient",
    "WebDriverBrowser",
    "WebDriverClient",
    "WebDriverError",
]
