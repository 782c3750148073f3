"""Default per-session test callback: collect the in-page mocha results."""

import logging
from typing import Any

from remote_browser_test.webdriver.base import AutomationBrowser

log = logging.getLogger(__name__)

# The in-page reporter stores the root suite on window.mochaResults at the end
MOCHA_RESULTS_SCRIPT = "return window.mochaResults || null;"


async def collect_mocha_results(
    browser: AutomationBrowser,
    timeout: float = 600,
    poll_interval: float = 2,
) -> Any:
    """Wait for the page's test run to end and return its raw report."""
    log.info("Waiting for test results (timeout=%ss)", timeout)
    return await browser.wait_for_value(
        MOCHA_RESULTS_SCRIPT, timeout=timeout, poll_interval=poll_interval
    )
