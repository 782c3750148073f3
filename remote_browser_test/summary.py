"""Consolidated summary of a remote run."""

import logging
from collections.abc import Mapping, Sequence

from remote_browser_test.models.config import BrowserSpec
from remote_browser_test.models.outcome import SessionOutcome

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "no results": "!",
}


def display_results(
    log: logging.Logger,
    browsers: Sequence[BrowserSpec],
    outcomes: Mapping[str, SessionOutcome],
) -> int:
    """Log the status of every browser and return how many did not pass."""
    log.info("=" * 80)
    log.info("Remote Test Results:")
    log.info("=" * 80)

    failures = 0
    for browser in browsers:
        name = browser.display_name
        outcome = outcomes.get(name, SessionOutcome.no_results())
        symbol = STATUS_SYMBOLS[outcome.status]

        if outcome.status == "no results":
            log.info("%s %s: no results", symbol, name)
            failures += 1
            continue

        if outcome.status == "passed":
            log.info("%s %s: %d passed", symbol, name, outcome.passed)
            continue

        failures += 1
        log.info(
            "%s %s: %d/%d failed",
            symbol,
            name,
            outcome.failed,
            outcome.passed + outcome.failed,
        )
        for n, test in enumerate(outcome.failures, start=1):
            log.info("  %d) %s", n, test.title)
            details = test.stack or test.message
            if details:
                log.info("%s", _indent(details, " " * 8))

    return failures


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())
