"""Tests for the consolidated run summary."""

import logging

import pytest

from remote_browser_test.models.config import BrowserSpec
from remote_browser_test.models.outcome import FailedTest, SessionOutcome
from remote_browser_test.summary import display_results
from remote_browser_test.testing.factories import SessionOutcomeFactory

CHROME = BrowserSpec(os="Windows 7", name="chrome", version="30")
FIREFOX = BrowserSpec(os="Linux", name="firefox", version="21")
SAFARI = BrowserSpec(os="OS X 10.8", name="safari", version="6")


def test_counts_failed_and_empty_sessions(caplog: pytest.LogCaptureFixture) -> None:
    """Returns the number of browsers that failed or had no results."""
    outcomes = {
        CHROME.display_name: SessionOutcomeFactory.build(total=5, passed=5),
        FIREFOX.display_name: SessionOutcome(
            total=3,
            passed=2,
            failed=1,
            failures=(FailedTest(title="Suite fails", message="boom"),),
        ),
        SAFARI.display_name: SessionOutcome.no_results(),
    }

    with caplog.at_level(logging.INFO):
        failures = display_results(
            logging.getLogger(), [CHROME, FIREFOX, SAFARI], outcomes
        )

    assert failures == 2
    assert "✓ chrome 30 (Windows 7): 5 passed" in caplog.text
    assert "✗ firefox 21 (Linux): 1/3 failed" in caplog.text
    assert "! safari 6 (OS X 10.8): no results" in caplog.text


def test_lists_browsers_in_configured_order(caplog: pytest.LogCaptureFixture) -> None:
    """Follows the order of the browser list, not of completion."""
    outcomes = {
        FIREFOX.display_name: SessionOutcomeFactory.build(),
        CHROME.display_name: SessionOutcomeFactory.build(),
    }

    with caplog.at_level(logging.INFO):
        display_results(logging.getLogger(), [CHROME, FIREFOX], outcomes)

    assert caplog.text.index("chrome") < caplog.text.index("firefox")


def test_shows_stack_of_failing_tests(caplog: pytest.LogCaptureFixture) -> None:
    """Logs each failing test title followed by its indented stack."""
    outcomes = {
        CHROME.display_name: SessionOutcome(
            total=2,
            passed=0,
            failed=2,
            failures=(
                FailedTest(
                    title="Parser parses floats",
                    message="expected 1 to equal 1.5",
                    stack="AssertionError: expected 1 to equal 1.5\n    at test.js:10",
                ),
                FailedTest(title="Parser parses ints", message="timeout"),
            ),
        )
    }

    with caplog.at_level(logging.INFO):
        failures = display_results(logging.getLogger(), [CHROME], outcomes)

    assert failures == 1
    assert "  1) Parser parses floats" in caplog.text
    assert "        AssertionError: expected 1 to equal 1.5" in caplog.text
    assert "            at test.js:10" in caplog.text
    assert "  2) Parser parses ints" in caplog.text
    assert "        timeout" in caplog.text


def test_missing_outcome_counts_as_no_results(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Counts a browser without an outcome as having no results."""
    with caplog.at_level(logging.INFO):
        failures = display_results(logging.getLogger(), [CHROME], {})

    assert failures == 1
    assert "no results" in caplog.text
