"""Reporting of session outcomes to the remote grid service."""

from remote_browser_test.reporting.base import JobReporter
from remote_browser_test.reporting.saucelabs import SauceLabsReporter

__all__ = ["JobReporter", "SauceLabsReporter"]
