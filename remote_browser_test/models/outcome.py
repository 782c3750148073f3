"""Per-browser session outcome and the walk that builds it from a report."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from remote_browser_test.models.report import SpecReport, SuiteReport


@dataclass(frozen=True, kw_only=True)
class FailedTest:
    """A failing test as shown in the summary."""

    title: str
    message: str = ""
    stack: str | None = None


@dataclass(frozen=True, kw_only=True)
class SessionOutcome:
    """Aggregated result of one browser session."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    duration: float = 0.0
    failures: Sequence[FailedTest] = field(default_factory=tuple)

    @classmethod
    def no_results(cls) -> "SessionOutcome":
        """Outcome of a session that never produced a report."""
        return cls()

    @property
    def has_results(self) -> bool:
        """Whether any test reported a result."""
        return bool(self.passed or self.failed)

    @property
    def status(self) -> Literal["no results", "failed", "passed"]:
        """Classification used by the summary."""
        if not self.has_results:
            return "no results"
        if self.failed:
            return "failed"
        return "passed"

    def summary(self) -> dict[str, Any]:
        """Counts in the shape stored as custom data on the remote job."""
        return {
            "failed": self.failed,
            "passed": self.passed,
            "total": self.total,
            "runtime": self.duration * 1000,
        }


def summarize_report(report: SuiteReport | None) -> SessionOutcome:
    """Walk the suite tree and count its specs.

    A suite contributes the counts of its specs and child suites. A spec
    contributes one test, counted as passed or failed by its own state.
    """
    if report is None:
        return SessionOutcome.no_results()

    counts = {"total": 0, "passed": 0, "failed": 0}
    failures: list[FailedTest] = []

    def walk_suite(suite: SuiteReport, path: Sequence[str]) -> None:
        titles = [*path, suite.description] if suite.description else list(path)
        for spec in suite.specs:
            walk_spec(spec, titles)
        for child in suite.suites:
            walk_suite(child, titles)

    def walk_spec(spec: SpecReport, path: Sequence[str]) -> None:
        counts["total"] += 1
        if spec.passed:
            counts["passed"] += 1
            return
        counts["failed"] += 1
        failures.append(_failed_test(spec, path))

    walk_suite(report, ())

    return SessionOutcome(
        total=counts["total"],
        passed=counts["passed"],
        failed=counts["failed"],
        duration=report.duration_sec,
        failures=tuple(failures),
    )


def _failed_test(spec: SpecReport, path: Sequence[str]) -> FailedTest:
    title = spec.full_title or " ".join([*path, spec.description]).strip()
    if spec.error is None:
        return FailedTest(title=title)
    return FailedTest(title=title, message=spec.error.message, stack=spec.error.stack)
