"""Orchestrates a test run across several browsers on a remote grid."""

import asyncio
import logging
import os
import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import ValidationError

from remote_browser_test.models.config import BrowserSpec, RemoteConfig
from remote_browser_test.models.outcome import SessionOutcome, summarize_report
from remote_browser_test.models.report import SuiteReport
from remote_browser_test.reporting.base import JobReporter
from remote_browser_test.summary import display_results
from remote_browser_test.tunnel.base import (
    TunnelHandle,
    TunnelLauncher,
    TunnelLaunchError,
)
from remote_browser_test.webdriver.base import AutomationBrowser, AutomationClient

log = logging.getLogger(__name__)

BUILD_ID_ENV = "TRAVIS_BUILD_NUMBER"
CI_TAG = "travis"
LOCAL_TAG = "custom"

OnTest: TypeAlias = Callable[[AutomationBrowser], Awaitable[Any]]
OnComplete: TypeAlias = Callable[[int | TunnelLaunchError], None]


def build_tags(build_id: str | None, rng: random.Random | None = None) -> list[str]:
    """Tags attached to every session of a run.

    CI runs are tagged with the build ID; local runs get a random number
    so their sessions can be grouped.
    """
    if build_id:
        return [CI_TAG, build_id]
    rng = rng or random.Random()
    return [LOCAL_TAG, str(rng.randrange(100_000_000))]


@dataclass(kw_only=True)
class RunState:
    """Mutable state of one run, shared by the session tasks."""

    remaining: int
    outcomes: dict[str, SessionOutcome] = field(default_factory=dict)
    tunnel: TunnelHandle | None = None
    tasks: set[asyncio.Task[None]] = field(default_factory=set)
    all_done: asyncio.Event = field(default_factory=asyncio.Event)

    def __post_init__(self) -> None:
        if self.remaining <= 0:
            self.all_done.set()

    def session_finished(self) -> bool:
        """Count one session as done. True when it was the last one."""
        self.remaining -= 1
        if self.remaining == 0:
            self.all_done.set()
            return True
        return False


@dataclass(kw_only=True)
class RemoteOrchestrator:
    """Runs the configured browsers on a remote grid and aggregates results.

    Sessions are launched in order, each one as soon as the previous session
    is initialized, so several sessions run on the grid at the same time.
    The tunnel is stopped and the summary shown once every session is done.
    """

    config: RemoteConfig
    client: AutomationClient
    on_test: OnTest
    reporter: JobReporter | None = None
    tunnel_launcher: TunnelLauncher | None = None
    build_id: str | None = field(default_factory=lambda: os.environ.get(BUILD_ID_ENV))
    summary_delay: float = 1.0
    session_timeout: float | None = None
    tags: Sequence[str] = field(init=False)

    def __post_init__(self) -> None:
        if self.config.tunnel and self.tunnel_launcher is None:
            raise ValueError("Tunnel requested but no tunnel launcher configured")
        self.tags = build_tags(self.build_id)

    async def run(self, on_complete: OnComplete | None = None) -> int:
        """Run the tests on every browser.

        Args:
            on_complete: Called once, with the number of failed browsers or
                with the error that aborted the run

        Returns:
            Number of browsers that failed or produced no results

        Raises:
            TunnelLaunchError: If the tunnel could not be started; no session
                is launched in that case

        """
        try:
            tunnel = await self._start_tunnel()
        except TunnelLaunchError as exc:
            if on_complete is not None:
                on_complete(exc)
            raise

        state = RunState(remaining=len(self.config.browsers), tunnel=tunnel)

        try:
            for index in range(len(self.config.browsers)):
                await self.start_browser(index, state)
                # Let the previous session's task start before the next launch
                await asyncio.sleep(0)
            await state.all_done.wait()
            log.info("All %d browser session(s) completed", len(self.config.browsers))
        finally:
            for task in list(state.tasks):
                task.cancel()
            await self._stop_tunnel(state)

        await asyncio.sleep(self.summary_delay)
        failures = display_results(log, self.config.browsers, state.outcomes)

        if on_complete is not None:
            on_complete(failures)
        return failures

    async def start_browser(self, index: int, state: RunState) -> None:
        """Initialize the session of browser `index` and start its tests.

        Returns as soon as the session is initialized; the tests run in a
        separate task.
        """
        spec = self.config.browsers[index]
        name = spec.display_name

        try:
            browser = self.client.remote(name)
            session_id = await browser.init(self.desired_capabilities(spec))
        except Exception as exc:
            log.error("%s : unable to start session: %s", name, exc, exc_info=exc)
            state.outcomes[name] = SessionOutcome.no_results()
            self.finish(state)
            return

        task = asyncio.create_task(self._run_session(browser, name, session_id, state))
        state.tasks.add(task)
        task.add_done_callback(state.tasks.discard)

    def desired_capabilities(self, spec: BrowserSpec) -> dict[str, Any]:
        """Session descriptor sent when initializing a browser."""
        return {
            "name": f"{self.config.name} - {spec.display_name}",
            "browserName": spec.name,
            "platform": spec.os,
            "version": spec.version,
            "build": self.build_id,
            "tags": list(self.tags),
        }

    async def _run_session(
        self,
        browser: AutomationBrowser,
        name: str,
        session_id: str,
        state: RunState,
    ) -> None:
        """Navigate, run the tests and handle completion of one session."""
        try:
            raw_report = await self._run_test(browser, name)
            await self.test_done(browser, name, session_id, raw_report, state)
        finally:
            self.finish(state)

    async def _run_test(self, browser: AutomationBrowser, name: str) -> Any:
        try:
            async with asyncio.timeout(self.session_timeout):
                if self.config.url:
                    await browser.get(self.config.url)
                return await self.on_test(browser)
        except TimeoutError as exc:
            log.warning(
                "%s : tests timed out: %s",
                name,
                str(exc) or f"no result after {self.session_timeout} seconds",
            )
        except Exception as exc:
            log.warning("%s : test run failed: %s", name, exc, exc_info=exc)
        return None

    async def test_done(
        self,
        browser: AutomationBrowser,
        name: str,
        session_id: str,
        raw_report: Any,
        state: RunState,
    ) -> None:
        """Close the session, record its outcome and report it."""
        try:
            await browser.quit()
        except Exception as exc:
            log.warning("%s : unable to quit session: %s", name, exc)

        report = self._parse_report(name, raw_report)
        outcome = summarize_report(report)
        state.outcomes[name] = outcome
        log.info(
            "%s : %d passed, %d failed, %d total",
            name,
            outcome.passed,
            outcome.failed,
            outcome.total,
        )

        await self.report(session_id, name, report, outcome)

    async def report(
        self,
        session_id: str,
        name: str,
        report: SuiteReport | None,
        outcome: SessionOutcome,
    ) -> None:
        """Post the outcome to the remote job. Failures are only logged."""
        if self.reporter is None:
            return

        success = (
            report is not None and report.passed and outcome.status == "passed"
        )
        try:
            await self.reporter.update_status(
                session_id, passed=success, metadata={"mocha": outcome.summary()}
            )
        except Exception as exc:
            log.warning(
                "%s : > job %s: unable to set status: %s", name, session_id, exc
            )
            return

        log.info(
            "%s : > job %s marked as %s",
            name,
            session_id,
            "passed" if success else "failed",
        )

    def finish(self, state: RunState) -> None:
        """Count down one session."""
        if state.session_finished():
            log.debug("Last browser session finished")

    def _parse_report(self, name: str, raw_report: Any) -> SuiteReport | None:
        if raw_report is None:
            return None
        try:
            return SuiteReport.model_validate(raw_report)
        except ValidationError as exc:
            log.warning("%s : invalid test report: %s", name, exc)
            return None

    async def _start_tunnel(self) -> TunnelHandle | None:
        if not self.config.tunnel or self.tunnel_launcher is None:
            return None

        try:
            return await self.tunnel_launcher.start()
        except TunnelLaunchError as exc:
            if exc.expected_termination:
                log.warning("Tunnel terminated during startup: %s", exc)
                return None
            log.error("Error launching tunnel: %s", exc)
            raise

    async def _stop_tunnel(self, state: RunState) -> None:
        if state.tunnel is None:
            return
        tunnel, state.tunnel = state.tunnel, None
        await tunnel.close()
