"""CLI entry point for running browser tests on a remote grid."""

import argparse
import asyncio
import functools
import logging
import os
import sys
from contextlib import AsyncExitStack
from pathlib import Path

from remote_browser_test.collect import collect_mocha_results
from remote_browser_test.models.config import RemoteConfig
from remote_browser_test.orchestrator import BUILD_ID_ENV, RemoteOrchestrator
from remote_browser_test.reporting.base import JobReporter
from remote_browser_test.reporting.saucelabs import SauceLabsReporter
from remote_browser_test.tunnel.base import TunnelLaunchError
from remote_browser_test.tunnel.sauce_connect import SauceConnectLauncher
from remote_browser_test.webdriver.client import WebDriverClient

EXIT_TUNNEL_ERROR = 2


def load_config(config_path: Path) -> RemoteConfig:
    """Load the run configuration from a JSON file."""
    return RemoteConfig.model_validate_json(config_path.read_text())


async def run(
    config_path: Path,
    build_id: str | None = None,
    results_timeout: float = 600,
    poll_interval: float = 2,
    session_timeout: float | None = None,
    sc_binary: str = "sc",
) -> int:
    """Run the remote tests and return exit code."""
    log = logging.getLogger("remote_browser_test")

    log.info("Loading configuration: %s", config_path)
    config = load_config(config_path)
    log.info("Running %r on %d browser(s)", config.name, len(config.browsers))

    tunnel_launcher = None
    if config.tunnel:
        tunnel_launcher = SauceConnectLauncher.from_config(config, binary=sc_binary)

    on_test = functools.partial(
        collect_mocha_results,
        timeout=results_timeout,
        poll_interval=poll_interval,
    )

    async with AsyncExitStack() as stack:
        client = await stack.enter_async_context(WebDriverClient.from_config(config))
        reporter: JobReporter | None = None
        if config.uses_saucelabs:
            reporter = await stack.enter_async_context(
                SauceLabsReporter.from_config(config)
            )

        orchestrator = RemoteOrchestrator(
            config=config,
            client=client,
            on_test=on_test,
            reporter=reporter,
            tunnel_launcher=tunnel_launcher,
            build_id=build_id or os.environ.get(BUILD_ID_ENV),
            session_timeout=session_timeout,
        )

        try:
            failures = await orchestrator.run()
        except TunnelLaunchError as exc:
            log.error("Aborting run: %s", exc)
            return EXIT_TUNNEL_ERROR

    log.info("%d browser(s) failed", failures)
    return 1 if failures else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run browser tests on a remote WebDriver grid"
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the JSON run configuration",
    )
    parser.add_argument(
        "--build-id",
        default=None,
        help="CI build identifier (default: $TRAVIS_BUILD_NUMBER)",
    )
    parser.add_argument(
        "--results-timeout",
        type=float,
        default=600,
        help="Seconds to wait for the page to publish its results",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=2,
        help="Seconds between two checks for results",
    )
    parser.add_argument(
        "--session-timeout",
        type=float,
        default=None,
        help="Seconds after which a session counts as having no results",
    )
    parser.add_argument(
        "--sc-binary",
        default="sc",
        help="Sauce Connect executable, used when the config enables the tunnel",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            config_path=args.config,
            build_id=args.build_id,
            results_timeout=args.results_timeout,
            poll_interval=args.poll_interval,
            session_timeout=args.session_timeout,
            sc_binary=args.sc_binary,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
