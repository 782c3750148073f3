"""Integration tests for the Sauce Labs job reporter."""

from collections.abc import AsyncGenerator

import pytest
from aioresponses import aioresponses as aioresponses_cls
from pydantic import SecretStr
from yarl import URL

from remote_browser_test.models.config import RemoteConfig
from remote_browser_test.reporting import SauceLabsReporter
from remote_browser_test.testing.factories import RemoteConfigFactory

API_BASE_URL = "http://saucelabs.test/rest/v1"


@pytest.fixture
def config() -> RemoteConfig:
    """Create test configuration."""
    return RemoteConfigFactory.build(
        user="smpl",
        key=SecretStr("secret"),
        rest_api_url=f"{API_BASE_URL}/",
    )


@pytest.fixture
async def reporter(
    config: RemoteConfig, aioresponses: aioresponses_cls
) -> AsyncGenerator[SauceLabsReporter, None]:
    """Create reporter with managed session."""
    async with SauceLabsReporter.from_config(config) as impl:
        yield impl


async def test_updates_job(
    reporter: SauceLabsReporter, aioresponses: aioresponses_cls
) -> None:
    """Puts the passed flag and custom data on the job."""
    url = f"{API_BASE_URL}/smpl/jobs/abc123"
    aioresponses.put(url, status=200, payload={"id": "abc123", "passed": True})

    await reporter.update_status(
        "abc123",
        passed=True,
        metadata={"mocha": {"failed": 0, "passed": 5, "total": 5, "runtime": 1500}},
    )

    call = aioresponses.requests[("PUT", URL(url))][0]
    assert call.kwargs["json"] == {
        "passed": True,
        "custom-data": {
            "mocha": {"failed": 0, "passed": 5, "total": 5, "runtime": 1500}
        },
    }


async def test_raises_on_error_status(
    reporter: SauceLabsReporter, aioresponses: aioresponses_cls
) -> None:
    """Raises RuntimeError when the API rejects the update."""
    aioresponses.put(f"{API_BASE_URL}/smpl/jobs/abc123", status=404, body="Not found")

    with pytest.raises(RuntimeError, match="Failed to update job abc123: 404"):
        await reporter.update_status("abc123", passed=False, metadata={})
