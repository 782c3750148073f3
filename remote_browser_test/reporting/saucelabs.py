"""Sauce Labs job status reporter."""

import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from remote_browser_test.models.config import RemoteConfig
from remote_browser_test.reporting.base import JobReporter

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SauceLabsReporter(JobReporter):
    """Updates jobs through the Sauce Labs REST API."""

    user: str
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: RemoteConfig
    ) -> AsyncGenerator["SauceLabsReporter", None]:
        """Create reporter with managed session lifecycle."""
        auth = aiohttp.BasicAuth(config.user, config.key.get_secret_value())
        async with aiohttp.ClientSession(
            base_url=config.rest_api_url,
            auth=auth,
        ) as session:
            yield cls(user=config.user, session=session)

    async def update_status(
        self,
        job_id: str,
        *,
        passed: bool,
        metadata: Mapping[str, Any],
    ) -> None:
        """Set the passed flag and custom data of a job."""
        url = f"{self.user}/jobs/{job_id}"
        # Only a summary fits in custom-data, the full report is too large
        payload = {"passed": passed, "custom-data": dict(metadata)}

        async with self.session.put(url, json=payload) as response:
            if response.status != 200:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to update job {job_id}: {response.status} {text}"
                )

        log.debug("Updated job %s: passed=%s", job_id, passed)
