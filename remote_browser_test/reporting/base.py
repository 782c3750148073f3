"""Abstract base class for remote job status reporters."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class JobReporter(ABC):
    """Posts the outcome of a remote session back to the grid service."""

    @abstractmethod
    async def update_status(
        self,
        job_id: str,
        *,
        passed: bool,
        metadata: Mapping[str, Any],
    ) -> None:
        """Mark a job as passed or failed.

        Args:
            job_id: Remote session ID
            passed: Whether the session's test run passed
            metadata: Custom data attached to the job

        """
