"""Models for the raw status report produced by the in-page mocha reporter."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field


class ReportModel(BaseModel):
    """Base for report models. The payload comes from browser code, so extra keys
    are ignored and field names follow its camelCase."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ErrorReport(ReportModel):
    """Error captured for a failing spec."""

    message: str = ""
    stack: str | None = None


class SpecReport(ReportModel):
    """A single test."""

    description: str = ""
    passed: bool
    duration_sec: float = Field(default=0.0, alias="durationSec")
    full_title: str | None = Field(default=None, alias="fullTitle")
    error: ErrorReport | None = None


class SuiteReport(ReportModel):
    """A suite holding specs and nested suites."""

    description: str = ""
    passed: bool = True
    duration_sec: float = Field(default=0.0, alias="durationSec")
    suites: Sequence["SuiteReport"] = Field(default_factory=list)
    specs: Sequence[SpecReport] = Field(default_factory=list)
