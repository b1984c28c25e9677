"""Progress reporting for the batch jobs.

The import and calculation jobs report through a small ``JobReporter``
capability instead of module loggers, so they can be exercised without any
logging configuration and their events can be asserted on in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol


class JobReporter(Protocol):
    """Sink for job progress events."""

    def info(self, event: str, **fields: Any) -> None:
        ...

    def warning(self, event: str, **fields: Any) -> None:
        ...

    def error(self, event: str, exc: BaseException | None = None, **fields: Any) -> None:
        ...


def _render(job: str, event: str, fields: dict[str, Any]) -> str:
    if not fields:
        return f"[{job}] {event}"
    details = " ".join(f"{key}={value}" for key, value in fields.items())
    return f"[{job}] {event} {details}"


class LoggingReporter:
    """``JobReporter`` backed by the standard logging module."""

    def __init__(self, job: str, logger: logging.Logger | None = None) -> None:
        self.job = job
        self.logger = logger or logging.getLogger(f"carteira.jobs.{job}")

    def info(self, event: str, **fields: Any) -> None:
        self.logger.info("%s", _render(self.job, event, fields))

    def warning(self, event: str, **fields: Any) -> None:
        self.logger.warning("%s", _render(self.job, event, fields))

    def error(self, event: str, exc: BaseException | None = None, **fields: Any) -> None:
        self.logger.error("%s", _render(self.job, event, fields), exc_info=exc)


@dataclass
class ReportedEvent:
    level: str
    event: str
    fields: dict[str, Any]
    exc: BaseException | None = None


@dataclass
class RecordingReporter:
    """In-memory reporter for tests and interactive use."""

    events: list[ReportedEvent] = field(default_factory=list)

    def info(self, event: str, **fields: Any) -> None:
        self.events.append(ReportedEvent("info", event, fields))

    def warning(self, event: str, **fields: Any) -> None:
        self.events.append(ReportedEvent("warning", event, fields))

    def error(self, event: str, exc: BaseException | None = None, **fields: Any) -> None:
        self.events.append(ReportedEvent("error", event, fields, exc))

    def by_level(self, level: str) -> list[ReportedEvent]:
        return [item for item in self.events if item.level == level]


__all__ = ["JobReporter", "LoggingReporter", "RecordingReporter", "ReportedEvent"]
