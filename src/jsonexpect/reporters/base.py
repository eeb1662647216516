"""Reporter protocol and the built-in reporters."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from jsonexpect.config import ExpectSettings, get_settings
from jsonexpect.failure import AssertionFailedError, FailureRecord


@runtime_checkable
class Reporter(Protocol):
    """Receives failure records from assertion chains.

    ``report`` is called synchronously from the thread running the
    assertion, zero or more times. Whether a report aborts the test is up to
    the reporter.
    """

    def report(self, record: FailureRecord) -> None: ...


class RaisingReporter:
    """Reporter that raises ``AssertionFailedError`` for every record."""

    def __init__(self, settings: ExpectSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def report(self, record: FailureRecord) -> None:
        message = record.render(
            show_trail=self.settings.show_trail,
            max_value_length=self.settings.max_value_length,
        )
        raise AssertionFailedError(record, message)


class CollectingReporter:
    """Reporter that keeps every record it receives."""

    def __init__(self) -> None:
        self.records: list[FailureRecord] = []

    def report(self, record: FailureRecord) -> None:
        self.records.append(record)

    @property
    def failed(self) -> bool:
        return bool(self.records)

    def clear(self) -> None:
        self.records.clear()


class LoggingReporter:
    """Reporter that writes each record to a logger.

    Parameters
    ----------
    logger : logging.Logger or None
        Target logger; defaults to ``jsonexpect.reporters``.
    level : int or str or None
        Log level; defaults to ``ExpectSettings.log_level``.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int | str | None = None,
        settings: ExpectSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = logger or logging.getLogger("jsonexpect.reporters")
        level = level if level is not None else self.settings.log_level
        self.level = logging.getLevelName(level.upper()) if isinstance(level, str) else level

    def report(self, record: FailureRecord) -> None:
        self.logger.log(
            self.level,
            record.render(
                show_trail=self.settings.show_trail,
                max_value_length=self.settings.max_value_length,
            ),
        )
