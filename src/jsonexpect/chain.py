"""Failure propagation context shared by the steps of a fluent assertion."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from jsonexpect.config import ExpectSettings, get_settings
from jsonexpect.failure import FailureRecord
from jsonexpect.reporters.base import Reporter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FailureState:
    """Failed flag shared between a chain and every chain cloned from it."""

    failed: bool = False


class Chain:
    """Propagation context owned by one assertion instance.

    The chain keeps a trail of operation labels for diagnostics and a failed
    flag. Once any step fails, the flag stays set and later steps skip their
    work, so only the first real failure reaches the reporter.

    A chain is meant for one caller issuing calls one after another; it does
    no locking.

    Parameters
    ----------
    name : str
        Root label, e.g. ``"Number(123)"``.
    reporter : Reporter
        Receives failure records. Must not be ``None``.
    settings : ExpectSettings or None
        Overrides process-wide settings.
    """

    def __init__(
        self,
        name: str,
        reporter: Reporter,
        settings: ExpectSettings | None = None,
        *,
        _state: FailureState | None = None,
    ):
        if reporter is None:
            raise ValueError("reporter is required")
        self.reporter = reporter
        self.settings = settings or get_settings()
        self._labels: list[str] = [name]
        self._alias: str | None = None
        self._state = _state if _state is not None else FailureState()

    def __repr__(self) -> str:
        status = "failed" if self.failed() else "active"
        return f"Chain({self.path!r}, {status})"

    @property
    def trail(self) -> list[str]:
        """Labels from the root down to the running operation."""
        return list(self._labels)

    @property
    def path(self) -> str:
        return ".".join(self._labels)

    @property
    def depth(self) -> int:
        """Number of entered operations not yet left."""
        return len(self._labels) - 1

    @property
    def alias(self) -> str | None:
        return self._alias

    def set_alias(self, name: str) -> None:
        """Use ``name`` instead of the root label in future failure records."""
        self._alias = name

    def enter(self, label: str) -> Chain:
        self._labels.append(label)
        return self

    def leave(self) -> None:
        if len(self._labels) <= 1:
            raise RuntimeError("Chain.leave() called without matching enter()")
        self._labels.pop()

    @contextmanager
    def scope(self, label: str) -> Iterator[Chain]:
        """Enter ``label`` for the duration of the ``with`` block.

        The label is popped on every exit path, including early returns.
        """
        self.enter(label)
        try:
            yield self
        finally:
            self.leave()

    def failed(self) -> bool:
        return self._state.failed

    def fail(self, record: FailureRecord) -> None:
        """Mark the chain failed and forward ``record`` to the reporter.

        Every call forwards a new record; an assertion step must call it at
        most once.
        """
        self._state.failed = True
        record.name = self._alias or self._labels[0]
        record.trail = self.trail
        logger.debug(
            "assertion failed\n%s",
            record.render(show_trail=self.settings.show_trail, max_value_length=self.settings.max_value_length),
        )
        self.reporter.report(record)

    def clone(self) -> Chain:
        """Return a chain sharing the failed state and reporter.

        The clone starts from a copy of the current trail and alias and tracks
        its own labels from then on.
        """
        child = Chain(self._labels[0], self.reporter, self.settings, _state=self._state)
        child._labels = list(self._labels)
        child._alias = self._alias
        return child
