from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from jsonexpect.config import get_settings
from jsonexpect.reporters import Reporter, get_reporter


REPORTER_CONTEXT: ContextVar[Reporter | None] = ContextVar("reporter_context", default=None)


def get_current_reporter() -> Reporter:
    """Return the reporter bound by `reporter_scope`, or the configured default."""
    if (reporter := REPORTER_CONTEXT.get()) is not None:
        return reporter
    return get_reporter(get_settings().default_reporter)


@contextmanager
def reporter_scope(reporter: Reporter) -> Iterator[Reporter]:
    """Temporarily set `REPORTER_CONTEXT` for the duration of the ``with`` block.

    Parameters
    ----------
    reporter : Reporter
        Reporter used by assertions created without an explicit one.
    """
    token = REPORTER_CONTEXT.set(reporter)
    try:
        yield reporter
    finally:
        REPORTER_CONTEXT.reset(token)
