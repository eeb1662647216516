"""Reporters receiving assertion failures."""

from jsonexpect.config import ReporterName
from jsonexpect.reporters.base import CollectingReporter, LoggingReporter, RaisingReporter, Reporter
from jsonexpect.reporters.console import ConsoleReporter

_REPORTERS: dict[str, type] = {
    "raise": RaisingReporter,
    "collect": CollectingReporter,
    "log": LoggingReporter,
    "console": ConsoleReporter,
}


def get_reporter(name: ReporterName) -> Reporter:
    """Build a reporter from its configuration name."""
    if name not in _REPORTERS:
        raise ValueError(f"Unknown reporter: '{name}'. Available: {list(_REPORTERS.keys())}")
    return _REPORTERS[name]()


__all__ = [
    "Reporter",
    "RaisingReporter",
    "CollectingReporter",
    "LoggingReporter",
    "ConsoleReporter",
    "get_reporter",
]
