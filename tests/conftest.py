import io
import os
from typing import Any

import pytest

from loxexpr.lox_errors import ErrorReporter

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def reporter() -> ErrorReporter:
    """Error sink that renders into a buffer instead of stderr."""
    return ErrorReporter(io.StringIO())
