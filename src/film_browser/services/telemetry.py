from __future__ import annotations

import contextlib
import time
from typing import Iterator

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


@contextlib.contextmanager
def timed_operation(label: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        console.log(f"\\[telemetry] {escape(label)} completed in {duration:.2f}s")


def report_failure(label: str, exc: BaseException) -> None:
    """Surface an error the caller has chosen not to propagate."""
    console.log(f"[red]{escape(label)} failed[/red]: {escape(repr(exc))}")
