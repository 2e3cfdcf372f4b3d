"""Wall-clock timing for collectors."""

import time
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta


class Timer:
    """Measures elapsed wall-clock time in whole milliseconds."""

    def __init__(self) -> None:
        self.start_time: float | None = None
        self.end_time: float | None = None

    def start(self) -> "Timer":
        """Mark the start of execution."""
        self.start_time = time.perf_counter()
        self.end_time = None
        return self

    def stop(self) -> int:
        """Mark the end of execution and return the duration."""
        self.end_time = time.perf_counter()
        return self.elapsed_ms

    @property
    def elapsed_ms(self) -> int:
        """Get execution duration in milliseconds."""
        if self.start_time is None:
            return 0
        end = self.end_time or time.perf_counter()
        return max(0, round((end - self.start_time) * 1000))


@contextmanager
def timed() -> Generator[Timer, None, None]:
    """Context manager yielding a started Timer, stopped on exit."""
    timer = Timer().start()
    try:
        yield timer
    finally:
        timer.stop()


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso_utc(moment: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_from_offset(now: datetime, seconds: int) -> str:
    """ISO timestamp for a point ``seconds`` after now."""
    return iso_utc(now + timedelta(seconds=seconds))
