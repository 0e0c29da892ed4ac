"""URL-safe event slugs: ``<title-base>-<millisecond stamp>``."""
import re
import threading
import time
from typing import Callable, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
MAX_BASE_LENGTH = 200


class MonotonicMillis:
    """Millisecond wall-clock stamps that are strictly increasing within the process.

    Two calls in the same millisecond get consecutive values instead of the
    same one, so identical titles never produce the same slug here. The
    guarantee is per process: separate workers can still stamp the same
    value, and event_service retries the insert with a fresh slug when that
    happens.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = now if now > self._last else self._last + 1
            return self._last


_default_clock = MonotonicMillis()


def slug_base(title: str) -> str:
    base = _NON_ALNUM.sub("-", title.lower()).strip("-")[:MAX_BASE_LENGTH].rstrip("-")
    return base or "event"


def generate_slug(title: str, clock: Optional[MonotonicMillis] = None) -> str:
    return f"{slug_base(title)}-{(clock or _default_clock).next()}"
