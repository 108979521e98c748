from __future__ import annotations

from datetime import datetime
from typing import Awaitable, Callable

# Monotonic seconds, e.g. time.monotonic
Clock = Callable[[], float]

# Wall clock used to resolve relative dates ("2 days ago")
WallClock = Callable[[], datetime]

Sleeper = Callable[[float], Awaitable[None]]
