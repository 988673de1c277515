"""Wall clock used by services and the export scheduler.

Timestamps are stored as naive UTC, so ``utcnow`` strips tzinfo.
"""

from datetime import datetime, timezone
from typing import Callable

from fastapi import Request

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_clock(request: Request) -> Clock:
    """FastAPI dependency returning the application's clock"""
    return request.app.state.clock
