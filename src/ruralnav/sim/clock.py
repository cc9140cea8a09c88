# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True)
class SimClock:
    epoch: datetime  # wall time of t=0; tz-aware

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    @classmethod
    def starting_now(cls) -> SimClock:
        """Anchor t=0 at the current wall time (live runs)."""
        return cls(datetime.now(UTC))

    # wall -> sim seconds
    def to_sim(self, dt: datetime) -> float:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return (dt - self.epoch).total_seconds()

    # sim seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)

    def clock_text(self, t: float) -> str:
        """HH:MM of sim time t, as shown next to an ETA."""
        return self.to_wall(t).strftime("%H:%M")
