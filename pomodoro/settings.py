"""
Bounded timer configuration.

The engine accepts any durations; this model is where the ranges offered to
users are enforced. Durations are in whole minutes.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from pomodoro.engine import PomodoroTimer


class TimerSettings(BaseModel):
    """User-facing Pomodoro settings."""
    work_minutes: int = Field(default=25, ge=1, le=60)
    short_break_minutes: int = Field(default=5, ge=1, le=30)
    long_break_minutes: int = Field(default=15, ge=5, le=60)
    sessions_until_long_break: int = Field(default=4, ge=2, le=8)

    @classmethod
    def from_timer(cls, timer: PomodoroTimer) -> TimerSettings:
        return cls(
            work_minutes=timer.work_duration // 60,
            short_break_minutes=timer.short_break_duration // 60,
            long_break_minutes=timer.long_break_duration // 60,
            sessions_until_long_break=timer.sessions_until_long_break,
        )

    def apply(self, timer: PomodoroTimer) -> None:
        """Write these settings to ``timer`` and reset it."""
        timer.work_duration = self.work_minutes * 60
        timer.short_break_duration = self.short_break_minutes * 60
        timer.long_break_duration = self.long_break_minutes * 60
        timer.sessions_until_long_break = self.sessions_until_long_break
        timer.reset()
