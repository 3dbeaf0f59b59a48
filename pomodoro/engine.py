"""Pomodoro timer state machine.

The timer has two independent axes:

- ``TimerState`` says whether the countdown advances (stopped, running, paused).
- ``TimerMode`` says which session is being counted (work, short or long break).

Sessions chain forever: work -> short break -> work -> ... -> long break ->
work, with a long break after every ``sessions_until_long_break`` completed
work sessions. Completing a session always leaves the timer running.

The engine does not validate its configuration. All mutating calls, ticks
included, must come from a single logical sequence such as one event loop.
"""
import logging
import typing as t
from enum import Enum

from pomodoro.ticker import AsyncioTicker, Ticker

logger = logging.getLogger(__name__)

WORK_DURATION = 25 * 60
SHORT_BREAK_DURATION = 5 * 60
LONG_BREAK_DURATION = 15 * 60
SESSIONS_UNTIL_LONG_BREAK = 4


class TimerState(Enum):
    """Whether the countdown is advancing."""
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"


class TimerMode(Enum):
    """Which kind of session is being counted down."""
    WORK = "WORK"
    SHORT_BREAK = "SHORT_BREAK"
    LONG_BREAK = "LONG_BREAK"


class TimerEvent(Enum):
    """Notifications sent to subscribers after each transition."""
    STARTED = "started"
    PAUSED = "paused"
    RESET = "reset"
    TICK = "tick"
    SESSION_COMPLETED = "session_completed"


Listener = t.Callable[[TimerEvent, "PomodoroTimer"], None]


class PomodoroTimer:
    """Countdown timer cycling through work and break sessions.

    Args:
        ticker: Source of one-second ticks. Defaults to an ``AsyncioTicker``,
            which needs a running event loop when ``start`` is called.
        work_duration: Seconds in a work session.
        short_break_duration: Seconds in a short break.
        long_break_duration: Seconds in a long break.
        sessions_until_long_break: Completed work sessions between long breaks.
    """

    def __init__(
        self,
        ticker: t.Optional[Ticker] = None,
        work_duration: int = WORK_DURATION,
        short_break_duration: int = SHORT_BREAK_DURATION,
        long_break_duration: int = LONG_BREAK_DURATION,
        sessions_until_long_break: int = SESSIONS_UNTIL_LONG_BREAK,
    ) -> None:
        self._ticker = ticker if ticker is not None else AsyncioTicker()
        self.work_duration = work_duration
        self.short_break_duration = short_break_duration
        self.long_break_duration = long_break_duration
        self.sessions_until_long_break = sessions_until_long_break

        self.state = TimerState.STOPPED
        self.mode = TimerMode.WORK
        self.remaining_seconds = work_duration
        self.completed_work_sessions = 0
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> t.Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def start(self) -> None:
        """Start or resume the countdown. Does nothing while running."""
        if self.state is TimerState.RUNNING:
            return
        self.state = TimerState.RUNNING
        self._ticker.start(self.tick)
        self._notify(TimerEvent.STARTED)

    def pause(self) -> None:
        """Stop the countdown and keep the remaining time."""
        self._ticker.cancel()
        self.state = TimerState.PAUSED
        self._notify(TimerEvent.PAUSED)

    def reset(self) -> None:
        """Stop the countdown and refill it for the current mode."""
        self._ticker.cancel()
        self.state = TimerState.STOPPED
        self.remaining_seconds = self.duration_for(self.mode)
        self._notify(TimerEvent.RESET)

    def skip_to_next_session(self) -> None:
        """Complete the current session now, whatever time is left."""
        self._complete_session()

    def tick(self) -> None:
        """Advance the countdown by one second.

        A tick arriving when the countdown is already at zero completes the
        session instead. Ticks are ignored unless the timer is running.
        """
        if self.state is not TimerState.RUNNING:
            return
        if self.remaining_seconds > 0:
            self.remaining_seconds -= 1
            self._notify(TimerEvent.TICK)
        else:
            self._complete_session()

    def duration_for(self, mode: TimerMode) -> int:
        if mode is TimerMode.WORK:
            return self.work_duration
        if mode is TimerMode.SHORT_BREAK:
            return self.short_break_duration
        return self.long_break_duration

    def formatted_time(self) -> str:
        """Remaining time as ``MM:SS``."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def current_session_number(self) -> int:
        """1-based number of the work session in progress or coming up next."""
        return self.completed_work_sessions + 1

    def snapshot(self) -> dict[str, t.Any]:
        """Current state as plain values."""
        return {
            "state": self.state.value,
            "mode": self.mode.value,
            "remaining_seconds": self.remaining_seconds,
            "formatted_time": self.formatted_time(),
            "completed_work_sessions": self.completed_work_sessions,
            "current_session_number": self.current_session_number,
            "work_duration": self.work_duration,
            "short_break_duration": self.short_break_duration,
            "long_break_duration": self.long_break_duration,
            "sessions_until_long_break": self.sessions_until_long_break,
        }

    def _complete_session(self) -> None:
        self._ticker.cancel()
        finished = self.mode

        if finished is TimerMode.WORK:
            self.completed_work_sessions += 1
            threshold = self.sessions_until_long_break
            if threshold > 0 and self.completed_work_sessions % threshold == 0:
                self.mode = TimerMode.LONG_BREAK
            else:
                self.mode = TimerMode.SHORT_BREAK
        else:
            self.mode = TimerMode.WORK

        self.remaining_seconds = self.duration_for(self.mode)
        logger.info("%s session finished, starting %s", finished.value, self.mode.value)

        self.state = TimerState.RUNNING
        self._ticker.start(self.tick)
        self._notify(TimerEvent.SESSION_COMPLETED)

    def _notify(self, event: TimerEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self)
