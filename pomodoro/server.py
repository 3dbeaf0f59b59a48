# -*- coding: utf-8 -*-
import typing as t

from fastmcp import FastMCP

from pomodoro.engine import PomodoroTimer
from pomodoro.settings import TimerSettings

mcp = FastMCP("PomodoroServer")

# One timer per server process. Tools are async so the timer is only
# touched from the server's event loop.
timer = PomodoroTimer()


@mcp.tool()
async def timer_status() -> dict[str, t.Any]:
    """Returns the state, mode, remaining time and session count of the timer."""
    return timer.snapshot()


@mcp.tool()
async def start_timer() -> dict[str, t.Any]:
    """Starts or resumes the countdown."""
    timer.start()
    return timer.snapshot()


@mcp.tool()
async def pause_timer() -> dict[str, t.Any]:
    """Pauses the countdown, keeping the remaining time."""
    timer.pause()
    return timer.snapshot()


@mcp.tool()
async def reset_timer() -> dict[str, t.Any]:
    """Stops the countdown and refills it for the current session."""
    timer.reset()
    return timer.snapshot()


@mcp.tool()
async def skip_session() -> dict[str, t.Any]:
    """Ends the current session immediately and starts the next one."""
    timer.skip_to_next_session()
    return timer.snapshot()


@mcp.tool()
async def configure_timer(
        work_minutes: int = 25,
        short_break_minutes: int = 5,
        long_break_minutes: int = 15,
        sessions_until_long_break: int = 4
) -> dict[str, t.Any]:
    """Changes the session lengths and resets the timer.

    :param work_minutes: Work session length, 1-60.
    :param short_break_minutes: Short break length, 1-30.
    :param long_break_minutes: Long break length, 5-60.
    :param sessions_until_long_break: Work sessions between long breaks, 2-8.
    :return: The timer status after the change.
    """
    TimerSettings(
        work_minutes=work_minutes,
        short_break_minutes=short_break_minutes,
        long_break_minutes=long_break_minutes,
        sessions_until_long_break=sessions_until_long_break,
    ).apply(timer)
    return timer.snapshot()


if __name__ == "__main__":
    mcp.run()
