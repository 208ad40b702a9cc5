from __future__ import annotations
import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

DURATION_MS = 1000
TICK_MS = 16

SUCCESS_COLOR = "#22c55e"
WARNING_COLOR = "#facc15"
ALERT_COLOR = "#ef4444"
TRACK_COLOR = "#1f2937"

RADIUS = 90
STROKE = 12
NORMALIZED_RADIUS = RADIUS - STROKE / 2
CIRCUMFERENCE = NORMALIZED_RADIUS * 2 * math.pi


def stroke_color(score: int) -> str:
    if score >= 75:
        return SUCCESS_COLOR
    if score >= 50:
        return WARNING_COLOR
    return ALERT_COLOR


def dash_offset(display_score: int) -> float:
    fill = max(0.0, min(1.0, display_score / 100))
    return CIRCUMFERENCE - fill * CIRCUMFERENCE


def total_ticks(duration_ms: int = DURATION_MS, tick_ms: int = TICK_MS) -> int:
    return max(1, duration_ms // tick_ms)


def frame_at(target: int, tick: int, ticks: int) -> Optional[int]:
    """Display value after `tick` ticks, or None once the run should snap to the target."""
    value = target * tick / ticks
    if value >= target:
        return None
    return math.floor(value)


# -------- Animation state machine --------
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Running:
    target: int
    current: int
    tick: int
    deadline: float


AnimationState = Union[Idle, Running]
FrameCallback = Callable[["ScoreGauge"], None]


class ScoreGauge:
    """Radial ATS score indicator that counts up to its target on every retarget.

    The ticking runs as an asyncio task. Retargeting or closing the gauge
    cancels that task before anything else happens, so a discarded run never
    writes another frame.
    """

    def __init__(
        self,
        on_frame: Optional[FrameCallback] = None,
        duration_ms: int = DURATION_MS,
        tick_ms: int = TICK_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_frame = on_frame
        self.duration_ms = duration_ms
        self.tick_ms = tick_ms
        self._sleep = sleep
        self._clock = clock
        self.state: AnimationState = Idle()
        self.target: Optional[int] = None
        self.display_score = 0
        self.color = ALERT_COLOR
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return isinstance(self.state, Running)

    def set_target(self, score: int) -> asyncio.Task:
        """Restart the count-up towards `score`. Must be called from a running event loop."""
        self.cancel()
        self._start(score)
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def animate(self, score: int) -> None:
        """Retarget and wait for the run to finish."""
        task = self.set_target(score)
        # Returns quietly when a newer target or close() cancels this run.
        await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()

    def show(self, score: int) -> None:
        """Draw the final frame for `score` without animating."""
        self.cancel()
        self.target = score
        self.color = stroke_color(score)
        self.display_score = score
        self._emit()

    def cancel(self) -> None:
        """Stop the current run, if any. Safe to call any number of times."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Gauge animation cancelled")
        self.state = Idle()

    async def aclose(self) -> None:
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _start(self, score: int) -> None:
        self.target = score
        self.color = stroke_color(score)
        self.display_score = 0
        self.state = Running(
            target=score,
            current=0,
            tick=0,
            deadline=self._clock() + self.duration_ms / 1000,
        )
        self._emit()

    def advance(self) -> bool:
        """Apply one tick. Returns False once the run has snapped to its target."""
        state = self.state
        if not isinstance(state, Running):
            return False
        tick = state.tick + 1
        value = frame_at(state.target, tick, total_ticks(self.duration_ms, self.tick_ms))
        # Past the deadline (a lagging loop) the run snaps instead of overrunning.
        if value is None or self._clock() >= state.deadline:
            self.display_score = state.target
            self.state = Idle()
            self._emit()
            return False
        self.display_score = value
        self.state = Running(target=state.target, current=value, tick=tick, deadline=state.deadline)
        self._emit()
        return True

    async def _run(self) -> None:
        while self.running:
            await self._sleep(self.tick_ms / 1000)
            if not self.advance():
                break

    def _emit(self) -> None:
        if self.on_frame is not None:
            self.on_frame(self)

    # -------- Rendering --------
    def render_svg(self) -> str:
        offset = dash_offset(self.display_score)
        r = f"{NORMALIZED_RADIUS:g}"
        return (
            '<div style="position:relative;width:224px;height:224px;margin:0 auto;">'
            '<svg height="100%" width="100%" style="transform:rotate(-90deg);">'
            f'<circle stroke="{TRACK_COLOR}" fill="transparent" stroke-width="{STROKE}" '
            f'r="{r}" cx="50%" cy="50%"/>'
            f'<circle stroke="{self.color}" fill="transparent" stroke-width="{STROKE}" '
            f'stroke-linecap="round" r="{r}" cx="50%" cy="50%" '
            f'stroke-dasharray="{CIRCUMFERENCE:.3f}" stroke-dashoffset="{offset:.3f}"/>'
            "</svg>"
            '<div style="position:absolute;inset:0;display:flex;flex-direction:column;'
            'align-items:center;justify-content:center;">'
            f'<span style="font-size:3rem;font-weight:800;">{self.display_score}</span>'
            '<span style="font-size:0.8rem;letter-spacing:0.1em;text-transform:uppercase;'
            'color:#9ca3af;">ATS Score</span>'
            "</div></div>"
        )
