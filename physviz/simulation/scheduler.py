"""
Cooperative animation loop.

Drives a session's `tick` from the asyncio event loop, one pending timer
callback at a time (the equivalent of requestAnimationFrame). The only
suspension point is the wait between the end of one tick and the next
scheduled callback, which is where `stop()` takes effect. Every scheduled
callback carries the generation it was scheduled under; a callback from
an older generation, or one that fires after the session went idle, is a
logged no-op. An exception escaping a tick (usually from a frame
subscriber) ends the animation and is re-raised by `run()`.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from physviz.simulation.stepper import SimulationStatus

if TYPE_CHECKING:
    from physviz.simulation.session import SimulationSession

logger = structlog.get_logger(__name__)


class AnimationLoop:
    """
    Periodic scheduler for a SimulationSession.
    
    Example:
        ```python
        session = SimulationSession()
        session.load_scenario(raw)
        animation = session.drive()
        ticks = await animation.run(duration=5.0)
        ```
    """
    
    def __init__(self, session: "SimulationSession", interval: float | None = None):
        self.session = session
        self.interval = interval if interval is not None else session.config.tick_seconds
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0
        self._done: asyncio.Event | None = None
        self._last_fire: float | None = None
        self._max_ticks: int | None = None
        self.error: Exception | None = None
        self.ticks = 0
        self.stale_callbacks = 0
        self.logger = structlog.get_logger(__name__)
    
    @property
    def running(self) -> bool:
        """True while a callback is pending."""
        return self._handle is not None
    
    def start(self, max_ticks: int | None = None) -> None:
        """Schedule the first tick on the running event loop."""
        if self.running:
            return
        
        self._loop = asyncio.get_running_loop()
        self._done = asyncio.Event()
        self._max_ticks = max_ticks
        self._generation += 1
        self._last_fire = self._loop.time()
        self.error = None
        self.ticks = 0
        
        self.logger.info("Animation started", interval=self.interval, max_ticks=max_ticks)
        self._schedule()
    
    def stop(self) -> None:
        """Cancel the pending callback; later firings of old callbacks are ignored."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            self.logger.info("Animation stopped", ticks=self.ticks)
        self._generation += 1
        self._finish()
    
    async def run(self, max_ticks: int | None = None, duration: float | None = None) -> int:
        """
        Run until stopped, `max_ticks` ticks have fired, or `duration`
        seconds of wall-clock time have passed.
        
        Returns:
            Number of ticks driven
        
        Raises:
            Exception: whatever escaped a tick; the animation is already stopped
        """
        self.start(max_ticks=max_ticks)
        try:
            if duration is None:
                await self._done.wait()
            else:
                try:
                    await asyncio.wait_for(self._done.wait(), timeout=duration)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.stop()
        if self.error is not None:
            raise self.error
        return self.ticks
    
    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self.interval, self._on_frame, self._generation)
    
    def _on_frame(self, generation: int) -> None:
        if generation != self._generation or self._handle is None:
            self.stale_callbacks += 1
            self.logger.debug("Stale animation callback ignored", generation=generation)
            return
        self._handle = None
        
        if self.session.status is SimulationStatus.IDLE:
            self.logger.info("Session idle, animation finished", ticks=self.ticks)
            self._finish()
            return
        
        now = self._loop.time()
        elapsed = now - self._last_fire
        self._last_fire = now
        
        try:
            self.session.tick(elapsed)
        except Exception as e:
            self.error = e
            self.logger.exception("Tick failed, animation finished", ticks=self.ticks)
            self._generation += 1
            self._finish()
            return
        self.ticks += 1
        
        if self._max_ticks is not None and self.ticks >= self._max_ticks:
            self._finish()
            return
        
        # A frame subscriber may have stopped us or cleared the session.
        if generation == self._generation and self.session.status is SimulationStatus.RUNNING:
            self._schedule()
        else:
            self._finish()
    
    def _finish(self) -> None:
        if self._done is not None:
            self._done.set()
