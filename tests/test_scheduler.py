"""
Tests for the asyncio animation loop.
"""

import asyncio

import pytest

from conftest import raw_projectile
from physviz.simulation.session import SimulationSession
from physviz.simulation.stepper import SimulationConfig, SimulationStatus


def _session(tick=0.01):
    session = SimulationSession(SimulationConfig(tick_seconds=tick))
    session.load_scenario(raw_projectile())
    return session


class TestAnimationLoop:
    """Tests for AnimationLoop."""
    
    def test_runs_fixed_number_of_ticks(self):
        """run(max_ticks) drives exactly that many ticks."""
        session = _session()
        
        ticks = asyncio.run(session.drive(interval=0.001).run(max_ticks=5))
        
        assert ticks == 5
        assert session.sim_time == pytest.approx(0.05)
        assert not session.animation.running
    
    def test_clear_cancels_pending_tick(self):
        """After clear() no further frames are delivered."""
        session = _session()
        frames = []
        session.subscribe(frames.append)
        
        async def scenario():
            animation = session.drive(interval=0.005)
            animation.start()
            await asyncio.sleep(0.05)
            session.clear()
            delivered = len(frames)
            await asyncio.sleep(0.05)
            return animation, delivered
        
        animation, delivered = asyncio.run(scenario())
        
        assert delivered > 0
        assert len(frames) == delivered
        assert not animation.running
        assert session.status is SimulationStatus.IDLE
    
    def test_failing_subscriber_ends_run(self):
        """An exception from a subscriber stops the loop and surfaces from run()."""
        session = _session()
        frames = []
        
        def on_frame(frame):
            frames.append(frame)
            if len(frames) == 2:
                raise RuntimeError("renderer exploded")
        
        session.subscribe(on_frame)
        animation = session.drive(interval=0.001)
        
        async def scenario():
            await asyncio.wait_for(animation.run(max_ticks=5), timeout=1.0)
        
        with pytest.raises(RuntimeError, match="renderer exploded"):
            asyncio.run(scenario())
        
        assert len(frames) == 2
        assert animation.ticks == 1
        assert isinstance(animation.error, RuntimeError)
        assert not animation.running
    
    def test_clear_from_subscriber(self):
        """A subscriber clearing the session ends the loop after that frame."""
        session = _session()
        frames = []
        
        def on_frame(frame):
            frames.append(frame)
            if len(frames) == 3:
                session.clear()
        
        session.subscribe(on_frame)
        ticks = asyncio.run(session.drive(interval=0.001).run())
        
        assert ticks == 3
        assert len(frames) == 3
    
    def test_idle_session_finishes_immediately(self):
        """Driving an idle session delivers no ticks."""
        session = SimulationSession()
        ticks = asyncio.run(session.drive(interval=0.001).run())
        assert ticks == 0
    
    def test_duration_limit(self):
        """run(duration) stops on its own."""
        session = _session()
        ticks = asyncio.run(session.drive(interval=0.005).run(duration=0.05))
        assert ticks > 0
        assert not session.animation.running
    
    def test_stale_callback_ignored(self):
        """A callback from an earlier generation does nothing."""
        session = _session()
        
        async def scenario():
            animation = session.drive(interval=0.001)
            animation.start()
            stale_generation = animation._generation
            animation.stop()
            animation._on_frame(stale_generation)
            return animation
        
        animation = asyncio.run(scenario())
        assert animation.stale_callbacks == 1
        assert session.current_frame is None
    
    def test_redrive_stops_previous_loop(self):
        """Attaching a new loop stops the old one."""
        session = _session()
        
        async def scenario():
            first = session.drive(interval=0.01)
            first.start()
            second = session.drive(interval=0.01)
            return first, second
        
        first, second = asyncio.run(scenario())
        assert not first.running
        assert session.animation is second
