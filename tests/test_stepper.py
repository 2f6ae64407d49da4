"""
Tests for the simulation stepper and session.
"""

import pytest

from conftest import raw_collision, raw_linear, raw_projectile
from physviz.errors import (
    ComputationError,
    SimulationStateError,
    UnknownMotionFamilyError,
    UnknownParameterError,
)
from physviz.physics.validator import validate_scenario
from physviz.simulation.parameters import ParameterStore
from physviz.simulation.session import SimulationSession
from physviz.simulation.stepper import (
    SimulationConfig,
    SimulationStatus,
    Stepper,
    TerminalPolicy,
)


class TestSimulationConfig:
    """Tests for SimulationConfig."""
    
    def test_defaults(self):
        """Test the default configuration."""
        config = SimulationConfig()
        assert config.tick_seconds == pytest.approx(1 / 60)
        assert config.terminal_policy is TerminalPolicy.LOOP
        assert config.max_sim_time == 10.0
    
    def test_from_env(self):
        """Environment variables override defaults."""
        config = SimulationConfig.from_env({
            "PHYSVIZ_TICK_SECONDS": "0.05",
            "PHYSVIZ_TERMINAL_POLICY": "HALT",
            "PHYSVIZ_MAX_SIM_TIME": "none",
        })
        assert config.tick_seconds == 0.05
        assert config.terminal_policy is TerminalPolicy.HALT
        assert config.max_sim_time is None
    
    def test_rejects_non_positive_tick(self):
        """The tick step must be positive."""
        with pytest.raises(ValueError):
            SimulationConfig(tick_seconds=0.0)


class TestStepper:
    """Tests for Stepper."""
    
    def test_idle_tick_is_noop(self):
        """Ticking without a scenario does nothing."""
        stepper = Stepper()
        assert stepper.status is SimulationStatus.IDLE
        assert stepper.tick() is None
        assert stepper.sim_time == 0.0
    
    def test_first_tick_emits_time_zero(self, projectile_scenario):
        """The first tick shows the initial state, then time advances."""
        stepper = Stepper()
        stepper.load(projectile_scenario)
        
        frame = stepper.tick()
        assert frame.sim_time == 0.0
        assert frame.primary.position.y == 0.0
        assert stepper.sim_time == pytest.approx(1 / 60)
    
    def test_time_advances_by_fixed_step(self, projectile_scenario):
        """Real elapsed time does not change the logical step."""
        stepper = Stepper(SimulationConfig(tick_seconds=0.1))
        stepper.load(projectile_scenario)
        stepper.tick(elapsed_real_seconds=0.5)
        frame = stepper.tick(elapsed_real_seconds=0.01)
        
        assert frame.sim_time == pytest.approx(0.1)
        assert stepper.last_real_interval == 0.01
    
    def test_reset_is_deterministic(self, projectile_scenario):
        """Frames after reset repeat the frames before it."""
        stepper = Stepper()
        stepper.load(projectile_scenario)
        first = [stepper.tick() for _ in range(30)]
        
        stepper.reset()
        second = [stepper.tick() for _ in range(30)]
        
        assert first == second
    
    def test_loops_after_landing(self, projectile_scenario):
        """A ball thrown up at 10 m/s lands after ~2.04 s and restarts."""
        stepper = Stepper()
        stepper.load(projectile_scenario)
        
        for _ in range(122):
            stepper.tick()
        last = stepper.tick()
        
        assert last.sim_time == pytest.approx(122 / 60)
        assert stepper.sim_time == 0.0
        assert stepper.tick().sim_time == 0.0
    
    def test_halt_holds_final_instant(self, projectile_scenario):
        """Under the halt policy the final frame repeats."""
        stepper = Stepper(SimulationConfig(terminal_policy=TerminalPolicy.HALT))
        stepper.load(projectile_scenario)
        
        frames = [stepper.tick() for _ in range(130)]
        landing = 20.0 / 9.8
        
        assert stepper.halted
        assert frames[-1].sim_time == pytest.approx(landing)
        assert frames[-1] == frames[-2]
        assert frames[-1].primary.position.y == pytest.approx(0.0, abs=1e-9)
    
    def test_max_sim_time_fallback(self):
        """Motions without a natural end stop at max_sim_time."""
        raw = raw_linear(velocity=1.0, acceleration=0.0)
        del raw["parameters"]["time"]
        scenario = validate_scenario(raw)
        stepper = Stepper(SimulationConfig(tick_seconds=0.5, max_sim_time=1.0))
        stepper.load(scenario)
        
        times = [stepper.tick().sim_time for _ in range(4)]
        assert times == [0.0, 0.5, 1.0, 0.0]
    
    def test_parameter_change_applies_next_tick(self, projectile_scenario):
        """Parameter writes take effect on the following tick."""
        store = ParameterStore(projectile_scenario)
        stepper = Stepper(SimulationConfig(tick_seconds=0.5))
        stepper.load(projectile_scenario, store)
        stepper.tick()
        
        store.set("velocity", 20.0)
        frame = stepper.tick()
        assert frame.primary.velocity.y == pytest.approx(20.0 - 9.8 * 0.5)
        assert frame.parameters["velocity"] == 20.0
    
    def test_failed_tick_keeps_last_frame(self):
        """A tick that cannot be computed keeps time and the last frame."""
        scenario = validate_scenario(raw_projectile())
        store = ParameterStore(scenario)
        stepper = Stepper()
        stepper.load(scenario, store)
        
        errors = []
        stepper.subscribe_errors(errors.append)
        good = stepper.tick()
        time_before = stepper.sim_time
        
        store.set("velocity", float("inf"))
        assert stepper.tick() is None
        assert stepper.current_frame is good
        assert stepper.sim_time == time_before
        assert isinstance(errors[0], ComputationError)
        assert errors[0].entity_id == "ball"
        
        store.set("velocity", 10.0)
        assert stepper.tick() is not None
        assert stepper.last_error is None
    
    def test_subscribers(self, projectile_scenario):
        """Subscribers receive every emitted frame until unsubscribed."""
        stepper = Stepper()
        stepper.load(projectile_scenario)
        received = []
        unsubscribe = stepper.subscribe(received.append)
        
        stepper.tick()
        stepper.tick()
        unsubscribe()
        stepper.tick()
        
        assert len(received) == 2
    
    def test_collision_frames(self):
        """Collision bodies swap to their post-collision velocities."""
        scenario = validate_scenario(raw_collision())
        stepper = Stepper(SimulationConfig(tick_seconds=0.5))
        stepper.load(scenario)
        
        before = stepper.frame_at(1.0)
        after = stepper.frame_at(3.0)
        assert before.entity("a").velocity.x == pytest.approx(3.0)
        assert after.entity("a").velocity.x == pytest.approx(1.0)
        assert after.entity("b").velocity.x == pytest.approx(4.0)
    
    def test_seek_requires_scenario(self):
        """Seeking while idle is an error."""
        with pytest.raises(SimulationStateError):
            Stepper().seek(1.0)
    
    def test_clear_returns_to_idle(self, projectile_scenario):
        """Clearing drops the scenario."""
        stepper = Stepper()
        stepper.load(projectile_scenario)
        stepper.tick()
        stepper.clear()
        
        assert stepper.status is SimulationStatus.IDLE
        assert stepper.current_frame is None
        assert stepper.tick() is None


class TestSimulationSession:
    """Tests for SimulationSession."""
    
    def test_load_and_tick(self):
        """Test loading a raw scenario and ticking it."""
        with SimulationSession() as session:
            scenario = session.load_scenario(raw_projectile())
            assert session.status is SimulationStatus.RUNNING
            assert session.tick().sim_time == 0.0
            assert session.scenario is scenario
    
    def test_failed_load_keeps_current_scenario(self):
        """A rejected scenario leaves the running one in place."""
        session = SimulationSession()
        scenario = session.load_scenario(raw_projectile())
        session.tick()
        
        bad = raw_projectile()
        bad["motionFamily"] = "rocket"
        with pytest.raises(UnknownMotionFamilyError):
            session.load_scenario(bad)
        
        assert session.scenario is scenario
        assert session.status is SimulationStatus.RUNNING
        assert session.sim_time > 0
    
    def test_failed_load_while_idle(self):
        """A rejected scenario leaves an idle session idle."""
        session = SimulationSession()
        with pytest.raises(UnknownMotionFamilyError):
            session.load_scenario({"motionFamily": "rocket", "entities": [{"id": "x"}]})
        assert session.status is SimulationStatus.IDLE
    
    def test_set_parameter(self):
        """Parameters can be changed through the session."""
        session = SimulationSession()
        session.load_scenario(raw_projectile())
        session.set_parameter("velocity", 15.0)
        assert session.get_parameter("velocity") == 15.0
        
        with pytest.raises(UnknownParameterError):
            session.set_parameter("warp", 1.0)
        
        session.reset_to_defaults()
        assert session.get_parameter("velocity") == 10.0
    
    def test_parameter_write_requires_scenario(self):
        """Writing parameters while idle is an error."""
        with pytest.raises(SimulationStateError):
            SimulationSession().set_parameter("velocity", 1.0)
