"""
Tests for the elastic collision model.
"""

import pytest

from physviz.errors import ComputationError
from physviz.models.scenario import Entity
from physviz.models.vector import Vector2
from physviz.physics.collision import (
    collision_motion,
    contact_time,
    elastic_collision,
    kinetic_energy,
    momentum,
    resolve_collision,
)


def _bodies(x1=-5.0, x2=1.0):
    return (
        Entity(id="a", name="A", initial_position=Vector2(x1, 0.0)),
        Entity(id="b", name="B", initial_position=Vector2(x2, 0.0)),
    )


class TestElasticCollision:
    """Tests for the 1-D elastic collision formula."""
    
    def test_heavy_body_hits_stationary_light_body(self):
        """A 2 kg body at 3 m/s hitting a stationary 1 kg body."""
        v1, v2 = elastic_collision(2.0, 3.0, 1.0, 0.0)
        assert v1 == pytest.approx(1.0)
        assert v2 == pytest.approx(4.0)
    
    def test_equal_masses_swap_velocities(self):
        """Equal masses exchange velocities."""
        v1, v2 = elastic_collision(1.0, 5.0, 1.0, -2.0)
        assert v1 == pytest.approx(-2.0)
        assert v2 == pytest.approx(5.0)
    
    @pytest.mark.parametrize("m1,v1,m2,v2", [
        (2.0, 3.0, 1.0, 0.0),
        (0.5, 4.0, 3.0, -1.0),
        (10.0, -2.0, 0.1, 7.0),
    ])
    def test_conservation(self, m1, v1, m2, v2):
        """Momentum and kinetic energy are conserved."""
        after = elastic_collision(m1, v1, m2, v2)
        assert momentum((m1, m2), after) == pytest.approx(momentum((m1, m2), (v1, v2)))
        assert kinetic_energy((m1, m2), after) == pytest.approx(kinetic_energy((m1, m2), (v1, v2)))
    
    def test_zero_total_mass(self):
        """Zero total mass cannot be resolved."""
        with pytest.raises(ComputationError):
            elastic_collision(0.0, 1.0, 0.0, 0.0)


class TestContactTime:
    """Tests for contact time between approaching bodies."""
    
    def test_approaching(self):
        """Bodies 6 m apart closing at 3 m/s meet after 2 s."""
        assert contact_time(-5.0, 3.0, 1.0, 0.0) == pytest.approx(2.0)
    
    def test_separating(self):
        """Bodies moving apart never meet."""
        assert contact_time(-5.0, -1.0, 1.0, 2.0) is None
    
    def test_already_touching(self):
        """Coincident bodies collide immediately."""
        assert contact_time(0.0, 1.0, 0.0, 0.0) == 0.0
    
    def test_coincident_and_separating(self):
        """Coincident bodies moving apart do not collide."""
        assert contact_time(-5.0, 0.0, -5.0, 3.0) is None
        assert contact_time(0.0, 1.0, 0.0, 1.0) is None


class TestResolveCollision:
    """Tests for resolving a scenario's collision event."""
    
    def test_event(self):
        """The event carries contact time, positions and final velocities."""
        event = resolve_collision(_bodies(), {"m1": 2.0, "m2": 1.0, "v1": 3.0, "v2": 0.0})
        
        assert event.occurs
        assert event.time == pytest.approx(2.0)
        assert event.contact_x == pytest.approx((1.0, 1.0))
        assert event.post_velocities == pytest.approx((1.0, 4.0))
        assert event.momentum_after == pytest.approx(event.momentum_before)
    
    def test_no_event_when_separating(self):
        """Separating bodies keep their velocities."""
        event = resolve_collision(_bodies(), {"m1": 2.0, "m2": 1.0, "v1": -1.0, "v2": 0.0})
        assert not event.occurs
        assert event.post_velocities == event.pre_velocities
    
    def test_coincident_bodies_moving_apart(self):
        """Bodies that start together but separate keep their own velocities."""
        bodies = _bodies(x1=-5.0, x2=-5.0)
        event = resolve_collision(bodies, {"m1": 1.0, "m2": 1.0, "v1": 0.0, "v2": 3.0})
        
        assert not event.occurs
        assert collision_motion(bodies[0], 0, event, 1.0).velocity.x == pytest.approx(0.0)
        assert collision_motion(bodies[1], 1, event, 1.0).velocity.x == pytest.approx(3.0)
    
    def test_motion_before_and_after(self):
        """Bodies coast, collide at t=2, then leave the contact point."""
        bodies = _bodies()
        event = resolve_collision(bodies, {"m1": 2.0, "m2": 1.0, "v1": 3.0, "v2": 0.0})
        
        before = collision_motion(bodies[0], 0, event, 1.0)
        assert before.position.x == pytest.approx(-2.0)
        assert before.velocity.x == pytest.approx(3.0)
        
        after_a = collision_motion(bodies[0], 0, event, 3.0)
        after_b = collision_motion(bodies[1], 1, event, 3.0)
        assert after_a.position.x == pytest.approx(2.0)
        assert after_a.velocity.x == pytest.approx(1.0)
        assert after_b.position.x == pytest.approx(5.0)
        assert after_b.velocity.x == pytest.approx(4.0)
    
    def test_needs_two_bodies(self):
        """A single body cannot collide."""
        with pytest.raises(ComputationError):
            resolve_collision(_bodies()[:1], {"m1": 1.0, "m2": 1.0, "v1": 1.0, "v2": 0.0})
