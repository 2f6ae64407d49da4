"""
Tests for scenario and frame models.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from physviz.models.frame import EntityFrame, FrameState
from physviz.models.scenario import Entity, EntityShape, MotionFamily, Scenario
from physviz.models.vector import Vector2


class TestVector2:
    """Tests for the Vector2 value type."""

    def test_arithmetic(self):
        """Vectors add, subtract and scale componentwise."""
        a, b = Vector2(1.0, 2.0), Vector2(3.0, -1.0)
        assert a + b == Vector2(4.0, 1.0)
        assert a - b == Vector2(-2.0, 3.0)
        assert 2 * a == Vector2(2.0, 4.0)
        assert -a == Vector2(-1.0, -2.0)

    def test_magnitude_and_dot(self):
        """Perpendicular vectors have a zero dot product."""
        v = Vector2(3.0, 4.0)
        assert v.magnitude() == pytest.approx(5.0)
        assert v.dot(Vector2(-4.0, 3.0)) == 0.0
        assert v.dot(v) == pytest.approx(v.magnitude() ** 2)
        assert v.normalized().magnitude() == pytest.approx(1.0)
        assert Vector2().normalized() == Vector2()


class TestEntity:
    """Tests for Entity model."""
    
    def test_entity_creation(self):
        """Test entity creation from camelCase data."""
        entity = Entity.model_validate({
            "id": "ball",
            "name": "Ball",
            "initialPosition": {"x": 1.0, "y": 2.0},
        })
        assert entity.initial_position == Vector2(1.0, 2.0)
        assert entity.shape == EntityShape.CIRCLE
        assert entity.mass is None
    
    def test_entity_is_frozen(self):
        """Entities cannot be mutated."""
        entity = Entity(id="ball")
        with pytest.raises(PydanticValidationError):
            entity.name = "Other"
    
    def test_mass_must_be_positive(self):
        """Non-positive masses are rejected."""
        with pytest.raises(PydanticValidationError):
            Entity(id="ball", mass=0.0)


class TestScenario:
    """Tests for Scenario model."""
    
    def test_scenario_lookup(self):
        """Test entity lookup and units."""
        scenario = Scenario(
            motion_family=MotionFamily.LINEAR,
            entities=(Entity(id="car"), Entity(id="truck")),
            parameters={"velocity": 1.0, "acceleration": 0.0},
            units={"velocity": "km/h"},
        )
        assert scenario.primary_entity.id == "car"
        assert scenario.index_of("truck") == 1
        assert scenario.unit_for("velocity") == "km/h"
        assert scenario.unit_for("acceleration") == "m/s²"
        with pytest.raises(KeyError):
            scenario.entity("bus")
    
    def test_duplicate_entity_ids(self):
        """Entity ids must be unique."""
        with pytest.raises(PydanticValidationError):
            Scenario(
                motion_family=MotionFamily.LINEAR,
                entities=(Entity(id="car"), Entity(id="car")),
            )
    
    def test_to_raw(self):
        """Serialization uses the camelCase raw shape."""
        scenario = Scenario(
            motion_family=MotionFamily.PROJECTILE,
            entities=(Entity(id="ball"),),
            parameters={"velocity": 10.0, "angle": 90.0, "gravity": 9.8},
            adjustable_parameters=frozenset({"velocity", "angle"}),
        )
        raw = scenario.to_raw()
        assert raw["motionFamily"] == "projectile"
        assert raw["adjustableParameters"] == ["angle", "velocity"]
        assert raw["entities"][0]["initialPosition"] == {"x": 0.0, "y": 0.0}


class TestFrameState:
    """Tests for FrameState."""
    
    def _frame(self, t=1.0, params=None):
        return FrameState(
            sim_time=t,
            entities=(EntityFrame("ball", Vector2(0, 5), Vector2(0, 1), Vector2(0, -9.8)),),
            parameters=params or {"velocity": 10.0},
        )
    
    def test_negative_time_rejected(self):
        """Simulation time is never negative."""
        with pytest.raises(ValueError):
            self._frame(t=-0.1)
    
    def test_parameters_are_snapshotted(self):
        """Changing the source mapping does not change the frame."""
        params = {"velocity": 10.0}
        frame = self._frame(params=params)
        params["velocity"] = 99.0
        assert frame.parameters["velocity"] == 10.0
        with pytest.raises(TypeError):
            frame.parameters["velocity"] = 1.0
    
    def test_equality(self):
        """Frames with equal content are equal."""
        assert self._frame() == self._frame()
        assert self._frame() != self._frame(t=2.0)
        assert hash(self._frame()) == hash(self._frame())
    
    def test_entity_lookup(self):
        """Test entity lookup and primary."""
        frame = self._frame()
        assert frame.entity("ball") is frame.primary
        assert frame.primary.speed == 1.0
