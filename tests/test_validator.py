"""
Tests for scenario validation.
"""

import math

import pytest

from conftest import raw_collision, raw_incline, raw_pendulum, raw_projectile
from physviz.errors import (
    MissingParameterError,
    UnknownMotionFamilyError,
    ValidationError,
)
from physviz.models.scenario import MotionFamily
from physviz.physics.validator import ScenarioValidator


class TestScenarioValidator:
    """Tests for ScenarioValidator."""
    
    def test_valid_projectile(self):
        """Test a complete projectile scenario."""
        scenario = ScenarioValidator().validate(raw_projectile())
        assert scenario.motion_family is MotionFamily.PROJECTILE
        assert scenario.parameters["velocity"] == 10.0
        assert scenario.adjustable_parameters == {"velocity", "angle", "gravity"}
    
    def test_family_is_case_insensitive(self):
        """Motion family names are matched case-insensitively."""
        raw = raw_projectile()
        raw["motionFamily"] = " Projectile "
        assert ScenarioValidator().validate(raw).motion_family is MotionFamily.PROJECTILE
    
    @pytest.mark.parametrize("family", [None, "rocket", 3])
    def test_unknown_family(self, family):
        """Unknown or absent families fail closed."""
        raw = raw_projectile()
        raw["motionFamily"] = family
        with pytest.raises(UnknownMotionFamilyError):
            ScenarioValidator().validate(raw)
    
    def test_missing_required_parameter(self):
        """A projectile without gravity is rejected."""
        raw = raw_projectile()
        del raw["parameters"]["gravity"]
        with pytest.raises(MissingParameterError) as exc:
            ScenarioValidator().validate(raw)
        assert exc.value.parameter == "gravity"
    
    def test_nan_parameter_is_missing(self):
        """NaN counts as missing."""
        with pytest.raises(MissingParameterError):
            ScenarioValidator().validate(raw_projectile(velocity=math.nan))
    
    def test_non_numeric_parameter(self):
        """Strings are not parameter values."""
        with pytest.raises(ValidationError):
            ScenarioValidator().validate(raw_projectile(extra="fast"))
    
    def test_boolean_is_not_a_number(self):
        """Booleans are not accepted as numbers."""
        with pytest.raises(MissingParameterError):
            ScenarioValidator().validate(raw_projectile(velocity=True))
    
    def test_collision_needs_two_entities(self):
        """Collisions need exactly two bodies."""
        raw = raw_collision()
        raw["entities"] = raw["entities"][:1]
        with pytest.raises(ValidationError):
            ScenarioValidator().validate(raw)
    
    def test_positive_masses(self):
        """Collision masses must be positive."""
        with pytest.raises(ValidationError):
            ScenarioValidator().validate(raw_collision(m2=0.0))
    
    @pytest.mark.parametrize("gravity", [0.0, -9.8])
    def test_pendulum_needs_positive_gravity(self, gravity):
        """A pendulum without downward gravity has no period and is rejected."""
        with pytest.raises(ValidationError, match="gravity"):
            ScenarioValidator().validate(raw_pendulum(gravity=gravity))
    
    def test_zero_gravity_allowed_elsewhere(self):
        """Projectiles may still be launched without gravity."""
        scenario = ScenarioValidator().validate(raw_projectile(gravity=0.0))
        assert scenario.parameters["gravity"] == 0.0
    
    def test_incline_defaults(self):
        """Incline velocity and friction default to zero."""
        raw = raw_incline()
        del raw["parameters"]["velocity"]
        scenario = ScenarioValidator().validate(raw)
        assert scenario.parameters["velocity"] == 0.0
        assert scenario.parameters["friction"] == 0.0
    
    def test_unknown_adjustable_parameter(self):
        """Adjustable names must be declared or known tunables."""
        raw = raw_projectile()
        raw["adjustableParameters"] = ["velocity", "warp"]
        with pytest.raises(ValidationError):
            ScenarioValidator().validate(raw)
    
    def test_known_tunable_without_base_value(self):
        """A known tunable may be adjustable without a declared value."""
        raw = raw_projectile()
        raw["adjustableParameters"] = ["mass"]
        assert "mass" in ScenarioValidator().validate(raw).adjustable_parameters
    
    def test_entity_ids_filled(self):
        """Entities without ids get positional ids."""
        raw = raw_projectile()
        raw["entities"] = [{"name": "Ball"}]
        scenario = ScenarioValidator().validate(raw)
        assert scenario.primary_entity.id == "entity-1"
    
    def test_not_a_mapping(self):
        """Non-mapping input is rejected."""
        with pytest.raises(ValidationError):
            ScenarioValidator().validate(["projectile"])
    
    def test_validation_error_is_value_error(self):
        """Validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            ScenarioValidator().validate({"motionFamily": "projectile", "entities": []})
