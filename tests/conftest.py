"""Shared fixtures: raw scenarios for each motion family."""

import pytest

from physviz.physics.validator import validate_scenario


def raw_projectile(**params):
    parameters = {"velocity": 10.0, "angle": 90.0, "gravity": 9.8}
    parameters.update(params)
    return {
        "motionFamily": "projectile",
        "entities": [{"id": "ball", "name": "Ball"}],
        "parameters": parameters,
        "adjustableParameters": ["velocity", "angle", "gravity"],
        "units": {"velocity": "m/s"},
        "description": "A ball is thrown straight up with a speed of 10 m/s",
    }


def raw_linear(**params):
    parameters = {"velocity": 0.0, "acceleration": 2.0, "time": 5.0}
    parameters.update(params)
    return {
        "motionFamily": "linear",
        "entities": [{"id": "car", "name": "Car", "shape": "rectangle"}],
        "parameters": parameters,
        "adjustableParameters": ["velocity", "acceleration"],
    }


def raw_collision(**params):
    parameters = {"m1": 2.0, "m2": 1.0, "v1": 3.0, "v2": 0.0}
    parameters.update(params)
    return {
        "motionFamily": "collision",
        "entities": [
            {"id": "a", "name": "Object A", "mass": 2.0, "initialPosition": {"x": -5.0, "y": 0.0}},
            {"id": "b", "name": "Object B", "mass": 1.0, "initialPosition": {"x": 1.0, "y": 0.0}},
        ],
        "parameters": parameters,
        "adjustableParameters": ["m1", "m2", "v1", "v2"],
    }


def raw_pendulum(**params):
    parameters = {"length": 2.0, "angle": 10.0, "gravity": 9.8}
    parameters.update(params)
    return {
        "motionFamily": "pendulum",
        "entities": [{"id": "bob", "name": "Bob", "initialPosition": {"x": 0.0, "y": 5.0}}],
        "parameters": parameters,
        "adjustableParameters": ["length", "angle", "gravity"],
    }


def raw_incline(**params):
    parameters = {"angle": 30.0, "gravity": 9.8, "velocity": 5.0}
    parameters.update(params)
    return {
        "motionFamily": "incline",
        "entities": [{"id": "block", "name": "Block", "initialPosition": {"x": -8.0, "y": 6.0}}],
        "parameters": parameters,
        "adjustableParameters": ["angle", "friction", "gravity"],
    }


def raw_circular(**params):
    parameters = {"radius": 3.0, "velocity": 6.0}
    parameters.update(params)
    return {
        "motionFamily": "circular",
        "entities": [{"id": "stone", "name": "Stone", "initialPosition": {"x": 0.0, "y": 5.0}}],
        "parameters": parameters,
        "adjustableParameters": ["radius", "velocity"],
    }


@pytest.fixture
def projectile_scenario():
    return validate_scenario(raw_projectile())


@pytest.fixture
def collision_scenario():
    return validate_scenario(raw_collision())


@pytest.fixture
def pendulum_scenario():
    return validate_scenario(raw_pendulum())


@pytest.fixture
def incline_scenario():
    return validate_scenario(raw_incline())


@pytest.fixture
def circular_scenario():
    return validate_scenario(raw_circular())


@pytest.fixture
def linear_scenario():
    return validate_scenario(raw_linear())
