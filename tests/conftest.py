"""Shared fixtures for nhmm tests."""

import pytest

from nhmm.constrained_markov import ConstrainedMarkovModel
from nhmm.constraints import NoConstraint, PositionConstraint
from nhmm.markov import MarkovModel


@pytest.fixture
def toy_source():
    """START -> {a, b}, a -> {x}, b -> {x, y}."""
    return MarkovModel([["a", "x"], ["b", "x"], ["b", "y"]])


@pytest.fixture
def toy_model(toy_source):
    model = ConstrainedMarkovModel(NoConstraint(), seed=1)
    model.train(toy_source, [None, None])
    return model


@pytest.fixture
def cascade_source():
    """Counts a -> {b: 2}, b -> {c, e}, c -> {a}, d -> {b}."""
    return MarkovModel([["a", "b", "c"], ["d", "b", "e"], ["c", "a", "b"]])


@pytest.fixture
def cascade_model(cascade_source):
    """Last word forced to c: the removals cascade back to the first layer."""
    model = ConstrainedMarkovModel(PositionConstraint(), seed=7)
    model.train(cascade_source, [None, None, "c"])
    return model


@pytest.fixture
def branching_source():
    """Counts a -> {b: 1, c: 2}, b -> {c, a}, c -> {b}."""
    return MarkovModel([["a", "b", "c"], ["a", "c", "b"], ["b", "a", "c"]])
