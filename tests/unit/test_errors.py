"""
Unit tests for the error taxonomy
"""
import pytest
from loadflow.utils.errors import (
    GraphCycleError, LoadFlowError, MissingTimingError, MultiParentNodeError,
    NoCpuNodeError, SimulationDivergedError)


@pytest.mark.parametrize("error", [
    GraphCycleError("cycle"),
    MissingTimingError("n1"),
    NoCpuNodeError("no cpu"),
    SimulationDivergedError(10, 3, 5),
    MultiParentNodeError("n1", ["a", "b"]),
])
def test_common_base(error):
    """Test that every error derives from LoadFlowError"""
    assert isinstance(error, LoadFlowError)


def test_graph_cycle_error():
    """Test the cycle attribute"""
    assert GraphCycleError("x", ["a", "b", "a"]).cycle == ["a", "b", "a"]
    assert GraphCycleError("x").cycle == []


def test_missing_timing_error():
    """Test the message names the node"""
    error = MissingTimingError("doc")
    assert error.node_id == "doc"
    assert "doc" in str(error)


def test_simulation_diverged_error():
    """Test the progress attributes"""
    error = SimulationDivergedError(100, 40, 50)
    assert (error.max_steps, error.completed, error.total) == (100, 40, 50)
    assert "100" in str(error)


def test_multi_parent_node_error():
    """Test the parent ids"""
    error = MultiParentNodeError("c", ["a", "b"])
    assert error.parent_ids == ["a", "b"]
    assert "2 parents" in str(error)
