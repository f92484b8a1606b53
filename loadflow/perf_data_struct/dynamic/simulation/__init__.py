from .node_timing import TimingEntry, NodeTiming, SimulationResult

__all__ = ["TimingEntry", "NodeTiming", "SimulationResult"]
