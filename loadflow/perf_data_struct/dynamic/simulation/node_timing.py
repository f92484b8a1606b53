'''
module node timing

Simulated timestamps of the nodes of a dependency graph.
'''

from typing import Any, Dict, ItemsView, Iterable, Optional

import numpy as np

from ...base import DependencyGraph, NodeType
from ....utils.throttling_config import ThrottlingProfile

'''
@class TimingEntry
Simulated queued/start/end time of one node
'''


class TimingEntry:
    """
    TimingEntry holds the simulated times of one node, in milliseconds.

    Attributes:
        m_queued_time: Time the node became ready
        m_start_time: Time the node obtained its resource and started
        m_end_time: Time the node completed
    """

    __slots__ = ('m_queued_time', 'm_start_time', 'm_end_time')

    def __init__(self, queued_time: float, start_time: float, end_time: float) -> None:
        """
        Initialize a TimingEntry.

        Raises:
            ValueError: If the times are not ordered queued <= start <= end
        """
        if not queued_time <= start_time <= end_time:
            raise ValueError(
                f"Timing must satisfy queued <= start <= end, got "
                f"({queued_time}, {start_time}, {end_time})")
        self.m_queued_time: float = queued_time
        self.m_start_time: float = start_time
        self.m_end_time: float = end_time

    def getQueuedTime(self) -> float:
        return self.m_queued_time

    def getStartTime(self) -> float:
        return self.m_start_time

    def getEndTime(self) -> float:
        return self.m_end_time

    def getDuration(self) -> float:
        """Get the simulated duration (end - start)."""
        return self.m_end_time - self.m_start_time

    def toDict(self) -> Dict[str, float]:
        return {
            'queuedTime': self.m_queued_time,
            'startTime': self.m_start_time,
            'endTime': self.m_end_time,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimingEntry):
            return NotImplemented
        return (self.m_queued_time == other.m_queued_time
                and self.m_start_time == other.m_start_time
                and self.m_end_time == other.m_end_time)

    def __repr__(self) -> str:
        return f"TimingEntry({self.m_queued_time}, {self.m_start_time}, {self.m_end_time})"


'''
@class NodeTiming
Per-run mapping from node index to TimingEntry
'''


class NodeTiming:
    """
    NodeTiming maps the arena index of each node to its simulated times.

    A NodeTiming belongs to exactly one simulation run. It is writable
    while the run is in progress and frozen once the run completes.

    Attributes:
        m_entries: Mapping from node index to TimingEntry
        m_frozen: Whether the mapping can still be modified
    """

    def __init__(self) -> None:
        """Initialize an empty, writable NodeTiming."""
        self.m_entries: Dict[int, TimingEntry] = {}
        self.m_frozen: bool = False

    def setTiming(self, index: int, queued_time: float, start_time: float, end_time: float) -> None:
        """
        Record the simulated times of a node.

        Raises:
            RuntimeError: If the mapping is frozen
            ValueError: If the times are not ordered
        """
        if self.m_frozen:
            raise RuntimeError("NodeTiming is frozen; simulation already completed")
        self.m_entries[index] = TimingEntry(queued_time, start_time, end_time)

    def getTiming(self, index: int) -> Optional[TimingEntry]:
        """Get the entry of a node, or None if it has none."""
        return self.m_entries.get(index)

    def hasTiming(self, index: int) -> bool:
        return index in self.m_entries

    def items(self) -> ItemsView[int, TimingEntry]:
        return self.m_entries.items()

    def freeze(self) -> None:
        """Make the mapping read-only."""
        self.m_frozen = True

    def isFrozen(self) -> bool:
        return self.m_frozen

    def getTotalDuration(self) -> float:
        """
        Get the simulated load duration (latest end minus earliest queued time).

        Returns:
            Duration in milliseconds, 0.0 for an empty mapping
        """
        if not self.m_entries:
            return 0.0
        ends = np.fromiter((e.m_end_time for e in self.m_entries.values()), dtype=np.float64)
        queued = np.fromiter((e.m_queued_time for e in self.m_entries.values()), dtype=np.float64)
        return float(ends.max() - queued.min())

    def getDurations(self, indices: Iterable[int]) -> np.ndarray:
        """
        Get the simulated durations of the given nodes.

        Raises:
            KeyError: If a node has no entry
        """
        return np.array([self.m_entries[i].getDuration() for i in indices], dtype=np.float64)

    def getSummary(self, graph: DependencyGraph) -> Dict[str, Dict[str, float]]:
        """
        Summarize simulated durations per node kind.

        Args:
            graph: Graph the timing was computed for

        Returns:
            Mapping from node kind ("cpu", "network") to count, total,
            mean and max duration in milliseconds
        """
        summary: Dict[str, Dict[str, float]] = {}
        for node_type in NodeType:
            indices = [n.getIndex() for n in graph.getNodes()
                       if n.getType() == node_type and n.getIndex() in self.m_entries]
            durations = self.getDurations(indices)
            summary[node_type.value] = {
                'count': len(indices),
                'total': float(durations.sum()) if len(indices) else 0.0,
                'mean': float(durations.mean()) if len(indices) else 0.0,
                'max': float(durations.max()) if len(indices) else 0.0,
            }
        return summary

    def __len__(self) -> int:
        return len(self.m_entries)

    def __contains__(self, index: object) -> bool:
        return index in self.m_entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeTiming):
            return NotImplemented
        return self.m_entries == other.m_entries


'''
@class SimulationResult
Output of one simulation run
'''


class SimulationResult:
    """
    SimulationResult bundles a graph with the timing of one simulation run.

    The graph is shared and read-only; the timing is owned by this run.

    Attributes:
        m_graph: Simulated dependency graph
        m_timing: Frozen NodeTiming of the run
        m_profile: Throttling profile the run used
        m_stats: Scheduler statistics (steps, wall time, ...)
    """

    def __init__(self, graph: DependencyGraph, timing: NodeTiming,
                 profile: ThrottlingProfile, stats: Optional[Dict[str, Any]] = None) -> None:
        self.m_graph: DependencyGraph = graph
        self.m_timing: NodeTiming = timing
        self.m_profile: ThrottlingProfile = profile
        self.m_stats: Dict[str, Any] = dict(stats) if stats else {}

    def getGraph(self) -> DependencyGraph:
        return self.m_graph

    def getTiming(self) -> NodeTiming:
        return self.m_timing

    def getProfile(self) -> ThrottlingProfile:
        return self.m_profile

    def getStats(self) -> Dict[str, Any]:
        return dict(self.m_stats)

    def getTotalDuration(self) -> float:
        """Get the simulated load duration in milliseconds."""
        return self.m_timing.getTotalDuration()
