'''
module load simulator
'''

import heapq
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import psutil

from ...flow.flow import FlowNode
from ...perf_data_struct.base import DependencyGraph, Node
from ...perf_data_struct.dynamic.simulation.node_timing import NodeTiming, SimulationResult
from ...utils.errors import GraphCycleError, SimulationDivergedError
from ...utils.throttling_config import NetworkProfile, ThrottlingConfig, ThrottlingProfile
from .connection_pool import ConnectionPool
from .network_analyzer import NetworkAnalyzer


DEFAULT_MAX_STEPS = 1000000


class NodeState(Enum):
    """Scheduling state of a node during one simulation run."""
    PENDING = "pending"    # Waiting for parents
    READY = "ready"        # All parents done, waiting for a resource
    RUNNING = "running"    # Occupying the CPU or a connection
    DONE = "done"          # Completed, end time assigned


'''
@class LoadSimulator
Simulate a page load over a dependency graph under a throttling profile.
'''


class LoadSimulator(FlowNode):
    """
    LoadSimulator assigns simulated times to every node of a dependency graph.

    The simulator is a discrete-event scheduler with two kinds of resources:
    a single CPU slot shared by all CPU nodes, and a bounded number of
    connections per origin for network nodes. At each step the clock
    advances to the next completion, the finished node releases its
    resource, its children become ready once all their parents are done,
    and ready nodes start (earliest queued first, discovery order on ties)
    as soon as their resource is free.

    Durations:
    - CPU nodes: captured duration x cpu slowdown multiplier.
    - Network nodes: captured duration when the profile has no network
      profile, otherwise re-estimated by NetworkAnalyzer from the round
      trips paid on a new or reused connection and the throughput ratio.

    Every run writes a fresh NodeTiming and never mutates the graph, so the
    same graph can be simulated under several profiles. Results are
    identical for identical graph and profile.

    Attributes:
        m_profile: Throttling profile used by simulate()/run()
        m_observed_network: Captured network conditions (estimated per graph if None)
        m_max_steps: Maximum number of scheduling steps per run
        m_enable_memory_tracking: Flag to sample process memory around each run
        m_memory_stats: Memory/time statistics of the last run
        m_last_result: Result of the last run
    """

    def __init__(self, profile: Optional[ThrottlingProfile] = None,
                 observed_network: Optional[NetworkProfile] = None,
                 max_steps: int = DEFAULT_MAX_STEPS,
                 enable_memory_tracking: bool = False) -> None:
        """
        Initialize a LoadSimulator.

        Args:
            profile: Throttling profile; the configured default profile if omitted
            observed_network: Network conditions of the capture; estimated
                from each graph's resource timing when omitted
            max_steps: Maximum number of scheduling steps before giving up
            enable_memory_tracking: If True, record process memory before and after each run

        Raises:
            ValueError: If max_steps is not positive
        """
        super().__init__()
        if max_steps < 1:
            raise ValueError(f"max_steps must be positive: {max_steps}")
        self.m_profile: ThrottlingProfile = (
            profile if profile is not None else ThrottlingConfig.get_instance().get_default_profile())
        self.m_observed_network: Optional[NetworkProfile] = observed_network
        self.m_max_steps: int = max_steps
        self.m_enable_memory_tracking: bool = enable_memory_tracking
        self.m_memory_stats: Dict[str, Any] = {}
        self.m_last_result: Optional[SimulationResult] = None

    def getProfile(self) -> ThrottlingProfile:
        return self.m_profile

    def setProfile(self, profile: ThrottlingProfile) -> None:
        self.m_profile = profile

    def getMaxSteps(self) -> int:
        return self.m_max_steps

    def getMemoryStats(self) -> Dict[str, Any]:
        """
        Get the statistics of the last run.

        Returns:
            Dictionary with wall time and, when memory tracking is enabled,
            RSS before/after the run
        """
        return dict(self.m_memory_stats)

    def getLastResult(self) -> Optional[SimulationResult]:
        return self.m_last_result

    def _measure_memory_usage(self) -> float:
        """
        Measure current memory usage in bytes.

        Returns:
            Current memory usage in bytes (RSS - Resident Set Size)
        """
        process = psutil.Process()
        return process.memory_info().rss

    def _computeDuration(self, node: Node, warm_connection: bool,
                         observed: Optional[NetworkProfile]) -> float:
        """Get the simulated duration of a node that is about to start."""
        if node.isCpu():
            return node.getDuration() * self.m_profile.getCpuSlowdownMultiplier()

        request = node.getPayload()
        target = self.m_profile.getNetworkProfile()
        if target is None:
            return request.getDuration()
        round_trips = NetworkAnalyzer.getSimulatedRoundTrips(request, warm_connection)
        return NetworkAnalyzer.simulateRequestDuration(request, target, observed, round_trips)

    def simulate(self, graph: DependencyGraph) -> SimulationResult:
        """
        Simulate the page load of a graph.

        Args:
            graph: Dependency graph to simulate (not modified)

        Returns:
            SimulationResult with a frozen NodeTiming holding one entry per node

        Raises:
            GraphCycleError: If a cycle keeps some nodes from ever becoming ready
            SimulationDivergedError: If the run exceeds the step bound
        """
        wall_start = time.time()
        if self.m_enable_memory_tracking:
            self.m_memory_stats = {'start_memory_bytes': self._measure_memory_usage()}
        else:
            self.m_memory_stats = {}

        nodes = graph.getNodes()
        total = len(nodes)
        rank = [0] * total
        for position, index in enumerate(graph.getDiscoveryOrder()):
            rank[index] = position

        observed = self.m_observed_network
        if observed is None and self.m_profile.isNetworkThrottled():
            observed = NetworkAnalyzer.estimateObservedProfile(graph)

        state = [NodeState.PENDING] * total
        waiting_parents = [len(node.getParents()) for node in nodes]
        queued_at = [0.0] * total
        started_at = [0.0] * total

        # (queued time, discovery rank, index) / (end time, discovery rank, index)
        ready: List[Tuple[float, int, int]] = []
        running: List[Tuple[float, int, int]] = []
        for root in graph.getRoots():
            state[root] = NodeState.READY
            heapq.heappush(ready, (0.0, rank[root], root))

        timing = NodeTiming()
        pool = ConnectionPool(self.m_profile.getMaxConnectionsPerOrigin())
        cpu_busy = False
        clock = 0.0
        completed = 0
        steps = 0

        while completed < total:
            blocked: List[Tuple[float, int, int]] = []
            while ready:
                entry = heapq.heappop(ready)
                index = entry[2]
                node = nodes[index]
                warm = False
                if node.isCpu():
                    if cpu_busy:
                        blocked.append(entry)
                        continue
                    cpu_busy = True
                else:
                    origin = node.getPayload().getOrigin()
                    if not pool.canAcquire(origin):
                        blocked.append(entry)
                        continue
                    warm = pool.acquire(origin)

                state[index] = NodeState.RUNNING
                queued_at[index] = entry[0]
                started_at[index] = clock
                end = clock + self._computeDuration(node, warm, observed)
                heapq.heappush(running, (end, rank[index], index))
            for entry in blocked:
                heapq.heappush(ready, entry)

            if not running:
                stuck = [nodes[i].getId() for i in range(total) if state[i] == NodeState.PENDING]
                raise GraphCycleError(
                    f"Simulation deadlocked: {len(stuck)} nodes can never become ready "
                    f"({', '.join(stuck[:5])})", stuck)

            steps += 1
            if steps > self.m_max_steps:
                raise SimulationDivergedError(self.m_max_steps, completed, total)

            end, _, index = heapq.heappop(running)
            clock = end
            node = nodes[index]
            if node.isCpu():
                cpu_busy = False
            else:
                pool.release(node.getPayload().getOrigin())

            state[index] = NodeState.DONE
            timing.setTiming(index, queued_at[index], started_at[index], end)
            completed += 1

            for child in node.getChildren():
                waiting_parents[child] -= 1
                if waiting_parents[child] == 0:
                    state[child] = NodeState.READY
                    heapq.heappush(ready, (clock, rank[child], child))

        timing.freeze()

        self.m_memory_stats['simulation_time_seconds'] = time.time() - wall_start
        if self.m_enable_memory_tracking:
            self.m_memory_stats['end_memory_bytes'] = self._measure_memory_usage()
            self.m_memory_stats['delta_memory_bytes'] = (
                self.m_memory_stats['end_memory_bytes'] - self.m_memory_stats['start_memory_bytes'])

        stats = {
            'steps': steps,
            'node_count': total,
            'observed_network': observed,
        }
        self.m_last_result = SimulationResult(graph, timing, self.m_profile, stats)
        return self.m_last_result

    def simulateProfiles(self, graph: DependencyGraph,
                         profiles: Sequence[ThrottlingProfile]) -> List[SimulationResult]:
        """
        Simulate the same graph under several profiles.

        Each run gets its own NodeTiming; the simulator's own profile is
        restored afterwards.

        Args:
            graph: Dependency graph shared by all runs
            profiles: Profiles to simulate, in order

        Returns:
            One SimulationResult per profile
        """
        original = self.m_profile
        results = []
        try:
            for profile in profiles:
                self.m_profile = profile
                results.append(self.simulate(graph))
        finally:
            self.m_profile = original
        return results

    def run(self) -> None:
        """
        Simulate every dependency graph in the inputs.

        One SimulationResult per graph is added to the outputs.
        """
        for graph in self.m_inputs.get_data_of_type(DependencyGraph):
            self.m_outputs.add_data(self.simulate(graph))
