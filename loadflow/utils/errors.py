'''
module errors

Error taxonomy for graph construction, simulation and trace serialization.
None of these are retried internally; they signal data-integrity problems
that the caller has to fix (repair the graph, change the profile, ...).
'''

from typing import List, Optional


class LoadFlowError(Exception):
    """Base class for all loadflow errors."""


class GraphCycleError(LoadFlowError):
    """
    A dependency cycle was detected while building, traversing or
    scheduling a dependency graph.

    Attributes:
        cycle: Node ids forming the cycle, in dependency order (may be empty
            when the cycle was detected as a scheduling deadlock)
    """

    def __init__(self, message: str, cycle: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.cycle: List[str] = list(cycle) if cycle else []


class MissingTimingError(LoadFlowError):
    """A node has no NodeTiming entry where one is required."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"No simulated timing found for node '{node_id}'")
        self.node_id: str = node_id


class NoCpuNodeError(LoadFlowError):
    """No CPU node is present, so no process/thread scope can be chosen."""


class SimulationDivergedError(LoadFlowError):
    """The scheduler exceeded its step bound without finishing."""

    def __init__(self, max_steps: int, completed: int, total: int) -> None:
        super().__init__(
            f"Simulation exceeded {max_steps} scheduling steps "
            f"({completed}/{total} nodes completed)"
        )
        self.max_steps: int = max_steps
        self.completed: int = completed
        self.total: int = total


class MultiParentNodeError(LoadFlowError):
    """
    A node with several parents was given to an operation that needs a
    single-parent (tree) context, such as tree-marker computation.
    """

    def __init__(self, node_id: str, parent_ids: List[str]) -> None:
        super().__init__(
            f"Node '{node_id}' has {len(parent_ids)} parents "
            f"({', '.join(parent_ids)}); tree context is only defined for forests"
        )
        self.node_id: str = node_id
        self.parent_ids: List[str] = list(parent_ids)
