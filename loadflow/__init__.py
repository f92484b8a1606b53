'''
loadflow: page-load dependency-graph simulation and trace serialization
'''

from .perf_data_struct.base import DependencyGraph, Node, NodeType
from .perf_data_struct.dynamic.simulation.node_timing import NodeTiming, SimulationResult
from .task.graph_building import GraphBuilder
from .task.simulation import LoadSimulator
from .task.chain_analysis import CriticalPathAnalyzer
from .task.trace_generation import TraceSerializer
from .task.reporter import TraceWriter, saveTraceOfGraph
from .utils.throttling_config import NetworkProfile, ThrottlingProfile, ThrottlingConfig

__version__ = '0.1.0'

__all__ = [
    "DependencyGraph", "Node", "NodeType", "NodeTiming", "SimulationResult",
    "GraphBuilder", "LoadSimulator", "CriticalPathAnalyzer", "TraceSerializer",
    "TraceWriter", "saveTraceOfGraph",
    "NetworkProfile", "ThrottlingProfile", "ThrottlingConfig",
]
