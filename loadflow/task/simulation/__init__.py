from .connection_pool import ConnectionPool
from .network_analyzer import NetworkAnalyzer
from .load_simulator import LoadSimulator, NodeState

__all__ = ["ConnectionPool", "NetworkAnalyzer", "LoadSimulator", "NodeState"]
