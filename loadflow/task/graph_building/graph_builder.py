'''
module graph builder
'''

import sys
from typing import Dict, List, Optional, Sequence, Union

from ...flow.flow import FlowNode
from ...perf_data_struct.base import DependencyGraph, NodeType
from ...perf_data_struct.dynamic.record.cpu_event import CpuEvent
from ...perf_data_struct.dynamic.record.network_request import NetworkRequest
from ...utils.errors import GraphCycleError

RequestInput = Union[NetworkRequest, dict]
CpuInput = Union[CpuEvent, dict]

'''
@class GraphBuilder
Build the dependency graph of a page load from captured records
'''


class GraphBuilder(FlowNode):
    """
    GraphBuilder turns captured network and CPU records into a DependencyGraph.

    Wiring rules:
    - A network request is a child of the request that initiated it, or a
      root (navigation) when it has no initiator.
    - A CPU task is a child of its explicit initiator (network or CPU node).
      Without one it depends on the request that finished last before the
      task started; if no request finished before it, it is a root.

    Nodes are created for all requests first, then for all CPU tasks, each
    in input order. Building is all-or-nothing: on any error no graph is
    returned.

    Attributes:
        m_request_records: Network records used by run()
        m_cpu_records: CPU records used by run()
        m_graph: Last graph built by run()
    """

    def __init__(self, request_records: Optional[Sequence[RequestInput]] = None,
                 cpu_records: Optional[Sequence[CpuInput]] = None) -> None:
        """
        Initialize a GraphBuilder.

        Args:
            request_records: Network records (NetworkRequest or capture dicts)
            cpu_records: CPU records (CpuEvent or capture dicts)
        """
        super().__init__()
        self.m_request_records: List[RequestInput] = list(request_records or [])
        self.m_cpu_records: List[CpuInput] = list(cpu_records or [])
        self.m_graph: Optional[DependencyGraph] = None

    def getGraph(self) -> Optional[DependencyGraph]:
        """Get the graph built by the last run()."""
        return self.m_graph

    def build(self, request_records: Sequence[RequestInput],
              cpu_records: Sequence[CpuInput]) -> DependencyGraph:
        """
        Build a dependency graph.

        The root set of the result is ``graph.getRoots()``.

        Args:
            request_records: Network records (NetworkRequest or capture dicts)
            cpu_records: CPU records (CpuEvent or capture dicts)

        Returns:
            The new, acyclic DependencyGraph

        Raises:
            GraphCycleError: If the initiator relationships form a cycle
            ValueError: If a record is malformed or an id is used twice
        """
        requests = [r if isinstance(r, NetworkRequest) else NetworkRequest.fromDict(r)
                    for r in request_records]
        cpu_events = [e if isinstance(e, CpuEvent) else CpuEvent.fromDict(e)
                      for e in cpu_records]

        graph = DependencyGraph()
        request_index: Dict[str, int] = {}
        for request in requests:
            request_index[request.getRequestId()] = graph.addNode(
                request.getRequestId(), NodeType.NETWORK, request)

        cpu_index: List[int] = []
        for position, event in enumerate(cpu_events):
            node_id = event.getEventId() or f"cpu-{position}"
            cpu_index.append(graph.addNode(node_id, NodeType.CPU, event))

        for request in requests:
            initiator = request.getInitiatorRequestId()
            if initiator is None:
                continue
            if initiator == request.getRequestId():
                raise GraphCycleError(
                    f"Request '{initiator}' initiates itself", [initiator, initiator])
            if initiator not in request_index:
                print(f"Warning: initiator '{initiator}' of request "
                      f"'{request.getRequestId()}' not found; treating it as a root",
                      file=sys.stderr)
                continue
            graph.addDependency(request_index[initiator], request_index[request.getRequestId()])

        for event, index in zip(cpu_events, cpu_index):
            parent = self._findCpuParent(graph, requests, request_index, event)
            if parent is not None:
                graph.addDependency(parent, index)

        graph.checkAcyclic()
        return graph

    def _findCpuParent(self, graph: DependencyGraph, requests: List[NetworkRequest],
                       request_index: Dict[str, int], event: CpuEvent) -> Optional[int]:
        """
        Find the node whose completion made a CPU task possible.

        Raises:
            KeyError: If an explicit initiator id does not exist
        """
        initiator = event.getInitiatorId()
        if initiator is not None:
            return graph.getNodeById(initiator).getIndex()

        start = event.getStartTimeMs()
        best: Optional[NetworkRequest] = None
        for request in requests:
            if request.getEndTime() > start:
                continue
            if best is None or request.getEndTime() > best.getEndTime():
                best = request
        if best is None:
            return None
        return request_index[best.getRequestId()]

    def run(self) -> None:
        """
        Build the graph from the configured records.

        The graph is added to the outputs and kept in ``m_graph``.
        """
        self.m_graph = self.build(self.m_request_records, self.m_cpu_records)
        self.m_outputs.add_data(self.m_graph)
