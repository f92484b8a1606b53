'''
module trace serializer

Render the simulated timeline of a dependency graph as an ordered stream
of trace events.
'''

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...flow.flow import FlowNode
from ...perf_data_struct.base import DependencyGraph, Node
from ...perf_data_struct.dynamic.record.network_request import NetworkRequest
from ...perf_data_struct.dynamic.simulation.node_timing import (
    NodeTiming, SimulationResult, TimingEntry)
from ...perf_data_struct.dynamic.trace.event import EventPhase, TraceEvent
from ...perf_data_struct.dynamic.trace.trace import Trace, TraceInfo
from ...utils.errors import MissingTimingError, NoCpuNodeError

NETWORK_CATEGORY = 'devtools.timeline'
LANDMARK_CATEGORY = 'disabled-by-default-devtools.timeline'
LANDMARK_OFFSET_US = 100


def toMicroseconds(ms: float) -> int:
    """Convert milliseconds to integral microseconds, rounding half up."""
    return int(math.floor(ms * 1000 + 0.5))


def _roundHalfUp(value: float) -> int:
    return int(math.floor(value + 0.5))


'''
@class TraceSerializer
Simulated timeline to trace events
'''


class TraceSerializer(FlowNode):
    """
    TraceSerializer converts (graph, NodeTiming) into a Trace.

    Every CPU node becomes one complete event reusing the identity of its
    captured record. Every network node becomes up to three instant events
    (send, receive response, finish) on the process/thread of the first CPU
    node. Two landmark events are prepended so consumers recognize the
    stream as a page-load trace.

    Serialization performs no I/O and never modifies the graph, the timing
    or the captured records; persistence is left to TraceWriter.

    Attributes:
        m_traces: Traces produced by the last run()
    """

    def __init__(self) -> None:
        super().__init__()
        self.m_traces: List[Trace] = []

    def getTraces(self) -> List[Trace]:
        return list(self.m_traces)

    @staticmethod
    def getThreadInfo(nodes: Sequence[Node]) -> Tuple[int, int]:
        """
        Get the process/thread identity shared by the synthesized events.

        Args:
            nodes: Nodes in traversal order

        Returns:
            (pid, tid) of the first CPU node

        Raises:
            NoCpuNodeError: If no node is a CPU node
        """
        for node in nodes:
            if node.isCpu():
                event = node.getPayload()
                return event.getPid(), event.getTid()
        raise NoCpuNodeError("No CPU node found; a trace needs a process/thread scope")

    @staticmethod
    def _sendData(request: NetworkRequest) -> Dict[str, Any]:
        return {
            'requestId': request.getRequestId(),
            'url': request.getUrl(),
            'requestMethod': request.getRequestMethod(),
            'priority': request.getPriority(),
        }

    @staticmethod
    def _receiveData(request: NetworkRequest, entry: TimingEntry, midpoint: float) -> Dict[str, Any]:
        queued = entry.getQueuedTime()
        return {
            'requestId': request.getRequestId(),
            'statusCode': request.getStatusCode(),
            'mimeType': request.getMimeType(),
            'fromServiceWorker': request.isFetchedViaServiceWorker(),
            'timing': {
                # requestTime is in seconds, the other fields are ms relative to it
                'requestTime': _roundHalfUp(queued / 1000),
                'sendStart': entry.getStartTime() - queued,
                'receiveHeadersEnd': midpoint - queued,
            },
        }

    @staticmethod
    def _finishData(request: NetworkRequest, entry: TimingEntry) -> Dict[str, Any]:
        return {
            'requestId': request.getRequestId(),
            'finishTime': entry.getEndTime(),
            'encodedDataLength': request.getTransferSize(),
            'decodedBodyLength': request.getResourceSize(),
            'didFail': request.isFailed(),
        }

    def createCpuEvent(self, node: Node, entry: TimingEntry) -> TraceEvent:
        """Create the complete event of a CPU node from its simulated times."""
        event = node.getPayload()
        return TraceEvent(
            pid=event.getPid(),
            tid=event.getTid(),
            name=event.getName(),
            category=event.getCategory(),
            phase=event.getPhase(),
            timestamp=toMicroseconds(entry.getStartTime()),
            duration=toMicroseconds(entry.getDuration()),
            args=event.getArgs(),
        )

    def createNetworkEvents(self, node: Node, entry: TimingEntry,
                            pid: int, tid: int) -> List[TraceEvent]:
        """
        Create the instant events of a network node.

        Returns:
            send and finish events, with a receive-response event between
            them unless the request was canceled or failed
        """
        request = node.getPayload()
        events = [TraceEvent(pid, tid, 'ResourceSendRequest', NETWORK_CATEGORY, EventPhase.INSTANT,
                             toMicroseconds(entry.getQueuedTime()),
                             args={'data': self._sendData(request)})]

        if not request.isCanceled() and not request.isFailed():
            midpoint = (entry.getStartTime() + entry.getEndTime()) / 2
            events.append(TraceEvent(pid, tid, 'ResourceReceiveResponse', NETWORK_CATEGORY,
                                     EventPhase.INSTANT, toMicroseconds(midpoint),
                                     args={'data': self._receiveData(request, entry, midpoint)}))

        events.append(TraceEvent(pid, tid, 'ResourceFinish', NETWORK_CATEGORY, EventPhase.INSTANT,
                                 toMicroseconds(entry.getEndTime()),
                                 args={'data': self._finishData(request, entry)}))
        return events

    def createLandmarkEvents(self, timestamp: int, pid: int, tid: int) -> List[TraceEvent]:
        """Create the two landmark events placed just before the first event."""
        ts = timestamp - LANDMARK_OFFSET_US
        return [
            TraceEvent(pid, tid, 'TracingStartedInPage', LANDMARK_CATEGORY, EventPhase.INSTANT, ts,
                       args={'data': {'sessionId': '-1'}}),
            TraceEvent(pid, tid, 'TracingStartedInBrowser', LANDMARK_CATEGORY, EventPhase.INSTANT, ts),
        ]

    def createTraceEvents(self, nodes: Sequence[Node], timing: NodeTiming,
                          pid: int, tid: int) -> List[TraceEvent]:
        """
        Create the events of all nodes, ordered by timestamp.

        Nodes are processed by simulated start time, ties in the given
        order, and the resulting events are then stably sorted by
        timestamp.

        Raises:
            MissingTimingError: If a node has no timing entry
        """
        entries: Dict[int, TimingEntry] = {}
        for node in nodes:
            entry = timing.getTiming(node.getIndex())
            if entry is None:
                raise MissingTimingError(node.getId())
            entries[node.getIndex()] = entry

        ordered = sorted(nodes, key=lambda n: entries[n.getIndex()].getStartTime())
        events: List[TraceEvent] = []
        for node in ordered:
            entry = entries[node.getIndex()]
            if node.isCpu():
                events.append(self.createCpuEvent(node, entry))
            else:
                events.extend(self.createNetworkEvents(node, entry, pid, tid))

        events.sort(key=lambda e: e.getTimestamp())
        return events

    def serialize(self, graph: DependencyGraph, timing: NodeTiming,
                  profile_name: Optional[str] = None) -> Trace:
        """
        Serialize the simulated timeline of a graph.

        Args:
            graph: Simulated dependency graph
            timing: Timing of the simulation run
            profile_name: Name of the profile, recorded in the TraceInfo

        Returns:
            Trace whose events have non-decreasing timestamps

        Raises:
            NoCpuNodeError: If the graph has no CPU node
            MissingTimingError: If a node has no timing entry
            GraphCycleError: If the graph contains a cycle
        """
        nodes = [graph.getNode(index) for index in graph.traverseAll()]
        pid, tid = self.getThreadInfo(nodes)
        events = self.createTraceEvents(nodes, timing, pid, tid)
        landmarks = self.createLandmarkEvents(events[0].getTimestamp(), pid, tid)

        trace = Trace(TraceInfo(pid, tid, landmarks[0].getTimestamp(),
                                events[-1].getTimestamp(), profile_name))
        for event in landmarks + events:
            trace.addEvent(event)
        return trace

    def run(self) -> None:
        """
        Serialize every simulation result in the inputs.

        One Trace per result is added to the outputs.
        """
        self.m_traces = []
        for result in self.m_inputs.get_data_of_type(SimulationResult):
            trace = self.serialize(result.getGraph(), result.getTiming(),
                                   result.getProfile().getName())
            self.m_traces.append(trace)
            self.m_outputs.add_data(trace)
