'''
module trace
'''

from typing import Any, Dict, List, Optional
from .event import TraceEvent

'''
@class TraceInfo
Basic information of the serialized trace
'''


class TraceInfo:
    """
    TraceInfo contains metadata about a serialized trace.

    Attributes:
        m_pid: Process ID shared by the synthesized markers
        m_tid: Thread ID shared by the synthesized markers
        m_trace_start_time: First timestamp of the trace (microseconds)
        m_trace_end_time: Last timestamp of the trace (microseconds)
        m_profile_name: Name of the throttling profile the trace was simulated with
    """

    def __init__(
        self,
        pid: Optional[int] = None,
        tid: Optional[int] = None,
        trace_start_time: Optional[int] = None,
        trace_end_time: Optional[int] = None,
        profile_name: Optional[str] = None
    ) -> None:
        """
        Initialize TraceInfo object.

        Args:
            pid: Process ID shared by the synthesized markers
            tid: Thread ID shared by the synthesized markers
            trace_start_time: First timestamp of the trace (microseconds)
            trace_end_time: Last timestamp of the trace (microseconds)
            profile_name: Name of the throttling profile
        """
        self.m_pid: Optional[int] = pid
        self.m_tid: Optional[int] = tid
        self.m_trace_start_time: Optional[int] = trace_start_time
        self.m_trace_end_time: Optional[int] = trace_end_time
        self.m_profile_name: Optional[str] = profile_name

    def getPid(self) -> Optional[int]:
        """Get the process ID."""
        return self.m_pid

    def getTid(self) -> Optional[int]:
        """Get the thread ID."""
        return self.m_tid

    def getTraceStartTime(self) -> Optional[int]:
        return self.m_trace_start_time

    def getTraceEndTime(self) -> Optional[int]:
        return self.m_trace_end_time

    def getTraceDuration(self) -> Optional[int]:
        """
        Calculate the span of the trace.

        Returns:
            Duration in microseconds, or None if start/end times are not set
        """
        if self.m_trace_start_time is not None and self.m_trace_end_time is not None:
            return self.m_trace_end_time - self.m_trace_start_time
        return None

    def getProfileName(self) -> Optional[str]:
        return self.m_profile_name


'''
@class Trace
A trace is an ordered collection of trace events.
'''


class Trace:
    """
    Trace represents the ordered event stream produced by serialization.

    Events are kept in emission order, which is non-decreasing by timestamp
    for traces built by the serializer.

    Attributes:
        m_events: List of events in emission order
        m_traceinfo: Metadata about this trace
    """

    def __init__(self, trace_info: Optional[TraceInfo] = None) -> None:
        """
        Initialize a Trace object.

        Args:
            trace_info: Optional metadata; an empty TraceInfo is used otherwise
        """
        self.m_events: List[TraceEvent] = []
        self.m_traceinfo: TraceInfo = trace_info if trace_info is not None else TraceInfo()

    def addEvent(self, event: TraceEvent) -> None:
        """
        Add an event to the trace.

        Args:
            event: The event to append
        """
        self.m_events.append(event)

    def getEvents(self) -> List[TraceEvent]:
        """Get all events in emission order."""
        return self.m_events

    def getEventCount(self) -> int:
        return len(self.m_events)

    def getTraceInfo(self) -> TraceInfo:
        return self.m_traceinfo

    def isOrdered(self) -> bool:
        """Check that timestamps are non-decreasing across the stream."""
        return all(a.getTimestamp() <= b.getTimestamp()
                   for a, b in zip(self.m_events, self.m_events[1:]))

    def toDict(self) -> Dict[str, Any]:
        """
        Convert the trace to the trace-file structure.

        Returns:
            ``{"traceEvents": [...]}`` with one dictionary per event
        """
        return {'traceEvents': [event.toDict() for event in self.m_events]}
