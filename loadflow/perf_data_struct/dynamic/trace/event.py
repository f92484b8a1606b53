'''
@module event
'''

import copy
from enum import Enum
from typing import Any, Dict, Optional, Union

'''
@Enum EventPhase
Phases of trace events used by the serializer
'''


class EventPhase(Enum):
    """Enumeration of trace event phases."""
    COMPLETE = "X"
    INSTANT = "I"


'''
@class TraceEvent
A trace event is a basic unit of the emitted trace stream.
'''


class TraceEvent:
    """
    TraceEvent represents one marker of a serialized trace.

    Timestamps and durations are integral microseconds, as required by the
    trace format. Arguments are copied on construction so emitted events
    never share state with the captured records they were built from.

    Attributes:
        m_pid: Process ID of the event
        m_tid: Thread ID of the event
        m_name: Name of the event
        m_category: Trace category
        m_phase: Phase string ("X", "I", ...)
        m_timestamp: Timestamp in microseconds
        m_duration: Duration in microseconds, None for instant events
        m_args: Event arguments
    """

    def __init__(
        self,
        pid: int,
        tid: int,
        name: str,
        category: str,
        phase: Union[EventPhase, str],
        timestamp: int,
        duration: Optional[int] = None,
        args: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize a TraceEvent.

        Args:
            pid: Process ID of the event
            tid: Thread ID of the event
            name: Name of the event
            category: Trace category
            phase: EventPhase or raw phase string
            timestamp: Timestamp in microseconds
            duration: Duration in microseconds (complete events only)
            args: Event arguments
        """
        self.m_pid: int = pid
        self.m_tid: int = tid
        self.m_name: str = name
        self.m_category: str = category
        self.m_phase: str = phase.value if isinstance(phase, EventPhase) else phase
        self.m_timestamp: int = timestamp
        self.m_duration: Optional[int] = duration
        self.m_args: Dict[str, Any] = copy.deepcopy(args) if args else {}

    def getPid(self) -> int:
        return self.m_pid

    def getTid(self) -> int:
        return self.m_tid

    def getName(self) -> str:
        return self.m_name

    def getCategory(self) -> str:
        return self.m_category

    def getPhase(self) -> str:
        return self.m_phase

    def getTimestamp(self) -> int:
        """Get the timestamp in microseconds."""
        return self.m_timestamp

    def getDuration(self) -> Optional[int]:
        """Get the duration in microseconds, None for instant events."""
        return self.m_duration

    def getArgs(self) -> Dict[str, Any]:
        return self.m_args

    def getData(self) -> Dict[str, Any]:
        """Get the ``args.data`` payload (empty if absent)."""
        return self.m_args.get('data', {})

    def toDict(self) -> Dict[str, Any]:
        """
        Convert the event to its trace-format dictionary.

        Returns:
            Dictionary with pid, tid, ph, cat, name, ts, dur (if set) and args
        """
        event: Dict[str, Any] = {
            'pid': self.m_pid,
            'tid': self.m_tid,
            'ph': self.m_phase,
            'cat': self.m_category,
            'name': self.m_name,
            'ts': self.m_timestamp,
        }
        if self.m_duration is not None:
            event['dur'] = self.m_duration
        event['args'] = copy.deepcopy(self.m_args)
        return event

    def __repr__(self) -> str:
        return f"TraceEvent({self.m_name!r}, ts={self.m_timestamp})"
