'''
module cpu event
'''

from typing import Any, Dict, Optional

'''
@class CpuEvent
A captured main-thread execution record, as found in a trace.
Timestamp and duration are in microseconds, like the trace they come from.
'''


class CpuEvent:
    """
    CpuEvent represents one captured CPU execution segment.

    The identity fields (pid, tid, name, category, phase, args) are reused
    verbatim when the simulated timeline is written back as a trace.

    Attributes:
        m_pid: Process ID where the task ran
        m_tid: Thread ID where the task ran
        m_name: Event name (e.g. "TaskQueueManager::ProcessTaskFromWorkQueue")
        m_category: Trace category
        m_phase: Trace phase (usually "X")
        m_timestamp: Captured start timestamp in microseconds
        m_duration: Captured duration in microseconds
        m_args: Original event arguments
        m_event_id: Optional identifier of this event
        m_initiator_id: Optional id of the node whose completion enabled it
    """

    def __init__(
        self,
        pid: int,
        tid: int,
        name: str,
        category: str = 'toplevel',
        phase: str = 'X',
        timestamp: float = 0.0,
        duration: float = 0.0,
        args: Optional[Dict[str, Any]] = None,
        event_id: Optional[str] = None,
        initiator_id: Optional[str] = None
    ) -> None:
        """
        Initialize a CpuEvent.

        Raises:
            ValueError: If the duration is negative
        """
        if duration < 0:
            raise ValueError(f"CPU event '{name}' has a negative duration: {duration}")
        self.m_pid: int = pid
        self.m_tid: int = tid
        self.m_name: str = name
        self.m_category: str = category
        self.m_phase: str = phase
        self.m_timestamp: float = float(timestamp)
        self.m_duration: float = float(duration)
        self.m_args: Dict[str, Any] = dict(args) if args else {}
        self.m_event_id: Optional[str] = event_id
        self.m_initiator_id: Optional[str] = initiator_id

    @classmethod
    def fromDict(cls, record: Dict[str, Any]) -> 'CpuEvent':
        """
        Create a CpuEvent from a capture-layer record.

        Both the long key names (processId, threadId, category, phase,
        timestamp, duration) and the trace short names (pid, tid, cat, ph,
        ts, dur) are accepted.

        Raises:
            ValueError: If the process/thread id or the name is missing
        """
        pid = record.get('processId', record.get('pid'))
        tid = record.get('threadId', record.get('tid'))
        name = record.get('name')
        if pid is None or tid is None or name is None:
            raise ValueError("CPU record requires a process id, a thread id and a name")
        return cls(
            pid=pid,
            tid=tid,
            name=name,
            category=record.get('category', record.get('cat', 'toplevel')),
            phase=record.get('phase', record.get('ph', 'X')),
            timestamp=record.get('timestamp', record.get('ts', 0.0)),
            duration=record.get('duration', record.get('dur', 0.0)),
            args=record.get('args'),
            event_id=record.get('eventId'),
            initiator_id=record.get('initiatorId'),
        )

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

    def getTimestamp(self) -> float:
        """Get the captured start timestamp in microseconds."""
        return self.m_timestamp

    def getDuration(self) -> float:
        """Get the captured duration in microseconds."""
        return self.m_duration

    def getArgs(self) -> Dict[str, Any]:
        return self.m_args

    def getEventId(self) -> Optional[str]:
        return self.m_event_id

    def getInitiatorId(self) -> Optional[str]:
        return self.m_initiator_id

    def getStartTimeMs(self) -> float:
        """Get the captured start time in milliseconds."""
        return self.m_timestamp / 1000.0

    def getEndTimeMs(self) -> float:
        """Get the captured end time in milliseconds."""
        return (self.m_timestamp + self.m_duration) / 1000.0

    def __repr__(self) -> str:
        return f"CpuEvent({self.m_name!r}, pid={self.m_pid}, tid={self.m_tid}, ts={self.m_timestamp})"
