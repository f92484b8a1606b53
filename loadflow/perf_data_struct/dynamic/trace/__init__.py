from .event import EventPhase, TraceEvent
from .trace import Trace, TraceInfo

__all__ = ["EventPhase", "TraceEvent", "Trace", "TraceInfo"]
