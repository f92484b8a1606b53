from .trace_serializer import TraceSerializer

__all__ = ["TraceSerializer"]
