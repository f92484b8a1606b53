from .trace_writer import TraceWriter, saveTraceOfGraph

__all__ = ["TraceWriter", "saveTraceOfGraph"]
