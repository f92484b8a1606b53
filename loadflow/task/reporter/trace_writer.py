'''
module trace writer
'''

import json
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ...flow.flow import FlowNode
from ...perf_data_struct.base import DependencyGraph
from ...perf_data_struct.dynamic.simulation.node_timing import NodeTiming
from ...perf_data_struct.dynamic.trace.event import TraceEvent
from ...perf_data_struct.dynamic.trace.trace import Trace
from ..trace_generation.trace_serializer import TraceSerializer

DEFAULT_TRACE_FILE = 'depgraph.trace.json'

'''
@class TraceWriter
Persist serialized traces as trace-event JSON files
'''


class TraceWriter(FlowNode):
    """
    TraceWriter writes traces to disk in the trace-event JSON format.

    The file holds a single ``traceEvents`` array with one event per line,
    so it can be opened in DevTools or chrome://tracing and diffed line by
    line.

    Attributes:
        m_traces: Traces to write
        m_trace_file_path: Target path (relative paths resolve against the cwd)
        m_written_paths: Files written by the last run()
    """

    def __init__(self, trace_file_path: Optional[str] = None) -> None:
        """
        Initialize a TraceWriter.

        Args:
            trace_file_path: Target path (default: depgraph.trace.json)
        """
        super().__init__()
        self.m_traces: List[Trace] = []
        self.m_trace_file_path: Optional[str] = trace_file_path
        self.m_written_paths: List[str] = []

    def setTraceFilePath(self, trace_file_path: Optional[str]) -> None:
        self.m_trace_file_path = trace_file_path

    def getTraceFilePath(self) -> Optional[str]:
        return self.m_trace_file_path

    def addTrace(self, trace: Trace) -> None:
        """
        Add a trace to write.

        Args:
            trace: Trace object to add
        """
        self.m_traces.append(trace)

    def getTraces(self) -> List[Trace]:
        return self.m_traces

    def getWrittenPaths(self) -> List[str]:
        return list(self.m_written_paths)

    def clear(self) -> None:
        """Clear all traces."""
        self.m_traces.clear()

    @staticmethod
    def resolvePath(trace_file_path: Optional[str] = None) -> str:
        """Resolve a target path against the current working directory."""
        return os.path.abspath(os.path.join(os.getcwd(), trace_file_path or DEFAULT_TRACE_FILE))

    @staticmethod
    def toJson(events: Sequence[Union[TraceEvent, Dict[str, Any]]]) -> str:
        """
        Encode events as a trace-event document, one event per line.

        Args:
            events: TraceEvent objects or already-encoded event dictionaries

        Returns:
            JSON text of ``{"traceEvents": [...]}``
        """
        lines = [json.dumps(e.toDict() if isinstance(e, TraceEvent) else e) for e in events]
        return '{"traceEvents":[\n' + ',\n'.join(lines) + '\n]}\n'

    def saveTrace(self, trace: Union[Trace, Sequence[TraceEvent]],
                  trace_file_path: Optional[str] = None) -> str:
        """
        Write a trace to disk.

        Args:
            trace: Trace, or the ordered events to write
            trace_file_path: Target path (default: depgraph.trace.json)

        Returns:
            Absolute path of the written file
        """
        events = trace.getEvents() if isinstance(trace, Trace) else list(trace)
        path = self.resolvePath(trace_file_path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.toJson(events))

        print(f"Dependency graph trace saved to: {path}")
        print("Open this file in DevTools (or chrome://tracing).")
        return path

    def _pathFor(self, trace: Trace, position: int, count: int) -> str:
        path = self.m_trace_file_path or DEFAULT_TRACE_FILE
        if count == 1:
            return path
        suffix = trace.getTraceInfo().getProfileName() or str(position)
        stem, ext = os.path.splitext(path)
        if stem.endswith('.trace') and ext == '.json':
            return f"{stem[:-len('.trace')]}.{suffix}.trace.json"
        return f"{stem}.{suffix}{ext}"

    def run(self) -> None:
        """
        Write every trace in the inputs.

        With several traces, the profile name (or the position) is inserted
        into each file name. The written paths are added to the outputs.
        """
        self.clear()
        self.m_written_paths = []
        for data in self.m_inputs.get_data():
            if isinstance(data, Trace):
                self.addTrace(data)

        for position, trace in enumerate(self.m_traces):
            path = self.saveTrace(trace, self._pathFor(trace, position, len(self.m_traces)))
            self.m_written_paths.append(path)
            self.m_outputs.add_data(path)


def saveTraceOfGraph(graph: DependencyGraph, timing: NodeTiming,
                     trace_file_path: Optional[str] = None) -> Tuple[Trace, str]:
    """
    Serialize the simulated timeline of a graph and write it to disk.

    Args:
        graph: Simulated dependency graph
        timing: Timing of the simulation run
        trace_file_path: Target path (default: depgraph.trace.json in the cwd)

    Returns:
        The serialized Trace and the absolute path of the written file
    """
    trace = TraceSerializer().serialize(graph, timing)
    path = TraceWriter().saveTrace(trace, trace_file_path)
    return trace, path
