"""
Unit tests for TraceWriter and saveTraceOfGraph
"""
import json
import os

from loadflow.perf_data_struct.base import DependencyGraph, NodeType
from loadflow.perf_data_struct.dynamic.record import CpuEvent, NetworkRequest
from loadflow.perf_data_struct.dynamic.simulation.node_timing import NodeTiming
from loadflow.perf_data_struct.dynamic.trace.event import EventPhase, TraceEvent
from loadflow.perf_data_struct.dynamic.trace.trace import Trace, TraceInfo
from loadflow.task.reporter.trace_writer import DEFAULT_TRACE_FILE, TraceWriter, saveTraceOfGraph


def small_trace(profile_name=None):
    trace = Trace(TraceInfo(pid=1, tid=2, profile_name=profile_name))
    trace.addEvent(TraceEvent(1, 2, "A", "cat", EventPhase.INSTANT, 0))
    trace.addEvent(TraceEvent(1, 2, "B", "cat", EventPhase.COMPLETE, 10, duration=5))
    return trace


class TestTraceWriter:
    """Test TraceWriter class"""

    def test_save_trace(self, tmp_path, capsys):
        """Test writing a trace file"""
        target = tmp_path / "out.trace.json"
        path = TraceWriter().saveTrace(small_trace(), str(target))

        assert path == str(target)
        with open(path) as f:
            data = json.load(f)
        assert [e["name"] for e in data["traceEvents"]] == ["A", "B"]
        assert data["traceEvents"][1]["dur"] == 5
        assert str(target) in capsys.readouterr().out

    def test_one_event_per_line(self, tmp_path):
        """Test the line layout of the file"""
        path = TraceWriter().saveTrace(small_trace(), str(tmp_path / "t.json"))
        with open(path) as f:
            lines = f.read().splitlines()

        assert lines[0] == '{"traceEvents":['
        assert lines[-1] == "]}"
        assert len(lines) == 4

    def test_save_event_list(self, tmp_path):
        """Test writing a plain list of events"""
        events = small_trace().getEvents()
        path = TraceWriter().saveTrace(events, str(tmp_path / "events.json"))
        with open(path) as f:
            assert len(json.load(f)["traceEvents"]) == 2

    def test_default_path(self, tmp_path, monkeypatch):
        """Test that the default file lands in the working directory"""
        monkeypatch.chdir(tmp_path)
        path = TraceWriter().saveTrace(small_trace())

        assert path == os.path.join(os.getcwd(), DEFAULT_TRACE_FILE)
        assert os.path.exists(path)

    def test_relative_path(self, tmp_path, monkeypatch):
        """Test that relative paths resolve against the working directory"""
        monkeypatch.chdir(tmp_path)
        assert TraceWriter.resolvePath("sub.json") == os.path.join(os.getcwd(), "sub.json")

    def test_run_single_trace(self, tmp_path):
        """Test the pipeline entry point with one trace"""
        target = str(tmp_path / "single.trace.json")
        writer = TraceWriter(target)
        writer.get_inputs().add_data(small_trace())
        writer.run()

        assert writer.getWrittenPaths() == [target]
        assert writer.get_outputs().get_data() == [target]

    def test_run_several_traces(self, tmp_path):
        """Test that several traces get one file each"""
        writer = TraceWriter(str(tmp_path / "page.trace.json"))
        writer.get_inputs().add_data(small_trace("fast"))
        writer.get_inputs().add_data(small_trace())
        writer.run()

        assert writer.getWrittenPaths() == [
            str(tmp_path / "page.fast.trace.json"),
            str(tmp_path / "page.1.trace.json"),
        ]
        assert all(os.path.exists(p) for p in writer.getWrittenPaths())


class TestSaveTraceOfGraph:
    """Test the one-call serialize and save helper"""

    def test_save_trace_of_graph(self, tmp_path):
        """Test serializing and saving a simulated graph"""
        graph = DependencyGraph()
        doc = graph.addNode("doc", NodeType.NETWORK,
                            NetworkRequest("doc", "https://a.test/", end_time=10))
        cpu = graph.addNode("cpu", NodeType.CPU, CpuEvent(3, 4, "Task", duration=2000))
        graph.addDependency(doc, cpu)
        timing = NodeTiming()
        timing.setTiming(doc, 0.0, 0.0, 10.0)
        timing.setTiming(cpu, 10.0, 10.0, 12.0)

        trace, path = saveTraceOfGraph(graph, timing, str(tmp_path / "graph.json"))

        with open(path) as f:
            data = json.load(f)
        assert len(data["traceEvents"]) == trace.getEventCount() == 6
        assert data == trace.toDict()
