"""
Unit tests for LoadSimulator
"""
import pytest
from loadflow.perf_data_struct.base import DependencyGraph, NodeType
from loadflow.perf_data_struct.dynamic.record import CpuEvent, NetworkRequest
from loadflow.perf_data_struct.dynamic.simulation.node_timing import SimulationResult, TimingEntry
from loadflow.task.simulation.load_simulator import LoadSimulator
from loadflow.utils.errors import GraphCycleError, SimulationDivergedError
from loadflow.utils.throttling_config import NetworkProfile, ThrottlingConfig, ThrottlingProfile


UNTHROTTLED = ThrottlingProfile(1.0, None, name="unthrottled")


def add_request(graph, request_id, url="http://a.test/", duration=50.0):
    request = NetworkRequest(request_id, url, start_time=0.0, end_time=duration)
    return graph.addNode(request_id, NodeType.NETWORK, request)


def add_cpu(graph, node_id, duration_ms=10.0):
    event = CpuEvent(pid=1, tid=1, name=node_id, timestamp=0.0, duration=duration_ms * 1000)
    return graph.addNode(node_id, NodeType.CPU, event)


def document_graph():
    """doc (100 ms) -> parse (10 ms cpu)"""
    graph = DependencyGraph()
    doc = add_request(graph, "doc", url="https://a.test/", duration=100.0)
    parse = add_cpu(graph, "parse", 10.0)
    graph.addDependency(doc, parse)
    return graph


class TestLoadSimulator:
    """Test LoadSimulator class"""

    def test_default_profile(self):
        """Test that the configured default profile is used"""
        simulator = LoadSimulator()
        assert simulator.getProfile() is ThrottlingConfig.get_instance().get_default_profile()

    def test_invalid_max_steps(self):
        """Test that the step bound must be positive"""
        with pytest.raises(ValueError):
            LoadSimulator(UNTHROTTLED, max_steps=0)

    def test_unthrottled_chain(self):
        """Test that an unthrottled run replays the captured durations"""
        graph = document_graph()
        result = LoadSimulator(UNTHROTTLED).simulate(graph)
        timing = result.getTiming()

        assert timing.getTiming(0) == TimingEntry(0.0, 0.0, 100.0)
        assert timing.getTiming(1) == TimingEntry(100.0, 100.0, 110.0)
        assert timing.isFrozen()
        assert result.getTotalDuration() == 110.0
        assert result.getStats()["steps"] == 2

    def test_cpu_slowdown_scales_cpu_only(self):
        """Test that the CPU multiplier leaves network durations alone"""
        graph = document_graph()
        base = LoadSimulator(ThrottlingProfile(1.0)).simulate(graph).getTiming()
        slow = LoadSimulator(ThrottlingProfile(3.0)).simulate(graph).getTiming()

        assert slow.getTiming(1).getDuration() == pytest.approx(3 * base.getTiming(1).getDuration())
        assert slow.getTiming(0).getDuration() == base.getTiming(0).getDuration()

    def test_single_cpu_slot(self):
        """Test that CPU nodes never overlap"""
        graph = DependencyGraph()
        add_cpu(graph, "first", 10.0)
        add_cpu(graph, "second", 10.0)

        timing = LoadSimulator(UNTHROTTLED).simulate(graph).getTiming()
        assert timing.getTiming(0) == TimingEntry(0.0, 0.0, 10.0)
        assert timing.getTiming(1) == TimingEntry(0.0, 10.0, 20.0)

    def test_network_and_cpu_run_in_parallel(self):
        """Test that network nodes do not wait for the CPU"""
        graph = DependencyGraph()
        add_cpu(graph, "task", 40.0)
        add_request(graph, "img", duration=30.0)

        timing = LoadSimulator(UNTHROTTLED).simulate(graph).getTiming()
        assert timing.getTiming(0).getStartTime() == 0.0
        assert timing.getTiming(1).getStartTime() == 0.0

    def test_connection_cap_and_reuse(self):
        """Test per-origin connection limits and warm connection reuse"""
        network = NetworkProfile(rtt_ms=10, throughput_kbps=1000, max_connections_per_origin=1)
        profile = ThrottlingProfile(1.0, network)
        graph = DependencyGraph()
        for request_id in ["r0", "r1", "r2"]:
            add_request(graph, request_id, url="http://a.test/" + request_id, duration=50.0)

        # observed == target: a warm request keeps its captured duration,
        # a new plain connection pays one extra round trip
        timing = LoadSimulator(profile, observed_network=network).simulate(graph).getTiming()
        assert timing.getTiming(0) == TimingEntry(0.0, 0.0, 60.0)
        assert timing.getTiming(1) == TimingEntry(0.0, 60.0, 110.0)
        assert timing.getTiming(2) == TimingEntry(0.0, 110.0, 160.0)

    def test_origins_have_separate_connections(self):
        """Test that different origins do not contend"""
        network = NetworkProfile(rtt_ms=10, throughput_kbps=1000, max_connections_per_origin=1)
        graph = DependencyGraph()
        add_request(graph, "a", url="http://a.test/", duration=50.0)
        add_request(graph, "b", url="http://b.test/", duration=50.0)

        timing = LoadSimulator(ThrottlingProfile(1.0, network),
                               observed_network=network).simulate(graph).getTiming()
        assert timing.getTiming(0) == timing.getTiming(1) == TimingEntry(0.0, 0.0, 60.0)

    def test_network_without_observed_profile(self):
        """Test the duration model when the capture has no usable timing"""
        graph = DependencyGraph()
        add_request(graph, "doc", url="https://a.test/", duration=50.0)
        profile = ThrottlingProfile(1.0, NetworkProfile(rtt_ms=100, throughput_kbps=1000))

        result = LoadSimulator(profile).simulate(graph)
        # new TLS connection: three round trips plus the captured transfer
        assert result.getTiming().getTiming(0).getEndTime() == 350.0
        assert result.getStats()["observed_network"] is None

    def test_node_waits_for_all_parents(self):
        """Test that a node with two parents starts after the later one"""
        graph = DependencyGraph()
        fast = add_request(graph, "fast", url="http://a.test/", duration=10.0)
        slow = add_request(graph, "slow", url="http://b.test/", duration=30.0)
        join = add_cpu(graph, "join", 5.0)
        graph.addDependency(fast, join)
        graph.addDependency(slow, join)

        timing = LoadSimulator(UNTHROTTLED).simulate(graph).getTiming()
        assert timing.getTiming(join) == TimingEntry(30.0, 30.0, 35.0)

    def test_deterministic(self):
        """Test that repeated runs give identical timing"""
        graph = DependencyGraph()
        root = add_request(graph, "doc", duration=20.0)
        for i in range(5):
            child = add_cpu(graph, f"cpu{i}", 3.0)
            graph.addDependency(root, child)
            graph.addDependency(child, add_request(graph, f"img{i}", duration=7.0))

        simulator = LoadSimulator(ThrottlingConfig().get_profile("mobileSlow4G"))
        first = simulator.simulate(graph).getTiming()
        second = simulator.simulate(graph).getTiming()
        assert first == second
        assert first is not second

    def test_graph_not_mutated(self):
        """Test that simulation leaves the graph untouched"""
        graph = document_graph()
        before = [(n.getId(), n.getChildren(), n.getParents(), n.getDuration())
                  for n in graph.getNodes()]

        LoadSimulator(ThrottlingProfile(4.0)).simulate(graph)

        after = [(n.getId(), n.getChildren(), n.getParents(), n.getDuration())
                 for n in graph.getNodes()]
        assert before == after

    def test_deadlock_is_cycle(self):
        """Test that nodes stuck behind a cycle are reported"""
        graph = DependencyGraph()
        add_cpu(graph, "root")
        b = add_cpu(graph, "b")
        c = add_cpu(graph, "c")
        graph.addDependency(b, c)
        graph.addDependency(c, b)

        with pytest.raises(GraphCycleError) as exc_info:
            LoadSimulator(UNTHROTTLED).simulate(graph)
        assert exc_info.value.cycle == ["b", "c"]

    def test_step_bound(self):
        """Test that exceeding the step bound fails the run"""
        graph = document_graph()
        add_cpu(graph, "extra")

        with pytest.raises(SimulationDivergedError) as exc_info:
            LoadSimulator(UNTHROTTLED, max_steps=2).simulate(graph)
        assert exc_info.value.completed == 2
        assert exc_info.value.total == 3

    def test_empty_graph(self):
        """Test simulating an empty graph"""
        result = LoadSimulator(UNTHROTTLED).simulate(DependencyGraph())
        assert len(result.getTiming()) == 0
        assert result.getTotalDuration() == 0.0

    def test_simulate_profiles(self):
        """Test one isolated timing per profile"""
        graph = document_graph()
        simulator = LoadSimulator(UNTHROTTLED)
        results = simulator.simulateProfiles(graph, [ThrottlingProfile(1.0), ThrottlingProfile(2.0)])

        assert len(results) == 2
        assert results[0].getTiming() is not results[1].getTiming()
        assert results[0].getGraph() is results[1].getGraph() is graph
        assert results[1].getTotalDuration() == 120.0
        assert simulator.getProfile() is UNTHROTTLED

    def test_memory_tracking(self):
        """Test the run statistics with memory tracking"""
        simulator = LoadSimulator(UNTHROTTLED, enable_memory_tracking=True)
        simulator.simulate(document_graph())

        stats = simulator.getMemoryStats()
        assert stats["start_memory_bytes"] > 0
        assert "delta_memory_bytes" in stats
        assert stats["simulation_time_seconds"] >= 0

    def test_run(self):
        """Test the pipeline entry point"""
        graph = document_graph()
        simulator = LoadSimulator(UNTHROTTLED)
        simulator.get_inputs().add_data(graph)
        simulator.get_inputs().add_data("not a graph")
        simulator.run()

        outputs = simulator.get_outputs().get_data()
        assert len(outputs) == 1
        assert isinstance(outputs[0], SimulationResult)
        assert simulator.getLastResult() is outputs[0]
