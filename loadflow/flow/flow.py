'''
module flow data/node/graph
'''

from typing import Any, Dict, List, Type
from abc import ABC, abstractmethod

from ..utils.errors import GraphCycleError

'''
@class FlowData
The data flowing through the edges between FlowNodes
'''


class FlowData:
    """
    FlowData represents data flowing through edges between FlowNodes.

    Items keep their insertion order so that downstream steps process them
    deterministically; adding the same object twice is a no-op.

    Attributes:
        m_data: Ordered list of data objects (graphs, simulation results, traces)
    """

    def __init__(self) -> None:
        """Initialize a FlowData object with no data."""
        self.m_data: List[Any] = []

    def get_data(self) -> List[Any]:
        """
        Get the data items in insertion order.

        Returns:
            List of data objects
        """
        return list(self.m_data)

    def get_data_of_type(self, data_type: Type) -> List[Any]:
        """
        Get the data items that are instances of a type.

        Args:
            data_type: Type to filter on

        Returns:
            Matching data objects in insertion order
        """
        return [data for data in self.m_data if isinstance(data, data_type)]

    def add_data(self, data: Any) -> None:
        """
        Add a data object to the flow data.

        Args:
            data: Data object to add
        """
        if not any(existing is data for existing in self.m_data):
            self.m_data.append(data)

    def clear(self) -> None:
        """Clear all data from the flow data."""
        self.m_data.clear()

    def size(self) -> int:
        """
        Get the number of data objects.

        Returns:
            Number of data objects
        """
        return len(self.m_data)


'''
@class FlowNode
The sub-task node
'''


class FlowNode(ABC):
    """
    FlowNode represents one step of the load-analysis pipeline.

    This is an abstract base class for all pipeline steps (graph building,
    simulation, chain analysis, serialization, persistence). Each node
    processes input data and produces output data.

    Attributes:
        m_inputs: Input flow data for this node
        m_outputs: Output flow data from this node
    """

    def __init__(self) -> None:
        """Initialize a FlowNode with empty input and output data."""
        self.m_inputs: FlowData = FlowData()
        self.m_outputs: FlowData = FlowData()

    def get_inputs(self) -> FlowData:
        """
        Get the input flow data.

        Returns:
            FlowData object containing input data
        """
        return self.m_inputs

    def get_outputs(self) -> FlowData:
        """
        Get the output flow data.

        Returns:
            FlowData object containing output data
        """
        return self.m_outputs

    def set_inputs(self, inputs: FlowData) -> None:
        """
        Set the input flow data.

        Args:
            inputs: FlowData object to set as inputs
        """
        self.m_inputs = inputs

    def set_outputs(self, outputs: FlowData) -> None:
        """
        Set the output flow data.

        Args:
            outputs: FlowData object to set as outputs
        """
        self.m_outputs = outputs

    @abstractmethod
    def run(self) -> None:
        """
        Execute the pipeline step.

        This method must be implemented by subclasses to read
        ``m_inputs`` and fill ``m_outputs``.
        """
        pass


'''
@class FlowGraph
The entire workflow of analysis
'''


class FlowGraph:
    """
    FlowGraph represents the whole load-analysis workflow.

    This class manages a directed graph of FlowNodes connected by edges.
    Nodes run in topological order; ties keep insertion order.

    Attributes:
        m_nodes: List of all FlowNodes in the graph
        m_edges: Dictionary mapping each node to its successor nodes
    """

    def __init__(self) -> None:
        """Initialize an empty FlowGraph."""
        self.m_nodes: List[FlowNode] = []
        self.m_edges: Dict[FlowNode, List[FlowNode]] = {}

    def add_node(self, node: FlowNode) -> None:
        """
        Add a node to the graph.

        Args:
            node: FlowNode to add to the graph
        """
        if node not in self.m_nodes:
            self.m_nodes.append(node)
            self.m_edges[node] = []

    def add_edge(self, from_node: FlowNode, to_node: FlowNode) -> None:
        """
        Add an edge between two nodes.

        Args:
            from_node: Source node
            to_node: Destination node
        """
        if from_node not in self.m_nodes:
            self.add_node(from_node)
        if to_node not in self.m_nodes:
            self.add_node(to_node)

        if to_node not in self.m_edges[from_node]:
            self.m_edges[from_node].append(to_node)

    def get_nodes(self) -> List[FlowNode]:
        """
        Get all nodes in the graph.

        Returns:
            List of all FlowNodes
        """
        return self.m_nodes

    def get_successors(self, node: FlowNode) -> List[FlowNode]:
        """
        Get successor nodes of a given node.

        Args:
            node: FlowNode to get successors for

        Returns:
            List of successor nodes
        """
        return self.m_edges.get(node, [])

    def get_execution_order(self) -> List[FlowNode]:
        """
        Compute the topological execution order.

        Returns:
            Nodes ordered so every node follows all of its predecessors

        Raises:
            GraphCycleError: If the workflow contains a cycle
        """
        in_degree: Dict[FlowNode, int] = {node: 0 for node in self.m_nodes}
        for node in self.m_nodes:
            for successor in self.m_edges[node]:
                in_degree[successor] += 1

        order: List[FlowNode] = []
        ready = [node for node in self.m_nodes if in_degree[node] == 0]
        while ready:
            node = ready.pop(0)
            order.append(node)
            for successor in self.m_edges[node]:
                in_degree[successor] -= 1
                if in_degree[successor] == 0:
                    ready.append(successor)

        if len(order) != len(self.m_nodes):
            stuck = [type(node).__name__ for node in self.m_nodes if in_degree[node] > 0]
            raise GraphCycleError(f"Workflow contains a cycle between: {', '.join(stuck)}", stuck)
        return order

    def run(self) -> None:
        """
        Execute the workflow.

        Runs all nodes in topological order and passes each node's outputs
        to the inputs of its successors.
        """
        for node in self.get_execution_order():
            node.run()

            for successor in self.get_successors(node):
                for data in node.get_outputs().get_data():
                    successor.get_inputs().add_data(data)

    def clear(self) -> None:
        """Clear all nodes and edges from the graph."""
        self.m_nodes.clear()
        self.m_edges.clear()
