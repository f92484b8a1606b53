'''
module critical path analyzer
'''

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ...flow.flow import FlowNode
from ...perf_data_struct.base import DependencyGraph, Node
from ...perf_data_struct.dynamic.simulation.node_timing import NodeTiming, SimulationResult
from ...utils.errors import MissingTimingError, MultiParentNodeError

'''
@class TreeRoot
Render context of a whole forest
'''


class TreeRoot:
    """
    TreeRoot is the context a tree renderer starts from.

    Attributes:
        m_forest: Root indices in insertion order
        m_start_time: Start time of the first root (ms), 0 for an empty forest
        m_transfer_size: Initial cumulative transfer size (always 0)
    """

    def __init__(self, forest: List[int], start_time: float, transfer_size: int = 0) -> None:
        self.m_forest: List[int] = list(forest)
        self.m_start_time: float = start_time
        self.m_transfer_size: int = transfer_size

    def getForest(self) -> List[int]:
        return list(self.m_forest)

    def getStartTime(self) -> float:
        return self.m_start_time

    def getTransferSize(self) -> int:
        return self.m_transfer_size


'''
@class Segment
Render context of one node of the forest
'''


class Segment:
    """
    Segment describes one node together with its position in the tree.

    Attributes:
        m_node: The node
        m_is_last_child: Whether the node is the last of its siblings
        m_has_children: Whether the node has children
        m_start_time: Start time inherited from the tree root (ms)
        m_transfer_size: Cumulative transfer size from the forest root to this node
        m_tree_markers: Per ancestor level, whether that ancestor was not
            the last child of its own parent
    """

    def __init__(self, node: Node, is_last_child: bool, has_children: bool,
                 start_time: float, transfer_size: int, tree_markers: List[bool]) -> None:
        self.m_node: Node = node
        self.m_is_last_child: bool = is_last_child
        self.m_has_children: bool = has_children
        self.m_start_time: float = start_time
        self.m_transfer_size: int = transfer_size
        self.m_tree_markers: List[bool] = tree_markers

    def getNode(self) -> Node:
        return self.m_node

    def isLastChild(self) -> bool:
        return self.m_is_last_child

    def hasChildren(self) -> bool:
        return self.m_has_children

    def getStartTime(self) -> float:
        return self.m_start_time

    def getTransferSize(self) -> int:
        return self.m_transfer_size

    def getTreeMarkers(self) -> List[bool]:
        return list(self.m_tree_markers)

    def getDepth(self) -> int:
        """Get the depth of the node (roots have depth 0)."""
        return len(self.m_tree_markers)

    def toDict(self) -> Dict[str, Any]:
        return {
            'id': self.m_node.getId(),
            'isLastChild': self.m_is_last_child,
            'hasChildren': self.m_has_children,
            'startTime': self.m_start_time,
            'transferSize': self.m_transfer_size,
            'treeMarkers': list(self.m_tree_markers),
        }


'''
@class ChainSummary
Longest dependency chain of a forest
'''


class ChainSummary:
    """
    ChainSummary holds the statistics of the longest root-to-leaf chain.

    Attributes:
        m_duration: Leaf end time minus root start time (ms)
        m_length: Number of nodes on the chain
        m_transfer_size: Cumulative transfer size along the chain
        m_node_ids: Node ids on the chain, root first
    """

    def __init__(self, duration: float = 0.0, length: int = 0, transfer_size: int = 0,
                 node_ids: Optional[List[str]] = None) -> None:
        self.m_duration: float = duration
        self.m_length: int = length
        self.m_transfer_size: int = transfer_size
        self.m_node_ids: List[str] = list(node_ids) if node_ids else []

    def getDuration(self) -> float:
        return self.m_duration

    def getLength(self) -> int:
        return self.m_length

    def getTransferSize(self) -> int:
        return self.m_transfer_size

    def getNodeIds(self) -> List[str]:
        return list(self.m_node_ids)

    def toDict(self) -> Dict[str, Any]:
        return {
            'duration': self.m_duration,
            'length': self.m_length,
            'transferSize': self.m_transfer_size,
        }


'''
@class CriticalPathAnalyzer
Longest chain and per-node tree context of a rooted forest
'''


class CriticalPathAnalyzer(FlowNode):
    """
    CriticalPathAnalyzer computes the longest dependency chain of a forest
    and the per-node context an external tree renderer needs.

    Times come from the simulated NodeTiming when one is given, otherwise
    from the captured records. All analysis methods are pure: they only read
    the graph and timing, so several readers can use one analyzer.

    Tree context is only defined for forests; a node with more than one
    parent raises MultiParentNodeError.

    Attributes:
        m_graph: Graph to analyze
        m_timing: Optional simulated timing
        m_summaries: ChainSummary per analyzed input (filled by run())
    """

    def __init__(self, graph: Optional[DependencyGraph] = None,
                 timing: Optional[NodeTiming] = None) -> None:
        """
        Initialize a CriticalPathAnalyzer.

        Args:
            graph: Graph to analyze
            timing: Simulated timing; captured times are used when omitted
        """
        super().__init__()
        self.m_graph: Optional[DependencyGraph] = graph
        self.m_timing: Optional[NodeTiming] = timing
        self.m_summaries: List[ChainSummary] = []

    def setGraph(self, graph: DependencyGraph, timing: Optional[NodeTiming] = None) -> None:
        self.m_graph = graph
        self.m_timing = timing

    def getGraph(self) -> Optional[DependencyGraph]:
        return self.m_graph

    def getSummaries(self) -> List[ChainSummary]:
        return list(self.m_summaries)

    def _requireGraph(self) -> DependencyGraph:
        if self.m_graph is None:
            raise ValueError("No graph set for critical path analysis")
        return self.m_graph

    def _startTime(self, node: Node) -> float:
        if self.m_timing is None:
            return node.getStartTime()
        entry = self.m_timing.getTiming(node.getIndex())
        if entry is None:
            raise MissingTimingError(node.getId())
        return entry.getStartTime()

    def _endTime(self, node: Node) -> float:
        if self.m_timing is None:
            return node.getEndTime()
        entry = self.m_timing.getTiming(node.getIndex())
        if entry is None:
            raise MissingTimingError(node.getId())
        return entry.getEndTime()

    def initTree(self, forest: Optional[Sequence[int]] = None) -> TreeRoot:
        """
        Create the render context of a forest.

        Args:
            forest: Root indices in insertion order; the graph roots if omitted

        Returns:
            TreeRoot whose start time is the first root's start time
        """
        graph = self._requireGraph()
        roots = list(forest) if forest is not None else graph.getRoots()
        start_time = 0.0
        if roots:
            start_time = self._startTime(graph.getNode(roots[0]))
        return TreeRoot(roots, start_time, 0)

    def createSegment(self, parent_children: Sequence[int], index: int, start_time: float,
                      transfer_size: int, tree_markers: Optional[Sequence[bool]] = None,
                      parent_is_last_child: Optional[bool] = None) -> Segment:
        """
        Create the context of one node based on its parent.

        Args:
            parent_children: Ordered sibling indices (the parent's children,
                or the forest roots)
            index: Index of the node among parent_children
            start_time: Start time inherited from the tree root
            transfer_size: Cumulative transfer size of the parent
            tree_markers: Markers of the parent (None for roots)
            parent_is_last_child: Whether the parent was the last of its
                siblings (None for roots)

        Returns:
            The Segment of the node

        Raises:
            ValueError: If index is not one of parent_children
            MultiParentNodeError: If the node has more than one parent
        """
        graph = self._requireGraph()
        siblings = list(parent_children)
        if index not in siblings:
            raise ValueError(f"Node index {index} is not among the given siblings")
        node = graph.getNode(index)
        parents = node.getParents()
        if len(parents) > 1:
            raise MultiParentNodeError(node.getId(), [graph.getNode(p).getId() for p in parents])

        markers = list(tree_markers) if tree_markers is not None else []
        if parent_is_last_child is not None:
            markers.append(not parent_is_last_child)

        return Segment(
            node=node,
            is_last_child=siblings.index(index) == len(siblings) - 1,
            has_children=node.hasChildren(),
            start_time=start_time,
            transfer_size=transfer_size + node.getTransferSize(),
            tree_markers=markers,
        )

    def iterSegments(self, forest: Optional[Sequence[int]] = None) -> Iterator[Segment]:
        """
        Produce the segment of every node, in render order.

        Render order is depth-first, parent before children, siblings in
        insertion order.

        Args:
            forest: Root indices; the graph roots if omitted

        Yields:
            Segments in render order
        """
        root = self.initTree(forest)
        roots = root.getForest()
        stack: List[Segment] = [
            self.createSegment(roots, index, root.getStartTime(), root.getTransferSize())
            for index in reversed(roots)
        ]
        while stack:
            segment = stack.pop()
            yield segment
            children = segment.getNode().getChildren()
            for child in reversed(children):
                stack.append(self.createSegment(
                    children, child, segment.getStartTime(), segment.getTransferSize(),
                    segment.m_tree_markers, segment.isLastChild()))

    def longestChain(self, forest: Optional[Sequence[int]] = None) -> ChainSummary:
        """
        Find the root-to-leaf chain with the largest duration.

        The duration of a chain is its leaf's end time minus its root's
        start time. On equal durations the chain found first in render
        order wins.

        Args:
            forest: Root indices; the graph roots if omitted

        Returns:
            ChainSummary of the longest chain (all zero for an empty forest)
        """
        graph = self._requireGraph()
        roots = list(forest) if forest is not None else graph.getRoots()
        best: Optional[ChainSummary] = None

        for root_index in roots:
            root_node = graph.getNode(root_index)
            root_start = self._startTime(root_node)
            stack: List[Tuple[int, List[int], int]] = [
                (root_index, [root_index], 0)
            ]
            while stack:
                index, path, inherited_size = stack.pop()
                node = graph.getNode(index)
                if len(node.getParents()) > 1:
                    raise MultiParentNodeError(
                        node.getId(), [graph.getNode(p).getId() for p in node.getParents()])
                transfer_size = inherited_size + node.getTransferSize()
                children = node.getChildren()
                if not children:
                    duration = self._endTime(node) - root_start
                    if best is None or duration > best.getDuration():
                        best = ChainSummary(duration, len(path), transfer_size,
                                            [graph.getNode(i).getId() for i in path])
                    continue
                for child in reversed(children):
                    stack.append((child, path + [child], transfer_size))

        return best if best is not None else ChainSummary()

    def getChainStatistics(self, forest: Optional[Sequence[int]] = None) -> Dict[str, Any]:
        """
        Get statistics about the longest chain.

        Returns:
            Dictionary with duration, length, transfer_size, the number of
            cpu/network nodes on the chain and their accumulated durations
        """
        graph = self._requireGraph()
        chain = self.longestChain(forest)
        num_cpu = 0
        num_network = 0
        cpu_time = 0.0
        network_time = 0.0
        for node_id in chain.getNodeIds():
            node = graph.getNodeById(node_id)
            duration = self._endTime(node) - self._startTime(node)
            if node.isCpu():
                num_cpu += 1
                cpu_time += duration
            else:
                num_network += 1
                network_time += duration

        return {
            "duration": chain.getDuration(),
            "length": chain.getLength(),
            "transfer_size": chain.getTransferSize(),
            "num_cpu_nodes": num_cpu,
            "num_network_nodes": num_network,
            "cpu_time": cpu_time,
            "network_time": network_time,
        }

    def run(self) -> None:
        """
        Analyze every simulation result (or bare graph) in the inputs.

        One ChainSummary per input is added to the outputs.
        """
        self.m_summaries = []
        for data in self.m_inputs.get_data():
            if isinstance(data, SimulationResult):
                self.setGraph(data.getGraph(), data.getTiming())
            elif isinstance(data, DependencyGraph):
                self.setGraph(data)
            else:
                continue
            summary = self.longestChain()
            self.m_summaries.append(summary)
            self.m_outputs.add_data(summary)
