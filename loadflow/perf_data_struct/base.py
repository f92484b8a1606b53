'''
@module base
dependency graph of a page load: CPU tasks and network requests
'''

from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

from .dynamic.record.cpu_event import CpuEvent
from .dynamic.record.network_request import NetworkRequest
from ..utils.errors import GraphCycleError


class NodeType(Enum):
    """Kind of work a node represents."""
    CPU = "cpu"
    NETWORK = "network"


Payload = Union[CpuEvent, NetworkRequest]

'''
@class Node
A Node is one unit of page-load work, stored in the graph arena
'''


class Node:
    """
    Node represents one CPU task or network request in a dependency graph.

    Nodes live in the flat arena of a DependencyGraph and refer to each other
    by arena index; children are kept in insertion order, which is the
    sibling order used by every walk over the graph.

    Attributes:
        m_index: Position of the node in the graph arena
        m_id: Stable identifier, unique within the graph
        m_type: NodeType of the node
        m_payload: Captured record (CpuEvent or NetworkRequest)
        m_children: Arena indices of the children, in insertion order
        m_parents: Arena indices of the parents, in insertion order
    """

    def __init__(self, index: int, node_id: str, node_type: NodeType, payload: Payload) -> None:
        """
        Initialize a Node.

        Args:
            index: Arena index assigned by the graph
            node_id: Identifier of the node
            node_type: Kind of the node
            payload: Captured record matching the node type

        Raises:
            ValueError: If the payload does not match the node type
        """
        expected = CpuEvent if node_type == NodeType.CPU else NetworkRequest
        if not isinstance(payload, expected):
            raise ValueError(
                f"Node '{node_id}' of type {node_type.value} needs a {expected.__name__} payload")
        self.m_index: int = index
        self.m_id: str = node_id
        self.m_type: NodeType = node_type
        self.m_payload: Payload = payload
        self.m_children: List[int] = []
        self.m_parents: List[int] = []

    def getIndex(self) -> int:
        """Get the arena index of the node."""
        return self.m_index

    def getId(self) -> str:
        """Get the node ID."""
        return self.m_id

    def getType(self) -> NodeType:
        """Get the node type."""
        return self.m_type

    def getPayload(self) -> Payload:
        """Get the captured record of the node."""
        return self.m_payload

    def isCpu(self) -> bool:
        return self.m_type == NodeType.CPU

    def isNetwork(self) -> bool:
        return self.m_type == NodeType.NETWORK

    def getChildren(self) -> List[int]:
        """Get the child indices in insertion order."""
        return list(self.m_children)

    def getParents(self) -> List[int]:
        """Get the parent indices in insertion order."""
        return list(self.m_parents)

    def hasChildren(self) -> bool:
        return len(self.m_children) > 0

    def getStartTime(self) -> float:
        """Get the captured start time in milliseconds."""
        if isinstance(self.m_payload, CpuEvent):
            return self.m_payload.getStartTimeMs()
        return self.m_payload.getStartTime()

    def getEndTime(self) -> float:
        """Get the captured end time in milliseconds."""
        if isinstance(self.m_payload, CpuEvent):
            return self.m_payload.getEndTimeMs()
        return self.m_payload.getEndTime()

    def getDuration(self) -> float:
        """Get the captured duration in milliseconds."""
        if isinstance(self.m_payload, CpuEvent):
            return self.m_payload.getDuration() / 1000.0
        return self.m_payload.getDuration()

    def getTransferSize(self) -> int:
        """Get the transferred bytes (always 0 for CPU nodes)."""
        if isinstance(self.m_payload, NetworkRequest):
            return self.m_payload.getTransferSize()
        return 0

    def __repr__(self) -> str:
        return f"Node({self.m_index}, {self.m_id!r}, {self.m_type.value})"


'''
@class DependencyGraph
The dependency graph of a page load, as a flat arena of nodes
'''


class DependencyGraph:
    """
    DependencyGraph holds the nodes of a page load and their dependencies.

    An edge parent -> child means the child cannot start before the parent
    completes. The graph is built once and treated as read-only afterwards;
    it can be shared between simulation runs.

    Attributes:
        m_nodes: Node arena, indexed by Node.getIndex()
        m_id_to_index: Mapping from node ID to arena index
    """

    def __init__(self) -> None:
        """Initialize an empty DependencyGraph."""
        self.m_nodes: List[Node] = []
        self.m_id_to_index: Dict[str, int] = {}

    def addNode(self, node_id: str, node_type: NodeType, payload: Payload) -> int:
        """
        Add a node to the graph.

        Args:
            node_id: Identifier of the node, never reused within a graph
            node_type: Kind of the node
            payload: Captured record of the node

        Returns:
            Arena index of the new node

        Raises:
            ValueError: If the ID is already used
        """
        if node_id in self.m_id_to_index:
            raise ValueError(f"Duplicate node id: {node_id}")
        index = len(self.m_nodes)
        self.m_nodes.append(Node(index, node_id, node_type, payload))
        self.m_id_to_index[node_id] = index
        return index

    def addDependency(self, parent_index: int, child_index: int) -> None:
        """
        Add an edge parent -> child.

        Re-adding an existing edge is a no-op, so child order stays as
        first inserted.

        Args:
            parent_index: Arena index of the parent
            child_index: Arena index of the child

        Raises:
            GraphCycleError: If the edge is a self-loop
            IndexError: If an index is out of range
        """
        parent = self.getNode(parent_index)
        child = self.getNode(child_index)
        if parent_index == child_index:
            raise GraphCycleError(f"Node '{parent.getId()}' cannot depend on itself",
                                  [parent.getId(), parent.getId()])
        if child_index not in parent.m_children:
            parent.m_children.append(child_index)
            child.m_parents.append(parent_index)

    def getNode(self, index: int) -> Node:
        """
        Get a node by arena index.

        Raises:
            IndexError: If the index is out of range
        """
        if index < 0 or index >= len(self.m_nodes):
            raise IndexError(f"Node index out of range: {index}")
        return self.m_nodes[index]

    def getNodeById(self, node_id: str) -> Node:
        """
        Get a node by ID.

        Raises:
            KeyError: If no node has that ID
        """
        if node_id not in self.m_id_to_index:
            raise KeyError(f"Unknown node id: {node_id}")
        return self.m_nodes[self.m_id_to_index[node_id]]

    def hasNodeId(self, node_id: str) -> bool:
        return node_id in self.m_id_to_index

    def getNodes(self) -> List[Node]:
        """Get all nodes in arena order."""
        return list(self.m_nodes)

    def getNodeCount(self) -> int:
        return len(self.m_nodes)

    def getEdgeCount(self) -> int:
        return sum(len(node.m_children) for node in self.m_nodes)

    def getRoots(self) -> List[int]:
        """Get the indices of nodes without parents, in arena order."""
        return [node.m_index for node in self.m_nodes if not node.m_parents]

    def getChildMap(self, index: int) -> Dict[str, Node]:
        """
        Get the children of a node as an ordered id -> Node mapping.

        Args:
            index: Arena index of the parent

        Returns:
            New dictionary in child insertion order
        """
        return {self.m_nodes[c].m_id: self.m_nodes[c] for c in self.getNode(index).m_children}

    def isForest(self) -> bool:
        """Check that no node has more than one parent."""
        return all(len(node.m_parents) <= 1 for node in self.m_nodes)

    def checkAcyclic(self, roots: Optional[List[int]] = None) -> None:
        """
        Verify that no node is reachable from itself.

        Args:
            roots: Start indices to check from; all nodes when omitted

        Raises:
            GraphCycleError: With the node ids of the first cycle found
        """
        # 0 = unvisited, 1 = on the current path, 2 = finished
        state = [0] * len(self.m_nodes)
        starts = roots if roots is not None else range(len(self.m_nodes))
        for start in starts:
            if state[start] != 0:
                continue
            path: List[int] = [start]
            iterators = [iter(self.m_nodes[start].m_children)]
            state[start] = 1
            while iterators:
                child = next(iterators[-1], None)
                if child is None:
                    state[path.pop()] = 2
                    iterators.pop()
                    continue
                if state[child] == 1:
                    cycle = path[path.index(child):] + [child]
                    ids = [self.m_nodes[i].m_id for i in cycle]
                    raise GraphCycleError(f"Dependency cycle: {' -> '.join(ids)}", ids)
                if state[child] == 0:
                    state[child] = 1
                    path.append(child)
                    iterators.append(iter(self.m_nodes[child].m_children))

    def traverse(self, root: int) -> Iterator[int]:
        """
        Walk the nodes reachable from root, depth-first.

        Every reachable node is produced exactly once, parent before
        children, children in insertion order. A node with several parents
        is held back until every parent reachable from root has been
        produced. The walk is validated for
        cycles before the first index is produced, so a cyclic graph fails
        without yielding anything. Each call starts a fresh walk.

        Args:
            root: Arena index to start from

        Yields:
            Arena indices in visitation order

        Raises:
            GraphCycleError: If a cycle is reachable from root
        """
        self.getNode(root)
        self.checkAcyclic([root])
        return self._walk([root])

    def traverseAll(self) -> Iterator[int]:
        """
        Walk every node of the graph once, root by root in arena order.

        Raises:
            GraphCycleError: If the graph contains a cycle
        """
        self.checkAcyclic()
        return self._walk(self.getRoots())

    def getDiscoveryOrder(self) -> List[int]:
        """
        Get every node index in traversal order without cycle validation.

        Nodes reachable from a root come first, in traverseAll() order; nodes
        only reachable through a cycle follow in arena order.

        Returns:
            List containing each arena index once
        """
        order = list(self._walk(self.getRoots()))
        if len(order) < len(self.m_nodes):
            seen = set(order)
            order.extend(i for i in range(len(self.m_nodes)) if i not in seen)
        return order

    def _walk(self, roots: List[int]) -> Iterator[int]:
        # A node is produced once every parent reachable from roots has been.
        reachable = [False] * len(self.m_nodes)
        stack = list(roots)
        while stack:
            index = stack.pop()
            if reachable[index]:
                continue
            reachable[index] = True
            stack.extend(self.m_nodes[index].m_children)
        pending = [sum(1 for p in node.m_parents if reachable[p]) for node in self.m_nodes]

        visited = [False] * len(self.m_nodes)
        for root in roots:
            if visited[root]:
                continue
            stack = [root]
            while stack:
                index = stack.pop()
                visited[index] = True
                yield index
                ready = []
                for child in self.m_nodes[index].m_children:
                    pending[child] -= 1
                    if pending[child] == 0 and not visited[child]:
                        ready.append(child)
                stack.extend(reversed(ready))
