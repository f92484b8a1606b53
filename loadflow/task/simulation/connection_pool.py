'''
module connection pool
'''

from typing import Dict

'''
@class ConnectionPool
Per-origin network connection slots of one simulation run
'''


class ConnectionPool:
    """
    ConnectionPool tracks the simulated connections of each origin.

    At most ``max_connections_per_origin`` requests of an origin run at the
    same time. A released connection stays open, so the next request of the
    origin reuses it (a warm connection) instead of paying for a new one.

    Attributes:
        m_max_connections: Connection cap per origin
        m_in_use: Number of busy connections per origin
        m_opened: Number of connections ever opened per origin
    """

    def __init__(self, max_connections_per_origin: int) -> None:
        """
        Initialize a ConnectionPool.

        Raises:
            ValueError: If the cap is smaller than one
        """
        if max_connections_per_origin < 1:
            raise ValueError("At least one connection per origin is required")
        self.m_max_connections: int = max_connections_per_origin
        self.m_in_use: Dict[str, int] = {}
        self.m_opened: Dict[str, int] = {}

    def canAcquire(self, origin: str) -> bool:
        """Check whether the origin has a free connection slot."""
        return self.m_in_use.get(origin, 0) < self.m_max_connections

    def acquire(self, origin: str) -> bool:
        """
        Occupy a connection of the origin.

        Returns:
            True if an idle open connection was reused, False if a new one was opened

        Raises:
            RuntimeError: If all slots of the origin are busy
        """
        in_use = self.m_in_use.get(origin, 0)
        if in_use >= self.m_max_connections:
            raise RuntimeError(f"No free connection for origin {origin}")
        opened = self.m_opened.get(origin, 0)
        warm = in_use < opened
        if not warm:
            self.m_opened[origin] = opened + 1
        self.m_in_use[origin] = in_use + 1
        return warm

    def release(self, origin: str) -> None:
        """
        Free a connection of the origin; it stays open for reuse.

        Raises:
            RuntimeError: If the origin has no busy connection
        """
        in_use = self.m_in_use.get(origin, 0)
        if in_use == 0:
            raise RuntimeError(f"No busy connection to release for origin {origin}")
        self.m_in_use[origin] = in_use - 1

    def getInUse(self, origin: str) -> int:
        return self.m_in_use.get(origin, 0)

    def getOpened(self, origin: str) -> int:
        return self.m_opened.get(origin, 0)
