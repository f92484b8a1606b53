from .network_request import NetworkRequest
from .cpu_event import CpuEvent

__all__ = ["NetworkRequest", "CpuEvent"]
