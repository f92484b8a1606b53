'''
module throttling_config

Throttling profiles for load simulation.
This module provides the declarative profiles (CPU slowdown, network latency
and throughput) applied by the load simulator, and a registry of named
presets.
'''

from typing import Dict, List, Optional


DEFAULT_MAX_CONNECTIONS_PER_ORIGIN = 6


'''
@class NetworkProfile
Latency/throughput characteristics of a simulated connection
'''


class NetworkProfile:
    """
    NetworkProfile describes the network conditions of a simulated connection.

    Throughput is expressed in kilobits per second, which is the same as
    bits per millisecond, so transfer time in ms is ``bytes * 8 / throughput``.

    Attributes:
        m_rtt_ms: Round trip time in milliseconds
        m_throughput_kbps: Throughput in kilobits per second
        m_max_connections_per_origin: Number of parallel connections per origin
    """

    def __init__(self, rtt_ms: float, throughput_kbps: float,
                 max_connections_per_origin: int = DEFAULT_MAX_CONNECTIONS_PER_ORIGIN) -> None:
        """
        Initialize a NetworkProfile.

        Args:
            rtt_ms: Round trip time in milliseconds
            throughput_kbps: Throughput in kilobits per second
            max_connections_per_origin: Connection cap per origin

        Raises:
            ValueError: If any of the values is out of range
        """
        if rtt_ms < 0:
            raise ValueError(f"RTT must not be negative: {rtt_ms}")
        if throughput_kbps <= 0:
            raise ValueError(f"Throughput must be positive: {throughput_kbps}")
        if max_connections_per_origin < 1:
            raise ValueError(
                f"At least one connection per origin is required: {max_connections_per_origin}")

        self.m_rtt_ms: float = float(rtt_ms)
        self.m_throughput_kbps: float = float(throughput_kbps)
        self.m_max_connections_per_origin: int = int(max_connections_per_origin)

    def getRttMs(self) -> float:
        """Get the round trip time in milliseconds."""
        return self.m_rtt_ms

    def getThroughputKbps(self) -> float:
        """Get the throughput in kilobits per second."""
        return self.m_throughput_kbps

    def getMaxConnectionsPerOrigin(self) -> int:
        """Get the connection cap per origin."""
        return self.m_max_connections_per_origin

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkProfile):
            return NotImplemented
        return (self.m_rtt_ms == other.m_rtt_ms
                and self.m_throughput_kbps == other.m_throughput_kbps
                and self.m_max_connections_per_origin == other.m_max_connections_per_origin)

    def __repr__(self) -> str:
        return (f"NetworkProfile(rtt_ms={self.m_rtt_ms}, "
                f"throughput_kbps={self.m_throughput_kbps}, "
                f"max_connections_per_origin={self.m_max_connections_per_origin})")


'''
@class ThrottlingProfile
CPU slowdown plus network conditions for one simulation run
'''


class ThrottlingProfile:
    """
    ThrottlingProfile groups the parameters of one simulation run.

    A profile without a network profile reuses the captured request durations
    unchanged; only CPU work is scaled.

    Attributes:
        m_cpu_slowdown_multiplier: Factor applied to captured CPU durations
        m_network_profile: Simulated network conditions, or None for "as captured"
        m_name: Optional display name
    """

    def __init__(self, cpu_slowdown_multiplier: float = 1.0,
                 network_profile: Optional[NetworkProfile] = None,
                 name: Optional[str] = None) -> None:
        """
        Initialize a ThrottlingProfile.

        Args:
            cpu_slowdown_multiplier: Factor applied to captured CPU durations
            network_profile: Simulated network conditions (None keeps captured durations)
            name: Optional display name

        Raises:
            ValueError: If the multiplier is not positive
        """
        if cpu_slowdown_multiplier <= 0:
            raise ValueError(
                f"CPU slowdown multiplier must be positive: {cpu_slowdown_multiplier}")
        self.m_cpu_slowdown_multiplier: float = float(cpu_slowdown_multiplier)
        self.m_network_profile: Optional[NetworkProfile] = network_profile
        self.m_name: Optional[str] = name

    def getCpuSlowdownMultiplier(self) -> float:
        """Get the CPU slowdown multiplier."""
        return self.m_cpu_slowdown_multiplier

    def getNetworkProfile(self) -> Optional[NetworkProfile]:
        """Get the network profile (None when network is simulated as captured)."""
        return self.m_network_profile

    def getName(self) -> Optional[str]:
        """Get the profile name."""
        return self.m_name

    def getMaxConnectionsPerOrigin(self) -> int:
        """Get the connection cap per origin, falling back to the browser default."""
        if self.m_network_profile is None:
            return DEFAULT_MAX_CONNECTIONS_PER_ORIGIN
        return self.m_network_profile.getMaxConnectionsPerOrigin()

    def isNetworkThrottled(self) -> bool:
        """Check whether network durations are re-estimated."""
        return self.m_network_profile is not None

    def __repr__(self) -> str:
        return (f"ThrottlingProfile(name={self.m_name!r}, "
                f"cpu_slowdown_multiplier={self.m_cpu_slowdown_multiplier}, "
                f"network_profile={self.m_network_profile!r})")


'''
@class ThrottlingConfig
Registry of named throttling profiles
'''


class ThrottlingConfig:
    """
    ThrottlingConfig manages the named throttling profiles.

    This class provides a singleton registry pre-populated with the
    standard presets. Additional profiles can be registered at runtime.

    Attributes:
        m_profiles: Mapping of profile name to ThrottlingProfile
        m_default_name: Name of the default profile
    """

    _instance: Optional['ThrottlingConfig'] = None

    def __init__(self) -> None:
        """
        Initialize ThrottlingConfig with the built-in presets.

        Note: Use get_instance() for the shared registry.
        """
        self.m_profiles: Dict[str, ThrottlingProfile] = {}
        self.m_default_name: str = 'mobileSlow4G'

        self.register_profile(ThrottlingProfile(1.0, None, name='unthrottled'))
        self.register_profile(ThrottlingProfile(
            4.0, NetworkProfile(rtt_ms=150, throughput_kbps=1638.4), name='mobileSlow4G'))
        self.register_profile(ThrottlingProfile(
            4.0, NetworkProfile(rtt_ms=300, throughput_kbps=700), name='mobileRegular3G'))
        self.register_profile(ThrottlingProfile(
            1.0, NetworkProfile(rtt_ms=40, throughput_kbps=10240), name='desktopDense4G'))

    @classmethod
    def get_instance(cls) -> 'ThrottlingConfig':
        """
        Get the singleton ThrottlingConfig instance.

        Returns:
            The singleton ThrottlingConfig instance
        """
        if cls._instance is None:
            cls._instance = ThrottlingConfig()
        return cls._instance

    def register_profile(self, profile: ThrottlingProfile, overwrite: bool = False) -> None:
        """
        Register a named profile.

        Args:
            profile: Profile to register; its name is used as key
            overwrite: Replace an existing profile with the same name

        Raises:
            ValueError: If the profile has no name, or the name is taken
                and overwrite is False
        """
        name = profile.getName()
        if not name:
            raise ValueError("Only named profiles can be registered")
        if name in self.m_profiles and not overwrite:
            raise ValueError(f"Throttling profile already registered: {name}")
        self.m_profiles[name] = profile

    def get_profile(self, name: str) -> ThrottlingProfile:
        """
        Get a registered profile by name.

        Raises:
            KeyError: If no profile is registered under that name
        """
        if name not in self.m_profiles:
            raise KeyError(f"Unknown throttling profile: {name}")
        return self.m_profiles[name]

    def get_profile_names(self) -> List[str]:
        """Get the registered profile names in registration order."""
        return list(self.m_profiles.keys())

    def get_default_profile(self) -> ThrottlingProfile:
        """Get the default profile."""
        return self.m_profiles[self.m_default_name]

    def set_default_profile(self, name: str) -> None:
        """
        Set the default profile.

        Raises:
            KeyError: If no profile is registered under that name
        """
        if name not in self.m_profiles:
            raise KeyError(f"Unknown throttling profile: {name}")
        self.m_default_name = name
