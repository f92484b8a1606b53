'''
module network analyzer

Estimate the connection characteristics a page load was captured under, and
re-estimate request durations for a different network profile.
'''

from typing import List, Optional

import numpy as np

from ...perf_data_struct.base import DependencyGraph
from ...perf_data_struct.dynamic.record.network_request import NetworkRequest
from ...utils.throttling_config import NetworkProfile

'''
@class NetworkAnalyzer
Observed RTT/throughput estimation and request duration model
'''


class NetworkAnalyzer:
    """
    NetworkAnalyzer derives network characteristics from captured requests.

    RTT is estimated per request from the TCP connect time when a
    connection was opened, otherwise from the time to first byte; the
    observed RTT is the median of these estimates. Throughput is the total
    number of transferred bits divided by the total download time.
    """

    @staticmethod
    def _timingValue(request: NetworkRequest, key: str) -> float:
        value = request.getTiming().get(key, -1)
        return -1.0 if value is None else float(value)

    @staticmethod
    def estimateRequestRtt(request: NetworkRequest) -> Optional[float]:
        """
        Estimate the RTT seen by one request.

        Args:
            request: Captured request with resource timing

        Returns:
            RTT estimate in milliseconds, or None if the timing has no usable data
        """
        connect_start = NetworkAnalyzer._timingValue(request, 'connectStart')
        connect_end = NetworkAnalyzer._timingValue(request, 'connectEnd')
        if connect_start >= 0 and connect_end > connect_start:
            connect = connect_end - connect_start
            ssl_start = NetworkAnalyzer._timingValue(request, 'sslStart')
            ssl_end = NetworkAnalyzer._timingValue(request, 'sslEnd')
            # connect time includes the TLS handshake
            if ssl_start >= 0 and ssl_end > ssl_start:
                connect -= ssl_end - ssl_start
            if connect > 0:
                return connect

        send_end = NetworkAnalyzer._timingValue(request, 'sendEnd')
        headers_end = NetworkAnalyzer._timingValue(request, 'receiveHeadersEnd')
        if send_end >= 0 and headers_end > send_end:
            return headers_end - send_end
        return None

    @staticmethod
    def getCapturedRoundTrips(request: NetworkRequest) -> int:
        """
        Get the number of round trips the captured request paid before data flowed.

        Returns:
            1 on a reused connection, 2 on a new connection, 3 on a new TLS connection
        """
        connect_start = NetworkAnalyzer._timingValue(request, 'connectStart')
        connect_end = NetworkAnalyzer._timingValue(request, 'connectEnd')
        if connect_start < 0 or connect_end <= connect_start:
            return 1
        if NetworkAnalyzer._timingValue(request, 'sslStart') >= 0:
            return 3
        return 2

    @staticmethod
    def getSimulatedRoundTrips(request: NetworkRequest, warm_connection: bool) -> int:
        """Get the round trips a simulated request pays on a warm or new connection."""
        if warm_connection:
            return 1
        return 3 if request.isSecure() else 2

    @staticmethod
    def estimateObservedProfile(graph: DependencyGraph) -> Optional[NetworkProfile]:
        """
        Estimate the network profile the graph was captured under.

        Args:
            graph: Dependency graph whose network nodes carry resource timing

        Returns:
            Observed NetworkProfile, or None if throughput cannot be estimated
        """
        requests = [node.getPayload() for node in graph.getNodes() if node.isNetwork()]

        rtts: List[float] = []
        bits: List[float] = []
        download_ms: List[float] = []
        for request in requests:
            rtt = NetworkAnalyzer.estimateRequestRtt(request)
            if rtt is not None:
                rtts.append(rtt)

            headers_end = NetworkAnalyzer._timingValue(request, 'receiveHeadersEnd')
            download = request.getDuration() - max(headers_end, 0.0)
            if request.getTransferSize() > 0 and download > 0:
                bits.append(request.getTransferSize() * 8.0)
                download_ms.append(download)

        if not download_ms:
            return None
        throughput = float(np.sum(bits) / np.sum(download_ms))
        rtt_ms = float(np.median(rtts)) if rtts else 0.0
        return NetworkProfile(rtt_ms=rtt_ms, throughput_kbps=throughput)

    @staticmethod
    def simulateRequestDuration(request: NetworkRequest, target: NetworkProfile,
                                observed: Optional[NetworkProfile],
                                round_trips: int) -> float:
        """
        Re-estimate a request's duration under a target network profile.

        The captured duration is split into the latency of its captured round
        trips and the remaining transfer time. The simulated duration pays
        ``round_trips`` target RTTs plus the transfer time scaled by the
        throughput ratio. Without an observed profile the whole captured
        duration counts as transfer time at unchanged throughput.

        Args:
            request: Captured request
            target: Simulated network conditions
            observed: Captured network conditions, or None if unknown
            round_trips: Round trips paid in the simulation

        Returns:
            Simulated duration in milliseconds
        """
        captured = request.getDuration()
        if observed is None:
            transfer = captured
            ratio = 1.0
        else:
            latency = min(captured,
                          NetworkAnalyzer.getCapturedRoundTrips(request) * observed.getRttMs())
            transfer = captured - latency
            ratio = observed.getThroughputKbps() / target.getThroughputKbps()
        return round_trips * target.getRttMs() + transfer * ratio
