'''
module network request
'''

from typing import Any, Dict, Optional
from urllib.parse import urlsplit

'''
@class NetworkRequest
A captured network request. Times are milliseconds relative to the capture's
time origin.
'''


class NetworkRequest:
    """
    NetworkRequest represents one request captured during a page load.

    Attributes:
        m_request_id: Identifier of the request, unique within a capture
        m_url: Requested URL
        m_request_method: HTTP method
        m_priority: Browser-assigned priority (e.g. "VeryHigh", "Low")
        m_status_code: HTTP status code of the response
        m_mime_type: MIME type of the response
        m_transfer_size: Bytes transferred over the network (encoded)
        m_resource_size: Size of the decoded resource in bytes
        m_start_time: Captured start time (ms)
        m_end_time: Captured end time (ms)
        m_queued_time: Captured queued time (ms), defaults to the start time
        m_canceled: Whether the request was canceled
        m_failed: Whether the request failed
        m_fetched_via_service_worker: Whether a service worker served it
        m_initiator_request_id: Request id of the initiating request, if any
        m_timing: Captured resource timing (connectStart, sendEnd, ...)
    """

    def __init__(
        self,
        request_id: str,
        url: str,
        request_method: str = 'GET',
        priority: str = 'Low',
        status_code: int = 200,
        mime_type: str = '',
        transfer_size: int = 0,
        resource_size: int = 0,
        start_time: float = 0.0,
        end_time: float = 0.0,
        queued_time: Optional[float] = None,
        canceled: bool = False,
        failed: bool = False,
        fetched_via_service_worker: bool = False,
        initiator_request_id: Optional[str] = None,
        timing: Optional[Dict[str, float]] = None
    ) -> None:
        """
        Initialize a NetworkRequest.

        Raises:
            ValueError: If the request id is empty, the end time precedes the
                start time, or a size is negative
        """
        if not request_id:
            raise ValueError("Network request requires a request id")
        if end_time < start_time:
            raise ValueError(
                f"Request {request_id} ends before it starts ({end_time} < {start_time})")
        if transfer_size < 0 or resource_size < 0:
            raise ValueError(f"Request {request_id} has a negative size")

        self.m_request_id: str = str(request_id)
        self.m_url: str = url
        self.m_request_method: str = request_method
        self.m_priority: str = priority
        self.m_status_code: int = status_code
        self.m_mime_type: str = mime_type
        self.m_transfer_size: int = transfer_size
        self.m_resource_size: int = resource_size
        self.m_start_time: float = float(start_time)
        self.m_end_time: float = float(end_time)
        self.m_queued_time: float = float(start_time if queued_time is None else queued_time)
        self.m_canceled: bool = canceled
        self.m_failed: bool = failed
        self.m_fetched_via_service_worker: bool = fetched_via_service_worker
        self.m_initiator_request_id: Optional[str] = initiator_request_id
        self.m_timing: Dict[str, float] = dict(timing) if timing else {}

    @classmethod
    def fromDict(cls, record: Dict[str, Any]) -> 'NetworkRequest':
        """
        Create a NetworkRequest from a capture-layer record.

        Args:
            record: Dictionary using the capture key names (requestId,
                requestMethod, statusCode, fetchedViaServiceWorker, ...)

        Returns:
            The parsed NetworkRequest

        Raises:
            ValueError: If requestId or url is missing
        """
        if 'requestId' not in record or 'url' not in record:
            raise ValueError("Network record requires 'requestId' and 'url'")
        return cls(
            request_id=record['requestId'],
            url=record['url'],
            request_method=record.get('requestMethod', 'GET'),
            priority=record.get('priority', 'Low'),
            status_code=record.get('statusCode', 200),
            mime_type=record.get('mimeType', ''),
            transfer_size=record.get('transferSize', 0),
            resource_size=record.get('resourceSize', 0),
            start_time=record.get('startTime', 0.0),
            end_time=record.get('endTime', record.get('startTime', 0.0)),
            queued_time=record.get('queuedTime'),
            canceled=bool(record.get('canceled', False)),
            failed=bool(record.get('failed', False)),
            fetched_via_service_worker=bool(record.get('fetchedViaServiceWorker', False)),
            initiator_request_id=record.get('initiatorRequestId'),
            timing=record.get('timing'),
        )

    def getRequestId(self) -> str:
        return self.m_request_id

    def getUrl(self) -> str:
        return self.m_url

    def getRequestMethod(self) -> str:
        return self.m_request_method

    def getPriority(self) -> str:
        return self.m_priority

    def getStatusCode(self) -> int:
        return self.m_status_code

    def getMimeType(self) -> str:
        return self.m_mime_type

    def getTransferSize(self) -> int:
        return self.m_transfer_size

    def getResourceSize(self) -> int:
        return self.m_resource_size

    def getStartTime(self) -> float:
        return self.m_start_time

    def getEndTime(self) -> float:
        return self.m_end_time

    def getQueuedTime(self) -> float:
        return self.m_queued_time

    def getDuration(self) -> float:
        """Get the captured duration (end - start) in milliseconds."""
        return self.m_end_time - self.m_start_time

    def isCanceled(self) -> bool:
        return self.m_canceled

    def isFailed(self) -> bool:
        return self.m_failed

    def isFetchedViaServiceWorker(self) -> bool:
        return self.m_fetched_via_service_worker

    def getInitiatorRequestId(self) -> Optional[str]:
        return self.m_initiator_request_id

    def getTiming(self) -> Dict[str, float]:
        """Get the captured resource timing fields."""
        return self.m_timing

    def getOrigin(self) -> str:
        """
        Get the origin (scheme://host[:port]) of the request URL.

        Requests whose URL has no host (data:, blob:, ...) each get their own
        pseudo-origin so they never share connections.
        """
        parts = urlsplit(self.m_url)
        if not parts.netloc:
            return f"{parts.scheme or 'unknown'}:{self.m_request_id}"
        return f"{parts.scheme}://{parts.netloc}"

    def isSecure(self) -> bool:
        """Check whether the request uses a TLS scheme."""
        return urlsplit(self.m_url).scheme in ('https', 'wss')

    def __repr__(self) -> str:
        return f"NetworkRequest({self.m_request_id!r}, {self.m_url!r})"
