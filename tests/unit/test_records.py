"""
Unit tests for captured records (NetworkRequest, CpuEvent)
"""
import pytest
from loadflow.perf_data_struct.dynamic.record import CpuEvent, NetworkRequest


class TestNetworkRequest:
    """Test NetworkRequest class"""

    def test_defaults(self):
        """Test default values"""
        request = NetworkRequest("1", "https://example.com/", start_time=10.0, end_time=30.0)

        assert request.getRequestMethod() == "GET"
        assert request.getPriority() == "Low"
        assert request.getStatusCode() == 200
        assert request.getQueuedTime() == 10.0
        assert request.getDuration() == 20.0
        assert not request.isCanceled()
        assert not request.isFailed()
        assert request.getInitiatorRequestId() is None
        assert request.getTiming() == {}

    def test_from_dict(self):
        """Test parsing a capture record"""
        request = NetworkRequest.fromDict({
            "requestId": "42",
            "url": "https://cdn.example.com/app.js",
            "requestMethod": "POST",
            "priority": "High",
            "statusCode": 201,
            "mimeType": "application/javascript",
            "transferSize": 1200,
            "resourceSize": 4000,
            "startTime": 5.0,
            "endTime": 50.0,
            "queuedTime": 2.0,
            "failed": True,
            "fetchedViaServiceWorker": True,
            "initiatorRequestId": "1",
            "timing": {"sendEnd": 3.0, "receiveHeadersEnd": 20.0},
        })

        assert request.getRequestId() == "42"
        assert request.getRequestMethod() == "POST"
        assert request.getPriority() == "High"
        assert request.getStatusCode() == 201
        assert request.getMimeType() == "application/javascript"
        assert request.getTransferSize() == 1200
        assert request.getResourceSize() == 4000
        assert request.getQueuedTime() == 2.0
        assert request.isFailed()
        assert request.isFetchedViaServiceWorker()
        assert request.getInitiatorRequestId() == "1"
        assert request.getTiming()["receiveHeadersEnd"] == 20.0

    def test_from_dict_requires_id_and_url(self):
        """Test that incomplete records are rejected"""
        with pytest.raises(ValueError):
            NetworkRequest.fromDict({"url": "https://example.com/"})
        with pytest.raises(ValueError):
            NetworkRequest.fromDict({"requestId": "1"})

    @pytest.mark.parametrize("kwargs", [
        {"request_id": ""},
        {"start_time": 10.0, "end_time": 5.0},
        {"transfer_size": -1},
    ])
    def test_invalid_values(self, kwargs):
        """Test that malformed values are rejected"""
        params = {"request_id": "1", "url": "https://example.com/"}
        params.update(kwargs)
        with pytest.raises(ValueError):
            NetworkRequest(**params)

    def test_origin(self):
        """Test origin extraction"""
        a = NetworkRequest("1", "https://example.com:8443/a?b=c")
        b = NetworkRequest("2", "http://example.com/")
        data = NetworkRequest("3", "data:image/png;base64,AAAA")

        assert a.getOrigin() == "https://example.com:8443"
        assert b.getOrigin() == "http://example.com"
        assert data.getOrigin() == "data:3"

    def test_is_secure(self):
        """Test TLS scheme detection"""
        assert NetworkRequest("1", "https://example.com/").isSecure()
        assert NetworkRequest("2", "wss://example.com/socket").isSecure()
        assert not NetworkRequest("3", "http://example.com/").isSecure()


class TestCpuEvent:
    """Test CpuEvent class"""

    def test_creation(self):
        """Test creating a CpuEvent"""
        event = CpuEvent(pid=10, tid=20, name="Layout", timestamp=5000.0, duration=2500.0,
                         args={"frame": "F1"})

        assert event.getPid() == 10
        assert event.getTid() == 20
        assert event.getName() == "Layout"
        assert event.getCategory() == "toplevel"
        assert event.getPhase() == "X"
        assert event.getStartTimeMs() == 5.0
        assert event.getEndTimeMs() == 7.5
        assert event.getArgs() == {"frame": "F1"}

    def test_from_dict_long_keys(self):
        """Test parsing a record with long key names"""
        event = CpuEvent.fromDict({
            "processId": 1, "threadId": 2, "name": "Task", "category": "cat",
            "phase": "X", "timestamp": 100, "duration": 50,
            "eventId": "task-1", "initiatorId": "r1",
        })

        assert (event.getPid(), event.getTid()) == (1, 2)
        assert event.getCategory() == "cat"
        assert event.getTimestamp() == 100.0
        assert event.getDuration() == 50.0
        assert event.getEventId() == "task-1"
        assert event.getInitiatorId() == "r1"

    def test_from_dict_trace_keys(self):
        """Test parsing a raw trace event"""
        event = CpuEvent.fromDict({"pid": 3, "tid": 4, "name": "Task", "cat": "toplevel",
                                   "ph": "X", "ts": 1000, "dur": 10})

        assert (event.getPid(), event.getTid()) == (3, 4)
        assert event.getTimestamp() == 1000.0

    def test_from_dict_missing_fields(self):
        """Test that records without identity are rejected"""
        with pytest.raises(ValueError):
            CpuEvent.fromDict({"pid": 1, "name": "Task"})

    def test_negative_duration(self):
        """Test that a negative duration is rejected"""
        with pytest.raises(ValueError):
            CpuEvent(pid=1, tid=1, name="Task", duration=-1.0)
