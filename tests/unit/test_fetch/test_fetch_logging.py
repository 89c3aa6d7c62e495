"""Unit tests for Fetcher request/response logging."""

import httpx
import pytest
from structlog.testing import capture_logs

from fetchkit.fetch.client import Fetcher
from fetchkit.fetch.logger import Logger, NullLogger, default_logger
from fetchkit.fetch.models import RequestOptions
from fetchkit.fetch.redact import REDACTED_VALUE
from tests.helpers.fetch import ENDPOINT, ExplodingLogger, RecordingLogger


class TestThresholdPolicy:
    """Tests for the single-entry-per-response logging policy."""

    @pytest.mark.asyncio
    async def test_silent_logger_records_nothing(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that a logger above every level records zero entries."""
        logger = RecordingLogger("off")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        for path in ("/hello", "/missing", "/object", "/missing"):
            await fetcher.get(path)

        assert logger.entries == []

    @pytest.mark.asyncio
    async def test_debug_logger_records_request_and_response(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that a successful call logs two debug entries."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        await fetcher.get("/hello")

        assert [(e.level, e.event) for e in logger.entries] == [
            ("debug", "fetch_request"),
            ("debug", "fetch_response"),
        ]

    @pytest.mark.asyncio
    async def test_error_status_logs_at_error(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that a 404 response is logged once at error level."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        await fetcher.get("/missing")

        assert len(logger.entries) == 2
        assert len(logger.at("debug")) == 1
        [entry] = logger.at("error")
        assert entry.event == "fetch_response"
        assert entry.fields["url"] == f"GET {ENDPOINT}/missing"
        assert entry.fields["status"] == 404
        assert entry.fields["data"] == "Not Found"
        assert entry.fields["sequence"] == 1

    @pytest.mark.asyncio
    async def test_error_logger_only_sees_failures(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that an error-level logger records only error responses."""
        logger = RecordingLogger("error")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        await fetcher.get("/hello")
        await fetcher.get("/missing")

        assert len(logger.entries) == 1
        assert logger.entries[0].fields["status"] == 404

    @pytest.mark.asyncio
    async def test_raised_threshold_suppresses_errors(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that a threshold above every status yields no error entries."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client, min_error=600)

        await fetcher.get("/missing")

        assert logger.at("error") == []
        assert len(logger.at("debug")) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_skips_response_log(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that only the request entry exists when no response arrives."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        with pytest.raises(httpx.ConnectError):
            await fetcher.get("/down")

        assert [e.event for e in logger.entries] == ["fetch_request"]


class TestEntryContents:
    """Tests for what the log entries carry."""

    @pytest.mark.asyncio
    async def test_request_entry_fields(self, client: httpx.AsyncClient) -> None:
        """Test that the request entry holds method, path, query and data."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        await fetcher.post("/echo", {"q": "x", "skip": None}, {"a": 1})

        entry = logger.entries[0]
        assert entry.fields["path"] == "POST /echo"
        assert entry.fields["query"] == {"q": "x"}
        assert entry.fields["data"] == {"a": 1}

    @pytest.mark.asyncio
    async def test_binary_data_is_summarized(self, client: httpx.AsyncClient) -> None:
        """Test that binary bodies are logged by size only."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(ENDPOINT, logger=logger, client=client)

        await fetcher.post("/upload", data=b"\x00\x01\x02")

        assert logger.entries[0].fields["data"] == "<3 bytes>"

    @pytest.mark.asyncio
    async def test_sensitive_headers_are_redacted(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that credentials never appear in the response entry."""
        logger = RecordingLogger("debug")
        fetcher = Fetcher(
            ENDPOINT,
            headers={"Authorization": "Bearer secret"},
            logger=logger,
            client=client,
        )

        await fetcher.get(
            "/hello", options=RequestOptions(headers={"Cookie": "session=abc"})
        )

        headers = logger.at("debug")[-1].fields["headers"]
        assert headers["authorization"] == REDACTED_VALUE
        assert headers["cookie"] == REDACTED_VALUE
        assert headers["accept-language"] == "en"


class TestLoggerFailures:
    """Tests for loggers that raise."""

    @pytest.mark.asyncio
    async def test_failing_logger_does_not_fail_call(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that a raising logger is reported and the call succeeds."""
        fetcher = Fetcher(ENDPOINT, logger=ExplodingLogger("debug"), client=client)

        with capture_logs() as logs:
            response = await fetcher.get("/hello")

        assert response.data == "Hello World!"
        assert fetcher.sequence == 1
        failures = [log for log in logs if log["event"] == "fetch_log_failed"]
        assert len(failures) == 2
        assert failures[0]["log_event"] == "fetch_request"


class TestDefaultLogger:
    """Tests for the logger used when none is supplied."""

    def test_loggers_satisfy_protocol(self) -> None:
        """Test that the bundled and test loggers match the protocol."""
        assert isinstance(NullLogger(), Logger)
        assert isinstance(RecordingLogger(), Logger)

    def test_default_logger_binds_component(self) -> None:
        """Test that the default logger tags entries with the component."""
        with capture_logs() as logs:
            default_logger().warning("ping")

        assert logs == [{"event": "ping", "log_level": "warning", "component": "fetch"}]

    @pytest.mark.asyncio
    async def test_default_logger_drops_debug(self, client: httpx.AsyncClient) -> None:
        """Test that successful calls are silent by default."""
        fetcher = Fetcher(ENDPOINT, client=client)

        with capture_logs() as logs:
            await fetcher.get("/hello")

        assert logs == []

    @pytest.mark.asyncio
    async def test_default_logger_reports_errors(
        self, client: httpx.AsyncClient
    ) -> None:
        """Test that error responses are never silently dropped."""
        fetcher = Fetcher(ENDPOINT, client=client)

        with capture_logs() as logs:
            await fetcher.get("/missing")

        assert len(logs) == 1
        assert logs[0]["event"] == "fetch_response"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["component"] == "fetch"
        assert logs[0]["status"] == 404
