"""Tests for sonarcli.generator.invoker.

Covers:
- Method lookup (unknown and private names)
- Unwrapping of each return shape
- Error wrapping with the service label, exit code and response
- Return count mismatches
- The streaming path: copy, flush, close, failures
"""

from __future__ import annotations

import io
from typing import Iterator, Optional

import httpx
import pytest

from sonarcli.exceptions import (
    InvocationError,
    MethodNotFoundError,
    NotFoundError,
    StreamingError,
    ValidationError,
)
from sonarcli.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND
from sonarcli.generator.invoker import Invocation, invoke_method, invoke_streaming, service_label
from sonarcli.models import ReturnShape


def _response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", "http://sonar.test/api/x"), **kwargs)


class WidgetsService:
    def __init__(self) -> None:
        self.calls: list[object] = []

    def get(self, opt):
        self.calls.append(opt)
        return {"key": opt}, _response()

    def nothing(self, opt):
        self.calls.append(opt)
        return _response(204)

    def empty(self):
        return None, _response()

    def raw(self):
        return b"\x00\x01", _response()

    def fail_validation(self, opt):
        raise ValidationError("Key", "is required")

    def fail_remote(self, opt):
        raise NotFoundError(_response(404), message="{errors: [{msg: gone}]}")

    def triple(self):
        return 1, 2, _response()

    def single(self, opt):
        return _response()

    def _private(self):
        return None, _response()

    attribute = "not callable"


# ---------------------------------------------------------------------------
# invoke_method
# ---------------------------------------------------------------------------


class TestServiceLabel:
    def test_strips_service_suffix(self) -> None:
        assert service_label(WidgetsService()) == "Widgets"

    def test_keeps_other_names(self) -> None:
        class Plain:
            pass

        assert service_label(Plain()) == "Plain"


class TestInvokeMethod:
    """Call and unwrap by shape."""

    def test_response_body(self) -> None:
        service = WidgetsService()
        result = invoke_method(service, "get", "opt", ReturnShape.RESPONSE_BODY, True)
        assert isinstance(result, Invocation)
        assert result.value == {"key": "opt"}
        assert result.response.status_code == 200
        assert service.calls == ["opt"]

    def test_no_body_returns_response_only(self) -> None:
        value, response = invoke_method(WidgetsService(), "nothing", None, ReturnShape.NO_BODY, True)
        assert value is None
        assert response.status_code == 204

    def test_none_value_passes_through(self) -> None:
        value, response = invoke_method(WidgetsService(), "empty", None, ReturnShape.RESPONSE_BODY, False)
        assert value is None
        assert response is not None

    def test_raw_bytes(self) -> None:
        value, _ = invoke_method(WidgetsService(), "raw", None, ReturnShape.RAW_BYTES, False)
        assert value == b"\x00\x01"

    def test_unknown_method(self) -> None:
        with pytest.raises(MethodNotFoundError, match="'missing' not found"):
            invoke_method(WidgetsService(), "missing", None, ReturnShape.NO_BODY, False)

    def test_private_method_not_reachable(self) -> None:
        with pytest.raises(MethodNotFoundError):
            invoke_method(WidgetsService(), "_private", None, ReturnShape.RESPONSE_BODY, False)

    def test_non_callable_attribute(self) -> None:
        with pytest.raises(MethodNotFoundError):
            invoke_method(WidgetsService(), "attribute", None, ReturnShape.NO_BODY, False)


class TestInvokeMethodErrors:
    """Errors carry the label, the exit code and the cause."""

    def test_validation_error_is_wrapped(self) -> None:
        with pytest.raises(InvocationError) as exc_info:
            invoke_method(WidgetsService(), "fail_validation", "opt", ReturnShape.RESPONSE_BODY, True)

        exc = exc_info.value
        assert str(exc).startswith("Widgets.fail_validation: ")
        assert 'validation error for field "Key"' in str(exc)
        assert exc.exit_code == EXIT_INVALID_USAGE
        assert isinstance(exc.__cause__, ValidationError)
        assert exc.response is None

    def test_response_error_keeps_response(self) -> None:
        with pytest.raises(InvocationError) as exc_info:
            invoke_method(WidgetsService(), "fail_remote", "opt", ReturnShape.RESPONSE_BODY, True)

        exc = exc_info.value
        assert exc.exit_code == EXIT_NOT_FOUND
        assert exc.response is not None
        assert exc.response.status_code == 404
        assert "gone" in str(exc)

    def test_tuple_for_no_body_shape(self) -> None:
        with pytest.raises(InvocationError, match="unexpected return count 3"):
            invoke_method(WidgetsService(), "get", "opt", ReturnShape.NO_BODY, True)

    def test_bare_response_for_body_shape(self) -> None:
        with pytest.raises(InvocationError, match="unexpected return count 2"):
            invoke_method(WidgetsService(), "single", "opt", ReturnShape.RESPONSE_BODY, True)

    def test_triple_for_body_shape(self) -> None:
        with pytest.raises(InvocationError, match="unexpected return count 4"):
            invoke_method(WidgetsService(), "triple", None, ReturnShape.RESPONSE_BODY, False)


# ---------------------------------------------------------------------------
# invoke_streaming
# ---------------------------------------------------------------------------


class TrackingStream(httpx.SyncByteStream):
    def __init__(self, chunks: list[bytes], fail_after: Optional[int] = None) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        for idx, chunk in enumerate(self.chunks):
            if self.fail_after is not None and idx >= self.fail_after:
                raise httpx.ReadError("connection reset")
            yield chunk

    def close(self) -> None:
        self.closed = True


class FlushCountingSink(io.BytesIO):
    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


class BrokenSink(io.BytesIO):
    def write(self, data) -> int:  # noqa: ANN001
        raise OSError("broken pipe")


class EventsService:
    def __init__(self, stream: Optional[TrackingStream] = None) -> None:
        self.stream = stream
        self.received: list[object] = []

    def events(self, opt):
        self.received.append(opt)
        return httpx.Response(200, stream=self.stream, request=httpx.Request("GET", "http://sonar.test/api/e"))

    def events_without_option(self):
        return httpx.Response(200, stream=self.stream, request=httpx.Request("GET", "http://sonar.test/api/e"))

    def pair(self, opt):
        return None, _response()

    def nothing(self, opt):
        return None

    def explode(self, opt):
        raise ValidationError("ProjectKeys", "is required")


class TestInvokeStreaming:
    """Streamed bodies are copied chunk by chunk and always closed."""

    def test_copies_every_chunk(self) -> None:
        stream = TrackingStream([b"event: a\n", b"data: 1\n\n"])
        service = EventsService(stream)
        sink = FlushCountingSink()

        invoke_streaming(service, "events", "opt", sink)

        assert sink.getvalue() == b"event: a\ndata: 1\n\n"
        assert sink.flushes >= 2
        assert stream.closed is True
        assert service.received == ["opt"]

    def test_no_option_calls_without_argument(self) -> None:
        stream = TrackingStream([b"x"])
        sink = io.BytesIO()

        invoke_streaming(EventsService(stream), "events_without_option", None, sink)

        assert sink.getvalue() == b"x"

    def test_method_errors_propagate_unwrapped(self) -> None:
        with pytest.raises(ValidationError):
            invoke_streaming(EventsService(), "explode", "opt", io.BytesIO())

    def test_pair_result_is_rejected(self) -> None:
        with pytest.raises(InvocationError, match="unexpected return count 3 from streaming method"):
            invoke_streaming(EventsService(), "pair", "opt", io.BytesIO())

    def test_none_response_is_a_no_op(self) -> None:
        sink = io.BytesIO()
        invoke_streaming(EventsService(), "nothing", "opt", sink)
        assert sink.getvalue() == b""

    def test_read_failure_closes_response(self) -> None:
        stream = TrackingStream([b"one", b"two"], fail_after=1)
        sink = io.BytesIO()

        with pytest.raises(StreamingError, match="copy stream"):
            invoke_streaming(EventsService(stream), "events", "opt", sink)

        assert sink.getvalue() == b"one"
        assert stream.closed is True

    def test_write_failure_closes_response(self) -> None:
        stream = TrackingStream([b"one"])

        with pytest.raises(StreamingError, match="broken pipe"):
            invoke_streaming(EventsService(stream), "events", "opt", BrokenSink())

        assert stream.closed is True

    def test_unknown_method(self) -> None:
        with pytest.raises(MethodNotFoundError):
            invoke_streaming(EventsService(), "missing", None, io.BytesIO())
