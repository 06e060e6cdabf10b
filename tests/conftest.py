import logging

import httpx
import pytest


class FakeSSLObject:
    def __init__(self, version: str) -> None:
        self._version = version

    def version(self) -> str:
        return self._version


class FakeNetworkStream:
    """Stand-in for an httpcore network stream."""

    def __init__(self, server_addr=("93.184.216.34", 443), tls_version: str | None = None) -> None:
        self.server_addr = server_addr
        self.tls_version = tls_version

    def get_extra_info(self, info: str):
        if info == "server_addr":
            return self.server_addr
        if info == "ssl_object" and self.tls_version is not None:
            return FakeSSLObject(self.tls_version)
        return None


class TrackingStream(httpx.SyncByteStream):
    """Response body stream that counts closes and can fail mid-read."""

    def __init__(self, chunks=(), fail: bool = False) -> None:
        self._chunks = list(chunks)
        self._fail = fail
        self.close_count = 0

    def __iter__(self):
        yield from self._chunks
        if self._fail:
            raise httpx.ReadError("connection reset by peer")

    def close(self) -> None:
        self.close_count += 1


def make_handler(
    *,
    status: int = 200,
    headers=None,
    body: bytes = b"",
    tls_version: str | None = "TLSv1.3",
    peer=("93.184.216.34", 443),
    connect_error: Exception | None = None,
    seen: list | None = None,
):
    """MockTransport handler that drives the trace extension like httpcore does."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        trace = request.extensions["trace"]
        port = request.url.port or (443 if request.url.scheme == "https" else 80)
        trace("connection.connect_tcp.started", {"host": request.url.host, "port": port})
        if connect_error is not None:
            trace("connection.connect_tcp.failed", {"exception": connect_error})
            raise connect_error

        stream = FakeNetworkStream(peer, tls_version)
        trace("connection.connect_tcp.complete", {"return_value": stream})
        if tls_version is not None:
            trace("connection.start_tls.complete", {"return_value": stream})

        return httpx.Response(
            status,
            headers=headers,
            stream=httpx.ByteStream(body),
            extensions={"network_stream": stream, "http_version": b"HTTP/1.1"},
        )

    return handler


@pytest.fixture
def handler_factory():
    return make_handler


@pytest.fixture
def tracking_stream():
    return TrackingStream


@pytest.fixture
def network_stream():
    return FakeNetworkStream


@pytest.fixture(autouse=True)
def _no_proxies(monkeypatch):
    # proxy mounts would bypass the mock transport
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("httpdiag")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
