"""
Traced HTTP client.

Builds a single request, sends it over an httpx client that reports
when the network connection comes up, and records the negotiated TLS
version.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import re
import socket
import ssl
from typing import Any, Iterable

import certifi
import httpx

from httpdiag import __version__
from httpdiag.config import TransportConfig, VisitConfig
from httpdiag.http.errors import BuildError, ExecError, FatalConnectError
from httpdiag.http.events import Emitter, EventKind, OutputEvent, Style
from httpdiag.http.models import (
    ConnectionEvent,
    RenderOptions,
    RequestSpec,
    ResponseView,
    TLSVersion,
)
from httpdiag.http.render import render_response

logger = logging.getLogger(__name__)

USER_AGENT = f"httpdiag/{__version__}"

# RFC 7230 section 3.2.6
TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

TLS_VERSIONS = {
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}

# httpcore trace event names
CONNECT_STARTED = {
    "connection.connect_tcp.started": "tcp",
    "connection.connect_unix_socket.started": "unix",
}
CONNECT_COMPLETE = {
    "connection.connect_tcp.complete": "tcp",
    "connection.connect_unix_socket.complete": "unix",
}
CONNECT_FAILED = {
    "connection.connect_tcp.failed": "tcp",
    "connection.connect_unix_socket.failed": "unix",
}
START_TLS_COMPLETE = "connection.start_tls.complete"


def parse_headers(header_strings: Iterable[str]) -> tuple[tuple[str, str], ...]:
    """Parse header strings in 'Name: Value' format, keeping order and repeats."""
    headers = []
    for h in header_strings:
        if ":" not in h:
            raise BuildError(f"invalid header {h!r}, expected 'Name: Value'")
        name, value = h.split(":", 1)
        headers.append((name.strip(), value.strip()))
    return tuple(headers)


def build_request(
    method: str,
    url: str | httpx.URL,
    body: str = "",
    headers: Iterable[tuple[str, str]] | None = None,
) -> RequestSpec:
    """Build the outbound request.

    The body is always present, possibly empty. A default User-Agent is
    added unless the caller supplied one.
    """
    if not method or not TOKEN_RE.fullmatch(method):
        raise BuildError(f"invalid method {method!r}")

    try:
        target = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise BuildError(e) from e

    if target.scheme not in ("http", "https"):
        raise BuildError(f"unsupported protocol scheme {target.scheme!r}")
    if not target.host:
        raise BuildError(f"no host in request URL {str(target)!r}")

    request_headers = list(headers or ())
    for name, value in request_headers:
        if not TOKEN_RE.fullmatch(name):
            raise BuildError(f"invalid header name {name!r}")
        if "\r" in value or "\n" in value:
            raise BuildError(f"invalid value for header {name!r}")

    if not any(name.lower() == "user-agent" for name, _ in request_headers):
        request_headers.append(("User-Agent", USER_AGENT))

    return RequestSpec(
        method=method,
        url=target,
        body=body.encode("utf-8"),
        headers=tuple(request_headers),
    )


def create_ssl_context(config: TransportConfig) -> ssl.SSLContext:
    """Verifying client context with the configured minimum protocol version."""
    context = ssl.create_default_context(cafile=certifi.where())
    context.check_hostname = True
    context.verify_mode = ssl.CERT_REQUIRED
    context.minimum_version = TLS_VERSIONS[config.min_tls_version]
    return context


def format_address(addr: Any) -> str:
    """Render a socket peer address as host:port."""
    if isinstance(addr, tuple) and len(addr) >= 2:
        host, port = addr[0], addr[1]
        if ":" in str(host):
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    return str(addr)


def negotiated_protocol(stream: Any) -> str | None:
    """TLS protocol of a network stream, or None for plaintext."""
    if stream is None:
        return None
    ssl_object = stream.get_extra_info("ssl_object")
    if ssl_object is None:
        return None
    return ssl_object.version()


def is_resolution_failure(exc: BaseException | None) -> bool:
    """True when a connect error was caused by a failed DNS lookup."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, socket.gaierror):
            return True
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return False


class ConnectionTracer:
    """Connection-lifecycle observer installed as the request's ``trace`` extension.

    httpcore calls it synchronously while setting up the connection, so
    the connect notification is emitted before any response bytes are
    read. A failed connect raises ``FatalConnectError`` unless the host
    name could not be resolved.
    """

    def __init__(self, emit: Emitter):
        self._emit = emit
        self._target = "<unknown>"
        self.connection: ConnectionEvent | None = None
        self.tls_protocol: str | None = None

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        logger.debug(f"trace: {event_name}")

        if event_name in CONNECT_STARTED:
            if "path" in info:
                self._target = str(info["path"])
            else:
                self._target = format_address((info.get("host"), info.get("port")))
        elif event_name in CONNECT_COMPLETE:
            self._connected(CONNECT_COMPLETE[event_name], info.get("return_value"))
        elif event_name in CONNECT_FAILED:
            self._failed(CONNECT_FAILED[event_name], info.get("exception"))
        elif event_name == START_TLS_COMPLETE:
            self.tls_protocol = negotiated_protocol(info.get("return_value"))

    def _connected(self, kind: str, stream: Any) -> None:
        if self.connection is not None:
            return
        peer = stream.get_extra_info("server_addr") if stream is not None else None
        address = format_address(peer) if peer else self._target
        self.connection = ConnectionEvent(peer_address=address, network_kind=kind)
        logger.debug(f"Connected to {address} over {kind}")
        self._emit(OutputEvent(EventKind.CONNECT, "Connected to", address, Style.SUCCESS))

    def _failed(self, kind: str, exc: BaseException | None) -> None:
        if is_resolution_failure(exc):
            # name lookup never reached a host; surfaces later as ExecError
            logger.warning(f"unable to resolve host {self._target}: {exc}")
            return
        self.connection = ConnectionEvent(peer_address=self._target, network_kind=kind, error=exc)
        logger.error(f"unable to connect to host {self._target}: {exc}")
        raise FatalConnectError(self._target, exc)


class TracedTransport:
    """Sends one request over a configured httpx client."""

    def __init__(
        self,
        emit: Emitter,
        config: TransportConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._emit = emit
        self.config = config or TransportConfig()
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "TracedTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_client(self, scheme: str) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            verify: ssl.SSLContext | bool = True
            if scheme == "https":
                verify = create_ssl_context(self.config)
            self._client = httpx.Client(
                transport=self._transport,
                verify=verify,
                http2=self.config.http2,
                trust_env=self.config.trust_env,
                follow_redirects=False,
                timeout=httpx.Timeout(None, connect=self.config.tls_handshake_timeout),
                limits=httpx.Limits(
                    max_connections=None,
                    max_keepalive_connections=self.config.max_idle_connections,
                    keepalive_expiry=self.config.idle_timeout,
                ),
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def execute(self, spec: RequestSpec) -> ResponseView:
        """Send the request and return the response with its body unread."""
        tracer = ConnectionTracer(self._emit)
        extensions: dict[str, Any] = {"trace": tracer}
        if spec.url.scheme == "https":
            extensions["sni_hostname"] = spec.url.host

        client = self._get_client(spec.url.scheme)

        try:
            request = client.build_request(
                spec.method,
                spec.url,
                headers=list(spec.headers),
                content=spec.body,
                extensions=extensions,
            )
        except (httpx.HTTPError, ValueError) as e:
            raise BuildError(e) from e

        logger.debug(f"Dispatching {spec.method} {spec.url}")
        try:
            response = client.send(request, stream=True)
        except FatalConnectError:
            raise
        except httpx.HTTPError as e:
            failed = tracer.connection
            if failed is not None and not failed.ok:
                raise FatalConnectError(failed.peer_address, failed.error) from e
            raise ExecError(e) from e

        protocol = negotiated_protocol(response.extensions.get("network_stream"))
        if protocol is None:
            protocol = tracer.tls_protocol

        view = ResponseView(
            request=request,
            response=response,
            tls_version=TLSVersion.from_protocol(protocol),
            tls_protocol=protocol,
            connection=tracer.connection,
        )
        logger.debug(f"{response.http_version} {response.status_code} via {view.tls_label}")
        self._emit(OutputEvent(EventKind.TLS, "Connected via", view.tls_label, Style.SUCCESS))
        return view


def visit(
    config: VisitConfig,
    emit: Emitter,
    transport_config: TransportConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> None:
    """Build, send and render one request."""
    spec = build_request(config.method, config.url, config.body, config.headers)
    options = RenderOptions(
        show_connect_info=config.show_connect_info,
        show_full_body=config.show_full_body,
    )

    with TracedTransport(emit, transport_config, transport=transport) as traced:
        view = traced.execute(spec)
        render_response(view, options, emit)
