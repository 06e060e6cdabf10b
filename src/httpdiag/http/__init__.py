"""
HTTP diagnostic request module.

Provides a single traced request with:
- Peer address reporting as soon as the connection is up
- Negotiated TLS version reporting
- Response headers in a fixed, protocol-aware order
- Brief (head/tail) or full body display

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from httpdiag.http.client import (
    ConnectionTracer,
    TracedTransport,
    build_request,
    visit,
)
from httpdiag.http.errors import (
    BuildError,
    ExecError,
    FatalConnectError,
    HTTPDiagError,
)
from httpdiag.http.models import (
    ConnectionEvent,
    RenderOptions,
    RequestSpec,
    ResponseView,
    TLSVersion,
)
from httpdiag.http.render import render_response

__all__ = [
    "ConnectionTracer",
    "TracedTransport",
    "build_request",
    "visit",
    "BuildError",
    "ExecError",
    "FatalConnectError",
    "HTTPDiagError",
    "ConnectionEvent",
    "RenderOptions",
    "RequestSpec",
    "ResponseView",
    "TLSVersion",
    "render_response",
]
