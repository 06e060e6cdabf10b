"""
Data model for a single traced HTTP exchange.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import io
from dataclasses import dataclass, field
from enum import Enum

import httpx

from httpdiag.http.headers import HeaderSet, collect_headers


@dataclass(frozen=True)
class RequestSpec:
    """Outbound request, immutable once built."""
    method: str
    url: httpx.URL
    body: bytes = b""
    headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def stream(self) -> io.BytesIO:
        """Readable stream over the body; empty rather than absent when there is no body."""
        return io.BytesIO(self.body)

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class ConnectionEvent:
    """Outcome of establishing the network connection."""
    peer_address: str
    network_kind: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TLSVersion(str, Enum):
    """Negotiated TLS protocol, as reported by the SSL object."""
    TLS1_2 = "TLSv1.2"
    TLS1_3 = "TLSv1.3"
    OTHER = "other"
    NONE = "plaintext"

    @classmethod
    def from_protocol(cls, protocol: str | None) -> "TLSVersion":
        if protocol is None:
            return cls.NONE
        if protocol == "TLSv1.2":
            return cls.TLS1_2
        if protocol == "TLSv1.3":
            return cls.TLS1_3
        return cls.OTHER

    @property
    def label(self) -> str:
        return self.value


@dataclass
class ResponseView:
    """A received response whose body has not been read yet."""
    request: httpx.Request
    response: httpx.Response
    tls_version: TLSVersion = TLSVersion.NONE
    tls_protocol: str | None = None
    connection: ConnectionEvent | None = None

    @property
    def headers(self) -> HeaderSet:
        return collect_headers(self.response.headers)

    @property
    def tls_label(self) -> str:
        if self.tls_version is TLSVersion.OTHER and self.tls_protocol:
            return self.tls_protocol
        return self.tls_version.label


@dataclass(frozen=True)
class RenderOptions:
    """How much of the response to show."""
    show_connect_info: bool = False
    show_full_body: bool = False
