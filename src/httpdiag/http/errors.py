"""
Errors raised by the request pipeline.

``BuildError`` and ``ExecError`` are recoverable: the caller reports them
and decides the exit status. ``FatalConnectError`` means no connection
could be established and the caller must stop.
"""


class HTTPDiagError(Exception):
    """Base class for httpdiag errors."""


class BuildError(HTTPDiagError):
    """The outbound request could not be constructed."""

    def __init__(self, cause: object):
        self.cause = cause
        super().__init__(f"Unable to create request: {cause}")


class ExecError(HTTPDiagError):
    """The request/response round trip failed."""

    def __init__(self, cause: object):
        self.cause = cause
        super().__init__(f"failed to read response: {cause}")


class FatalConnectError(HTTPDiagError):
    """The network connection to the host could not be established."""

    def __init__(self, address: str, cause: object):
        self.address = address
        self.cause = cause
        super().__init__(f"unable to connect to host {address}: {cause}")
