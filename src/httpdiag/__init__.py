"""
httpdiag - single-request HTTP diagnostic client

Issues one HTTP/HTTPS request, reports how the connection was made
(peer address, negotiated TLS version) and prints the response headers
and body in a deterministic order.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
