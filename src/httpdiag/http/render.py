"""
Response rendering.

Turns a received response into output events: an optional echo of the
request, the sorted headers, then the body either in full or as a brief
head/tail sample.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging

import httpx

from httpdiag.http.events import Emitter, EventKind, OutputEvent, Style
from httpdiag.http.headers import sort_header_names
from httpdiag.http.models import RenderOptions, ResponseView

logger = logging.getLogger(__name__)

BRIEF_HEAD_LINES = 5
BRIEF_TAIL_LINES = 3


def render_response(view: ResponseView, options: RenderOptions, emit: Emitter) -> None:
    """Render a response. The body stream is always closed afterwards."""
    try:
        if options.show_connect_info:
            show_request_info(view, emit)
            emit(OutputEvent(EventKind.NOTE, "*Get response from server", style=Style.NEUTRAL))

        show_response_headers(view, emit)

        body = read_body(view.response)
        if options.show_full_body:
            show_full_body(body, view.response, emit)
        else:
            show_brief_body(body, view.response, emit)
    finally:
        view.response.close()


def show_request_info(view: ResponseView, emit: Emitter) -> None:
    request = view.request
    host = request.headers.get("Host") or request.url.netloc.decode("ascii")
    user_agent = request.headers.get("User-Agent") or "*"
    accept = request.headers.get("Accept") or "*/*"

    emit(OutputEvent(EventKind.REQUEST, f">{request.method}", view.response.http_version))
    emit(OutputEvent(EventKind.REQUEST, ">Host:", host))
    emit(OutputEvent(EventKind.REQUEST, ">User-Agent:", user_agent))
    emit(OutputEvent(EventKind.REQUEST, ">Accept:", accept))


def show_response_headers(view: ResponseView, emit: Emitter) -> None:
    headers = view.headers
    for name in sort_header_names(headers):
        emit(OutputEvent(EventKind.HEADER, f"<{name}:", ",".join(headers[name])))


def read_body(response: httpx.Response) -> bytes:
    """Read the whole body; a failed read yields an empty body."""
    try:
        return response.read()
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.warning(f"failed to read response body: {e}")
        return b""


def decode_body(body: bytes, response: httpx.Response) -> str:
    return body.decode(response.encoding or "utf-8", errors="replace")


def brief_lines(text: str, head: int = BRIEF_HEAD_LINES, tail: int = BRIEF_TAIL_LINES) -> list[str]:
    """First ``head`` and last ``tail`` lines; short bodies are returned whole."""
    if not text:
        return []
    lines = text.split("\n")
    # a trailing newline terminates the last line, it does not start a new one
    if text.endswith("\n"):
        lines.pop()
    if len(lines) <= head + tail:
        return lines
    return lines[:head] + lines[-tail:]


def show_brief_body(body: bytes, response: httpx.Response, emit: Emitter) -> None:
    emit(OutputEvent(EventKind.BODY, "Body:"))
    for line in brief_lines(decode_body(body, response)):
        emit(OutputEvent(EventKind.BODY, "", line))


def show_full_body(body: bytes, response: httpx.Response, emit: Emitter) -> None:
    emit(OutputEvent(EventKind.BODY, "Body:", decode_body(body, response), data=body))
