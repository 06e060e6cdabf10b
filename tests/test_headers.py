from itertools import permutations

import httpx
import pytest

from httpdiag.http.headers import (
    HeaderClass,
    canonical_header_name,
    classify_header,
    collect_headers,
    compare_header_names,
    sort_header_names,
)


@pytest.mark.parametrize(
    "name",
    ["Connection", "Keep-Alive", "Proxy-Authenticate", "Proxy-Authorization",
     "TE", "Trailers", "Transfer-Encoding", "Upgrade", "transfer-encoding", "Te"],
)
def test_hop_by_hop_headers_are_connection_scoped(name):
    assert classify_header(name) is HeaderClass.CONNECTION


@pytest.mark.parametrize("name", ["Server", "server", "SERVER"])
def test_server_is_its_own_class(name):
    assert classify_header(name) is HeaderClass.SERVER


@pytest.mark.parametrize("name", ["Content-Type", "Content-Length", "Age", "X-Served-By", "Servers"])
def test_everything_else_is_end_to_end(name):
    assert classify_header(name) is HeaderClass.END_TO_END


def test_server_sorts_first():
    assert sort_header_names(["Age", "Connection", "Server"]) == ["Server", "Age", "Connection"]


def test_end_to_end_before_hop_by_hop():
    # "Upgrade" < "X-Cache" lexically, but hop-by-hop headers go last
    assert sort_header_names(["Upgrade", "X-Cache"]) == ["X-Cache", "Upgrade"]


def test_connection_and_content_length_order():
    names = ["Connection", "Content-Length", "Server"]
    assert sort_header_names(names) == ["Server", "Content-Length", "Connection"]


def test_same_class_is_ordinal():
    assert sort_header_names(["b-header", "B-Header", "a-header"]) == ["B-Header", "a-header", "b-header"]
    assert sort_header_names(["Upgrade", "Connection", "TE"]) == ["Connection", "TE", "Upgrade"]


def test_sort_is_idempotent():
    names = ["Vary", "Transfer-Encoding", "Server", "Date", "Keep-Alive", "Content-Type"]
    once = sort_header_names(names)
    assert sort_header_names(once) == once


def test_sort_is_total_over_permutations():
    names = ["Server", "Date", "Connection", "Content-Type", "Upgrade"]
    results = {tuple(sort_header_names(p)) for p in permutations(names)}
    assert results == {("Server", "Content-Type", "Date", "Connection", "Upgrade")}


def test_compare_is_antisymmetric():
    names = ["Server", "Date", "Connection", "ETag", "TE"]
    for a in names:
        for b in names:
            assert compare_header_names(a, b) == -compare_header_names(b, a)
    assert compare_header_names("Date", "Date") == 0


@pytest.mark.parametrize(
    "raw, canonical",
    [
        ("content-type", "Content-Type"),
        ("x-forwarded-for", "X-Forwarded-For"),
        ("SERVER", "Server"),
        ("te", "Te"),
        ("bad header", "bad header"),
    ],
)
def test_canonical_header_name(raw, canonical):
    assert canonical_header_name(raw) == canonical


def test_collect_headers_keeps_repeated_values_in_order():
    headers = httpx.Headers([
        ("server", "nginx"),
        ("set-cookie", "a=1"),
        ("Set-Cookie", "b=2"),
    ])
    assert collect_headers(headers) == {"Server": ["nginx"], "Set-Cookie": ["a=1", "b=2"]}
