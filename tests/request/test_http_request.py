# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import io

from reqcheck.request import HttpRequest, Request, parse_query


def test_http_request_satisfies_protocol():
    assert isinstance(HttpRequest("GET", "/"), Request)


def test_header_lookup_is_case_insensitive():
    request = HttpRequest("GET", "/", headers={"Content-Type": "application/json"})

    assert request.get_header_value("content-type") == "application/json"
    assert request.get_header_value("CONTENT-TYPE") == "application/json"
    assert request.get_header_value("Accept") == ""


def test_repeated_headers_are_combined():
    request = HttpRequest("GET", "/", headers=[("Accept", "text/html"), ("accept", "application/json")])

    assert request.get_header_value("Accept") == "text/html, application/json"


def test_method_is_kept_verbatim():
    assert HttpRequest("pOsT", "/").get_method() == "pOsT"


def test_from_url_splits_path_and_query():
    request = HttpRequest.from_url("GET", "https://api.example.com/users?a=1&b=two")

    assert request.get_path() == "/users"
    assert request.get_raw_query_string() == "a=1&b=two"


def test_from_url_defaults_path_to_root():
    assert HttpRequest.from_url("GET", "https://api.example.com").get_path() == "/"


def test_body_variants():
    assert HttpRequest("POST", "/").get_body_bytes() == b""
    assert HttpRequest("POST", "/", body="héllo").get_body_bytes() == "héllo".encode("utf-8")
    assert HttpRequest("POST", "/", body=bytearray(b"raw")).get_body_bytes() == b"raw"
    assert HttpRequest("POST", "/", body=io.StringIO("text")).get_body_bytes() == b"text"


def test_stream_body_is_buffered_after_first_read():
    stream = io.BytesIO(b'{"a": 1}')
    request = HttpRequest("POST", "/", body=stream)

    assert request.get_body_bytes() == b'{"a": 1}'
    assert stream.tell() == len(b'{"a": 1}')
    assert request.get_body_bytes() == b'{"a": 1}'


def test_parse_query_last_value_wins_and_keeps_blanks():
    assert parse_query("a=1&b=&a=2&c") == {"a": "2", "b": "", "c": ""}


def test_parse_query_decodes_values():
    assert parse_query("q=hello+world&tag=%C3%A9") == {"q": "hello world", "tag": "é"}


def test_parse_query_is_deterministic():
    assert parse_query("x=1&y=2") == parse_query("x=1&y=2")
    assert parse_query("") == {}
