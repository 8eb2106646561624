# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import httpx
import pytest

from httpservice.config import ServiceSettings
from httpservice.http.models import RequestOptions
from httpservice.http.pool import PoolKind
from httpservice.service import Service, _BaseService


class RecordingTransport(httpx.MockTransport):
    def __init__(self, status_code=200, text="ok"):
        self.requests: list[httpx.Request] = []
        self._status_code = status_code
        self._text = text
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self._status_code, text=self._text)


def make_service(root_url="https://api.example.com", settings=None, **response):
    transport = RecordingTransport(**response)
    return Service(root_url, settings=settings or ServiceSettings(), transport=transport), transport


def test_service_selects_pool_kind_from_root_url():
    secure, _ = make_service("https://api.example.com")
    plain, _ = make_service("http://api.example.com")
    odd, _ = make_service("Https://api.example.com")
    assert secure.pool.kind is PoolKind.HTTPS
    assert plain.pool.kind is PoolKind.HTTP
    assert odd.pool.kind is PoolKind.HTTP
    assert secure.root_url == "https://api.example.com"


def test_service_builds_real_pool_without_transport():
    with Service("https://api.example.com", settings=ServiceSettings()) as service:
        assert isinstance(service.pool.transport, httpx.HTTPTransport)
        assert service.pool.kind is PoolKind.HTTPS


def test_request_defaults_to_get_with_query_string(caplog):
    caplog.set_level(logging.INFO, logger="httpservice.service")
    service, transport = make_service("http://api.example.com")

    resp = service.request("/search", {"q": "a b"}, {})

    sent = transport.requests[0]
    assert sent.method == "GET"
    assert sent.url.raw_path == b"/search?q=a+b"
    assert str(sent.url) == "http://api.example.com/search?q=a+b"
    assert resp.status_code == 200
    assert "Outgoing request: GET http://api.example.com/search?q=a+b" in caplog.text


def test_request_joins_existing_query_with_ampersand():
    service, transport = make_service()
    service.request("/search?page=2", {"q": "x"})
    service.request("/search?", {"q": "x"})
    service.request("/search", None)
    assert [r.url.raw_path for r in transport.requests] == [
        b"/search?page=2&q=x",
        b"/search?&q=x",
        b"/search",
    ]


def test_request_resolves_against_root_url_path():
    service, transport = make_service("https://api.example.com/v1/")
    service.request("users")
    service.request("/health")
    service.request("../v2/users")
    service.request("https://other.example.com/ping")
    assert [str(r.url) for r in transport.requests] == [
        "https://api.example.com/v1/users",
        "https://api.example.com/health",
        "https://api.example.com/v2/users",
        "https://other.example.com/ping",
    ]


def test_request_passes_caller_options_through():
    service, transport = make_service()
    service.request(
        "/items/1",
        None,
        RequestOptions(method="PUT", headers={"X-Trace": "abc"}, body=b"raw", timeout=1.5),
    )
    sent = transport.requests[0]
    assert sent.method == "PUT"
    assert sent.headers["X-Trace"] == "abc"
    assert sent.content == b"raw"
    assert sent.extensions["timeout"]["read"] == 1.5


def test_request_ignores_caller_supplied_pool():
    service, transport = make_service()
    foreign = RecordingTransport()

    service.request("/a", None, {"agent": foreign, "transport": foreign, "method": "DELETE"})
    service.request("/b", None, RequestOptions(extra={"transport": foreign, "pool": foreign}))

    assert [r.url.path for r in transport.requests] == ["/a", "/b"]
    assert transport.requests[0].method == "DELETE"
    assert foreign.requests == []


def test_request_returns_response_without_interpretation():
    service, _ = make_service(status_code=500, text="boom")
    resp = service.request("/fail")
    assert resp.status_code == 500
    assert resp.text == "boom"


def test_request_propagates_transport_errors(caplog):
    caplog.set_level(logging.DEBUG, logger="httpservice.service")

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = Service("http://api.example.com", settings=ServiceSettings(), transport=httpx.MockTransport(refuse))
    with pytest.raises(httpx.ConnectError, match="connection refused"):
        service.request("/down")
    assert "Outgoing request failed: GET http://api.example.com/down (CONNECTION_ERROR" in caplog.text


def test_request_raises_resolution_errors_before_dispatch():
    service, transport = make_service("http://[::1")
    with pytest.raises(ValueError):
        service.request("/x")
    assert transport.requests == []


def test_post_json_sends_compact_json():
    service, transport = make_service()
    service.post_json("/users", {}, {"name": "a"})
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://api.example.com/users"
    assert sent.content == b'{"name":"a"}'
    assert sent.headers["Content-Type"] == "application/json"


def test_post_json_keeps_query_data_and_unicode():
    service, transport = make_service()
    service.post_json("/notes", {"draft": True}, {"text": "café"})
    sent = transport.requests[0]
    assert sent.url.raw_path == b"/notes?draft=true"
    assert sent.content == '{"text":"café"}'.encode("utf-8")


@pytest.mark.parametrize("payload", [object(), {"self": None}])
def test_post_json_serialization_errors_propagate(payload):
    if isinstance(payload, dict):
        payload["self"] = payload
    service, transport = make_service()
    with pytest.raises((TypeError, ValueError)):
        service.post_json("/users", None, payload)
    assert transport.requests == []


def test_post_form_sends_urlencoded_body():
    service, transport = make_service()
    service.post_form("/login", {}, {"user": "a", "pass": "b"})
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.content == b"user=a&pass=b"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_settings_apply_client_defaults():
    settings = ServiceSettings(timeout=3.0, follow_redirects=False, user_agent="UA/1.0")
    service, transport = make_service(settings=settings)
    service.request("/")
    sent = transport.requests[0]
    assert sent.headers["User-Agent"] == "UA/1.0"
    assert sent.extensions["timeout"]["connect"] == 3.0


def test_follow_redirects_default_and_override():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "/new"})
        return httpx.Response(200, text=request.url.path)

    service = Service("http://api.example.com", settings=ServiceSettings(), transport=httpx.MockTransport(handler))
    assert service.request("/old").text == "/new"
    assert service.request("/old", None, {"follow_redirects": False}).status_code == 302


def test_close_releases_client():
    service, _ = make_service()
    with service:
        service.request("/")
    assert service._client.is_closed


def test_request_ignores_pool_keys_added_to_extra_after_construction():
    service, transport = make_service()
    opts = RequestOptions(method="GET")
    opts.extra["agent"] = RecordingTransport()
    opts.extra["transport"] = RecordingTransport()

    resp = service.request("/a", None, opts)

    assert resp.status_code == 200
    assert [r.url.path for r in transport.requests] == ["/a"]


@pytest.mark.parametrize(
    ("root_url", "path"),
    [
        ("http://api.example.com", "https://secure.example.com/ping"),
        ("https://api.example.com", "http://plain.example.com/ping"),
        ("HTTPS://api.example.com", "/ping"),
    ],
)
def test_request_rejects_urls_outside_pool_scheme(root_url, path):
    service, transport = make_service(root_url)
    with pytest.raises(httpx.UnsupportedProtocol):
        service.request(path)
    assert transport.requests == []


def test_post_json_encoding_errors_raise_before_dispatch():
    service, transport = make_service()
    with pytest.raises(UnicodeEncodeError):
        service.post_json("/users", None, {"name": "\ud800"})
    assert transport.requests == []


def test_base_service_requires_request_implementation():
    with pytest.raises(TypeError):
        _BaseService("http://api.example.com")
