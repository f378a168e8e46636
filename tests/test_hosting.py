"""Tests for green hosting oracles using httpx mock transports."""

from __future__ import annotations

import logging

import httpx
import pytest

from web_carbon.hosting import (
    GreenWebOracle,
    HostingResult,
    KnownHostsOracle,
    build_hosting_oracle,
    known_green_host,
    normalise_domain,
)
from web_carbon.settings import WebCarbonSettings


class _Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, responder) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def _oracle(responder, **kwargs) -> tuple[GreenWebOracle, _Recorder]:
    recorder = _Recorder(responder)
    oracle = GreenWebOracle(
        "https://greencheck.test/greencheck",
        user_agent="web-carbon-tests",
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )
    return oracle, recorder


async def test_green_domain():
    oracle, recorder = _oracle(
        lambda request: httpx.Response(
            200, json={"url": "example.org", "green": True, "hostedby": "Kualo"}
        )
    )

    result = await oracle.check("example.org")

    assert result == HostingResult(green=True, hosted_by="Kualo", url="example.org")
    request = recorder.requests[0]
    assert request.url.path == "/greencheck/example.org"
    assert request.headers["User-Agent"] == "web-carbon-tests"


@pytest.mark.parametrize(("flag", "expected"), [("yes", True), ("YES", True), ("no", False), (False, False), (None, False)])
async def test_green_flag_parsing(flag, expected):
    oracle, _ = _oracle(lambda request: httpx.Response(200, json={"green": flag}))
    result = await oracle.check("example.org")
    assert result.green is expected
    assert result.degraded is False


async def test_server_error_degrades_and_is_not_cached(caplog: pytest.LogCaptureFixture):
    oracle, recorder = _oracle(lambda request: httpx.Response(500, text="oops"))

    with caplog.at_level(logging.WARNING):
        first = await oracle.check("example.org")
        second = await oracle.check("example.org")

    assert first == HostingResult(green=False, degraded=True)
    assert second.degraded is True
    assert len(recorder.requests) == 2
    assert "Green hosting lookup degraded" in caplog.text


async def test_transport_error_degrades():
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    oracle, _ = _oracle(_refuse)
    result = await oracle.check("example.org")
    assert result.green is False
    assert result.degraded is True


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["unexpected"]),
    ],
)
async def test_malformed_payload_degrades(response):
    oracle, _ = _oracle(lambda request: response)
    result = await oracle.check("example.org")
    assert result == HostingResult(green=False, degraded=True)


async def test_successful_lookups_are_cached_per_domain():
    oracle, recorder = _oracle(lambda request: httpx.Response(200, json={"green": "yes"}))

    await oracle.check("Example.org")
    await oracle.check("https://example.org/some/page")
    await oracle.check("other.org")

    assert [r.url.path for r in recorder.requests] == [
        "/greencheck/example.org",
        "/greencheck/other.org",
    ]
    assert oracle.get_cache_stats() == {"hits": 1, "misses": 2}

    oracle.clear_cache()
    await oracle.check("example.org")
    assert len(recorder.requests) == 3


async def test_zero_ttl_disables_cache():
    oracle, recorder = _oracle(
        lambda request: httpx.Response(200, json={"green": True}), ttl_seconds=0
    )
    await oracle.check("example.org")
    await oracle.check("example.org")
    assert len(recorder.requests) == 2


async def test_blank_domain_is_degraded_without_request():
    oracle, recorder = _oracle(lambda request: httpx.Response(200, json={"green": True}))
    result = await oracle.check("   ")
    assert result.degraded is True
    assert recorder.requests == []


async def test_fallback_consulted_when_degraded():
    oracle, _ = _oracle(
        lambda request: httpx.Response(503), fallback=KnownHostsOracle()
    )

    result = await oracle.check("www.kualo.com")

    assert result.green is True
    assert result.hosted_by == "kualo.com"
    assert result.degraded is True


async def test_fallback_not_consulted_on_answer():
    oracle, _ = _oracle(
        lambda request: httpx.Response(200, json={"green": False}),
        fallback=KnownHostsOracle(),
    )
    result = await oracle.check("kualo.com")
    assert result.green is False


@pytest.mark.parametrize(
    ("domain", "expected"),
    [
        ("kualo.com", "kualo.com"),
        ("shop.kualo.com", "kualo.com"),
        ("HTTPS://Hetzner.com/path", "hetzner.com"),
        ("notkualo.com", None),
        ("kualo.com.evil.test", None),
    ],
)
def test_known_green_host_suffix_match(domain, expected):
    assert known_green_host(domain) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://User@Example.org:8443/a?b=c", "example.org"),
        ("example.org", "example.org"),
        ("http://[::1]:8080/", "[::1]"),
        ("", ""),
    ],
)
def test_normalise_domain(raw, expected):
    assert normalise_domain(raw) == expected


def test_build_hosting_oracle_from_settings():
    plain = build_hosting_oracle(WebCarbonSettings())
    chained = build_hosting_oracle(WebCarbonSettings(known_hosts_fallback=True))

    assert isinstance(plain, GreenWebOracle)
    assert plain._fallback is None
    assert isinstance(chained._fallback, KnownHostsOracle)
