"""
tests/test_imagery_agent.py
Geocoding status mapping and static map fetching, against a mocked transport.
"""
import asyncio
import base64
import logging

import httpx
import pytest

from backend.agents.imagery_agent import (
    ImageryAgent, GEOCODE_URL, STATIC_MAP_URL, REQUEST_DENIED_MESSAGE, clamp_zoom, to_data_url,
)
from backend.models.security_analysis import Coordinate
from backend.utils.errors import ErrorKind, SurveyError

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"

OK_GEOCODE = {
    "status": "OK",
    "results": [{"geometry": {"location": {"lat": 51.5237715, "lng": -0.1585557}}}],
}


def _agent(geocode_payload, calls=None, static_status=200):
    """ImageryAgent whose HTTP traffic is answered by a MockTransport."""
    calls = calls if calls is not None else []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        url = str(request.url)
        if url.startswith(GEOCODE_URL):
            return httpx.Response(200, json=geocode_payload)
        if url.startswith(STATIC_MAP_URL):
            return httpx.Response(static_status, content=JPEG_BYTES, headers={"content-type": "image/jpeg"})
        return httpx.Response(404)

    return ImageryAgent(api_key="maps-key", transport=httpx.MockTransport(handler))


def _error(coro) -> SurveyError:
    with pytest.raises(SurveyError) as exc_info:
        asyncio.run(coro)
    return exc_info.value


# ── Helpers ──────────────────────────────────────────────────────────────────

def test_clamp_zoom():
    assert clamp_zoom(19) == 19
    assert clamp_zoom(25) == 21
    assert clamp_zoom(3) == 17


def test_to_data_url():
    url = to_data_url(JPEG_BYTES)
    assert url.startswith("data:image/jpeg;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == JPEG_BYTES


def test_static_map_params():
    agent = ImageryAgent(api_key="maps-key")
    params = agent.static_map_params(Coordinate(lat=51.5, lng=-0.15), 19)
    assert params == {
        "center": "51.5,-0.15",
        "zoom": 19,
        "size": "1024x576",
        "maptype": "satellite",
        "key": "maps-key",
    }


# ── Fetch ────────────────────────────────────────────────────────────────────

def test_fetch_aerial_image_success():
    calls = []
    agent = _agent(OK_GEOCODE, calls)
    image = asyncio.run(agent.fetch_aerial_image("221B Baker Street, London", 20))

    assert image == to_data_url(JPEG_BYTES, "image/jpeg")
    assert len(calls) == 2
    geocode_req, static_req = calls
    assert geocode_req.url.params["address"] == "221B Baker Street, London"
    assert static_req.url.params["center"] == "51.5237715,-0.1585557"
    assert static_req.url.params["zoom"] == "20"
    assert static_req.url.params["maptype"] == "satellite"


def test_missing_key_fails_before_any_request(monkeypatch):
    for name in ("MAPS_API_KEY", "GOOGLE_MAPS_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    agent = ImageryAgent(transport=httpx.MockTransport(handler))
    err = _error(agent.fetch_aerial_image("anywhere", 19))
    assert err.kind == ErrorKind.MISSING_CONFIGURATION
    assert calls == []


@pytest.mark.parametrize("status, kind", [
    ("ZERO_RESULTS", ErrorKind.ZERO_RESULTS),
    ("OVER_QUERY_LIMIT", ErrorKind.OVER_QUERY_LIMIT),
    ("INVALID_REQUEST", ErrorKind.INVALID_REQUEST),
])
def test_geocode_status_errors(status, kind):
    calls = []
    err = _error(_agent({"status": status, "results": []}, calls).fetch_aerial_image("x", 19))
    assert err.kind == kind
    # No static map request after a failed geocode
    assert len(calls) == 1


def test_zero_results_message():
    err = _error(_agent({"status": "ZERO_RESULTS"}).fetch_aerial_image("nowhere", 19))
    assert err.message == "No location could be found for the address entered. Please check for typos and try again."


def test_request_denied_includes_google_message():
    calls = []
    payload = {"status": "REQUEST_DENIED", "error_message": "API keys with referer restrictions cannot be used"}
    err = _error(_agent(payload, calls).fetch_aerial_image("x", 19))

    assert err.kind == ErrorKind.REQUEST_DENIED
    assert err.message.startswith(REQUEST_DENIED_MESSAGE)
    assert "(Google's message: API keys with referer restrictions cannot be used)" in err.message
    assert len(calls) == 1


def test_unknown_status():
    err = _error(_agent({"status": "UNKNOWN_ERROR"}).fetch_aerial_image("x", 19))
    assert err.kind == ErrorKind.UNKNOWN_STATUS
    assert err.message == "Could not find location. Google Maps status: UNKNOWN_ERROR."


def test_ok_without_results():
    err = _error(_agent({"status": "OK", "results": []}).fetch_aerial_image("x", 19))
    assert err.kind == ErrorKind.GEOCODE_EMPTY


def test_static_map_http_error():
    err = _error(_agent(OK_GEOCODE, static_status=403).fetch_aerial_image("x", 19))
    assert err.kind == ErrorKind.IMAGERY_FETCH_FAILED


def test_network_error_during_geocode():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    agent = ImageryAgent(api_key="maps-key", transport=httpx.MockTransport(handler))
    err = _error(agent.fetch_aerial_image("x", 19))
    assert err.kind == ErrorKind.NETWORK


# ── Logging ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("static_status", [200, 403])
def test_maps_key_never_logged(caplog, static_status):
    caplog.set_level(logging.INFO)

    def handler(request):
        if str(request.url).startswith(GEOCODE_URL):
            return httpx.Response(200, json=OK_GEOCODE)
        return httpx.Response(static_status, content=JPEG_BYTES, headers={"content-type": "image/jpeg"})

    agent = ImageryAgent(api_key="SENTINEL-MAPS-KEY", transport=httpx.MockTransport(handler))
    try:
        asyncio.run(agent.fetch_aerial_image("221B Baker Street, London", 19))
    except SurveyError:
        pass

    assert caplog.records
    assert not [r for r in caplog.records if "SENTINEL-MAPS-KEY" in r.getMessage()]
