import asyncio

import pytest

from audioboo_client.application.domain import ApiTransport, Unlinked
from audioboo_client.application.exceptions import (
    ApiErrorReported,
    ConfigurationError,
)
from audioboo_client.application.service import AudiobooService
from audioboo_client.infrastructure.response_parser import JsonResponseDecoder

from wire import envelope, post_list_body, post_wire

FEEDS = {"recent": "/audio_clips", "popular": "/audio_clips/popular"}
ENDPOINTS = {
    "register": "/sources/register",
    "status": "/sources/status",
    "unlink": "/sources/unlink",
    "upload": "/account/audio_clips",
}


class FakeTransport(ApiTransport):
    """Serves canned bodies and records every request."""

    def __init__(self, body):
        self.body = body
        self.requests = []

    async def get(self, path, params=None):
        self.requests.append(("GET", path, params, None))
        return self.body

    async def post(self, path, data=None, files=None):
        self.requests.append(("POST", path, data, files))
        return self.body


@pytest.fixture
def make_service(sink):
    def _make(body):
        transport = FakeTransport(body)
        service = AudiobooService(
            transport=transport,
            decoder=JsonResponseDecoder(),
            sink=sink,
            feeds=FEEDS,
            endpoints=ENDPOINTS,
        )
        return service, transport

    return _make


def test_fetch_posts_uses_feed_path_and_params(make_service, sink):
    service, transport = make_service(
        envelope(post_list_body(post_wire(), post_wire(id=6)))
    )

    result = asyncio.run(service.fetch_posts("popular", params={"page": 2}))

    assert [post.id for post in result.content.posts] == [5, 6]
    assert transport.requests == [
        ("GET", "/audio_clips/popular", {"page": 2}, None)
    ]
    assert sink.drain() == []


def test_fetch_posts_rejects_unknown_feed(make_service):
    service, transport = make_service("{}")

    with pytest.raises(ConfigurationError):
        asyncio.run(service.fetch_posts("nonexistent"))
    assert transport.requests == []


def test_fetch_posts_reports_api_error(make_service, sink):
    service, _ = make_service(
        envelope({"error": {"code": 42, "description": "bad"}})
    )

    assert asyncio.run(service.fetch_posts("recent")) is None

    failures = sink.drain()
    assert len(failures) == 1
    assert isinstance(failures[0], ApiErrorReported)


def test_fetch_status(make_service):
    service, transport = make_service(
        envelope({"linked": False, "link_url": "http://x"})
    )

    result = asyncio.run(service.fetch_status())

    assert result.content == Unlinked("http://x")
    assert transport.requests[0][:2] == ("GET", "/sources/status")


def test_register_posts_details(make_service):
    service, transport = make_service(
        envelope({"source": {"api_secret": "s", "api_key": "k"}})
    )

    result = asyncio.run(service.register({"source[name]": "tests"}))

    assert result.content.api_key == "k"
    assert transport.requests[0] == (
        "POST", "/sources/register", {"source[name]": "tests"}, None
    )


def test_unlink(make_service):
    service, transport = make_service(envelope({"unlinked": True}))

    assert asyncio.run(service.unlink()).content is True
    assert transport.requests[0][:2] == ("POST", "/sources/unlink")


def test_upload_sends_file(make_service, tmp_path):
    audio = tmp_path / "walk.mp3"
    audio.write_bytes(b"ID3")
    service, transport = make_service(envelope({"audio_clip": {"id": 99}}))

    result = asyncio.run(service.upload(audio, {"audio_clip[title]": "Walk"}))

    assert result.content == 99
    method, path, data, files = transport.requests[0]
    assert (method, path) == ("POST", "/account/audio_clips")
    assert data == {"audio_clip[title]": "Walk"}
    assert files["audio_clip[uploaded_data]"][0] == "walk.mp3"


def test_missing_endpoint_is_a_configuration_error(sink):
    service = AudiobooService(
        transport=FakeTransport("{}"),
        decoder=JsonResponseDecoder(),
        sink=sink,
        feeds=FEEDS,
        endpoints={},
    )

    with pytest.raises(ConfigurationError):
        asyncio.run(service.unlink())
