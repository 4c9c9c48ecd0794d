import json

import pytest

from audioboo_client.application.exceptions import (
    ApiErrorReported,
    ParseError,
    VersionMismatch,
)
from audioboo_client.infrastructure.response_parser import (
    API_VERSION,
    check_for_error,
    decode_envelope,
)

from wire import envelope


def test_decode_envelope_extracts_metadata_and_body():
    result = decode_envelope(envelope({"unlinked": True}, timestamp=123, window=45))

    assert result.protocol_version == API_VERSION
    assert result.timestamp == 123
    assert result.window == 45
    assert result.body == {"unlinked": True}


def test_decode_envelope_accepts_bytes():
    result = decode_envelope(envelope({}).encode("utf-8"))
    assert result.body == {}


@pytest.mark.parametrize(
    "raw",
    [
        "{not-json",
        "",
        "[1, 2, 3]",
        '"just a string"',
    ],
)
def test_decode_envelope_rejects_malformed_json(raw):
    with pytest.raises(ParseError):
        decode_envelope(raw)


@pytest.mark.parametrize("missing", ["version", "timestamp", "window", "body"])
def test_decode_envelope_rejects_missing_fields(missing):
    payload = json.loads(envelope({}))
    del payload[missing]

    with pytest.raises(ParseError):
        decode_envelope(json.dumps(payload))


def test_decode_envelope_rejects_non_object_body():
    with pytest.raises(ParseError):
        decode_envelope(envelope(["not", "an", "object"]))


def test_decode_envelope_rejects_other_versions():
    with pytest.raises(VersionMismatch) as excinfo:
        decode_envelope(envelope({}, version=API_VERSION + 1))

    assert excinfo.value.expected == API_VERSION
    assert excinfo.value.actual == API_VERSION + 1


def test_check_for_error_passes_bodies_without_error_key():
    assert check_for_error({"linked": False, "link_url": "http://x"}) is None


def test_check_for_error_raises_reported_error():
    with pytest.raises(ApiErrorReported) as excinfo:
        check_for_error({"error": {"code": 42, "description": "bad"}})

    assert excinfo.value.code == 42
    assert excinfo.value.description == "bad"


def test_check_for_error_ignores_other_fields_when_error_present():
    with pytest.raises(ApiErrorReported):
        check_for_error(
            {"error": {"code": 1, "description": "x"}, "unlinked": True}
        )


def test_check_for_error_treats_malformed_error_as_parse_error():
    with pytest.raises(ParseError):
        check_for_error({"error": {"code": "not a number"}})
