"""Builders for wire-format API responses used across the tests."""

import json

from audioboo_client.infrastructure.response_parser import API_VERSION


def envelope(body, version=API_VERSION, timestamp=100, window=60):
    return json.dumps(
        {
            "version": version,
            "timestamp": timestamp,
            "window": window,
            "body": body,
        }
    )


def user_wire(**overrides):
    user = {
        "id": 7,
        "username": "jens",
        "urls": {
            "profile": "http://audioboo.fm/users/7",
            "image": "http://audioboo.fm/users/7/image.png",
        },
        "counts": {"followers": 12, "followings": 3, "audio_clips": 42},
    }
    user.update(overrides)
    return user


def tag_wire(text="London"):
    return {
        "display_tag": text,
        "normalised_tag": text.lower(),
        "url": f"http://audioboo.fm/tag/{text.lower()}",
    }


def post_wire(**overrides):
    post = {
        "id": 5,
        "title": "Morning walk",
        "duration": 12.5,
        "tags": [tag_wire("London"), tag_wire("Birds")],
        "recorded_at": "2010-03-22T15:44:13Z",
        "uploaded_at": "2010-03-22T16:02:40+01:00",
        "urls": {
            "high_mp3": "http://audioboo.fm/boos/5.mp3",
            "detail": "http://audioboo.fm/boos/5",
            "image": "http://audioboo.fm/boos/5/image.png",
        },
        "counts": {"plays": 3, "comments": 1},
        "user": user_wire(),
        "location": {
            "longitude": -0.1275,
            "latitude": 51.5072,
            "accuracy": 25.0,
            "description": "Regent's Park",
        },
    }
    post.update(overrides)
    return post


def post_list_body(*posts, offset=0, count=None):
    return {
        "totals": {
            "offset": offset,
            "count": len(posts) if count is None else count,
        },
        "audio_clips": list(posts),
    }
