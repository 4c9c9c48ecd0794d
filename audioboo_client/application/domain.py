"""
This module defines the core domain models for the application.

These classes represent the pure, technology-agnostic entities and data
structures that decoded API responses are mapped to, plus the ports the
application talks to. Every model is immutable once constructed.
"""

import dataclasses
from datetime import datetime

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, TypeVar, Union

from .exceptions import (
    ApiErrorReported,
    ParseError,
    ResponseError,
    VersionMismatch,
)

T = TypeVar("T")


# --- Domain Models ---

@dataclasses.dataclass(frozen=True)
class Envelope:
    """The outer response wrapper, with its body still undecoded."""

    protocol_version: int
    timestamp: int
    window: int
    body: Mapping[str, Any]


@dataclasses.dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """A fully decoded response: envelope metadata plus typed content."""

    timestamp: int
    window: int
    content: T


@dataclasses.dataclass(frozen=True)
class Author:
    id: int
    username: str
    profile_url: str
    image_url: str
    follower_count: int
    following_count: int
    post_count: int


@dataclasses.dataclass(frozen=True)
class GeoTag:
    longitude: float
    latitude: float
    accuracy_meters: float
    description: str


@dataclasses.dataclass(frozen=True)
class Tag:
    display_text: str
    normalized_text: str
    url: str


@dataclasses.dataclass(frozen=True)
class Post:
    """
    A single audio clip ("boo") with its metadata.

    `author` is None for anonymous posts, which is distinct from an author
    with zero counts. `tags` is None when the post carries no tags.
    Timestamps are None when the server value was absent or unparsable.
    """

    id: int
    title: str
    duration: float
    recorded_at: Optional[datetime]
    uploaded_at: Optional[datetime]
    high_quality_audio_url: str
    detail_url: str
    play_count: int
    comment_count: int
    image_url: Optional[str] = None
    tags: Optional[Tuple[Tag, ...]] = None
    author: Optional[Author] = None
    location: Optional[GeoTag] = None


@dataclasses.dataclass(frozen=True)
class PostPage:
    """One page of posts; offset and total_count are the pagination cursor."""

    offset: int
    total_count: int
    posts: Tuple[Post, ...]


@dataclasses.dataclass(frozen=True)
class Linked:
    """The device is linked to an account."""

    username: str
    email: str


@dataclasses.dataclass(frozen=True)
class Unlinked:
    """The device is not linked; `link_url` starts the linking flow."""

    link_url: str


LinkStatus = Union[Linked, Unlinked]


@dataclasses.dataclass(frozen=True)
class RegistrationCredentials:
    api_secret: str
    api_key: str


# --- Ports (Interfaces) ---

class FailureSink(ABC):
    """
    A port for delivering decode failures to whoever initiated a request.

    Implementations decide how and on which thread the failure reaches its
    receiver. Decoders hand over at most one failure per call.
    """

    @abstractmethod
    def report(self, failure: ResponseError):
        """Delivers a single terminal decode failure."""
        pass

    def parse_error(self):
        self.report(ParseError())

    def version_mismatch(self, expected: int, actual: int):
        self.report(VersionMismatch(expected, actual))

    def api_error(self, code: int, description: str):
        self.report(ApiErrorReported(code, description))


class ResponseDecoder(ABC):
    """
    A port for turning raw response text into domain models.

    Every method returns None after reporting a failure to the sink.
    """

    @abstractmethod
    def post_page(
        self, raw: str, sink: FailureSink
    ) -> Optional[ResponseEnvelope[PostPage]]:
        pass

    @abstractmethod
    def registration(
        self, raw: str, sink: FailureSink
    ) -> Optional[ResponseEnvelope[RegistrationCredentials]]:
        pass

    @abstractmethod
    def link_status(
        self, raw: str, sink: FailureSink
    ) -> Optional[ResponseEnvelope[LinkStatus]]:
        pass

    @abstractmethod
    def unlink(
        self, raw: str, sink: FailureSink
    ) -> Optional[ResponseEnvelope[bool]]:
        pass

    @abstractmethod
    def upload(
        self, raw: str, sink: FailureSink
    ) -> Optional[ResponseEnvelope[int]]:
        pass


class ApiTransport(ABC):
    """A port for anything that can fetch raw API response bodies."""

    @abstractmethod
    async def get(self, path: str, params: Optional[Dict] = None) -> str:
        """Performs a GET request and returns the response body as text."""
        pass

    @abstractmethod
    async def post(
        self,
        path: str,
        data: Optional[Dict] = None,
        files: Optional[Dict] = None,
    ) -> str:
        """Performs a POST request and returns the response body as text."""
        pass
