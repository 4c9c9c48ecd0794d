"""
Decoders for Audioboo API responses.

Every response arrives wrapped in a versioned envelope. Decoding always runs
envelope -> error check -> body, and each public decoder either returns a
fully populated ResponseEnvelope or reports exactly one failure to the sink
it was given and returns None. The public decoders are called as
`decode_xxx(raw, sink)`; see `reports_failures`.

Decoders keep no state and consult only module constants, so they are safe
to call from any number of threads at once.
"""

import json
import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..application.domain import (
    Author,
    Envelope,
    GeoTag,
    Linked,
    LinkStatus,
    Post,
    PostPage,
    RegistrationCredentials,
    ResponseDecoder,
    ResponseEnvelope,
    Tag,
    Unlinked,
)
from ..application.exceptions import (
    ApiErrorReported,
    FieldTimestampUnparsable,
    ParseError,
    VersionMismatch,
)

from .api_models import (
    EnvelopeModel,
    ErrorBody,
    LinkedStatusBody,
    LocationDetails,
    PostDetails,
    PostListBody,
    RegistrationBody,
    StatusFlag,
    TagDetails,
    UnlinkBody,
    UnlinkedStatusBody,
    UploadBody,
    UserDetails,
    UserFlags,
)
from .decorators import reports_failures

logger = logging.getLogger(__name__)

# Only one protocol version is understood; anything else is rejected outright.
API_VERSION = 200

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_ERROR_KEY = "error"

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], data: Any) -> M:
    """Validate data against a wire model, mapping failures to ParseError."""
    try:
        return model.model_validate(data)
    except RecursionError as e:
        raise ParseError(f"Invalid {model.__name__}: nested too deeply") from e
    except ValidationError as e:
        raise ParseError(
            f"Invalid {model.__name__}: {e.error_count()} validation error(s)"
            f" ({e.errors()[0]['loc']}: {e.errors()[0]['msg']})"
        ) from e


# --- Envelope and error channel ---

def decode_envelope(raw: Union[str, bytes]) -> Envelope:
    """
    Unwrap the outer JSON object and check its protocol version.

    Args:
        raw: The entire response body as text.

    Returns:
        The envelope metadata with the body still undecoded.

    Raises:
        ParseError: If the text is not JSON or a required envelope field
            (version, timestamp, window, body) is missing or ill-typed.
        VersionMismatch: If the version is not API_VERSION.
    """

    try:
        payload = json.loads(raw)
    except (
        json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError
    ) as e:
        raise ParseError(f"Malformed JSON: {e}") from e

    envelope = _validate(EnvelopeModel, payload)

    if envelope.version != API_VERSION:
        raise VersionMismatch(API_VERSION, envelope.version)

    return Envelope(
        protocol_version=envelope.version,
        timestamp=envelope.timestamp,
        window=envelope.window,
        body=envelope.body,
    )


def check_for_error(body: Mapping[str, Any]):
    """
    Raise ApiErrorReported if the body carries an error object.

    The presence of the error key is the only signal consulted; a present
    but malformed error object is a ParseError.
    """
    if _ERROR_KEY not in body:
        return

    error = _validate(ErrorBody, body).error
    raise ApiErrorReported(error.code, error.description)


def _retrieve_body(raw: Union[str, bytes]) -> Envelope:
    """Decode the envelope and make sure the body is not an error report."""
    envelope = decode_envelope(raw)
    check_for_error(envelope.body)
    return envelope


def _wrap(envelope: Envelope, content) -> ResponseEnvelope:
    return ResponseEnvelope(
        timestamp=envelope.timestamp,
        window=envelope.window,
        content=content,
    )


# --- Field decoders ---

def _strptime(value: str) -> datetime:
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise FieldTimestampUnparsable(value) from e


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a wire timestamp, degrading to None instead of failing.

    This is the one field whose failure does not abort the response; values
    of the wrong type are treated like unparsable strings.
    """
    if value is None:
        return None
    try:
        if not isinstance(value, str):
            raise FieldTimestampUnparsable(value)
        return _strptime(value)
    except FieldTimestampUnparsable:
        logger.warning(f"Could not parse timestamp: {value!r}")
        return None


def decode_author(user: Mapping[str, Any]) -> Optional[Author]:
    """Map a user object to an Author, or None for an anonymous user."""
    if _validate(UserFlags, user).anonymous:
        return None

    dto = _validate(UserDetails, user)
    return Author(
        id=dto.id,
        username=dto.username,
        profile_url=dto.urls.profile,
        image_url=dto.urls.image,
        follower_count=dto.counts.followers,
        following_count=dto.counts.followings,
        post_count=dto.counts.audio_clips,
    )


def decode_location(dto: LocationDetails) -> GeoTag:
    return GeoTag(
        longitude=dto.longitude,
        latitude=dto.latitude,
        accuracy_meters=dto.accuracy,
        description=dto.description,
    )


def decode_tag(dto: TagDetails) -> Tag:
    return Tag(
        display_text=dto.display_tag,
        normalized_text=dto.normalised_tag,
        url=dto.url,
    )


def decode_tags(dtos) -> Optional[Tuple[Tag, ...]]:
    """Map a tag list, collapsing an absent or empty list to None."""
    if not dtos:
        return None
    return tuple(decode_tag(dto) for dto in dtos)


def decode_post(data: Any) -> Post:
    """
    Map a single raw post object to a Post.

    Raises:
        ParseError: If any required field of the post, its author, its
            location or its tags is missing or ill-typed.
    """
    dto = _validate(PostDetails, data)

    return Post(
        id=dto.id,
        title=dto.title,
        duration=dto.duration,
        recorded_at=parse_timestamp(dto.recorded_at),
        uploaded_at=parse_timestamp(dto.uploaded_at),
        high_quality_audio_url=dto.urls.high_mp3,
        detail_url=dto.urls.detail,
        image_url=dto.urls.image,
        play_count=dto.counts.plays,
        comment_count=dto.counts.comments,
        tags=decode_tags(dto.tags),
        author=decode_author(dto.user),
        location=(
            decode_location(dto.location) if dto.location is not None else None
        ),
    )


# --- Domain decoders ---

@reports_failures
def decode_post_page(raw: Union[str, bytes]) -> ResponseEnvelope[PostPage]:
    """
    Decode a post listing.

    Posts keep the server's order. A single malformed post fails the whole
    page; partial pages are never returned.
    """
    envelope = _retrieve_body(raw)
    dto = _validate(PostListBody, envelope.body)

    page = PostPage(
        offset=dto.totals.offset,
        total_count=dto.totals.count,
        posts=tuple(decode_post(post) for post in dto.audio_clips),
    )
    logger.debug(
        f"Decoded {len(page.posts)} posts at offset {page.offset} "
        f"of {page.total_count}"
    )
    return _wrap(envelope, page)


@reports_failures
def decode_registration(
    raw: Union[str, bytes]
) -> ResponseEnvelope[RegistrationCredentials]:
    """Decode the credentials issued by a registration request."""
    envelope = _retrieve_body(raw)
    source = _validate(RegistrationBody, envelope.body).source

    return _wrap(
        envelope,
        RegistrationCredentials(
            api_secret=source.api_secret,
            api_key=source.api_key,
        ),
    )


@reports_failures
def decode_link_status(raw: Union[str, bytes]) -> ResponseEnvelope[LinkStatus]:
    """
    Decode a link status response.

    The linked flag is read first; it decides whether the account fields or
    the link URL are validated. The other branch's fields are never read.
    """
    envelope = _retrieve_body(raw)

    status: LinkStatus
    if _validate(StatusFlag, envelope.body).linked:
        account = _validate(LinkedStatusBody, envelope.body).account
        status = Linked(username=account.username, email=account.email)
    else:
        link_url = _validate(UnlinkedStatusBody, envelope.body).link_url
        status = Unlinked(link_url=link_url)

    return _wrap(envelope, status)


@reports_failures
def decode_unlink(raw: Union[str, bytes]) -> ResponseEnvelope[bool]:
    """Decode the confirmation of an unlink request."""
    envelope = _retrieve_body(raw)
    return _wrap(envelope, _validate(UnlinkBody, envelope.body).unlinked)


@reports_failures
def decode_upload(raw: Union[str, bytes]) -> ResponseEnvelope[int]:
    """Decode an upload acknowledgment into the new clip's id."""
    envelope = _retrieve_body(raw)
    return _wrap(envelope, _validate(UploadBody, envelope.body).audio_clip.id)


class JsonResponseDecoder(ResponseDecoder):
    """Implements the ResponseDecoder port with the decoders above."""

    def post_page(self, raw, sink):
        return decode_post_page(raw, sink)

    def registration(self, raw, sink):
        return decode_registration(raw, sink)

    def link_status(self, raw, sink):
        return decode_link_status(raw, sink)

    def unlink(self, raw, sink):
        return decode_unlink(raw, sink)

    def upload(self, raw, sink):
        return decode_upload(raw, sink)
