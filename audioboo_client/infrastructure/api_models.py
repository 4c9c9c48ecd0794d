"""
Pydantic models for validating the structure of responses from the Audioboo API.

These models serve as a strict contract for the expected JSON data, ensuring
that any deviation from this structure is caught at the infrastructure layer
before being passed to the application core. A validation failure anywhere
in a response is reported as a parse error for the whole response.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator


def _wire_bool(value: Any) -> bool:
    """Accept only JSON booleans and the strings "true" or "false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"Expected a boolean, got {value!r}")


# Lax bool would also take 0, "no", "off" and friends.
WireBool = Annotated[bool, BeforeValidator(_wire_bool)]


# --- Envelope ---

class EnvelopeModel(BaseModel):
    """Represents the outer wrapper every API response arrives in."""

    version: int
    timestamp: int
    window: int
    body: Dict[str, Any]


class ErrorDetails(BaseModel):
    code: int
    description: str


class ErrorBody(BaseModel):
    """Represents a body that carries a server-reported error."""

    error: ErrorDetails


# --- Post fields ---

class UserFlags(BaseModel):
    """
    The only user field consulted before deciding whether the remaining
    user fields are expected at all.
    """

    anonymous: WireBool = False


class UserUrls(BaseModel):
    profile: str
    image: str


class UserCounts(BaseModel):
    followers: int
    followings: int
    audio_clips: int


class UserDetails(BaseModel):
    """Represents a non-anonymous post author."""

    id: int
    username: str
    urls: UserUrls
    counts: UserCounts


class LocationDetails(BaseModel):
    longitude: float
    latitude: float
    accuracy: float
    description: str


class TagDetails(BaseModel):
    display_tag: str
    normalised_tag: str
    url: str


class PostUrls(BaseModel):
    high_mp3: str
    detail: str
    image: Optional[str] = None


class PostCounts(BaseModel):
    plays: int
    comments: int


class PostDetails(BaseModel):
    """
    Represents a single audio clip.

    The user object is kept raw because its required fields depend on the
    anonymous flag. Timestamps are kept as they arrive and parsed leniently
    by the mapper, so a value of the wrong type never aborts the post.
    """

    id: int
    title: str
    duration: float
    user: Dict[str, Any]
    location: Optional[LocationDetails] = None
    tags: Optional[List[TagDetails]] = None
    recorded_at: Optional[Any] = None
    uploaded_at: Optional[Any] = None
    urls: PostUrls
    counts: PostCounts


# --- Response bodies ---

class Totals(BaseModel):
    offset: int
    count: int


class PostListBody(BaseModel):
    """
    Represents the body of any post listing.

    Elements stay raw so each post is validated on its own, in order.
    """

    totals: Totals
    audio_clips: List[Dict[str, Any]]


class SourceCredentials(BaseModel):
    api_secret: str
    api_key: str


class RegistrationBody(BaseModel):
    source: SourceCredentials


class StatusFlag(BaseModel):
    """The discriminant that decides which status fields are expected."""

    linked: WireBool


class AccountDetails(BaseModel):
    username: str
    email: str


class LinkedStatusBody(BaseModel):
    account: AccountDetails


class UnlinkedStatusBody(BaseModel):
    link_url: str


class UnlinkBody(BaseModel):
    unlinked: WireBool


class UploadedClip(BaseModel):
    id: int


class UploadBody(BaseModel):
    audio_clip: UploadedClip
