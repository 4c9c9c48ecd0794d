"""
The core application service, tying the transport to the response decoders.

Every call fetches one raw response through the ApiTransport port and hands
it to the matching decoder together with the service's FailureSink. A call
returns the decoded ResponseEnvelope, or None once the sink has been told
why.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from .domain import *
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class AudiobooService:
    """Runs API calls and decodes their responses."""

    def __init__(
        self,
        transport: ApiTransport,
        decoder: ResponseDecoder,
        sink: FailureSink,
        feeds: Mapping[str, str],
        endpoints: Mapping[str, str],
        upload_field: str = "audio_clip[uploaded_data]",
    ):
        """
        Initializes the service.

        Args:
            transport: The port raw responses are fetched through.
            decoder: Turns raw responses into domain models.
            sink: Receives every decode failure.
            feeds: Maps post feed names (e.g. 'recent') to endpoint paths.
            endpoints: Maps 'register', 'status', 'unlink' and 'upload' to
                endpoint paths.
            upload_field: The multipart field name the audio file is sent as.
        """
        self.transport = transport
        self.decoder = decoder
        self.sink = sink
        self.feeds = dict(feeds)
        self.endpoints = dict(endpoints)
        self.upload_field = upload_field

    def _endpoint(self, name: str) -> str:
        try:
            return self.endpoints[name]
        except KeyError:
            raise ConfigurationError(
                f"No endpoint configured for '{name}'."
            ) from None

    async def fetch_posts(
        self, feed: str, params: Optional[Dict] = None
    ) -> Optional[ResponseEnvelope[PostPage]]:
        """Fetches and decodes one page of a named post feed.

        Args:
            feed: A feed name from the configured feeds.
            params: Extra query parameters, e.g. for pagination.

        Raises:
            ConfigurationError: If the feed name is unknown.
            TransportError: If no response could be obtained.
        """
        if feed not in self.feeds:
            raise ConfigurationError(
                f"Unknown feed '{feed}'. Known feeds: {sorted(self.feeds)}"
            )

        logger.info(f"Fetching feed '{feed}' with {params or {}}...")
        raw = await self.transport.get(self.feeds[feed], params=params)
        result = self.decoder.post_page(raw, self.sink)

        if result is not None:
            logger.info(
                f"Feed '{feed}': {len(result.content.posts)} posts "
                f"(offset {result.content.offset} of "
                f"{result.content.total_count})."
            )
        return result

    async def register(
        self, details: Optional[Dict] = None
    ) -> Optional[ResponseEnvelope[RegistrationCredentials]]:
        """Registers this client and decodes the issued credentials."""
        raw = await self.transport.post(
            self._endpoint("register"), data=details
        )
        return self.decoder.registration(raw, self.sink)

    async def fetch_status(self) -> Optional[ResponseEnvelope[LinkStatus]]:
        """Fetches whether this client is linked to an account."""
        raw = await self.transport.get(self._endpoint("status"))
        return self.decoder.link_status(raw, self.sink)

    async def unlink(self) -> Optional[ResponseEnvelope[bool]]:
        """Unlinks this client from its account."""
        raw = await self.transport.post(self._endpoint("unlink"))
        return self.decoder.unlink(raw, self.sink)

    async def upload(
        self, audio_path: Path, fields: Optional[Dict] = None
    ) -> Optional[ResponseEnvelope[int]]:
        """Uploads an audio file and decodes the new clip's id."""
        logger.info(f"Uploading {audio_path.name}...")
        with open(audio_path, "rb") as audio:
            raw = await self.transport.post(
                self._endpoint("upload"),
                data=fields,
                files={self.upload_field: (audio_path.name, audio)},
            )
        return self.decoder.upload(raw, self.sink)
