"""Base class for async HTTP clients."""

import logging
import httpx

from ..application.exceptions import ConfigurationError


class BaseClient:
    """A base client that holds an async client and the API base URL."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        """
        Initializes the base client.

        Args:
            client: An instance of httpx.AsyncClient.
            base_url: The root URL every endpoint path is appended to.

        Raises:
            ConfigurationError: If the base URL is missing or appears to be
                                a placeholder.
        """

        if not base_url or "YOUR_" in base_url.upper():
            raise ConfigurationError(
                f"Base URL for {self.__class__.__name__} is missing "
                f"or is a placeholder. Please check your config files."
            )

        self.client = client
        self.base_url = base_url.rstrip("/")
        self.logger = logging.getLogger(self.__class__.__name__)
