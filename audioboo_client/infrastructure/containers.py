"""
Dependency Injection container for the audioboo_client component.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as the service, the decoder, the
failure sink and the HTTP transport, based on the application's
configuration.
"""

from dependency_injector import containers, providers
import httpx

from ..application.domain import *
from ..application.service import AudiobooService
from ..settings import settings

from .api_client import HttpApiTransport
from .response_parser import JsonResponseDecoder
from .sinks import QueueSink


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    config = providers.Object(settings)

    http_client = providers.Singleton(httpx.AsyncClient)

    transport: providers.Factory[ApiTransport] = providers.Factory(
        HttpApiTransport,
        client=http_client,
        base_url=config().api.base_url,
        timeout=config().api.timeout,
    )

    decoder: providers.Singleton[ResponseDecoder] = providers.Singleton(
        JsonResponseDecoder,
    )

    sink: providers.Singleton[FailureSink] = providers.Singleton(QueueSink)

    audioboo_service = providers.Factory(
        AudiobooService,
        transport=transport,
        decoder=decoder,
        sink=sink,
        feeds=config().api.feeds,
        endpoints=config().api.endpoints,
        upload_field=config().api.upload_field,
    )
