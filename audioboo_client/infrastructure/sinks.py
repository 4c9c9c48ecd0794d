"""
Infrastructure adapters implementing the FailureSink port.

Each adapter decides how a decode failure travels back to the code that
initiated the request: a thread-safe queue, a plain callback, an asyncio
event loop, or simply the log.
"""

import asyncio
import logging
import queue
from typing import Callable, Optional

from ..application.domain import FailureSink
from ..application.exceptions import ResponseError


class QueueSink(FailureSink):
    """
    Delivers failures onto a thread-safe queue.

    The originating thread drains the queue at its own pace, which decouples
    delivery from the decoder's call site.
    """

    def __init__(self, failures: Optional[queue.Queue] = None):
        self.failures = failures if failures is not None else queue.Queue()

    def report(self, failure: ResponseError):
        self.failures.put_nowait(failure)

    def drain(self):
        """Returns and removes every failure delivered so far, oldest first."""
        drained = []
        while True:
            try:
                drained.append(self.failures.get_nowait())
            except queue.Empty:
                return drained


class CallbackSink(FailureSink):
    """Hands each failure to a user supplied callable."""

    def __init__(self, callback: Callable[[ResponseError], None]):
        self.callback = callback

    def report(self, failure: ResponseError):
        self.callback(failure)


class AsyncioSink(FailureSink):
    """
    Delivers failures onto an asyncio.Queue owned by an event loop.

    Reports may come from any thread; they are scheduled onto the loop with
    call_soon_threadsafe so consumers only ever touch the queue from the
    loop's own thread.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        failures: Optional[asyncio.Queue] = None,
    ):
        self.loop = loop
        self.failures = failures if failures is not None else asyncio.Queue()

    def report(self, failure: ResponseError):
        self.loop.call_soon_threadsafe(self.failures.put_nowait, failure)


class LoggingSink(FailureSink):
    """Writes failures to the log and nothing else."""

    def __init__(self, level: int = logging.ERROR):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.level = level

    def report(self, failure: ResponseError):
        self.logger.log(
            self.level, f"{type(failure).__name__}: {failure}"
        )
