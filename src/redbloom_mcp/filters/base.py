"""Filter keys: a filter name bound to the transport that reaches it."""

import logging
import uuid
from datetime import datetime
from typing import Any, Sequence

from ..exceptions import FilterError, TransportError
from ..protocol.replies import reclassify
from ..transport import AsyncTransport, Transport

logger = logging.getLogger(__name__)


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now() - start_time).total_seconds() * 1000)


class FilterKey:
    """A named remote filter reached through a synchronous transport.

    Filter clients hold a key rather than subclassing it; any filter family
    sharing the same naming and delivery can reuse it.
    """

    def __init__(self, transport: Transport, name: str) -> None:
        """Initialize the key.

        Args:
            transport: Object with ``submit(args) -> reply``
            name: Remote filter name
        """
        self.transport = transport
        self.name = name

    def submit(self, command: Sequence[Any]) -> Any:
        """Send one command and return the raw reply.

        Args:
            command: Full argument list, command name first

        Returns:
            The raw transport reply

        Raises:
            FilterError: Service rejections, classified
            TransportError: Delivery failures
        """
        request_id = str(uuid.uuid4())
        start_time = datetime.now()
        command_name = command[0]

        logger.info(f"Request {request_id}: Starting {command_name} {self.name}")

        try:
            reply = self.transport.submit(command)
        except FilterError as e:
            if e.command is None:
                e.command = command_name
            error = reclassify(e)
            if isinstance(error, TransportError):
                logger.error(f"Request {request_id}: Transport failure in {_elapsed_ms(start_time)}ms: {error}")
            else:
                logger.warning(f"Request {request_id}: {command_name} rejected in {_elapsed_ms(start_time)}ms: {error}")
            if error is e:
                raise
            raise error from e
        except OSError as e:
            logger.error(f"Request {request_id}: Transport failure in {_elapsed_ms(start_time)}ms: {e}")
            raise TransportError(str(e), command=command_name) from e

        logger.info(f"Request {request_id}: {command_name} succeeded in {_elapsed_ms(start_time)}ms")
        return reply

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class AsyncFilterKey:
    """A named remote filter reached through an asynchronous transport."""

    def __init__(self, transport: AsyncTransport, name: str) -> None:
        self.transport = transport
        self.name = name

    async def submit(self, command: Sequence[Any]) -> Any:
        """Send one command and await the raw reply.

        Cancellation is never converted: a cancelled submit raises
        ``asyncio.CancelledError`` and may have been applied remotely.
        """
        request_id = str(uuid.uuid4())
        start_time = datetime.now()
        command_name = command[0]

        logger.info(f"Request {request_id}: Starting {command_name} {self.name}")

        try:
            reply = await self.transport.submit(command)
        except FilterError as e:
            if e.command is None:
                e.command = command_name
            error = reclassify(e)
            if isinstance(error, TransportError):
                logger.error(f"Request {request_id}: Transport failure in {_elapsed_ms(start_time)}ms: {error}")
            else:
                logger.warning(f"Request {request_id}: {command_name} rejected in {_elapsed_ms(start_time)}ms: {error}")
            if error is e:
                raise
            raise error from e
        except OSError as e:
            logger.error(f"Request {request_id}: Transport failure in {_elapsed_ms(start_time)}ms: {e}")
            raise TransportError(str(e), command=command_name) from e

        logger.info(f"Request {request_id}: {command_name} succeeded in {_elapsed_ms(start_time)}ms")
        return reply

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
