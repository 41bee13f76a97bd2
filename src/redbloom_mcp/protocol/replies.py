"""Reply decoding and error classification."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from ..constants import ERROR_PATTERNS, INFO_FIELDS, REPLY_OK
from ..exceptions import (
    CapacityExceededError,
    FilterAlreadyExistsError,
    FilterError,
    FilterNotFoundError,
    InvalidArgumentError,
    ItemTooLargeError,
    ProtocolError,
    ReplyError,
)

logger = logging.getLogger(__name__)

_ERROR_CLASSES: Dict[str, Type[FilterError]] = {
    "filter_exists": FilterAlreadyExistsError,
    "filter_not_found": FilterNotFoundError,
    "capacity_exceeded": CapacityExceededError,
    "item_too_large": ItemTooLargeError,
    "invalid_argument": InvalidArgumentError,
}


@dataclass(frozen=True)
class BloomInfo:
    """Decoded BF.INFO reply.

    Attributes:
        capacity: Total capacity across all sub-filters
        size: Memory used by the filter, in bytes
        number_of_filters: Sub-filters allocated so far
        items_inserted: Items added since creation
        expansion_rate: Growth factor, or None for a non-scaling filter
        fields: The raw ordered field list as reported by the service
    """

    capacity: int
    size: int
    number_of_filters: int
    items_inserted: int
    expansion_rate: Optional[int]
    fields: List[Any] = field(default_factory=list, compare=False)

    @property
    def scaling(self) -> bool:
        return self.expansion_rate is not None


def _text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def classify_error(message: str, command: Optional[str] = None) -> FilterError:
    """Map a service error message onto the error taxonomy.

    Args:
        message: The error reply text, e.g. ``"ERR item exists"``
        command: Name of the command that produced it

    Returns:
        An exception instance carrying the original message
    """
    message = _text(message)
    lowered = str(message).lower()
    for code, fragments in ERROR_PATTERNS.items():
        if any(fragment in lowered for fragment in fragments):
            return _ERROR_CLASSES[code](message, command=command)
    return ReplyError(message, command=command)


def reclassify(error: FilterError) -> FilterError:
    """Narrow a generic ReplyError raised by a transport."""
    if type(error) is ReplyError:
        return classify_error(error.message, command=error.command)
    return error


def decode_ok(reply: Any, command: Optional[str] = None) -> bool:
    """Decode a simple-string acknowledgement."""
    if reply is True or _text(reply) == REPLY_OK:
        return True
    raise ProtocolError(f"Expected {REPLY_OK} acknowledgement, got {reply!r}", command=command)


def decode_int(reply: Any, command: Optional[str] = None) -> int:
    """Decode a 0/1 integer reply.

    redis-py may have already converted the reply into a bool.
    """
    if isinstance(reply, Exception):
        raise _as_filter_error(reply, command)
    if isinstance(reply, int):
        return int(reply)
    raise ProtocolError(f"Expected integer reply, got {reply!r}", command=command)


def _as_filter_error(element: Exception, command: Optional[str]) -> FilterError:
    if isinstance(element, FilterError) and type(element) is not ReplyError:
        return element
    message = element.message if isinstance(element, FilterError) else str(element)
    return classify_error(message, command=command)


def decode_int_list(reply: Any, expected: int, command: Optional[str] = None) -> List[int]:
    """Decode an array of 0/1 integers, one per submitted item.

    Args:
        reply: Raw array reply
        expected: Number of items submitted
        command: Name of the command that produced it

    Returns:
        Integers in submission order

    Raises:
        ProtocolError: If the reply is not an array of the expected length
        FilterError: If any element is an error reply; ``partial`` holds
            the decoded results with None at failed positions
    """
    if not isinstance(reply, (list, tuple)):
        raise ProtocolError(f"Expected array reply, got {reply!r}", command=command)
    if len(reply) != expected:
        raise ProtocolError(
            f"Expected {expected} results, got {len(reply)}",
            command=command,
        )

    results: List[Optional[int]] = []
    first_error: Optional[FilterError] = None
    for element in reply:
        if isinstance(element, Exception):
            if first_error is None:
                first_error = _as_filter_error(element, command)
            results.append(None)
        else:
            results.append(decode_int(element, command=command))

    if first_error is not None:
        logger.warning(
            f"{command}: {results.count(None)} of {expected} items failed: {first_error.message}"
        )
        first_error.partial = results
        raise first_error

    return [result for result in results if result is not None]


def decode_info_fields(reply: Any, command: Optional[str] = None) -> List[Any]:
    """Decode the BF.INFO array, turning bytes labels into text."""
    if isinstance(reply, dict):
        # RESP3 map replies
        fields: List[Any] = []
        for key, value in reply.items():
            fields.extend([_text(key), _text(value)])
        return fields
    if not isinstance(reply, (list, tuple)):
        raise ProtocolError(f"Expected array reply, got {reply!r}", command=command)
    return [_text(value) for value in reply]


def parse_info(fields: List[Any], command: Optional[str] = None) -> BloomInfo:
    """Build a BloomInfo from the alternating label/value field list.

    A non-scaling filter reports no expansion rate (nil), which maps to None.
    """
    if len(fields) % 2:
        raise ProtocolError(f"Odd number of info fields: {len(fields)}", command=command)

    values: Dict[str, Any] = {}
    for label, value in zip(fields[0::2], fields[1::2]):
        attr = INFO_FIELDS.get(str(label))
        if attr is not None:
            values[attr] = value

    missing = [attr for attr in INFO_FIELDS.values() if attr not in values and attr != "expansion_rate"]
    if missing:
        raise ProtocolError(f"Info reply missing fields: {', '.join(missing)}", command=command)

    expansion = values.get("expansion_rate")
    return BloomInfo(
        capacity=int(values["capacity"]),
        size=int(values["size"]),
        number_of_filters=int(values["number_of_filters"]),
        items_inserted=int(values["items_inserted"]),
        expansion_rate=int(expansion) if expansion is not None else None,
        fields=list(fields),
    )
