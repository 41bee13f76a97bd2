"""Item encoding for filter commands.

Members reach the wire as a single scalar each. Text and bytes pass through
untouched, numbers keep their numeric type so the transport serialises them
without loss. The service treats every encoded item as an opaque byte string,
so ``1`` and ``"1"`` address the same member.
"""

from typing import Iterable, List, Union

from ..exceptions import InvalidArgumentError

Item = Union[str, bytes, int, float]

_ITEM_TYPES = (str, bytes, int, float)


def encode_item(item: Item) -> Item:
    """Return the wire scalar for a single member value.

    Args:
        item: Text, bytes, int or float member

    Returns:
        The same value, unchanged

    Raises:
        InvalidArgumentError: For booleans and any other type
    """
    if isinstance(item, bool) or not isinstance(item, _ITEM_TYPES):
        raise InvalidArgumentError(
            f"Unsupported item type: {type(item).__name__}",
            submitted=False,
        )
    return item


def encode_items(items: Iterable[Item]) -> List[Item]:
    """Encode a batch of members, preserving call order."""
    return [encode_item(item) for item in items]
