"""Argument list builders for the scalable Bloom filter commands.

Each builder returns the complete positional argument list for one command,
``[COMMAND, name, *args]``. Optional clauses are appended only when their
trigger holds; an omitted flag is absent from the list, never ``None``.
Local precondition failures raise before anything reaches a transport.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from ..constants import (
    COMMANDS,
    DEFAULT_EXPANSION_RATE,
    KEYWORD_CAPACITY,
    KEYWORD_ERROR,
    KEYWORD_EXPANSION,
    KEYWORD_ITEMS,
    KEYWORD_NOCREATE,
    KEYWORD_NONSCALING,
)
from ..exceptions import EmptyBatchError, InvalidArgumentError
from ..utils.validators import (
    validate_batch_container,
    validate_capacity,
    validate_error_rate,
    validate_expansion_rate,
    validate_filter_name,
)
from .encoding import Item, encode_item, encode_items

Command = List[Any]


@dataclass(frozen=True)
class InsertOptions:
    """Optional knobs for BF.INSERT.

    Attributes:
        error_rate: False-positive rate used if the filter gets created (ERROR)
        capacity: Initial capacity used if the filter gets created (CAPACITY)
        expansion_rate: Negative disables scaling (NONSCALING), positive sets
            the growth factor (EXPANSION); zero or None emits nothing
        upsert: When False the filter must already exist (NOCREATE)
    """

    error_rate: Optional[float] = None
    capacity: Optional[int] = None
    expansion_rate: Optional[int] = None
    upsert: bool = True


def _check_name(command: str, name: Any) -> None:
    if not validate_filter_name(name):
        raise InvalidArgumentError(f"Invalid filter name: {name!r}", command=command, submitted=False)


def _check_error_rate(command: str, error_rate: Any) -> None:
    if not validate_error_rate(error_rate):
        raise InvalidArgumentError(
            f"Error rate must be between 0 and 1 (exclusive), got {error_rate!r}",
            command=command,
            submitted=False,
        )


def _check_capacity(command: str, capacity: Any) -> None:
    if not validate_capacity(capacity):
        raise InvalidArgumentError(
            f"Capacity must be a positive integer, got {capacity!r}",
            command=command,
            submitted=False,
        )


def _check_expansion_rate(command: str, expansion_rate: Any) -> None:
    if not validate_expansion_rate(expansion_rate):
        raise InvalidArgumentError(
            f"Expansion rate must be an integer, got {expansion_rate!r}",
            command=command,
            submitted=False,
        )


def collect_items(command: str, items: Iterable[Item]) -> List[Item]:
    """Materialize a batch of items into a list.

    A bare str or bytes is a single member, not a batch, and is rejected
    rather than split into characters.

    Raises:
        InvalidArgumentError: items is not a batch container
        EmptyBatchError: the batch holds no items
    """
    if not validate_batch_container(items):
        raise InvalidArgumentError(
            f"Items must be a list or other iterable of members, not {type(items).__name__}",
            command=command,
            submitted=False,
        )
    batch = list(items)
    if not batch:
        raise EmptyBatchError(command=command)
    return batch


def _batch(command: str, name: Any, items: Iterable[Item]) -> Command:
    _check_name(command, name)
    return [command, name, *encode_items(collect_items(command, items))]


def build_reserve(
    name: str,
    error_rate: float,
    capacity: int,
    expansion_rate: int = DEFAULT_EXPANSION_RATE,
) -> Command:
    """Build BF.RESERVE.

    An expansion rate of zero or below creates a non-scaling filter.
    """
    command = COMMANDS["reserve"]
    _check_name(command, name)
    _check_error_rate(command, error_rate)
    _check_capacity(command, capacity)
    _check_expansion_rate(command, expansion_rate)

    cmd: Command = [command, name, error_rate, capacity]
    if expansion_rate <= 0:
        cmd.append(KEYWORD_NONSCALING)
    else:
        cmd.extend([KEYWORD_EXPANSION, expansion_rate])
    return cmd


def build_add(name: str, item: Item) -> Command:
    """Build BF.ADD."""
    command = COMMANDS["add"]
    _check_name(command, name)
    return [command, name, encode_item(item)]


def build_madd(name: str, items: Iterable[Item]) -> Command:
    """Build BF.MADD."""
    return _batch(COMMANDS["madd"], name, items)


def build_exists(name: str, item: Item) -> Command:
    """Build BF.EXISTS."""
    command = COMMANDS["exists"]
    _check_name(command, name)
    return [command, name, encode_item(item)]


def build_mexists(name: str, items: Iterable[Item]) -> Command:
    """Build BF.MEXISTS."""
    return _batch(COMMANDS["mexists"], name, items)


def build_info(name: str) -> Command:
    """Build BF.INFO."""
    command = COMMANDS["info"]
    _check_name(command, name)
    return [command, name]


def build_insert(name: str, items: Iterable[Item], options: Optional[InsertOptions] = None) -> Command:
    """Build BF.INSERT.

    Clauses are emitted in the fixed order ERROR, CAPACITY,
    NONSCALING/EXPANSION, NOCREATE, ITEMS. Unlike BF.RESERVE, an expansion
    rate of exactly zero emits no scaling clause at all.

    Args:
        name: Filter name
        items: Members to insert, at least one
        options: Creation and upsert knobs

    Returns:
        The full argument list
    """
    command = COMMANDS["insert"]
    options = options or InsertOptions()
    _check_name(command, name)
    items = collect_items(command, items)

    cmd: Command = [command, name]

    if options.error_rate:
        _check_error_rate(command, options.error_rate)
        cmd.extend([KEYWORD_ERROR, options.error_rate])

    if options.capacity:
        _check_capacity(command, options.capacity)
        cmd.extend([KEYWORD_CAPACITY, options.capacity])

    if options.expansion_rate:
        _check_expansion_rate(command, options.expansion_rate)
        if options.expansion_rate < 0:
            cmd.append(KEYWORD_NONSCALING)
        else:
            cmd.extend([KEYWORD_EXPANSION, options.expansion_rate])

    if not options.upsert:
        cmd.append(KEYWORD_NOCREATE)

    cmd.append(KEYWORD_ITEMS)
    cmd.extend(encode_items(items))
    return cmd
