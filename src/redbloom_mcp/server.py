#!/usr/bin/env python3
"""MCP Server exposing remote scalable Bloom filters using FastMCP.

This server provides authentication and one tool per filter command:
reserve, add, madd, exists, mexists, info and insert. Commands are delivered
through the transport selected by the REDBLOOM_* environment variables.
"""

import json
import logging
import secrets
from typing import Annotated, Any, List, Optional, Union

from dotenv import load_dotenv
from fastmcp import FastMCP

from .config import Settings, create_transport, load_settings
from .filters.bloom import BloomFilter
from .protocol.commands import InsertOptions
from .transport import Transport
from .utils.decorators import format_success, handle_filter_errors
from .utils.rate_limiter import RateLimiter

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

mcp: FastMCP = FastMCP(
    "redbloom-mcp",
    instructions="Tools for creating and querying remote scalable Bloom filters. Call get_auth_token first.",
)

# Auth token storage - stores valid authentication tokens
auth_tokens: set[str] = set()

AUTH_ERROR = "Error: Invalid or missing auth token. Please call get_auth_token() first to obtain a valid token."

_settings: Optional[Settings] = None
_transport: Optional[Transport] = None
_rate_limiter: Optional[RateLimiter] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings(dotenv=False)
    return _settings


def get_transport() -> Transport:
    """Return the shared transport, creating it on first use."""
    global _transport
    if _transport is None:
        settings = get_settings()
        logger.info(f"Connecting {settings.transport} transport")
        _transport = create_transport(settings)
    return _transport


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        settings = get_settings()
        _rate_limiter = RateLimiter(default=(settings.rate_limit, settings.rate_burst))
    return _rate_limiter


def validate_auth_token(token: str) -> bool:
    """Validate if the provided auth token is valid."""
    return token in auth_tokens


def parse_items(items: str) -> List[Union[str, int, float]]:
    """Parse a batch argument.

    Accepts a JSON array (numbers stay numeric) or a comma-separated string
    (every member is text).

    Raises:
        ValueError: If a JSON value is not an array
    """
    text = items.strip()
    if text.startswith("["):
        parsed = json.loads(text)
        if not isinstance(parsed, list):
            raise ValueError("items must be a JSON array")
        return parsed
    return [item.strip() for item in text.split(",") if item.strip()]


def _filter(name: str) -> BloomFilter:
    return BloomFilter(get_transport(), name)


def get_auth_token() -> str:
    """Generate and return a new authentication token that must be used for all other function calls.

    This is the FIRST function you must call before using any other tool in this server.
    Store the returned token and pass it as the 'auth_token' parameter in every later call.
    """
    token = secrets.token_hex(32)
    auth_tokens.add(token)
    return f"Authentication successful. Your auth token is: {token}"


AuthToken = Annotated[
    str,
    "Authentication token obtained from get_auth_token(). Required for this function to work.",
]
FilterName = Annotated[str, "Name (key) of the remote filter"]
ItemsArg = Annotated[str, "Items as a JSON array (e.g. '[\"a\", 1]') or a comma-separated list"]


@handle_filter_errors
def bf_reserve(
    auth_token: AuthToken,
    name: FilterName,
    error_rate: Annotated[float, "False-positive probability between 0 and 1; 0 uses the server default"] = 0.0,
    capacity: Annotated[int, "Number of entries intended to be added; 0 uses the server default"] = 0,
    expansion_rate: Annotated[int, "Growth factor when full; 0 or below creates a non-scaling filter"] = 2,
) -> str:
    """Create a new scalable Bloom filter.

    REQUIRES AUTHENTICATION. Fails with 'filter_exists' if the name is taken.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_reserve")
    settings = get_settings()
    error_rate = error_rate or settings.default_error_rate
    capacity = capacity or settings.default_capacity

    _filter(name).reserve(error_rate, capacity, expansion_rate)
    return format_success(
        {"name": name, "reserved": True},
        metadata={
            "error_rate": error_rate,
            "capacity": capacity,
            "scaling": expansion_rate > 0,
        },
    )


@handle_filter_errors
def bf_add(
    auth_token: AuthToken,
    name: FilterName,
    item: Annotated[str, "Item to add"],
) -> str:
    """Add one item. Returns 1 if newly added, 0 if it may already have existed.

    REQUIRES AUTHENTICATION.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_add")
    result = _filter(name).add(item)
    return format_success({"name": name, "added": result})


@handle_filter_errors
def bf_madd(auth_token: AuthToken, name: FilterName, items: ItemsArg) -> str:
    """Add several items in one round trip. Returns one 1/0 flag per item, in order.

    REQUIRES AUTHENTICATION.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_madd")
    members = parse_items(items)
    results = _filter(name).madd(members)
    return format_success({"name": name, "results": results}, metadata={"item_count": len(members)})


@handle_filter_errors
def bf_exists(
    auth_token: AuthToken,
    name: FilterName,
    item: Annotated[str, "Item to check"],
) -> str:
    """Check one item. Returns 1 if it may exist, 0 if it certainly does not.

    REQUIRES AUTHENTICATION.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_exists")
    result = _filter(name).exists(item)
    return format_success({"name": name, "exists": result})


@handle_filter_errors
def bf_mexists(auth_token: AuthToken, name: FilterName, items: ItemsArg) -> str:
    """Check several items in one round trip. Returns one 1/0 flag per item, in order.

    REQUIRES AUTHENTICATION.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_mexists")
    members = parse_items(items)
    results = _filter(name).mexists(members)
    return format_success({"name": name, "results": results}, metadata={"item_count": len(members)})


@handle_filter_errors
def bf_info(auth_token: AuthToken, name: FilterName) -> str:
    """Return capacity, size, sub-filter count, items inserted and expansion rate.

    REQUIRES AUTHENTICATION.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_info")
    info = _filter(name).info()
    data: dict[str, Any] = {
        "name": name,
        "capacity": info.capacity,
        "size": info.size,
        "number_of_filters": info.number_of_filters,
        "items_inserted": info.items_inserted,
        "expansion_rate": info.expansion_rate,
        "scaling": info.scaling,
    }
    return format_success(data)


@handle_filter_errors
def bf_insert(
    auth_token: AuthToken,
    name: FilterName,
    items: ItemsArg,
    error_rate: Annotated[float, "Error rate if the filter gets created; 0 leaves it to the service"] = 0.0,
    capacity: Annotated[int, "Capacity if the filter gets created; 0 leaves it to the service"] = 0,
    expansion_rate: Annotated[int, "Negative for a non-scaling filter, positive growth factor, 0 to omit"] = 0,
    upsert: Annotated[bool, "Create the filter if it does not exist"] = True,
) -> str:
    """Add items, creating the filter first unless upsert is false.

    REQUIRES AUTHENTICATION. With upsert=false a missing filter fails with
    'filter_not_found' and nothing is created.
    """
    if not validate_auth_token(auth_token):
        return AUTH_ERROR

    get_rate_limiter().check("bf_insert")
    members = parse_items(items)
    options = InsertOptions(
        error_rate=error_rate or None,
        capacity=capacity or None,
        expansion_rate=expansion_rate or None,
        upsert=upsert,
    )
    results = _filter(name).insert(members, options)
    return format_success(
        {"name": name, "results": results},
        metadata={"item_count": len(members), "upsert": upsert},
    )


for _tool in (get_auth_token, bf_reserve, bf_add, bf_madd, bf_exists, bf_mexists, bf_info, bf_insert):
    mcp.tool()(_tool)


def main() -> None:
    """Entry point for the MCP server."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    mcp.run()


if __name__ == "__main__":
    main()
