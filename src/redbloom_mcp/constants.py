"""Constants for the RedisBloom scalable filter commands."""

# Command names
COMMANDS = {
    "reserve": "BF.RESERVE",
    "add": "BF.ADD",
    "madd": "BF.MADD",
    "exists": "BF.EXISTS",
    "mexists": "BF.MEXISTS",
    "info": "BF.INFO",
    "insert": "BF.INSERT",
}

# Optional clause keywords (case-sensitive on the wire)
KEYWORD_ERROR = "ERROR"
KEYWORD_CAPACITY = "CAPACITY"
KEYWORD_EXPANSION = "EXPANSION"
KEYWORD_NONSCALING = "NONSCALING"
KEYWORD_NOCREATE = "NOCREATE"
KEYWORD_ITEMS = "ITEMS"

# Acknowledgement returned by BF.RESERVE
REPLY_OK = "OK"

# Filter defaults
DEFAULT_EXPANSION_RATE = 2
DEFAULT_ERROR_RATE = 0.01
DEFAULT_CAPACITY = 1000

# BF.INFO field labels, in the order the service reports them
INFO_FIELDS = {
    "Capacity": "capacity",
    "Size": "size",
    "Number of filters": "number_of_filters",
    "Number of items inserted": "items_inserted",
    "Expansion rate": "expansion_rate",
}

# Service error reply fragments, matched case-insensitively in declaration order
ERROR_PATTERNS = {
    "filter_exists": ("item exists",),
    "filter_not_found": ("not found",),
    "capacity_exceeded": ("non scaling filter is full",),
    "item_too_large": ("exceeds maximum", "item too large", "invalid bulk length"),
    "invalid_argument": (
        "bad error rate",
        "error rate should be",
        "bad capacity",
        "capacity should be",
        "bad expansion",
        "expansion should be",
        "wrong number of arguments",
        "syntax error",
    ),
}

# Tool error codes
ERROR_CODES = {
    "invalid_argument": "Rejected arguments, locally or by the service",
    "empty_batch": "Batch operation called with no items",
    "filter_exists": "Filter name already reserved",
    "filter_not_found": "Filter does not exist",
    "item_too_large": "Item exceeds the service size limit",
    "capacity_exceeded": "Non-scaling filter is full",
    "reply_error": "Other service error reply",
    "protocol_error": "Reply shape did not match the command",
    "transport_failure": "Connection issues",
    "rate_limit_exceeded": "Tool call throttled",
    "unexpected_error": "Unhandled exceptions",
}

# Default request timeout (seconds)
DEFAULT_TIMEOUT = 5.0

# Default tool rate limits (calls per second, burst capacity)
DEFAULT_RATE_LIMIT = (50, 100)
