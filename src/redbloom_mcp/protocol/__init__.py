"""Command encoding and reply decoding for BF.* commands."""

from .commands import (
    InsertOptions,
    build_add,
    build_exists,
    build_info,
    build_insert,
    build_madd,
    build_mexists,
    build_reserve,
    collect_items,
)
from .encoding import encode_item, encode_items
from .replies import BloomInfo, classify_error, decode_info_fields, decode_int, decode_int_list, decode_ok, parse_info

__all__ = [
    "BloomInfo",
    "InsertOptions",
    "build_add",
    "build_exists",
    "build_info",
    "build_insert",
    "build_madd",
    "build_mexists",
    "build_reserve",
    "classify_error",
    "collect_items",
    "decode_info_fields",
    "decode_int",
    "decode_int_list",
    "decode_ok",
    "encode_item",
    "encode_items",
    "parse_info",
]
