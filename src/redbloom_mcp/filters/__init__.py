"""Filter clients."""

from .base import AsyncFilterKey, FilterKey
from .bloom import AsyncBloomFilter, BloomFilter

__all__ = ["AsyncBloomFilter", "AsyncFilterKey", "BloomFilter", "FilterKey"]
