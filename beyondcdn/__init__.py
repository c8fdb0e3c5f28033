"""Filesystem-style access to BeyondCDN storage zones."""

from beyondcdn.config import Config, load_config
from beyondcdn.storage import BeyondCDNAdapter, BeyondCDNClient, Region, StorageAdapter

__all__ = [
    "BeyondCDNAdapter",
    "BeyondCDNClient",
    "Config",
    "Region",
    "StorageAdapter",
    "load_config",
]
