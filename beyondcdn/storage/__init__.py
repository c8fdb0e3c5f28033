"""Storage abstraction layer over a BeyondCDN storage zone."""

from beyondcdn.storage.adapter import StorageAdapter
from beyondcdn.storage.cdn_adapter import BeyondCDNAdapter
from beyondcdn.storage.client import BeyondCDNClient
from beyondcdn.storage.regions import Region

__all__ = ["StorageAdapter", "BeyondCDNAdapter", "BeyondCDNClient", "Region"]
