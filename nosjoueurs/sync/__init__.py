"""Push and pull a club's data to and from the remote copy."""

from .client import SyncClient
from .merge import merge_storage_data

__all__ = ["SyncClient", "merge_storage_data"]
