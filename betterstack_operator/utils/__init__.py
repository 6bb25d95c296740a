"""Utility modules for the operator."""
from .config import Config
from .helpers import create_merge_patch, object_key, secret_index_key, split_key, utcnow

__all__ = [
    "Config",
    "create_merge_patch",
    "object_key",
    "secret_index_key",
    "split_key",
    "utcnow",
]
