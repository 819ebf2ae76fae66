"""
Utility helpers for graphql-shorts.
"""

from .request import get_request_id, resolve_request
from .transform import DELETE, as_path, deep_transform, get_in

__all__ = [
    "DELETE",
    "as_path",
    "deep_transform",
    "get_in",
    "get_request_id",
    "resolve_request",
]
