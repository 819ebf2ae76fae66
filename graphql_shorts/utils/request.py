"""
Request utilities for graphql-shorts.

This module provides helpers for reading request metadata from the
GraphQL context.
"""

from typing import Any, Optional


def resolve_request(context: Any) -> Any:
    """
    Return the Django request carried by a GraphQL context.

    graphene-style views pass the request itself as the context; other setups
    wrap it in an object or mapping exposing ``request``.
    """
    if context is None:
        return None
    if hasattr(context, "META"):
        return context
    if isinstance(context, dict):
        return context.get("request")
    return getattr(context, "request", None)


def get_request_id(context: Any, header: str) -> Optional[str]:
    """
    Read the request id from the request headers.

    Args:
        context: The GraphQL context (usually the Django request).
        header: The ``request.META`` key, e.g. ``HTTP_X_REQUEST_ID``.

    Returns:
        The request id or None.
    """
    request = resolve_request(context)
    meta = getattr(request, "META", None)
    if not meta:
        return None
    request_id = meta.get(header)
    if request_id:
        return str(request_id).strip() or None
    return None


__all__ = ["get_request_id", "resolve_request"]
