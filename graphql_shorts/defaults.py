"""
Default configuration for the graphql-shorts library.

Every setting the library consumes is listed here. Projects override any of
them through the ``GRAPHQL_SHORTS`` dictionary in their Django settings.
"""

from __future__ import annotations

from typing import Any

SETTINGS_NAME = "GRAPHQL_SHORTS"

UNRECOGNIZED_ERROR_POLICIES = ("ignore", "warn", "raise")

# --------------------------------------------------------------------------- #
# Library-wide defaults
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    # Dotted path of a module exposing ``dumps`` used by ``encoder.dumps``.
    "json_adapter": "json",
    # What the middleware does with values that are not error records.
    "on_unrecognized_error": "warn",
    # Payload keys written by the middleware on mutations.
    "user_error_key": "user_errors",
    "success_key": "success",
    # First segment(s) of every user error field path.
    "root_path": ("input",),
    # ``request.META`` key holding the request id injected into top-level errors.
    "request_id_header": "HTTP_X_REQUEST_ID",
    # Extensions attached to the fallback error on a selector miss.
    "fallback_error_message": {"extensions": {}},
}

FALLBACK_ERROR_CODE = "internal_server_error"
FALLBACK_ERROR_MESSAGE = "Looks like something unexpected went wrong."
UNRECOGNIZED_ERROR_MESSAGE = "An unexpected error occurred, please try again later."


def merge_settings(*settings_dicts: dict[str, Any]) -> dict[str, Any]:
    """
    Merge multiple settings dictionaries with deep merging for nested dicts.
    Later dictionaries override earlier ones.
    """
    result: dict[str, Any] = {}
    for settings_dict in settings_dicts:
        for key, value in (settings_dict or {}).items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = merge_settings(result[key], value)
            else:
                result[key] = value
    return result


def validate_settings(settings: dict[str, Any]) -> list[str]:
    """Return a list of human readable problems found in ``settings``."""
    problems: list[str] = []
    policy = settings.get("on_unrecognized_error")
    if policy not in UNRECOGNIZED_ERROR_POLICIES:
        problems.append(
            f"on_unrecognized_error must be one of {UNRECOGNIZED_ERROR_POLICIES}, got {policy!r}"
        )
    root_path = settings.get("root_path")
    if isinstance(root_path, str) or not all(
        isinstance(segment, str) for segment in (root_path or ())
    ):
        problems.append(f"root_path must be a sequence of strings, got {root_path!r}")
    for key in ("user_error_key", "success_key", "request_id_header"):
        if not isinstance(settings.get(key), str) or not settings.get(key):
            problems.append(f"{key} must be a non-empty string")
    return problems
