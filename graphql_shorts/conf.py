"""
Settings for graphql-shorts.

Settings are resolved per call from ``settings.GRAPHQL_SHORTS`` merged over
``LIBRARY_DEFAULTS``; entry points accept keyword overrides on top of that.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured

from .defaults import LIBRARY_DEFAULTS, SETTINGS_NAME, merge_settings, validate_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphQLShortsSettings:
    """Settings consumed by the error handling entry points.

    Attributes:
        json_adapter: Dotted path of a module exposing ``dumps``.
        on_unrecognized_error: ``ignore``, ``warn`` or ``raise``.
        user_error_key: Payload key receiving rendered user errors.
        success_key: Payload key receiving the success flag.
        root_path: Leading segments of every user error field path.
        request_id_header: ``request.META`` key read for the request id.
        fallback_error_message: Options for the fallback error on a selector miss.
    """

    json_adapter: str = LIBRARY_DEFAULTS["json_adapter"]
    on_unrecognized_error: str = LIBRARY_DEFAULTS["on_unrecognized_error"]
    user_error_key: str = LIBRARY_DEFAULTS["user_error_key"]
    success_key: str = LIBRARY_DEFAULTS["success_key"]
    root_path: Tuple[str, ...] = LIBRARY_DEFAULTS["root_path"]
    request_id_header: str = LIBRARY_DEFAULTS["request_id_header"]
    fallback_error_message: Dict[str, Any] = field(
        default_factory=lambda: {"extensions": {}}
    )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GraphQLShortsSettings":
        valid_fields = set(cls.__dataclass_fields__.keys())
        filtered = {k: v for k, v in config.items() if k in valid_fields}
        problems = validate_settings(merge_settings(LIBRARY_DEFAULTS, filtered))
        if problems:
            raise ImproperlyConfigured(
                f"Invalid {SETTINGS_NAME} settings: " + "; ".join(problems)
            )
        if "root_path" in filtered:
            filtered["root_path"] = tuple(filtered["root_path"])
        return cls(**filtered)

    @classmethod
    def from_django(cls, **overrides: Any) -> "GraphQLShortsSettings":
        """Create settings from Django settings with keyword overrides applied last."""
        project_settings = getattr(django_settings, SETTINGS_NAME, {}) or {}
        unknown = set(project_settings) - set(cls.__dataclass_fields__.keys())
        if unknown:
            logger.warning(f"Ignoring unknown {SETTINGS_NAME} keys: {sorted(unknown)}")
        overrides = {k: v for k, v in overrides.items() if v is not None}
        merged = merge_settings(LIBRARY_DEFAULTS, project_settings, overrides)
        return cls.from_dict(merged)


def get_settings(**overrides: Any) -> GraphQLShortsSettings:
    """Return the effective settings; ``None`` overrides fall back to configuration."""
    return GraphQLShortsSettings.from_django(**overrides)


__all__ = ["GraphQLShortsSettings", "get_settings"]
