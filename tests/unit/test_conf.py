"""
Unit tests for settings resolution.
"""

import logging

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from graphql_shorts.conf import GraphQLShortsSettings, get_settings
from graphql_shorts.defaults import LIBRARY_DEFAULTS, merge_settings, validate_settings

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.on_unrecognized_error == "warn"
        assert settings.user_error_key == "user_errors"
        assert settings.success_key == "success"
        assert settings.root_path == ("input",)
        assert settings.fallback_error_message == {"extensions": {}}

    def test_project_settings(self):
        with override_settings(GRAPHQL_SHORTS={"success_key": "ok", "root_path": ["attrs"]}):
            settings = get_settings()
        assert settings.success_key == "ok"
        assert settings.root_path == ("attrs",)

    def test_overrides_win_and_none_is_ignored(self):
        with override_settings(GRAPHQL_SHORTS={"success_key": "ok"}):
            settings = get_settings(success_key="done", user_error_key=None)
        assert settings.success_key == "done"
        assert settings.user_error_key == "user_errors"

    def test_nested_settings_are_merged(self):
        with override_settings(
            GRAPHQL_SHORTS={"fallback_error_message": {"extensions": {"support": "help@example.com"}}}
        ):
            settings = get_settings()
        assert settings.fallback_error_message == {"extensions": {"support": "help@example.com"}}

    def test_unknown_keys_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="graphql_shorts.conf"):
            with override_settings(GRAPHQL_SHORTS={"sucess_key": "typo"}):
                get_settings()
        assert "sucess_key" in caplog.text

    @pytest.mark.parametrize(
        "config",
        [
            {"on_unrecognized_error": "explode"},
            {"root_path": "input"},
            {"root_path": ["input", 1]},
            {"success_key": ""},
        ],
    )
    def test_invalid_settings_raise(self, config):
        with pytest.raises(ImproperlyConfigured):
            GraphQLShortsSettings.from_dict(config)


class TestDefaults:
    def test_merge_settings_is_deep(self):
        merged = merge_settings({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}}, {"d": 4})
        assert merged == {"a": {"b": 1, "c": 3}, "d": 4}

    def test_library_defaults_are_valid(self):
        assert validate_settings(LIBRARY_DEFAULTS) == []
